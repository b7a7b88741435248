from __future__ import annotations


PACKAGIST_REPO_BASE = "https://repo.packagist.org"
PACKAGIST_WEB_BASE = "https://packagist.org/packages/"


def get_packagist_metadata_url(package: str, base: str = PACKAGIST_REPO_BASE) -> str:
	return f"{base.rstrip('/')}/p2/{package}.json"
