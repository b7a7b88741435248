from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class BranchDocument(BaseModel):
	"""One entry of the ``branches`` mapping of an advisory file"""
	model_config = ConfigDict(extra="ignore")

	time: Any = None
	versions: list[str] = Field(default_factory=list)


class AdvisoryDocument(BaseModel):
	"""Typed view of an advisory YAML file, used by the export path.

	Unknown keys are ignored here; the validator reports them.
	"""
	model_config = ConfigDict(extra="ignore", populate_by_name=True)

	reference: str
	title: str
	link: str
	cve: Optional[str] = None
	branches: dict[str, BranchDocument]
	composer_repository: Any = Field(None, alias="composer-repository")


class PackagistVersion(BaseModel):
	"""Single release entry of a p2 metadata document"""
	model_config = ConfigDict(extra="ignore")

	version: Optional[str] = None


class PackagistMetadata(BaseModel):
	"""Response of ``https://repo.packagist.org/p2/<vendor>/<package>.json``"""
	model_config = ConfigDict(extra="ignore")

	packages: dict[str, list[PackagistVersion]] = Field(default_factory=dict)
	minified: Optional[str] = None


class CachedPackage(BaseModel):
	"""Cache payload for one registry lookup"""
	name: str
	found: bool
	versions: list[str] = Field(default_factory=list)
