from __future__ import annotations

import json

import pytest

from security_advisories.app.cli import app
from security_advisories.infra.git_timestamps import GitTimestampSource


@pytest.fixture
def fixed_timestamps(monkeypatch):
	monkeypatch.setattr(GitTimestampSource, "first_commit_time", lambda self, path: 1_600_000_000)
	monkeypatch.setattr(GitTimestampSource, "last_commit_time", lambda self, path: 1_700_000_000)


def test_export_writes_records(runner, advisory_tree, advisory_data, register_package, fixed_timestamps, tmp_path):
	register_package("acme/widget", ["1.5.0", "1.4.1", "1.0.0"])
	advisory_tree("acme/widget/CVE-2024-0001.yaml", advisory_data("acme/widget", cve="CVE-2024-0001"))
	advisory_tree("acme/widget/2024-05-01.yaml", advisory_data("acme/widget"))
	target = tmp_path / "osv"

	result = runner.invoke(app, ["export", str(target), "--root", str(advisory_tree.root)])

	assert result.exit_code == 0, result.output
	assert f"Exported 2 advisories to {target} (0 skipped)." in result.output
	record = json.loads((target / "CVE-2024-0001.json").read_text(encoding="utf-8"))
	assert record["affected"][0]["versions"] == ["1.0.0", "1.4.1"]
	assert (target / "PHPSEC-2024-05-01.json").is_file()


def test_export_prints_skips_and_exits_zero(runner, advisory_tree, advisory_data, mock_httpx_client, fixed_timestamps, tmp_path):
	advisory_tree("acme/widget/a.yaml", advisory_data("acme/widget"))
	advisory_tree("acme/widget/readme.md", "# notes")

	result = runner.invoke(app, ["export", str(tmp_path / "osv"), "--root", str(advisory_tree.root)])

	assert result.exit_code == 0, result.output
	assert 'Skipped "acme/widget/a.yaml" because "acme/widget" was not found on Packagist' in result.output
	assert 'Skipped "acme/widget/readme.md" because it is not a YAML file' in result.output
	assert "(2 skipped)" in result.output


def test_export_unwritable_target(runner, advisory_tree, tmp_path):
	blocker = tmp_path / "blocker"
	blocker.write_text("x")

	result = runner.invoke(app, ["export", str(blocker), "--root", str(advisory_tree.root)])

	assert result.exit_code == 1
	assert "Error:" in result.output
