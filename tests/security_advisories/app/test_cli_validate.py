from __future__ import annotations

import logging

from security_advisories.app.cli import app


def test_validate_clean_database(runner, advisory_tree, advisory_data, register_package):
	register_package("acme/widget", ["1.0.0"])
	advisory_tree("acme/widget/CVE-2024-0001.yaml", advisory_data("acme/widget"))

	result = runner.invoke(app, ["validate", "--root", str(advisory_tree.root)])

	assert result.exit_code == 0, result.output
	assert "[OK] No issues found in 1 files." in result.output


def test_validate_exit_code_counts_files_with_issues(runner, advisory_tree, advisory_data):
	advisory_tree("acme/widget/a.yaml", advisory_data("acme/widget", title=None, link=None))
	advisory_tree("acme/widget/b.yml", advisory_data("acme/widget"))
	advisory_tree("acme/widget/c.yaml", advisory_data("acme/widget"))

	result = runner.invoke(app, ["validate", "--offline", "--root", str(advisory_tree.root)])

	assert result.exit_code == 2
	assert "[ERROR] Found 3 issues in 2 files." in result.output
	assert 'acme/widget/a.yaml  Key "title" is required.' in result.output
	assert 'Key "link" is required.' in result.output
	assert 'acme/widget/b.yml   The file extension should be ".yaml".' in result.output


def test_validate_reports_unknown_package(runner, advisory_tree, advisory_data, mock_httpx_client):
	advisory_tree("acme/widget/a.yaml", advisory_data("acme/widget"))

	result = runner.invoke(app, ["validate", "--root", str(advisory_tree.root)])

	assert result.exit_code == 1
	assert "Invalid composer package" in result.output


def test_validate_offline_makes_no_requests(runner, advisory_tree, advisory_data, mock_httpx_client):
	advisory_tree("acme/widget/a.yaml", advisory_data("acme/widget"))

	result = runner.invoke(app, ["validate", "--offline", "--root", str(advisory_tree.root)])

	assert result.exit_code == 0, result.output
	assert mock_httpx_client.calls == []


def test_validate_with_workers(runner, advisory_tree, advisory_data):
	for n in range(5):
		advisory_tree(f"acme/pkg{n}/a.yaml", advisory_data(f"acme/pkg{n}", title=None))

	result = runner.invoke(app, ["validate", "--offline", "--workers", "3", "--root", str(advisory_tree.root)])

	assert result.exit_code == 5
	lines = [line for line in result.output.splitlines() if "required" in line]
	assert [line.split()[0] for line in lines] == [f"acme/pkg{n}/a.yaml" for n in range(5)]


def test_validate_missing_root(runner, tmp_path):
	result = runner.invoke(app, ["validate", "--offline", "--root", str(tmp_path / "missing")])

	assert result.exit_code == 1
	assert "Error:" in result.output


def test_log_level_attaches_stream_handler(runner, advisory_tree, advisory_data):
	advisory_tree("acme/widget/a.yaml", advisory_data("acme/widget"))
	logger = logging.getLogger("security_advisories")
	before = list(logger.handlers)

	try:
		result = runner.invoke(
			app, ["--log-level", "DEBUG", "validate", "--offline", "--root", str(advisory_tree.root)]
		)
		assert result.exit_code == 0, result.output
		assert logger.level == logging.DEBUG
		assert any(isinstance(h, logging.StreamHandler) and h not in before for h in logger.handlers)
	finally:
		for handler in [h for h in logger.handlers if h not in before]:
			logger.removeHandler(handler)
		logger.setLevel(logging.NOTSET)
		logger.propagate = True
