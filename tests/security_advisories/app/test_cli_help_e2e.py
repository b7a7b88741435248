from __future__ import annotations

import subprocess


def run_cli(args: list[str]) -> subprocess.CompletedProcess[str]:
	return subprocess.run(["security-advisories", *args], capture_output=True, text=True)


def test_cli_help_shows_commands():
	cp = run_cli(["--help"])
	assert cp.returncode == 0
	assert "validate" in cp.stdout
	assert "export" in cp.stdout
	assert "clear" in cp.stdout
	assert "--log-level" in cp.stdout
