from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..core.domain.errors import TimestampUnavailableError
from ..core.ports.timestamp_port import CommitTimestampPort

logger = logging.getLogger(__name__)


class GitTimestampSource(CommitTimestampPort):
    """Reads author timestamps (``%at``) of a file from ``git log``.

    Commands run in the file's directory so the enclosing repository is found
    without configuration.
    """

    def __init__(self, git_executable: str = "git", timeout_seconds: float = 30.0) -> None:
        self._git = git_executable
        self._timeout = timeout_seconds

    def first_commit_time(self, path: Path) -> int:
        lines = self._log(path, "--reverse")
        return _parse_timestamp(path, lines[0] if lines else "")

    def last_commit_time(self, path: Path) -> int:
        lines = self._log(path, "--max-count=1")
        return _parse_timestamp(path, lines[0] if lines else "")

    def _log(self, path: Path, *options: str) -> list[str]:
        path = Path(path).resolve()
        cmd = [self._git, "log", "--format=%at", *options, "--", path.name]
        try:
            result = subprocess.run(
                cmd,
                cwd=path.parent,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=True,
            )
        except FileNotFoundError as e:
            raise TimestampUnavailableError(f"git executable not found: {self._git}") from e
        except subprocess.TimeoutExpired as e:
            raise TimestampUnavailableError(f"git log timed out for {path}") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise TimestampUnavailableError(f"git log failed for {path}: {stderr or e.returncode}") from e
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def _parse_timestamp(path: Path, value: str) -> int:
    if not value:
        raise TimestampUnavailableError(f"{path} has no commit history")
    try:
        return int(value)
    except ValueError as e:
        raise TimestampUnavailableError(f"unexpected git log output for {path}: {value!r}") from e
