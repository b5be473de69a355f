"""Domain errors.

Every failure surfaced to the user derives from `DeployError`, so the CLI
can report it with a single `except` clause. Adapters translate library
errors (httpx, docker, zipfile) into these types.
"""

from __future__ import annotations

from typing import Sequence


class DeployError(Exception):
    """Base class for deployment failures."""


class PermissionDeniedError(DeployError):
    """The action needs root privileges."""


class UnsupportedSystemError(DeployError):
    """Host OS or CPU architecture is not supported."""


class CommandError(DeployError):
    """An external command exited with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed ({returncode}): {' '.join(self.argv)}"
        if stderr.strip():
            message += f"\n{stderr.strip()}"
        super().__init__(message)


class ConfigFileError(DeployError):
    """snell-server.conf is missing keys or malformed."""


class DeploymentMissingError(DeployError):
    """No deployment found in the work directory."""

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"{path} does not exist")


class DownloadError(DeployError):
    """Fetching or unpacking a remote artifact failed."""


class EngineError(DeployError):
    """The container engine rejected an operation."""
