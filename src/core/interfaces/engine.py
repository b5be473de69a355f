"""Container engine contract.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- Lets the compose/SDK adapter be swapped for an in-memory fake in tests
  without coupling the services to Docker.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContainerEngine(Protocol):
    """Minimal set of lifecycle verbs the deployment needs.

    Design rules:
    - Every verb raises `core.errors.DeployError` (or a subclass) on failure.
    - `service=None` means "every service in the project".
    """

    def is_available(self) -> bool:
        """True when the engine CLI exists and the daemon answers."""

        ...

    def compose_available(self) -> bool:
        """True when the compose plugin is installed."""

        ...

    def up(self, service: str | None = None, *, build: bool = False) -> None: ...

    def down(self, service: str | None = None) -> None: ...

    def build(self, service: str | None = None, *, pull: bool = False) -> None: ...

    def pull(self, service: str | None = None) -> None:
        """Pull registry images; build-only services are skipped.

        Update does not call this: the Snell service is built locally, so it
        refreshes the base image with `build(pull=True)` instead.
        """

        ...

    def remove_image(self, image: str) -> bool:
        """Remove `image`; return False when it did not exist."""

        ...

    def container_status(self, name: str) -> str | None:
        """Engine-reported state (`running`, `exited`, ...) or None if absent."""

        ...
