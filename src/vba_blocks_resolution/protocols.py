"""Protocols for package sources and the configuration they consume.

Per KERNEL_PHILOSOPHY: Protocol-based extensibility over configuration.
Per IMPLEMENTATION_PHILOSOPHY: Composition over inheritance.
"""

from pathlib import Path
from typing import Protocol
from typing import runtime_checkable

from .dependency import Dependency
from .registration import Registration


class RegistrySettings(Protocol):
    """Registry locations a source needs."""

    local: Path
    remote: str


class ConfigProtocol(Protocol):
    """Configuration injected into every source operation.

    Apps decide WHERE things live; sources only ask.
    """

    registry: RegistrySettings
    git_dir: Path
    timeout: float

    def resolve_remote_package(self, registration: Registration) -> str:
        """URL of the registration's package tarball."""
        ...

    def resolve_local_package(self, registration: Registration) -> Path:
        """Cache path of the registration's downloaded tarball."""
        ...

    def resolve_source(self, registration: Registration) -> Path:
        """Directory the registration's files are extracted into."""
        ...


@runtime_checkable
class SourceProtocol(Protocol):
    """Protocol for package acquisition backends (registry, path, git).

    The resolver only depends on this interface.

    Example implementations:
    - RegistrySource: Git-mirrored sharded index + checksum-verified tarballs
    - PathSource: Package directories on local disk
    - GitSource: Git repositories pinned by rev, tag or branch
    """

    def match(self, indicator: str | Dependency) -> bool:
        """Report whether this source owns a kind string ("registry") or dependency."""
        ...

    async def update(self, config: ConfigProtocol) -> None:
        """Refresh the source's view of available packages.

        Idempotent, safe to call on every run. Not safe to run concurrently for the same local path.
        """
        ...

    async def resolve(self, config: ConfigProtocol, dependency: Dependency) -> list[Registration]:
        """List every visible registration for dependency.

        Raises:
            PackageNotFoundError: If the package is unknown to this source
        """
        ...

    async def fetch(self, config: ConfigProtocol, registration: Registration) -> Path:
        """Ensure the registration's files exist locally and return their directory.

        Idempotent: an already materialized registration only costs an existence check.
        """
        ...
