"""Path source - Packages living in a directory on local disk.

Nothing is copied: fetch hands back the directory itself.
"""

import asyncio
import logging
from pathlib import Path

from .dependency import Dependency
from .dependency import PathDependency
from .exceptions import PackageNotFoundError
from .manifest import MANIFEST_FILENAME
from .manifest import load_manifest
from .protocols import ConfigProtocol
from .registration import Registration
from .registration import get_registration_id
from .registration import get_registration_source

logger = logging.getLogger(__name__)


class PathSource:
    """Source for path dependencies (one registration per directory)."""

    kind = "path"

    def match(self, indicator: str | Dependency) -> bool:
        if isinstance(indicator, str):
            return indicator == self.kind
        return isinstance(indicator, PathDependency)

    async def update(self, config: ConfigProtocol) -> None:
        """Nothing to refresh, the directory is read on every resolve."""

    async def resolve(self, config: ConfigProtocol, dependency: Dependency) -> list[Registration]:
        """
        Describe the package at dependency.path.

        Raises:
            PackageNotFoundError: If the directory holds no manifest
            ManifestError: If the manifest is invalid
        """
        if not isinstance(dependency, PathDependency):
            raise PackageNotFoundError(f'"{dependency.name}" is not a path dependency', context={"name": dependency.name})

        if not (Path(dependency.path) / MANIFEST_FILENAME).exists():
            raise PackageNotFoundError(
                f'"{dependency.name}" was not found at {dependency.path}',
                context={"name": dependency.name, "path": dependency.path},
            )

        manifest = await asyncio.to_thread(load_manifest, dependency.path)
        logger.debug(f"Resolved {manifest.name}@{manifest.version} from {dependency.path}")

        return [
            Registration(
                id=get_registration_id(manifest.name, manifest.version),
                source=get_registration_source(self.kind, dependency.path),
                name=manifest.name,
                version=manifest.version,
                dependencies=manifest.dependencies,
            )
        ]

    async def fetch(self, config: ConfigProtocol, registration: Registration) -> Path:
        path = Path(registration.origin)
        if not path.exists():
            raise PackageNotFoundError(
                f"Path for {registration.id} no longer exists: {path}",
                context={"id": registration.id, "path": str(path)},
            )
        return path
