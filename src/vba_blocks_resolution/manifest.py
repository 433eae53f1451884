"""Package manifest - Parse vba-block.toml files.

Per AGENTS.md: Ruthless simplicity - use standard library (tomllib), minimal fields.
"""

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .dependency import Dependency
from .dependency import parse_dependencies
from .exceptions import ManifestError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "vba-block.toml"


class Manifest(BaseModel):
    """
    Package manifest from vba-block.toml.

    Only the fields resolution needs: [package] name/version and [dependencies].
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    dependencies: list[Dependency] = Field(default_factory=list)
    dir: Path

    @classmethod
    def from_toml(cls, manifest_path: Path) -> "Manifest":
        """
        Load manifest from a vba-block.toml file.

        Args:
            manifest_path: Path to vba-block.toml

        Returns:
            Manifest instance (path dependencies resolved against its directory)

        Raises:
            ManifestError: If the file is missing, not valid TOML, or lacks [package] name/version
        """
        if not manifest_path.exists():
            raise ManifestError(
                f"{MANIFEST_FILENAME} not found: {manifest_path}",
                context={"path": str(manifest_path)},
            )

        try:
            with open(manifest_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ManifestError(f"Invalid TOML in {manifest_path}: {e}", context={"path": str(manifest_path)}) from e

        package = data.get("package", {})
        dependencies = data.get("dependencies", {})
        if not isinstance(package, Mapping) or not isinstance(dependencies, Mapping):
            raise ManifestError(
                f"[package] and [dependencies] must be tables in {manifest_path}",
                context={"path": str(manifest_path)},
            )

        if not package.get("name") or not package.get("version"):
            raise ManifestError(
                f"[package] name and version are required in {manifest_path}",
                context={"path": str(manifest_path)},
            )

        base_dir = manifest_path.parent
        return cls(
            name=package["name"],
            version=package["version"],
            dependencies=parse_dependencies(dependencies, base_dir),
            dir=base_dir,
        )


def load_manifest(dir: str | Path) -> Manifest:
    """Load the manifest in a package directory."""
    manifest_path = Path(dir) / MANIFEST_FILENAME
    logger.debug(f"Loading manifest {manifest_path}")
    return Manifest.from_toml(manifest_path)
