"""Source configuration (with injected paths).

Per KERNEL_PHILOSOPHY: Locations are app policy. This model only maps
registrations onto the paths and URLs the app chose; it never reads files
or the environment.
"""

from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict

from .registration import Registration

DEFAULT_REGISTRY_REMOTE = "https://github.com/vba-blocks/registry"
DEFAULT_PACKAGES_URL = "https://packages.vba-blocks.com"


class RegistryConfig(BaseModel):
    """Registry index mirror and package download locations."""

    model_config = ConfigDict(frozen=True)

    local: Path
    remote: str = DEFAULT_REGISTRY_REMOTE
    packages: str = DEFAULT_PACKAGES_URL


class Config(BaseModel):
    """
    Configuration passed to every source operation.

    Layout under cache_dir:
      registry/                      index mirror (unless registry.local points elsewhere)
      packages/<name>/v<version>.block   verified tarballs
      sources/<name>/v<version>/     extracted package files
      git/<name>/                    git checkouts
    """

    model_config = ConfigDict(frozen=True)

    registry: RegistryConfig
    cache_dir: Path
    timeout: float = 30.0

    @classmethod
    def from_cache_dir(
        cls,
        cache_dir: Path,
        remote: str = DEFAULT_REGISTRY_REMOTE,
        packages: str = DEFAULT_PACKAGES_URL,
    ) -> "Config":
        """Build a config rooting every location under cache_dir.

        Example:
            >>> config = Config.from_cache_dir(Path.home() / ".vba-blocks")
            >>> config.registry.local.name
            'registry'
        """
        return cls(
            registry=RegistryConfig(local=cache_dir / "registry", remote=remote, packages=packages),
            cache_dir=cache_dir,
        )

    @classmethod
    def default(cls) -> "Config":
        return cls.from_cache_dir(Path.home() / ".vba-blocks")

    @property
    def git_dir(self) -> Path:
        return self.cache_dir / "git"

    def resolve_remote_package(self, registration: Registration) -> str:
        return f"{self.registry.packages.rstrip('/')}/{registration.name}/v{registration.version}.block"

    def resolve_local_package(self, registration: Registration) -> Path:
        return self.cache_dir / "packages" / registration.name / f"v{registration.version}.block"

    def resolve_source(self, registration: Registration) -> Path:
        # Git trees of one version can differ per commit
        if registration.kind == "git" and registration.details:
            return self.cache_dir / "sources" / "git" / registration.name / registration.details
        return self.cache_dir / "sources" / registration.name / f"v{registration.version}"
