"""Registrations - Concrete, fetchable package versions as seen through a source.

Source locator format: "<kind>+<origin>#<details>", e.g.
"registry+https://github.com/vba-blocks/registry#<sha256>".
"""

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .dependency import Dependency


class Feature(BaseModel):
    """Optional feature of a package (src/references are filled by build tooling)."""

    model_config = ConfigDict(frozen=True)

    name: str
    dependencies: list[str] = Field(default_factory=list)
    src: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)


class RegistryDependency(BaseModel):
    """
    Published constraint of a registry package on another package.

    version_range is the unresolved range from the index ("req"), never a concrete version.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    version_range: str = Field(alias="req")
    features: list[str] = Field(default_factory=list)
    optional: bool = False
    default_features: bool = Field(default=True, alias="defaultFeatures")


class Registration(BaseModel):
    """One concrete version of a package (immutable)."""

    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    name: str
    version: str
    dependencies: list[RegistryDependency | Dependency] = Field(default_factory=list)
    features: list[Feature] = Field(default_factory=list)

    @property
    def kind(self) -> str:
        return parse_registration_source(self.source)[0]

    @property
    def origin(self) -> str:
        return parse_registration_source(self.source)[1]

    @property
    def details(self) -> str | None:
        """Checksum (registry) or commit (git) embedded in the source locator."""
        return parse_registration_source(self.source)[2]


def get_registration_id(name: str, version: str) -> str:
    return f"{name}@{version}"


def get_registration_source(kind: str, value: str, details: str | None = None) -> str:
    """Build a source locator string.

    Example:
        >>> get_registration_source("registry", "https://github.com/vba-blocks/registry", "abc")
        'registry+https://github.com/vba-blocks/registry#abc'
    """
    source = f"{kind}+{value}"
    return f"{source}#{details}" if details else source


def parse_registration_source(source: str) -> tuple[str, str, str | None]:
    """Split a source locator into (kind, origin, details)."""
    kind, _, rest = source.partition("+")
    origin, _, details = rest.partition("#")
    return kind, origin, details or None
