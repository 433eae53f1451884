"""Dependency model - Parse manifest dependency entries into a typed union.

Raw manifest values are validated once, here. Everything downstream works with
the closed Dependency union and dispatches on its `kind` discriminant.

Precedence when an entry gives several location hints:
version > path > git, and within git: rev > tag > branch.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Annotated
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator
from pydantic import model_validator
from semantic_version import NpmSpec

from .exceptions import ManifestError
from .utils import resolve_path

DEFAULT_REGISTRY = "vba-blocks"
DEFAULT_BRANCH = "master"

EXAMPLE = """Example vba-block.toml:

  [dependencies]
  a = "^1.0.0"
  b = { version = "^0.1.0", registry = "vba-blocks" }
  c = { path = "packages/c" }
  d = { git = "https://github.com/author/d" }
  e = { git = "https://github.com/author/e", branch = "next" }
  f = { git = "https://github.com/author/f", tag = "v1.0.0" }
  g = { git = "https://github.com/author/g", rev = "a1b2c3d4" }

  [dependencies.h]
  version = "^2.0.0\""""

_STRING_FIELDS = ("registry", "version", "path", "git", "tag", "branch", "rev")


class DependencyBase(BaseModel):
    """Fields shared by every dependency kind (immutable)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str

    # Exact resolved version, only set on lock entries
    version: str | None = None

    def locked(self, version: str) -> "DependencyBase":
        """Copy of this dependency pinned to an exact resolved version."""
        return self.model_copy(update={"version": version})


class VersionDependency(DependencyBase):
    """Dependency on a published registry package, constrained by a semver range."""

    kind: Literal["registry"] = "registry"
    registry: str = DEFAULT_REGISTRY
    version_range: str

    @field_validator("version_range")
    @classmethod
    def check_range(cls, value: str) -> str:
        NpmSpec(value)
        return value


class PathDependency(DependencyBase):
    """Dependency on a package directory (absolute, trailing-separator form)."""

    kind: Literal["path"] = "path"
    path: str


class GitDependency(DependencyBase):
    """Dependency on a git repository pinned by exactly one of rev, tag or branch."""

    kind: Literal["git"] = "git"
    git_url: str
    rev: str | None = None
    tag: str | None = None
    branch: str | None = None

    @model_validator(mode="after")
    def check_single_ref(self) -> "GitDependency":
        refs = [ref for ref in (self.rev, self.tag, self.branch) if ref is not None]
        if len(refs) != 1:
            raise ValueError("git dependency requires exactly one of rev, tag, or branch")
        return self

    @property
    def ref_kind(self) -> Literal["rev", "tag", "branch"]:
        if self.rev is not None:
            return "rev"
        if self.tag is not None:
            return "tag"
        return "branch"

    @property
    def ref(self) -> str:
        return getattr(self, self.ref_kind)


Dependency = Annotated[
    VersionDependency | PathDependency | GitDependency,
    Field(discriminator="kind"),
]


def parse_dependencies(value: Mapping[str, Any], base_dir: str | Path) -> list[Dependency]:
    """
    Parse a manifest [dependencies] table.

    Args:
        value: Mapping of package name to raw entry (string or table)
        base_dir: Directory of the declaring manifest (path entries resolve against it)

    Returns:
        Dependencies in declaration order

    Raises:
        ManifestError: If any entry is invalid
    """
    return [parse_dependency(name, entry, base_dir) for name, entry in value.items()]


def parse_dependency(name: str, value: Any, base_dir: str | Path) -> Dependency:
    """
    Parse a single manifest dependency entry.

    A bare string is shorthand for { version = "<string>" }.

    Args:
        name: Package name (table key)
        value: Version string or table with version/registry/path/git/tag/branch/rev
        base_dir: Directory of the declaring manifest

    Returns:
        VersionDependency, PathDependency or GitDependency

    Raises:
        ManifestError: If no version, path or git is given, or a field is invalid

    Example:
        >>> parse_dependency("a", "^1.0.0", "/project")
        VersionDependency(name='a', version=None, kind='registry', registry='vba-blocks', version_range='^1.0.0')
    """
    if isinstance(value, str):
        value = {"version": value}

    if not isinstance(value, Mapping):
        raise ManifestError(
            f'Invalid dependency "{name}", expected a version string or table. {EXAMPLE}',
            context={"name": name},
        )

    for key in _STRING_FIELDS:
        if key in value and not isinstance(value[key], str):
            raise ManifestError(
                f'Invalid dependency "{name}", "{key}" must be a string. {EXAMPLE}',
                context={"name": name, "field": key},
            )

    registry = value.get("registry", DEFAULT_REGISTRY)
    version = value.get("version")
    path = value.get("path")
    git = value.get("git")
    tag = value.get("tag")
    branch = value.get("branch", DEFAULT_BRANCH)
    rev = value.get("rev")

    if not (version or path or git):
        raise ManifestError(
            f'Invalid dependency "{name}", no version, path, or git specified. {EXAMPLE}',
            context={"name": name},
        )

    try:
        if version:
            return VersionDependency(name=name, registry=registry, version_range=version)
        if path:
            return PathDependency(name=name, path=resolve_path(base_dir, path))
        if rev:
            return GitDependency(name=name, git_url=git, rev=rev)
        if tag:
            return GitDependency(name=name, git_url=git, tag=tag)
        return GitDependency(name=name, git_url=git, branch=branch)
    except ValidationError as e:
        raise ManifestError(
            f'Invalid dependency "{name}": {e.errors()[0]["msg"]}. {EXAMPLE}',
            context={"name": name},
        ) from e
