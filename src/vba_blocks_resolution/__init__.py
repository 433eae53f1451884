"""vba-blocks-resolution - Dependency parsing, lock satisfaction and package acquisition.

Public API: the dependency model, the satisfaction check, the source protocol
and its registry / path / git implementations.

Per KERNEL_PHILOSOPHY: This is library mechanism, apps inject policy (paths, sources).
"""

from .config import Config
from .config import RegistryConfig
from .dependency import Dependency
from .dependency import GitDependency
from .dependency import PathDependency
from .dependency import VersionDependency
from .dependency import parse_dependencies
from .dependency import parse_dependency
from .exceptions import BlocksError
from .exceptions import ChecksumMismatchError
from .exceptions import GitError
from .exceptions import ManifestError
from .exceptions import PackageNotFoundError
from .exceptions import RegistryIndexError
from .git_source import GitSource
from .manifest import Manifest
from .manifest import load_manifest
from .path_source import PathSource
from .protocols import ConfigProtocol
from .protocols import SourceProtocol
from .registration import Feature
from .registration import Registration
from .registration import RegistryDependency
from .registration import get_registration_id
from .registration import get_registration_source
from .registration import parse_registration_source
from .registry_source import RegistrySource
from .registry_source import get_index_path
from .registry_source import parse_registration
from .satisfaction import satisfies
from .sources import default_sources
from .sources import fetch_registration
from .sources import find_source
from .sources import resolve_dependency
from .sources import update_sources

__all__ = [
    # Dependencies
    "Dependency",
    "VersionDependency",
    "PathDependency",
    "GitDependency",
    "parse_dependencies",
    "parse_dependency",
    # Manifest
    "Manifest",
    "load_manifest",
    # Satisfaction
    "satisfies",
    # Registrations
    "Registration",
    "RegistryDependency",
    "Feature",
    "get_registration_id",
    "get_registration_source",
    "parse_registration_source",
    # Sources
    "SourceProtocol",
    "ConfigProtocol",
    "Config",
    "RegistryConfig",
    "RegistrySource",
    "PathSource",
    "GitSource",
    "get_index_path",
    "parse_registration",
    "default_sources",
    "find_source",
    "update_sources",
    "resolve_dependency",
    "fetch_registration",
    # Exceptions
    "BlocksError",
    "ManifestError",
    "PackageNotFoundError",
    "RegistryIndexError",
    "ChecksumMismatchError",
    "GitError",
]

__version__ = "0.1.0"
