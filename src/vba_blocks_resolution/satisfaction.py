"""Manifest / lock consistency check.

Decides whether a previously resolved (locked) dependency can be reused
without re-resolution.
"""

import asyncio
import logging

from semantic_version import NpmSpec
from semantic_version import Version

from .dependency import Dependency
from .dependency import GitDependency
from .dependency import PathDependency
from .dependency import VersionDependency
from .manifest import load_manifest

logger = logging.getLogger(__name__)


async def satisfies(value: Dependency, comparison: Dependency) -> bool:
    """
    Check whether a locked dependency still honors the manifest.

    Argument order matters:
    - value: dependency as declared in the manifest
    - comparison: locked dependency (more specific, carries an exact version)

    Args:
        value: Manifest dependency
        comparison: Lock entry

    Returns:
        True if the lock entry can be reused

    Example:
        >>> await satisfies(
        ...     VersionDependency(name="a", version_range="^1.0.0"),
        ...     VersionDependency(name="a", version_range="1.2.0", version="1.2.0"),
        ... )
        True
    """
    if isinstance(comparison, VersionDependency):
        if not isinstance(value, VersionDependency):
            return False
        return _satisfies_range(comparison.version or comparison.version_range, value.version_range)

    if isinstance(comparison, PathDependency):
        if not isinstance(value, PathDependency) or value.path != comparison.path:
            return False

        # Current version of the package on disk must match the lock
        manifest = await asyncio.to_thread(load_manifest, value.path)
        return manifest.version == comparison.version

    if isinstance(comparison, GitDependency):
        if not isinstance(value, GitDependency):
            return False

        # Ref kinds are never coerced (tag vs rev compares as unsatisfied)
        if value.ref_kind != comparison.ref_kind:
            return False
        return value.ref == comparison.ref

    return False


def _satisfies_range(version: str, version_range: str) -> bool:
    try:
        exact = Version(version)
    except ValueError:
        logger.debug(f"Locked version '{version}' is not an exact version")
        return False

    return NpmSpec(version_range).match(exact)
