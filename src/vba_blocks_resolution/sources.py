"""Source dispatch - Pick the backend that owns a dependency.

Per KERNEL_PHILOSOPHY: The source list is app policy; default_sources() is a convenience.
"""

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from .dependency import Dependency
from .exceptions import PackageNotFoundError
from .git_source import GitSource
from .path_source import PathSource
from .protocols import ConfigProtocol
from .protocols import SourceProtocol
from .registration import Registration
from .registry_source import RegistrySource

logger = logging.getLogger(__name__)


def default_sources() -> list[SourceProtocol]:
    """Registry, path and git sources, in that order."""
    return [RegistrySource(), PathSource(), GitSource()]


def find_source(sources: Sequence[SourceProtocol], indicator: str | Dependency) -> SourceProtocol:
    """
    Return the first source that matches a kind string or dependency.

    Raises:
        PackageNotFoundError: If no source matches
    """
    for source in sources:
        if source.match(indicator):
            return source

    label = indicator if isinstance(indicator, str) else f'"{indicator.name}" ({indicator.kind})'
    raise PackageNotFoundError(f"No source found for {label}", context={"indicator": str(label)})


async def update_sources(config: ConfigProtocol, sources: Sequence[SourceProtocol]) -> None:
    """Refresh every source concurrently (each one owns a distinct local path)."""
    await asyncio.gather(*(source.update(config) for source in sources))


async def resolve_dependency(
    config: ConfigProtocol,
    dependency: Dependency,
    sources: Sequence[SourceProtocol],
) -> list[Registration]:
    """Resolve candidate registrations through the matching source."""
    source = find_source(sources, dependency)
    logger.debug(f"Resolving {dependency.name} via {type(source).__name__}")
    return await source.resolve(config, dependency)


async def fetch_registration(
    config: ConfigProtocol,
    registration: Registration,
    sources: Sequence[SourceProtocol],
) -> Path:
    """Fetch a registration through the source named by its locator kind."""
    source = find_source(sources, registration.kind)
    return await source.fetch(config, registration)
