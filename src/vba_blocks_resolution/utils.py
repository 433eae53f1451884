"""Filesystem and transfer helpers shared by sources.

Per RUTHLESS_SIMPLICITY: Thin wrappers over stdlib and httpx, no caching.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def trailing(path: str | Path) -> str:
    """Return path with exactly one trailing separator.

    Directory comparisons then never match on a string prefix
    ("packages/a/" vs "packages/ab/").
    """
    value = str(path)
    return value if value.endswith(os.sep) else value + os.sep


def resolve_path(base_dir: str | Path, path: str | Path) -> str:
    """Resolve path against base_dir into an absolute, trailing-normalized form.

    Args:
        base_dir: Directory of the declaring manifest
        path: Absolute or base-relative path

    Returns:
        Normalized absolute directory path ending in a separator

    Example:
        >>> resolve_path("/work/project", "../shared/a")
        '/work/shared/a/'
    """
    joined = os.path.join(os.path.abspath(os.fspath(base_dir)), os.fspath(path))
    return trailing(os.path.normpath(joined))


def checksum(file: Path) -> str:
    """Compute sha256 hex digest of a file."""
    digest = hashlib.sha256()
    with open(file, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def tmp_file(directory: Path, suffix: str = ".partial") -> Path:
    """Create an empty temporary file inside directory.

    Keeping it next to its final destination allows an atomic os.replace.
    """
    directory.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(dir=directory, prefix=".", suffix=suffix)
    os.close(fd)
    return Path(name)


async def download(
    url: str,
    dest: Path,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Stream url into dest.

    Args:
        url: Remote file URL
        dest: Local file to write (overwritten)
        timeout: Transport timeout in seconds
        transport: Optional httpx transport (tests inject httpx.MockTransport)

    Raises:
        httpx.HTTPError: On connection failure or non-2xx response
    """
    logger.debug(f"Downloading {url} to {dest}")
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        transport=transport,
        follow_redirects=True,
    ) as client:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            with open(dest, "wb") as f:
                async for chunk in response.aiter_bytes():
                    f.write(chunk)
