"""Registry source - Git-mirrored sharded index plus checksum-verified tarballs.

Index layout (one newline-delimited JSON file per package, one record per version):
  1/<name>                 name of length 1
  2/<name>                 name of length 2
  3/<c1>/<name>            name of length 3
  <c1c2>/<c3c4>/<name>     name of length 4 or more

Downloads never land at the cache path unverified: they go to a temp file next
to it and are moved in with os.replace only after the checksum matches.
"""

import asyncio
import json
import logging
import os
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from .dependency import Dependency
from .dependency import VersionDependency
from .exceptions import ChecksumMismatchError
from .exceptions import PackageNotFoundError
from .exceptions import RegistryIndexError
from .git import clone
from .git import pull
from .protocols import ConfigProtocol
from .registration import Feature
from .registration import Registration
from .registration import RegistryDependency
from .registration import get_registration_id
from .registration import get_registration_source
from .utils import checksum
from .utils import download
from .utils import tmp_file

logger = logging.getLogger(__name__)

REGISTRY_ORIGIN = "https://github.com/vba-blocks/registry"


class RegistrySource:
    """
    Source for packages published to the central registry.

    Args:
        transport: Optional httpx transport for downloads (tests inject httpx.MockTransport)

    Example:
        >>> source = RegistrySource()
        >>> await source.update(config)
        >>> registrations = await source.resolve(config, dependency)
        >>> path = await source.fetch(config, registrations[-1])
    """

    kind = "registry"

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self.transport = transport

    def match(self, indicator: str | Dependency) -> bool:
        if isinstance(indicator, str):
            return indicator == self.kind
        return isinstance(indicator, VersionDependency)

    async def update(self, config: ConfigProtocol) -> None:
        """Clone the index mirror on first use, pull it afterwards."""
        local = Path(config.registry.local)
        remote = config.registry.remote

        if not local.exists():
            local.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Cloning registry index {remote} into {local}")
            await clone(remote, local.name, local.parent)
            return

        logger.info(f"Updating registry index at {local}")
        await pull(local)

    async def resolve(self, config: ConfigProtocol, dependency: Dependency) -> list[Registration]:
        """
        Read every non-yanked version of a package from the index.

        Raises:
            PackageNotFoundError: If the package has no index file
            RegistryIndexError: If any line of the index file is malformed
        """
        name = dependency.name
        path = get_index_path(Path(config.registry.local), name)

        if not path.exists():
            raise PackageNotFoundError(
                f'"{name}" was not found in the registry',
                context={"name": name, "index_path": str(path)},
            )

        registrations = []
        data = await asyncio.to_thread(path.read_text, encoding="utf-8")
        for line_number, line in enumerate(data.splitlines(), start=1):
            if not line.strip():
                continue

            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise RegistryIndexError(
                    f"Invalid index record for {name} at {path}:{line_number}: {e}",
                    context={"name": name, "index_path": str(path), "line": line_number},
                ) from e

            if not isinstance(record, dict):
                raise RegistryIndexError(
                    f"Invalid index record for {name} at {path}:{line_number}: expected an object",
                    context={"name": name, "index_path": str(path), "line": line_number},
                )

            if record.get("yanked"):
                logger.debug(f"Skipping yanked {name}@{record.get('vers')}")
                continue

            registrations.append(parse_registration(record))

        logger.debug(f"Resolved {len(registrations)} registrations for {name}")
        return registrations

    async def fetch(self, config: ConfigProtocol, registration: Registration) -> Path:
        """
        Download, verify and extract a registration.

        Returns:
            Directory the package was extracted into

        Raises:
            ChecksumMismatchError: If the download does not match the recorded checksum
            httpx.HTTPError: If the download fails
        """
        url = config.resolve_remote_package(registration)
        file = Path(config.resolve_local_package(registration))

        if not file.exists():
            unverified = tmp_file(file.parent)
            try:
                logger.info(f"Downloading {registration.id} from {url}")
                await download(url, unverified, timeout=config.timeout, transport=self.transport)

                actual = await asyncio.to_thread(checksum, unverified)
                if actual != registration.details:
                    raise ChecksumMismatchError(
                        f"Invalid checksum for {registration.id}",
                        context={"url": url, "expected": registration.details, "actual": actual},
                    )

                os.replace(unverified, file)
                logger.debug(f"Verified {registration.id} into {file}")
            finally:
                unverified.unlink(missing_ok=True)

        src = Path(config.resolve_source(registration))
        if not src.exists():
            logger.info(f"Extracting {registration.id} to {src}")
            src.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(_extract, file, src)

        return src


def parse_registration(value: Any) -> Registration:
    """
    Convert one index record into a Registration.

    Raises:
        RegistryIndexError: If required fields are missing or malformed
    """
    try:
        name = value["name"]
        version = value["vers"]
        cksum = value["cksum"]

        dependencies = [RegistryDependency.model_validate(dep) for dep in value.get("deps", [])]
        features = [
            Feature(name=feature, dependencies=deps, src=[], references=[])
            for feature, deps in value.get("features", {}).items()
        ]

        return Registration(
            id=get_registration_id(name, version),
            source=get_registration_source("registry", REGISTRY_ORIGIN, cksum),
            name=name,
            version=version,
            dependencies=dependencies,
            features=features,
        )
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise RegistryIndexError(f"Invalid index record: {e}", context={"record": value}) from e


def get_index_path(local: Path, name: str) -> Path:
    """
    Path of a package's index file inside the mirror.

    Example:
        >>> get_index_path(Path("registry"), "vba-blocks")
        PosixPath('registry/vb/a-/vba-blocks')
    """
    if len(name) == 1:
        parts = ["1"]
    elif len(name) == 2:
        parts = ["2"]
    elif len(name) == 3:
        parts = ["3", name[0]]
    else:
        parts = [name[0:2], name[2:4]]

    return local.joinpath(*parts, name)


def _extract(file: Path, dest: Path) -> None:
    """Extract a tarball into dest via a sibling temp dir and an atomic rename."""
    staging = Path(tempfile.mkdtemp(dir=dest.parent, prefix=f".{dest.name}-"))
    try:
        with tarfile.open(file, "r:*") as tar:
            tar.extractall(staging, filter="data")
        try:
            os.replace(staging, dest)
        except OSError:
            # Another fetch of the same registration finished first
            if not dest.exists():
                raise
    finally:
        if staging.exists():
            shutil.rmtree(staging)
