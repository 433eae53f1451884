"""Git source - Packages cloned from git repositories.

Checkouts live under config.git_dir/<url digest>, keyed on the origin URL so a
registration always finds the repository it was resolved from. fetch copies the
checked-out tree (without .git) into the registration's source directory.
"""

import asyncio
import hashlib
import logging
import os
import shutil
import tempfile
from pathlib import Path

from .dependency import Dependency
from .dependency import GitDependency
from .exceptions import GitError
from .exceptions import PackageNotFoundError
from .git import checkout
from .git import clone
from .git import fetch as git_fetch
from .git import head_commit
from .manifest import load_manifest
from .protocols import ConfigProtocol
from .registration import Registration
from .registration import get_registration_id
from .registration import get_registration_source

logger = logging.getLogger(__name__)


def checkout_dir(git_dir: Path, git_url: str) -> Path:
    """Checkout location for a repository URL."""
    return git_dir / hashlib.sha256(git_url.encode()).hexdigest()[:16]


class GitSource:
    """Source for git dependencies (one registration for the pinned ref)."""

    kind = "git"

    def match(self, indicator: str | Dependency) -> bool:
        if isinstance(indicator, str):
            return indicator == self.kind
        return isinstance(indicator, GitDependency)

    async def update(self, config: ConfigProtocol) -> None:
        """Repositories are synchronized per dependency in resolve()."""

    async def resolve(self, config: ConfigProtocol, dependency: Dependency) -> list[Registration]:
        """
        Clone or fetch the repository, check out the ref and read its manifest.

        Raises:
            PackageNotFoundError: If the repository cannot be cloned or the ref is unknown
            GitError: If updating an existing checkout fails
        """
        if not isinstance(dependency, GitDependency):
            raise PackageNotFoundError(f'"{dependency.name}" is not a git dependency', context={"name": dependency.name})

        git_dir = Path(config.git_dir)
        local = checkout_dir(git_dir, dependency.git_url)

        if not local.exists():
            git_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Cloning {dependency.git_url} into {local}")
            try:
                await clone(dependency.git_url, local.name, git_dir)
            except GitError as e:
                raise PackageNotFoundError(
                    f'"{dependency.name}" could not be cloned from {dependency.git_url}',
                    context={"name": dependency.name, "git": dependency.git_url, **e.context},
                ) from e
        else:
            logger.debug(f"Fetching {dependency.git_url} in {local}")
            await git_fetch(local)

        ref = f"origin/{dependency.branch}" if dependency.ref_kind == "branch" else dependency.ref
        try:
            await checkout(local, ref)
        except GitError as e:
            raise PackageNotFoundError(
                f'{dependency.ref_kind} "{dependency.ref}" not found for "{dependency.name}"',
                context={"name": dependency.name, "git": dependency.git_url, **e.context},
            ) from e

        commit = await head_commit(local)
        manifest = await asyncio.to_thread(load_manifest, local)

        return [
            Registration(
                id=get_registration_id(manifest.name, manifest.version),
                source=get_registration_source(self.kind, dependency.git_url, commit),
                name=manifest.name,
                version=manifest.version,
                dependencies=manifest.dependencies,
            )
        ]

    async def fetch(self, config: ConfigProtocol, registration: Registration) -> Path:
        """Copy the checkout for registration into its source directory (once)."""
        src = Path(config.resolve_source(registration))
        if src.exists():
            return src

        local = checkout_dir(Path(config.git_dir), registration.origin)
        if not local.exists():
            raise PackageNotFoundError(
                f"No checkout found for {registration.id}, resolve it first",
                context={"id": registration.id, "git": registration.origin, "path": str(local)},
            )

        if registration.details:
            await checkout(local, registration.details)

        logger.info(f"Copying {registration.id} to {src}")
        src.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(_copy_checkout, local, src)
        return src


def _copy_checkout(local: Path, dest: Path) -> None:
    staging = Path(tempfile.mkdtemp(dir=dest.parent, prefix=f".{dest.name}-")) / "tree"
    try:
        shutil.copytree(local, staging, ignore=shutil.ignore_patterns(".git"))
        try:
            os.replace(staging, dest)
        except OSError:
            if not dest.exists():
                raise
    finally:
        shutil.rmtree(staging.parent, ignore_errors=True)
