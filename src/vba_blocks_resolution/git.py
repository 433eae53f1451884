"""Minimal async git primitives (clone, pull, fetch, checkout, HEAD).

Each call runs the git CLI as a subprocess and raises GitError on a non-zero exit.
"""

import asyncio
import logging
from pathlib import Path

from .exceptions import GitError

logger = logging.getLogger(__name__)


async def run_git(*args: str, cwd: Path | None = None) -> str:
    """Run a git command and return its stripped stdout.

    Raises:
        GitError: If git exits with a non-zero status
    """
    logger.debug(f"git {' '.join(args)} (cwd={cwd})")
    process = await asyncio.create_subprocess_exec(
        "git",
        *args,
        cwd=str(cwd) if cwd else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()

    if process.returncode != 0:
        message = stderr.decode(errors="replace").strip()
        raise GitError(
            f"git {args[0]} failed (rc={process.returncode}): {message[:300]}",
            context={"args": list(args), "cwd": str(cwd) if cwd else None, "returncode": process.returncode},
        )

    return stdout.decode(errors="replace").strip()


async def clone(remote: str, name: str, cwd: Path) -> None:
    """Clone remote into cwd/name."""
    await run_git("clone", remote, name, cwd=cwd)


async def pull(local: Path) -> None:
    """Fast-forward local checkout to the latest remote state."""
    await run_git("pull", "--ff-only", cwd=local)


async def fetch(local: Path) -> None:
    """Fetch all branches and tags without touching the working tree."""
    await run_git("fetch", "--tags", "--force", "origin", cwd=local)


async def checkout(local: Path, ref: str) -> None:
    """Check out ref (commit, tag or remote branch) as a detached HEAD."""
    await run_git("checkout", "--quiet", "--detach", ref, cwd=local)


async def head_commit(local: Path) -> str:
    """Return the full SHA of HEAD."""
    return await run_git("rev-parse", "HEAD", cwd=local)
