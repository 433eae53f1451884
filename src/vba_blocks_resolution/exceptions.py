"""Resolution-specific exceptions.

Per IMPLEMENTATION_PHILOSOPHY: Clear, actionable error messages.
Filesystem, network and subprocess failures are not wrapped here, they propagate as-is.
"""


class BlocksError(Exception):
    """Base exception for dependency resolution and acquisition."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (package name, paths, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ManifestError(BlocksError):
    """Invalid dependency entry or manifest."""


class PackageNotFoundError(BlocksError):
    """Package unknown to a source, or no source handles it."""


class RegistryIndexError(BlocksError):
    """Malformed record in the registry index."""


class ChecksumMismatchError(BlocksError):
    """Downloaded package does not match its recorded checksum."""


class GitError(BlocksError):
    """Git command failed."""
