"""Exception hierarchy for the scan / lookup / apply pipeline."""


class PlexifyError(Exception):
    """Base class for every error raised by plexify."""
    pass


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------

class ScanError(PlexifyError):
    """Raised when a folder cannot be scanned."""
    pass


class FolderNotFoundError(ScanError):
    def __init__(self, path):
        super().__init__(f"Folder not found: {path}")
        self.path = path


class NotAFolderError(ScanError):
    def __init__(self, path):
        super().__init__(f"Path is not a directory: {path}")
        self.path = path


class ScanIOError(ScanError):
    def __init__(self, path, message: str):
        super().__init__(f"Scan failed for {path}: {message}")
        self.path = path


# ---------------------------------------------------------------------------
# Metadata lookup
# ---------------------------------------------------------------------------

class MetadataLookupError(PlexifyError):
    """Raised by lookup clients. The resolver never lets these escape."""
    pass


class MissingCredentialError(MetadataLookupError):
    pass


class NoResultsError(MetadataLookupError):
    pass


class MissingExternalIDError(MetadataLookupError):
    pass


class InvalidResponseError(MetadataLookupError):
    pass


# ---------------------------------------------------------------------------
# Filesystem boundary
# ---------------------------------------------------------------------------

class FileSystemError(PlexifyError):
    """A filesystem operation failed; subclasses name the category."""

    def __init__(self, path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class PathNotFoundError(FileSystemError):
    pass


class PathExistsError(FileSystemError):
    pass


class PermissionDeniedError(FileSystemError):
    pass


class FileSystemIOError(FileSystemError):
    pass


# ---------------------------------------------------------------------------
# Apply
# ---------------------------------------------------------------------------

class ApplyError(PlexifyError):
    """Applying a rename plan failed. Completed steps have been rolled back."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ApplyConflictError(ApplyError):
    """The target already exists as a different filesystem object."""
    pass


class ApplyIOError(ApplyError):
    pass
