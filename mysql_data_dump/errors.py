"""
Error types for MySQL Data Dumper.

Every error is fatal to the running dump. Nothing here is retried.
"""


class DumpError(Exception):
    """Base class for all dump failures."""


class SourceConnectionError(DumpError):
    """Opening the source connection or running a query against it failed."""


class LockError(DumpError):
    """The global read lock could not be acquired."""


class LockReleaseError(LockError):
    """The global read lock could not be released.

    Raised after the export has run (successfully or not), or while undoing a
    partially acquired lock. Any data already written is present, but the
    lock/read-only state of the source server is unknown and must be checked
    by hand.

    ``tables`` holds the dumped table descriptors when the export itself
    completed before the release failed, and is None otherwise.
    """

    def __init__(self, message: str, tables=None):
        super().__init__(message)
        self.tables = tables


class WriteError(DumpError):
    """The destination file could not be opened or written."""


class IndexQueryError(DumpError):
    """The index catalog of a table could not be read."""
