"""
Global read lock handling for MySQL Data Dumper.

See https://dev.mysql.com/doc/refman/8.0/en/replication-solutions-backups-read-only.html
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from mysql.connector import Error as MySQLError

from .connection import DatabaseConnection
from .errors import LockError, LockReleaseError


class LockManager:
    """Takes and gives back the server-wide read lock around a dump."""

    ACQUIRE_STATEMENTS = (
        'FLUSH TABLES WITH READ LOCK',
        'SET GLOBAL read_only = ON',
    )
    RELEASE_STATEMENTS = (
        'SET GLOBAL read_only = OFF',
        'UNLOCK TABLES',
    )

    def __init__(self, connection: DatabaseConnection):
        self.connection = connection

    def acquire(self) -> None:
        """Take the lock. A partial acquire is undone before LockError is raised."""
        done = 0
        try:
            for statement in self.ACQUIRE_STATEMENTS:
                self.connection.execute(statement)
                done += 1
        except MySQLError as e:
            if done:
                logging.warning("Global read lock partially acquired, undoing")
                # release statements mirror acquire statements in reverse
                self._release(self.RELEASE_STATEMENTS[len(self.RELEASE_STATEMENTS) - done:])
            raise LockError(f"Failed to acquire global read lock: {e}") from e
        logging.info("Acquired global read lock")

    def release(self) -> None:
        self._release(self.RELEASE_STATEMENTS)

    def _release(self, statements: tuple[str, ...]) -> None:
        try:
            for statement in statements:
                self.connection.execute(statement)
        except MySQLError as e:
            logging.error(f"Failed to release global read lock, server lock state is unknown: {e}")
            raise LockReleaseError(f"Failed to release global read lock: {e}") from e
        logging.info("Released global read lock")

    @contextmanager
    def held(self) -> Iterator[None]:
        """Hold the lock for the duration of the block.

        Release is attempted however the block exits. A failing release
        replaces any error raised by the block.
        """
        self.acquire()
        try:
            yield
        finally:
            self.release()
