"""
Record identity generation: a UUID and a local creation timestamp.

Identity is produced off the caller's thread by IdentityGenerator so an
interactive caller never blocks on it; the result is only needed before the
record is encoded.
"""

import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import NamedTuple

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class RecordIdentity(NamedTuple):
    record_id: str
    created_at: str


def new_id() -> str:
    """
    Return a random RFC 4122 version-4 UUID in canonical 8-4-4-4-12 form.

    uuid4 draws its bits from os.urandom and sets the version and variant bits.
    """
    return str(uuid.uuid4())


def now() -> str:
    """Return the local wall-clock time as YYYY-MM-DD HH:MM:SS."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def new_identity() -> RecordIdentity:
    return RecordIdentity(record_id=new_id(), created_at=now())


class IdentityGenerator:
    """
    Generates record identities on a dedicated worker thread.

    Usage:
        with IdentityGenerator() as generator:
            identity = generator.generate().result()
    """

    def __init__(self):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="identity")

    def generate(self) -> Future:
        """
        Schedule identity generation.

        Returns:
            Future resolving to a RecordIdentity
        """
        return self._executor.submit(new_identity)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
