"""
Structured-document sink: a JSON array rewritten in full on every append.

Each append reads the whole document, splices the new object in before the
closing bracket and swaps the result into place through a temporary file in
the same directory. Every append gets its own uniquely named temporary file
(``<name>.<random>.tmp``), so concurrent writers never truncate or move each
other's pending bytes. Cost is O(document size) per write, which is fine for
operator-paced submissions.

Atomicity: os.replace is atomic on POSIX and Windows. When it fails the sink
falls back to copying the temporary file over the destination, which is NOT
crash-atomic; a crash mid-copy can leave a truncated document. Both paths are
serialized per destination inside one process only; two processes appending
to the same document always leave a complete document behind, but one of
the two updates can be lost (last writer wins).
"""

import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

from condition_log.core.models import ValidatedRecord

from .exceptions import JsonFormatError, PersistenceError
from .locks import path_lock

logger = logging.getLogger(__name__)

_TRAILING_WHITESPACE = " \t\r\n"


@dataclass(frozen=True)
class JsonAppendResult:
    """
    What happened to the existing document during an append.

    Attributes:
        replaced_malformed: The previous content was not a JSON array and was discarded
        backup_path: Where the discarded bytes were saved, if they were
    """

    replaced_malformed: bool = False
    backup_path: Path | None = None


def encode_object(record: Mapping[str, Any]) -> str:
    """
    Encode a flat string-to-string mapping as a compact JSON object.

    Quotes, backslashes and control characters are escaped (\\b \\f \\n \\r \\t,
    other controls as \\u00XX); non-ASCII text is kept as-is.

    Raises:
        TypeError: If a key or value is not a string
    """
    for key, value in record.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError(f"JSON record fields must be strings, got {key!r}: {type(value).__name__}")
    return json.dumps(dict(record), ensure_ascii=False, separators=(",", ":"))


def splice_document(existing: str | None, object_json: str) -> tuple[str, bool]:
    """
    Build the new document text from the existing one.

    Args:
        existing: Current file content (None when the file does not exist)
        object_json: Encoded object to append

    Returns:
        (new document, whether the existing content was malformed and discarded)
    """
    trimmed = (existing or "").rstrip(_TRAILING_WHITESPACE)

    if trimmed.startswith("[") and trimmed.endswith("]"):
        # "[]" and "[ ]" hold no elements; splicing a comma in would corrupt them
        if not trimmed[1:-1].strip():
            return f"[{object_json}]", False
        return f"{trimmed[:-1]},{object_json}]", False

    if not trimmed:
        return f"[{object_json}]", False

    return f"[{object_json}]", True


class JsonDocumentSink:
    """
    JSON array document of validated records, one object per record.

    The object holds the JSON view of the record (see ValidatedRecord.json_object).
    """

    name = "json"

    def __init__(self, path: str | Path):
        """
        Initialize JSON document sink.

        Args:
            path: Destination JSON file
        """
        self.path = Path(path)

    def append(self, record: ValidatedRecord) -> JsonAppendResult:
        """Encode a validated record and append it to the document."""
        return self.append_object(encode_object(record.json_object()))

    def append_object(self, object_json: str) -> JsonAppendResult:
        """
        Append one encoded object to the document.

        Malformed existing content is replaced by a fresh single-element array
        rather than failing the append; the old bytes are copied to a sibling
        backup file first and the replacement is logged as a warning.

        Args:
            object_json: Output of encode_object

        Returns:
            JsonAppendResult describing whether existing content was replaced

        Raises:
            PersistenceError: If the document cannot be read, written or replaced
        """
        with path_lock(self.path):
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                raw = self.path.read_bytes() if self.path.exists() else None
            except OSError as e:
                raise PersistenceError(self.name, str(self.path), str(e)) from e

            try:
                existing = raw.decode("utf-8") if raw is not None else None
                undecodable = False
            except UnicodeDecodeError:
                existing, undecodable = None, True

            document, malformed = splice_document(existing, object_json)
            malformed = malformed or undecodable

            backup_path = None
            if malformed:
                backup_path = self._backup(raw)
                logger.warning(
                    f"Existing content of {self.path} is not a JSON array; starting a new document",
                    extra={"path": str(self.path), "backup_path": str(backup_path) if backup_path else None},
                )

            try:
                payload = document.encode("utf-8")
            except UnicodeEncodeError as e:
                raise PersistenceError(self.name, str(self.path), f"cannot encode document: {e}") from e

            temp_path = self._write_temp(payload)
            self._replace(temp_path)

        logger.debug(f"Appended JSON object to {self.path}", extra={"document_bytes": len(payload)})
        return JsonAppendResult(replaced_malformed=malformed, backup_path=backup_path)

    def read_document(self) -> list[dict[str, Any]]:
        """
        Load the stored array.

        Raises:
            FileNotFoundError: If the file does not exist
            JsonFormatError: If the content is not a JSON array of objects
        """
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return []
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise JsonFormatError(f"{self.path} is not valid JSON: {e}") from e

        if not isinstance(document, list) or not all(isinstance(item, dict) for item in document):
            raise JsonFormatError(f"{self.path} is not a JSON array of objects")
        return document

    def _backup(self, raw: bytes | None) -> Path | None:
        if not raw:
            return None

        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        backup_path = self.path.with_name(f"{self.path.name}.malformed-{stamp}")
        counter = 1
        while backup_path.exists():
            backup_path = self.path.with_name(f"{self.path.name}.malformed-{stamp}-{counter}")
            counter += 1

        try:
            backup_path.write_bytes(raw)
        except OSError as e:
            raise PersistenceError(self.name, str(backup_path), f"cannot back up malformed document: {e}") from e
        return backup_path

    def _write_temp(self, payload: bytes) -> Path:
        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "wb",
                dir=self.path.parent,
                prefix=self.path.name + ".",
                suffix=".tmp",
                delete=False,
            ) as tf:
                temp_path = Path(tf.name)
                tf.write(payload)
                tf.flush()
                os.fsync(tf.fileno())
        except OSError as e:
            if temp_path is not None:
                self._discard_temp(temp_path)
            raise PersistenceError(self.name, str(temp_path or self.path.parent), str(e)) from e
        return temp_path

    def _replace(self, temp_path: Path) -> None:
        try:
            os.replace(temp_path, self.path)
            return
        except OSError as e:
            logger.warning(
                f"Atomic replace of {self.path} failed, falling back to copy: {e}",
                extra={"path": str(self.path)},
            )

        try:
            shutil.copyfile(temp_path, self.path)
        except OSError as e:
            self._discard_temp(temp_path)
            raise PersistenceError(self.name, str(self.path), str(e)) from e
        self._discard_temp(temp_path)

    def _discard_temp(self, temp_path: Path) -> None:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temporary file {temp_path}: {e}")
