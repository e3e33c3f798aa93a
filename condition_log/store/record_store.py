"""
Record store facade: validate a raw field map, stamp it, write it to the sinks.

One submission walks IDLE -> VALIDATING -> REJECTED | PERSISTING ->
PERSISTED | PERSIST_FAILED -> IDLE. A rejected submission performs no I/O.
A failed write keeps the operator's input so it can be retried unchanged;
a successful one resets the retained input to the form defaults.

The caller never shares mutable state with the workers: ``submit`` returns a
Future whose PersistResult value the caller hands to whoever owns its
display state.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Mapping, Protocol, Sequence

from condition_log.config import Settings
from condition_log.core.fields import FORM_DEFAULTS, normalize_field_map
from condition_log.core.identity import IdentityGenerator
from condition_log.core.models import PersistResult, StoreState, ValidatedRecord, ValidationReport
from condition_log.core.rules import RuleEngine
from condition_log.observability import log_operation
from condition_log.observability import metrics
from condition_log.storage import CsvSink, JsonAppendResult, JsonDocumentSink, PersistenceError

logger = logging.getLogger(__name__)

MALFORMED_JSON_WARNING = (
    "The existing JSON document at {path} was not a JSON array and has been replaced; "
    "its previous content was saved to {backup}"
)


class RecordSink(Protocol):
    name: str

    def append(self, record: ValidatedRecord) -> object:
        ...


def build_sinks(settings: Settings) -> list[RecordSink]:
    """Instantiate the configured sinks in write order."""
    factories = {
        "csv": lambda: CsvSink(settings.csv_path),
        "json": lambda: JsonDocumentSink(settings.json_path),
    }
    return [factories[name]() for name in settings.sinks]


class RecordStore:
    """
    Orchestrates validation, identity stamping and persistence of device-condition records.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        engine: RuleEngine | None = None,
        sinks: Sequence[RecordSink] | None = None,
    ):
        """
        Initialize the record store.

        Args:
            settings: Store configuration (defaults to Settings())
            engine: Rule engine (defaults to one built from settings.load_rules())
            sinks: Sinks to write to (defaults to the ones named in settings.sinks)
        """
        self.settings = settings or Settings()
        self.engine = engine or RuleEngine(self.settings.load_rules())
        self.sinks = list(sinks) if sinks is not None else build_sinks(self.settings)

        self._identity = IdentityGenerator()
        self._submissions = ThreadPoolExecutor(max_workers=1, thread_name_prefix="persist")
        self._persist_lock = threading.Lock()
        self._state = StoreState.IDLE
        self._retained_input = dict(FORM_DEFAULTS)

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def retained_input(self) -> dict[str, str]:
        """The field map to show in the form: last failed input, or the defaults."""
        return dict(self._retained_input)

    def clear(self) -> dict[str, str]:
        """Reset the retained input to the form defaults and return it."""
        self._retained_input = dict(FORM_DEFAULTS)
        return self.retained_input

    def validate(self, field_map: Mapping[str, str]) -> ValidationReport:
        """
        Validate a raw field map without side effects.

        Args:
            field_map: Field name (snake_case or camelCase) -> raw string

        Returns:
            ValidationReport; ``messages_by_field`` holds one message per failing field
        """
        return self.engine.validate(normalize_field_map(field_map))

    def persist(self, field_map: Mapping[str, str]) -> PersistResult:
        """
        Validate a raw field map and, if it passes, write it to every sink.

        Calls are serialized: a second caller waits for the first to finish.

        Args:
            field_map: Field name (snake_case or camelCase) -> raw string

        Returns:
            PersistResult with the terminal state of this submission
        """
        with self._persist_lock:
            fields = normalize_field_map(field_map)
            self._retained_input = dict(fields)
            try:
                return self._run(fields)
            finally:
                self._transition(StoreState.IDLE)

    def submit(self, field_map: Mapping[str, str]) -> Future:
        """
        Queue a persist call on the store's worker thread.

        Returns:
            Future resolving to the PersistResult
        """
        return self._submissions.submit(self.persist, dict(field_map))

    def close(self) -> None:
        """Wait for queued submissions, then stop the worker threads."""
        self._submissions.shutdown(wait=True)
        self._identity.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _transition(self, state: StoreState) -> None:
        logger.debug(f"Record store {self._state.value} -> {state.value}")
        self._state = state

    def _run(self, fields: dict[str, str]) -> PersistResult:
        self._transition(StoreState.VALIDATING)
        report = self.engine.validate(fields)

        if not report.ok:
            self._transition(StoreState.REJECTED)
            metrics.record_submission("rejected")
            metrics.record_validation_failures(report.failed_rules())
            logger.info(
                "Submission rejected by validation",
                extra={"failed_fields": sorted(report.messages_by_field)},
            )
            return PersistResult(
                ok=False,
                state=StoreState.REJECTED,
                messages_by_field=report.messages_by_field,
            )

        self._transition(StoreState.PERSISTING)
        identity = self._identity.generate().result()
        record = ValidatedRecord.from_fields(fields, identity.record_id, identity.created_at)

        warnings: list[str] = []
        written: list[str] = []
        try:
            with log_operation("Persisting record", logger=logger, record_id=record.record_id):
                for sink in self.sinks:
                    outcome = self._write(sink, record)
                    written.append(sink.name)
                    if isinstance(outcome, JsonAppendResult) and outcome.replaced_malformed:
                        metrics.record_json_replacement()
                        warnings.append(MALFORMED_JSON_WARNING.format(
                            path=getattr(sink, "path", sink.name),
                            backup=outcome.backup_path,
                        ))
        except PersistenceError as e:
            self._transition(StoreState.PERSIST_FAILED)
            metrics.record_submission("persist_failed")
            return PersistResult(
                ok=False,
                state=StoreState.PERSIST_FAILED,
                record_id=record.record_id,
                error_detail=str(e),
                warnings=warnings,
                sinks_written=written,
            )

        self._transition(StoreState.PERSISTED)
        metrics.record_submission("persisted")
        self._retained_input = dict(FORM_DEFAULTS)
        return PersistResult(
            ok=True,
            state=StoreState.PERSISTED,
            record_id=record.record_id,
            warnings=warnings,
            sinks_written=written,
        )

    def _write(self, sink: RecordSink, record: ValidatedRecord) -> object:
        try:
            with metrics.track_duration(metrics.sink_write_duration_seconds, sink=sink.name):
                outcome = sink.append(record)
        except PersistenceError:
            metrics.record_sink_write(sink.name, success=False)
            raise
        metrics.record_sink_write(sink.name, success=True)
        return outcome
