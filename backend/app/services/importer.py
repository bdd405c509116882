"""Import run orchestration: map rows, confirm, create users, keep a log.

One ``ImportRun`` belongs to one operator session. Its log is append-only
while a run is in progress and is cleared when the next run starts, when the
operator declines the confirmation, or on ``reset()``.
"""
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Sequence

from app.core.config import settings
from app.core.errors import ArrayIndexError, PathConflictError
from app.schemas.profile import Profile
from app.services.batch import BatchOutcome, CreateFn, Failed, submit
from app.services.row_mapper import map_row

logger = logging.getLogger(__name__)

FINISHED = "Finished"

ConfirmFn = Callable[[int], bool | Awaitable[bool]]


@dataclass
class MappedRows:
    objects: list[dict[str, Any]] = field(default_factory=list)
    indexes: list[int] = field(default_factory=list)
    failures: list[Failed] = field(default_factory=list)


@dataclass
class ImportSummary:
    outcomes: list[BatchOutcome]
    log: list[str]

    @property
    def created(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.ok)


def map_rows(rows: Sequence[Mapping[str, str | None]], profile: Profile) -> MappedRows:
    """Map every row. Rows that cannot be mapped become failures instead of objects."""
    mapped = MappedRows()
    for index, row in enumerate(rows):
        try:
            obj = map_row(row, profile)
        except (PathConflictError, ArrayIndexError) as exc:
            logger.warning("Row %d could not be mapped: %s", index, exc)
            mapped.failures.append(Failed(index, str(exc)))
            continue
        mapped.objects.append(obj)
        mapped.indexes.append(index)
    return mapped


class ImportRun:
    """Runs imports and keeps the log of the latest one.

    ``on_line`` is called with each log line as it is appended.
    """

    def __init__(self, on_line: Callable[[str], None] | None = None) -> None:
        self.log: list[str] = []
        self._on_line = on_line

    def reset(self) -> None:
        self.log = []

    def _log(self, line: str) -> None:
        self.log.append(line)
        if self._on_line is not None:
            self._on_line(line)

    async def run(
        self,
        rows: Sequence[Mapping[str, str | None]],
        profile: Profile,
        create: CreateFn,
        confirm: ConfirmFn,
        chunk_size: int | None = None,
    ) -> ImportSummary | None:
        """Create a user per row. Returns None when the operator declines."""
        self.reset()
        mapped = map_rows(rows, profile)

        answer = confirm(len(mapped.objects))
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            logger.info("Import of %d users declined", len(mapped.objects))
            self.reset()
            return None

        logger.info(
            "Importing %d users with profile '%s'", len(mapped.objects), profile.name,
        )
        # Unmapped rows are logged in row order between the submitted ones
        unmapped = list(mapped.failures)

        def log_unmapped_before(index: int) -> None:
            while unmapped and unmapped[0].index < index:
                self._log(unmapped.pop(0).log_line())

        def record(chunk_outcomes: list[BatchOutcome]) -> None:
            for outcome in chunk_outcomes:
                log_unmapped_before(outcome.index)
                self._log(outcome.log_line())

        submitted = await submit(
            mapped.objects,
            create,
            chunk_size or settings.IMPORT_CHUNK_SIZE,
            indexes=mapped.indexes,
            on_chunk=record,
        )
        log_unmapped_before(len(rows))
        self._log(FINISHED)

        outcomes = sorted([*mapped.failures, *submitted], key=lambda o: o.index)
        summary = ImportSummary(outcomes=outcomes, log=list(self.log))
        logger.info("Import finished: %d created, %d failed", summary.created, summary.failed)
        return summary
