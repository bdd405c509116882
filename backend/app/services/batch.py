"""Batch submitter — creates mapped users in sequential chunks of concurrent calls.

Each create call is wrapped by ``reflect`` so that it always settles into a
``Created`` or ``Failed`` outcome. A failing call never cancels its siblings,
and ``submit`` itself never raises because of a remote failure.
"""
import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator, Sequence, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 10

T = TypeVar("T")

CreateFn = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]
ChunkCallback = Callable[[list["BatchOutcome"]], Any]


# ─── Outcomes ───

@dataclass(frozen=True)
class Created:
    index: int
    primary_id: str

    @property
    def ok(self) -> bool:
        return True

    def log_line(self) -> str:
        return f"Created: {self.primary_id}"


@dataclass(frozen=True)
class Failed:
    index: int
    message: str

    @property
    def ok(self) -> bool:
        return False

    def log_line(self) -> str:
        return f"Failed: {self.message}"


BatchOutcome = Created | Failed


# ─── Error messages ───

def error_message(exc: BaseException) -> str:
    """Best available human-readable message for a failed create call.

    Looks at the structured API error body first:
      1. web_service_result.errorList.error.errorMessage
      2. errorList.error[0].errorMessage
    and falls back to the exception text.
    """
    payload = getattr(exc, "payload", None)
    if isinstance(payload, dict):
        try:
            return str(payload["web_service_result"]["errorList"]["error"]["errorMessage"])
        except (KeyError, TypeError):
            pass
        try:
            return str(payload["errorList"]["error"][0]["errorMessage"])
        except (KeyError, IndexError, TypeError):
            pass
    return str(exc) or exc.__class__.__name__


# ─── Helpers ───

def chunk(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most ``size`` items."""
    if size < 1:
        raise ValueError("chunk size must be at least 1")
    for start in range(0, len(items), size):
        yield items[start:start + size]


async def reflect(index: int, create: CreateFn, obj: dict[str, Any]) -> BatchOutcome:
    """Run ``create(obj)`` and capture its result or exception as an outcome."""
    try:
        user = await create(obj)
        primary_id = str(user.get("primary_id", ""))
    except Exception as exc:
        message = error_message(exc)
        logger.warning("Create failed for row %d: %s", index, message)
        return Failed(index, message)
    return Created(index, primary_id)


# ─── Submit ───

async def submit(
    objects: Sequence[dict[str, Any]],
    create: CreateFn,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    *,
    start_index: int = 0,
    indexes: Sequence[int] | None = None,
    on_chunk: ChunkCallback | None = None,
) -> list[BatchOutcome]:
    """Create every object, ``chunk_size`` at a time.

    Chunks run one after another; the calls inside a chunk run concurrently.
    Outcomes come back in input order. ``indexes`` (or ``start_index``) sets
    the row index recorded on each outcome. ``on_chunk`` is called, and awaited
    if it returns an awaitable, with each chunk's outcomes once it settles.
    """
    if indexes is None:
        indexes = range(start_index, start_index + len(objects))
    elif len(indexes) != len(objects):
        raise ValueError("indexes must match objects one to one")

    outcomes: list[BatchOutcome] = []
    pairs = list(zip(indexes, objects))
    for number, group in enumerate(chunk(pairs, chunk_size), start=1):
        logger.info("Submitting chunk %d (%d users)", number, len(group))
        settled = await asyncio.gather(*(reflect(i, create, obj) for i, obj in group))
        settled = list(settled)
        outcomes.extend(settled)
        if on_chunk is not None:
            result = on_chunk(settled)
            if inspect.isawaitable(result):
                await result
    return outcomes
