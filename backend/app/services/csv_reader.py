"""CSV parsing for user import files.

The first line is the header. Every data line becomes a ``{header: value}``
dict. Malformed lines are kept where possible and reported in ``errors``;
callers decide what to do with them.
"""
import csv
import io
import logging
from dataclasses import dataclass, field

from app.schemas.imports import CsvRowError

logger = logging.getLogger(__name__)


@dataclass
class CsvParseResult:
    data: list[dict[str, str]] = field(default_factory=list)
    errors: list[CsvRowError] = field(default_factory=list)


def parse_csv(content: bytes) -> CsvParseResult:
    text = content.decode("utf-8-sig", errors="replace")
    reader = csv.reader(io.StringIO(text))
    result = CsvParseResult()

    try:
        header = next(reader, None)
        if header is None:
            result.errors.append(CsvRowError(row=1, message="File has no header row"))
            return result
        header = [h.strip() for h in header]

        for cells in reader:
            if not any(c.strip() for c in cells):
                continue
            if len(cells) != len(header):
                result.errors.append(CsvRowError(
                    row=reader.line_num,
                    message=f"Expected {len(header)} fields but found {len(cells)}",
                ))
            result.data.append({
                h: (cells[i] if i < len(cells) else "") for i, h in enumerate(header)
            })
    except csv.Error as exc:
        result.errors.append(CsvRowError(row=reader.line_num, message=str(exc)))

    if result.errors:
        logger.warning("CSV parsed with %d error(s)", len(result.errors))
    return result
