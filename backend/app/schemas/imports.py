"""Pydantic schemas for CSV user import requests and results."""
from typing import Any, Literal

from pydantic import BaseModel


class CsvRowError(BaseModel):
    row: int
    message: str


class ImportOutcomeOut(BaseModel):
    row: int
    status: Literal["created", "failed"]
    primary_id: str | None = None
    message: str | None = None


class ImportPreview(BaseModel):
    profile: str
    row_count: int
    parse_errors: list[CsvRowError]
    sample: list[dict[str, Any]]


class ImportResult(BaseModel):
    profile: str
    created: int
    failed: int
    outcomes: list[ImportOutcomeOut]
    log: list[str]
    parse_errors: list[CsvRowError] = []
