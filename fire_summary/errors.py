"""Exceptions raised by the fire summary pipeline."""
from __future__ import annotations
from typing import Any


class FireSummaryError(Exception):
    """Base error for the fire summary pipeline."""

    pass


class DataSourceError(FireSummaryError):
    """Input file missing, unreadable, or missing a required column. Aborts the run."""

    def __init__(self, message: str, path: Any = None, column: str | None = None):
        super().__init__(message)
        self.path = path
        self.column = column


class FieldParseError(FireSummaryError):
    """A single attribute value could not be parsed as a number."""

    def __init__(self, column: str, value: Any, record_id: Any = None, reason: str = "not numeric"):
        self.column = column
        self.value = value
        self.record_id = record_id
        self.reason = reason
        where = f" (record {record_id})" if record_id is not None else ""
        super().__init__(f"{column}{where}: {value!r} is {reason}")


class RenderSkipped(FireSummaryError):
    """A chart or map had nothing to draw; the artifact is skipped."""

    def __init__(self, artifact: str, reason: str):
        self.artifact = artifact
        self.reason = reason
        super().__init__(f"{artifact}: {reason}")
