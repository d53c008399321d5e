"""Pydantic schemas exchanged between the scraping core and its collaborators."""

from .source import Source, ScrapedRecord
from .progress import (
    ProgressEvent,
    ConnectedEvent,
    StartedEvent,
    ProgressUpdateEvent,
    SuccessEvent,
    ErrorEvent,
    CompletedEvent,
    parse_event,
)

__all__ = [
    "Source",
    "ScrapedRecord",
    "ProgressEvent",
    "ConnectedEvent",
    "StartedEvent",
    "ProgressUpdateEvent",
    "SuccessEvent",
    "ErrorEvent",
    "CompletedEvent",
    "parse_event",
]
