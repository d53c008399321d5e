"""Scraping core: site extractors, browser driver and batch execution.

This package provides:
- Base extractor classes and strategy chains for site-specific scrapers
- A Playwright driver that snapshots a product page for extraction
- A static registry mapping source types to extractors
- A sequential batch runner that reports progress over a channel
"""

from .base import BaseExtractor, ExtractionResult, SiteProfile, WaitSpec
from .batch_runner import BatchItemResult, BatchRunner, CancellationToken
from .driver import SiteDriver
from .persistence import HttpRecordSink, MemoryRecordSink, RecordSink
from .progress import ProgressChannel, QueueListener
from .registry import ScraperRegistry, create_default_registry

__all__ = [
    # Base classes
    "BaseExtractor",
    "ExtractionResult",
    "SiteProfile",
    "WaitSpec",
    # Execution
    "BatchRunner",
    "BatchItemResult",
    "CancellationToken",
    "SiteDriver",
    # Collaborators
    "ProgressChannel",
    "QueueListener",
    "RecordSink",
    "HttpRecordSink",
    "MemoryRecordSink",
    # Registry
    "ScraperRegistry",
    "create_default_registry",
]
