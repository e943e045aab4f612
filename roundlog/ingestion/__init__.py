"""Raw source parsing and consolidation into the canonical store."""

from roundlog.ingestion.merger import ConsolidationReport, IngestionMerger, RejectedSource
from roundlog.ingestion.raw_batch import RawBatch

__all__ = [
    "ConsolidationReport",
    "IngestionMerger",
    "RawBatch",
    "RejectedSource",
]
