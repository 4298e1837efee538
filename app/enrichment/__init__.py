"""
Enrichment jobs - fill derived fields on civic records.

This package handles:
- Issue positions for candidates and issue tags for bills
- Inspiration posts built from the news feed
- Vector embeddings for all three record kinds
- Idempotent seeding of baseline records (priming)

Every job walks its records one at a time and reports a JobResult.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional


class EnrichmentStrategy(Enum):
    """Where an issue enricher gets its extraction context from."""
    SELF_CONTEXT = 'self_context'
    SEARCH_AUGMENTED = 'search_augmented'


@dataclass
class JobResult:
    """Per-job counts. processed = succeeded + failed."""
    job: str
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    skipped_reason: Optional[str] = None

    def record_success(self):
        self.processed += 1
        self.succeeded += 1

    def record_failure(self):
        self.processed += 1
        self.failed += 1

    @property
    def ok(self) -> bool:
        return self.failed == 0 and self.skipped_reason is None

    def as_dict(self):
        return asdict(self)

    def __str__(self):
        text = (f"{self.job}: processed={self.processed} succeeded={self.succeeded} "
                f"failed={self.failed} skipped={self.skipped}")
        if self.skipped_reason:
            text += f" ({self.skipped_reason})"
        return text
