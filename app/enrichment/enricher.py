"""
Issue Enricher

Fills issue_positions on candidates and issue_tags on bills.

One enricher class serves both entity kinds; an EntityProfile describes
what differs between them (table, derived field, value range, search query,
own-text context) and an EnrichmentStrategy decides where the extraction
context comes from:

- SELF_CONTEXT: the record's own text (candidate bio, bill description)
- SEARCH_AUGMENTED: search snippets about the record, falling back to its
  own text when the search comes back empty

Records are processed strictly one at a time. A record whose extraction or
write fails is logged and left untouched, so it stays eligible for the next
scheduled run.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple, Type

from app.enrichment import EnrichmentStrategy, JobResult
from app.enrichment.constants import (
    BILL_SEARCH_DOMAINS,
    BILL_SEARCH_MAX_RESULTS,
    BILL_TAG_RANGE,
    BILL_TAGS_PROMPT,
    CANDIDATE_POSITION_RANGE,
    CANDIDATE_POSITIONS_PROMPT,
    CANDIDATE_SEARCH_DOMAINS,
    CANDIDATE_SEARCH_MAX_RESULTS,
)
from app.errors import StoreError
from app.models import Bill, Candidate
from app.providers import FailureMode, Providers
from app.providers.search import format_search_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityProfile:
    kind: str
    model: Type
    field: str
    context_field: str
    value_range: Tuple[float, float]
    schema_hint: str
    search_domains: Sequence[str]
    search_max_results: int
    build_query: Callable
    build_context: Callable
    label: Callable


def _candidate_query(candidate) -> str:
    parts = [candidate.name, candidate.office, candidate.state, 'politics positions']
    return ' '.join(part for part in parts if part)


def _candidate_context(candidate) -> str:
    parts = [f"Candidate: {candidate.name}"]
    if candidate.office:
        parts.append(f"Office: {candidate.office}")
    if candidate.party:
        parts.append(f"Party: {candidate.party}")
    if candidate.state:
        parts.append(f"State: {candidate.state}")
    if candidate.bio:
        parts.append(f"Bio: {candidate.bio}")
    return '\n'.join(parts)


def _bill_query(bill) -> str:
    return f"{bill.bill_number} {bill.title} congress legislation"


def _bill_context(bill) -> str:
    parts = [f"Bill: {bill.bill_number}", f"Title: {bill.title}"]
    if bill.description:
        parts.append(f"Description: {bill.description}")
    if bill.summary:
        parts.append(f"Summary: {bill.summary}")
    return '\n'.join(parts)


CANDIDATE_PROFILE = EntityProfile(
    kind='candidate',
    model=Candidate,
    field='issue_positions',
    context_field='bio',
    value_range=CANDIDATE_POSITION_RANGE,
    schema_hint=CANDIDATE_POSITIONS_PROMPT,
    search_domains=CANDIDATE_SEARCH_DOMAINS,
    search_max_results=CANDIDATE_SEARCH_MAX_RESULTS,
    build_query=_candidate_query,
    build_context=_candidate_context,
    label=lambda candidate: candidate.name,
)

BILL_PROFILE = EntityProfile(
    kind='bill',
    model=Bill,
    field='issue_tags',
    context_field='description',
    value_range=BILL_TAG_RANGE,
    schema_hint=BILL_TAGS_PROMPT,
    search_domains=BILL_SEARCH_DOMAINS,
    search_max_results=BILL_SEARCH_MAX_RESULTS,
    build_query=_bill_query,
    build_context=_bill_context,
    label=lambda bill: bill.bill_number,
)


class IssueEnricher:
    """Extracts an issue mapping for every record still missing one."""

    def __init__(self, store, providers: Providers, profile: EntityProfile,
                 strategy: EnrichmentStrategy = EnrichmentStrategy.SEARCH_AUGMENTED):
        self.store = store
        self.providers = providers
        self.profile = profile
        self.strategy = strategy

    @property
    def job_name(self) -> str:
        return f"{self.profile.kind}_{self.profile.field}"

    def missing_providers(self) -> Optional[str]:
        """Name the provider this enricher cannot run without, if any is absent."""
        if self.providers.text is None:
            return "completion provider not configured"
        if self.strategy is EnrichmentStrategy.SEARCH_AUGMENTED and self.providers.search is None:
            return "search provider not configured"
        return None

    def pending_records(self):
        not_null = ()
        if self.strategy is EnrichmentStrategy.SELF_CONTEXT:
            not_null = (self.profile.context_field,)
        return self.store.select(self.profile.model, is_null=(self.profile.field,), not_null=not_null)

    def run(self) -> JobResult:
        result = JobResult(job=self.job_name)

        reason = self.missing_providers()
        if reason:
            logger.warning(f"Skipping {self.job_name} enrichment: {reason}")
            result.skipped_reason = reason
            return result

        try:
            records = self.pending_records()
        except StoreError as e:
            logger.error(f"Error fetching {self.profile.model.__tablename__}: {e}")
            result.skipped_reason = "store query failed"
            return result

        logger.info(f"Found {len(records)} {self.profile.kind} records without {self.profile.field} "
                    f"(strategy={self.strategy.value})")

        for record in records:
            if self.enrich_record(record):
                result.record_success()
            else:
                result.record_failure()

        logger.info(f"{self.job_name} enrichment complete: {result}")
        return result

    def build_context(self, record) -> str:
        own_context = self.profile.build_context(record)
        if self.strategy is EnrichmentStrategy.SELF_CONTEXT:
            return own_context

        query = self.profile.build_query(record)
        results = self.providers.search.search(
            query, self.profile.search_domains, self.profile.search_max_results
        )
        if not results:
            logger.info(f"No search results for {self.profile.kind} {self.profile.label(record)}, "
                        f"using record text as context")
            return own_context
        return format_search_context(results)

    def extract(self, record) -> Optional[dict]:
        """Run the extraction for one record without writing anything."""
        context = self.build_context(record)
        return self.providers.text.extract_structured(
            context,
            self.profile.schema_hint,
            value_range=self.profile.value_range,
            on_failure=FailureMode.RETURN_NONE,
        )

    def enrich_record(self, record) -> bool:
        """Extract and persist the mapping for one record. Returns True on success."""
        label = self.profile.label(record)
        logger.info(f"Processing {self.profile.kind}: {label}")

        mapping = self.extract(record)
        if mapping is None:
            logger.error(f"No {self.profile.field} extracted for {self.profile.kind} {label}")
            return False

        try:
            self.store.update(self.profile.model, record.id, {self.profile.field: mapping})
        except StoreError as e:
            logger.error(f"Error updating {self.profile.kind} {label}: {e}")
            return False

        logger.info(f"Successfully updated {self.profile.kind} {label}")
        return True


PROFILES = {
    'candidate': CANDIDATE_PROFILE,
    'bill': BILL_PROFILE,
}


def enricher_for(kind: str, store, providers: Providers, settings) -> IssueEnricher:
    """Build the enricher for an entity kind with its configured strategy."""
    strategy_name = settings.candidate_strategy if kind == 'candidate' else settings.bill_strategy
    return IssueEnricher(store, providers, PROFILES[kind], EnrichmentStrategy(strategy_name))
