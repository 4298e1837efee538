"""
Database priming.

Seeds a small baseline of candidates, bills and inspiration posts. Each
seed row is checked by its natural key first, so running priming again is
a no-op. Inserted candidates get issue positions either from inline
search-augmented enrichment or, when that is unavailable or fails, from a
fixed per-party default.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import date

import requests

from app.enrichment import EnrichmentStrategy
from app.enrichment.constants import OTHER_PARTY_DEFAULT_POSITIONS, PARTY_DEFAULT_POSITIONS
from app.enrichment.enricher import CANDIDATE_PROFILE, IssueEnricher
from app.errors import StoreError
from app.models import Bill, Candidate, InspirationPost
from app.providers import Providers

logger = logging.getLogger(__name__)


SEED_CANDIDATES = [
    {
        'name': 'Jane Smith',
        'office': 'Senate',
        'party': 'Democratic',
        'state': 'CA',
        'bio': 'Jane Smith is a passionate advocate for environmental issues and social justice.',
        'website_url': 'https://example.com/janesmith',
    },
    {
        'name': 'John Doe',
        'office': 'House',
        'party': 'Republican',
        'state': 'TX',
        'district': '12',
        'bio': 'John Doe believes in small government and fiscal responsibility.',
        'website_url': 'https://example.com/johndoe',
    },
    {
        'name': 'Maria Garcia',
        'office': 'Governor',
        'party': 'Independent',
        'state': 'NY',
        'bio': 'Maria Garcia is focused on economic development and education reform.',
        'website_url': 'https://example.com/mariagarcia',
    },
]

SEED_BILLS = [
    {
        'bill_number': 'S.123',
        'title': 'Clean Water Act Amendment',
        'description': 'A bill to strengthen water quality standards and enforcement.',
        'status': 'In Committee',
        'introduced_date': date(2025, 1, 15),
        'chamber': 'Senate',
        'federal': True,
        'summary': 'This bill would increase funding for water quality monitoring and enforcement.',
        'issue_tags': {'environment': 0.9, 'health': 0.7, 'infrastructure': 0.5},
    },
    {
        'bill_number': 'H.R.456',
        'title': 'Tax Relief for Small Businesses',
        'description': 'A bill to provide tax incentives for small business development.',
        'status': 'Passed House',
        'introduced_date': date(2025, 2, 10),
        'last_action_date': date(2025, 4, 20),
        'chamber': 'House',
        'federal': True,
        'summary': 'This bill would reduce taxes for businesses with fewer than 50 employees.',
        'issue_tags': {'economy': 0.9, 'small_business': 0.8, 'taxes': 0.9},
    },
    {
        'bill_number': 'A.789',
        'title': 'Education Funding Increase',
        'description': 'A bill to increase state funding for public education.',
        'status': 'Introduced',
        'introduced_date': date(2025, 3, 5),
        'chamber': 'Assembly',
        'state': 'NY',
        'federal': False,
        'summary': 'This bill would increase state education funding by 10% over the next five years.',
        'issue_tags': {'education': 0.9, 'budget': 0.7, 'children': 0.8},
    },
]

SEED_POSTS = [
    {
        'title': 'Historic Climate Bill Passes',
        'summary': 'After years of advocacy, a landmark climate bill has passed, setting ambitious targets '
                   'for carbon reduction.',
        'source_url': 'https://example.com/climate-bill',
        'published_date': date(2025, 5, 1),
        'topics': ['environment', 'legislation', 'climate'],
        'importance_score': 0.9,
    },
    {
        'title': 'Local Community Revitalizes Park',
        'summary': 'Volunteers come together to transform an abandoned lot into a thriving community garden '
                   'and park.',
        'source_url': 'https://example.com/community-park',
        'published_date': date(2025, 4, 28),
        'topics': ['community', 'environment', 'local'],
        'importance_score': 0.7,
    },
    {
        'title': 'New Voting Rights Protections Enacted',
        'summary': 'Legislation expanding access to voting passes, ensuring more citizens can participate '
                   'in democracy.',
        'source_url': 'https://example.com/voting-rights',
        'published_date': date(2025, 5, 3),
        'topics': ['voting', 'civil_rights', 'legislation'],
        'importance_score': 0.85,
    },
]


def default_issue_positions(party: str) -> dict:
    """Fixed fallback positions keyed by party name."""
    return dict(PARTY_DEFAULT_POSITIONS.get(party, OTHER_PARTY_DEFAULT_POSITIONS))


@dataclass
class PrimeResult:
    candidates_inserted: int = 0
    candidates_skipped: int = 0
    candidates_enriched: int = 0
    bills_inserted: int = 0
    bills_skipped: int = 0
    posts_inserted: int = 0
    posts_skipped: int = 0
    errors: int = 0

    def as_dict(self):
        return asdict(self)


class DatabasePrimer:

    def __init__(self, store, providers: Providers = None, enrich: bool = False,
                 candidates=None, bills=None, posts=None):
        self.store = store
        self.providers = providers or Providers()
        self.enrich = enrich
        self.candidates = SEED_CANDIDATES if candidates is None else candidates
        self.bills = SEED_BILLS if bills is None else bills
        self.posts = SEED_POSTS if posts is None else posts

    def run(self) -> PrimeResult:
        logger.info("Starting database priming process...")
        result = PrimeResult()

        self.prime_candidates(result)
        result.bills_inserted, result.bills_skipped = self._prime_rows(Bill, 'bill_number', self.bills, result)
        result.posts_inserted, result.posts_skipped = self._prime_rows(
            InspirationPost, 'source_url', self.posts, result
        )

        logger.info(f"Database priming completed: {result.as_dict()}")
        return result

    def _inline_enricher(self):
        if not self.enrich:
            return None
        if self.providers.search is None or self.providers.text is None:
            logger.warning("Inline enrichment requested but search/completion providers are not configured, "
                           "using party defaults")
            return None
        return IssueEnricher(self.store, self.providers, CANDIDATE_PROFILE, EnrichmentStrategy.SEARCH_AUGMENTED)

    def prime_candidates(self, result: PrimeResult):
        logger.info("Adding sample candidates...")
        enricher = self._inline_enricher()

        for seed in self.candidates:
            try:
                if self.store.exists(Candidate, name=seed['name']):
                    logger.info(f"Candidate already exists: {seed['name']}")
                    result.candidates_skipped += 1
                    continue

                row = dict(seed)
                positions = None
                if enricher is not None:
                    positions = enricher.extract(Candidate(**row))
                    if positions is not None:
                        result.candidates_enriched += 1
                if positions is None:
                    positions = default_issue_positions(row.get('party'))
                row['issue_positions'] = positions

                self.store.insert(Candidate, [row])
                result.candidates_inserted += 1
                logger.info(f"Added candidate: {seed['name']}")
            except StoreError as e:
                logger.error(f"Error adding candidate {seed['name']}: {e}")
                result.errors += 1

    def _prime_rows(self, model, key: str, seeds, result: PrimeResult):
        table = model.__tablename__
        logger.info(f"Adding sample {table}...")
        inserted = skipped = 0

        for seed in seeds:
            try:
                if self.store.exists(model, **{key: seed[key]}):
                    logger.info(f"{table} row already exists: {seed[key]}")
                    skipped += 1
                    continue
                self.store.insert(model, [dict(seed)])
                inserted += 1
            except StoreError as e:
                logger.error(f"Error adding {table} row {seed[key]}: {e}")
                result.errors += 1

        return inserted, skipped


def notify_webhook(url: str, result: PrimeResult, timeout: int = 30) -> bool:
    """
    POST the priming summary to a downstream webhook.

    Gives consumers an explicit completion signal instead of relying on
    timing. Failures are logged and reported as False.
    """
    try:
        response = requests.post(
            url,
            json={'event': 'database_primed', 'result': result.as_dict()},
            timeout=timeout
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Priming webhook failed: {e}")
        return False

    logger.info(f"Priming webhook notified: {url}")
    return True


def prime_database(store, providers: Providers = None, enrich: bool = False, webhook_url: str = None,
                   timeout: int = 30) -> PrimeResult:
    result = DatabasePrimer(store, providers, enrich=enrich).run()
    if webhook_url:
        notify_webhook(webhook_url, result, timeout=timeout)
    return result
