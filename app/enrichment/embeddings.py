"""
Embedding Generator

Runs after the issue enrichers: embeds candidates and bills from their issue
mappings, and inspiration posts from title, summary and topics. A record
whose embedding call fails keeps a null embedding and is picked up again on
the next run.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence, Type

from app.enrichment import JobResult
from app.errors import StoreError
from app.models import Bill, Candidate, InspirationPost
from app.providers import Providers

logger = logging.getLogger(__name__)


def issue_mapping_text(mapping: dict) -> str:
    """Serialise {'environment': 0.9, 'economy': 0.5} as 'environment: 0.9, economy: 0.5'."""
    return ', '.join(f"{issue}: {value}" for issue, value in mapping.items())


def post_text(post) -> str:
    topics = ', '.join(post.topics) if isinstance(post.topics, list) else ''
    return f"{post.title}. {post.summary}. Topics: {topics}"


@dataclass(frozen=True)
class EmbeddingTarget:
    name: str
    model: Type
    required_fields: Sequence[str]
    to_text: Callable
    label: Callable


EMBEDDING_TARGETS = [
    EmbeddingTarget(
        name='candidates',
        model=Candidate,
        required_fields=('issue_positions',),
        to_text=lambda candidate: issue_mapping_text(candidate.issue_positions),
        label=lambda candidate: candidate.name,
    ),
    EmbeddingTarget(
        name='bills',
        model=Bill,
        required_fields=('issue_tags',),
        to_text=lambda bill: issue_mapping_text(bill.issue_tags),
        label=lambda bill: bill.bill_number,
    ),
    EmbeddingTarget(
        name='inspiration_posts',
        model=InspirationPost,
        required_fields=(),
        to_text=post_text,
        label=lambda post: post.title,
    ),
]


class EmbeddingGenerator:

    def __init__(self, store, providers: Providers, targets: Sequence[EmbeddingTarget] = None):
        self.store = store
        self.providers = providers
        self.targets = list(targets) if targets is not None else EMBEDDING_TARGETS

    def run(self) -> List[JobResult]:
        if self.providers.embeddings is None:
            logger.warning("Skipping embedding generation: embedding provider not configured")
            return [JobResult(job=f"embeddings_{t.name}", skipped_reason="embedding provider not configured")
                    for t in self.targets]

        results = [self.run_target(target) for target in self.targets]
        logger.info("Embedding generation completed.")
        return results

    def run_target(self, target: EmbeddingTarget) -> JobResult:
        result = JobResult(job=f"embeddings_{target.name}")
        logger.info(f"Generating embeddings for {target.name}...")

        try:
            records = self.store.select(target.model, is_null=('embedding',), not_null=target.required_fields)
        except StoreError as e:
            logger.error(f"Error fetching {target.name}: {e}")
            result.skipped_reason = "store query failed"
            return result

        logger.info(f"Found {len(records)} {target.name} without embeddings")

        for record in records:
            label = target.label(record)
            logger.info(f"Processing {target.name} record: {label}")

            embedding = self.providers.embeddings.embed(target.to_text(record))
            if embedding is None:
                result.record_failure()
                continue

            try:
                self.store.update(target.model, record.id, {'embedding': embedding}, touch=False)
            except StoreError as e:
                logger.error(f"Error updating embedding for {label}: {e}")
                result.record_failure()
                continue

            logger.info(f"Successfully updated embedding for {label}")
            result.record_success()

        return result
