"""
News Enricher

Turns the latest political news into inspiration posts:
1. Fetch recent articles from the news provider
2. Skip articles whose URL is already stored
3. Summarise each article and extract its topics
4. Score importance from topic count and recency
5. Insert the post
"""

import logging
from typing import List

from app.enrichment import JobResult
from app.enrichment.constants import (
    DEFAULT_TOPICS,
    NO_SUMMARY_TEXT,
    SUMMARY_MAX_TOKENS,
    SUMMARY_SYSTEM_PROMPT,
    TOPICS_MAX_TOKENS,
    TOPICS_SYSTEM_PROMPT,
)
from app.enrichment.scoring import importance
from app.errors import StoreError
from app.lib.time import parse_iso_timestamp, utcnow_naive
from app.models import InspirationPost
from app.providers import FailureMode, NewsArticle, Providers

logger = logging.getLogger(__name__)


def _article_block(article: NewsArticle) -> str:
    return (
        f"Article Title: {article.title}\n"
        f"Article URL: {article.url}\n"
        f"Article Content: {article.content or article.description or ''}"
    )


class NewsEnricher:

    def __init__(self, store, providers: Providers, query: str, page_size: int = 20, clock=utcnow_naive):
        self.store = store
        self.providers = providers
        self.query = query
        self.page_size = page_size
        self.clock = clock

    def run(self) -> JobResult:
        result = JobResult(job='news')

        if self.providers.news is None:
            logger.warning("Skipping news job: news provider not configured")
            result.skipped_reason = "news provider not configured"
            return result
        if self.providers.text is None:
            logger.warning("Skipping news job: completion provider not configured")
            result.skipped_reason = "completion provider not configured"
            return result

        logger.info("Fetching news articles...")
        articles = self.providers.news.fetch_articles(self.query, self.page_size)
        logger.info(f"Found {len(articles)} articles")

        for article in articles:
            logger.info(f"Processing article: {article.title}")

            try:
                if self.store.exists(InspirationPost, source_url=article.url):
                    logger.info(f"Article already exists: {article.title}")
                    result.skipped += 1
                    continue
            except StoreError as e:
                logger.error(f"Error checking for existing article {article.title}: {e}")
                result.record_failure()
                continue

            if self.process_article(article):
                result.record_success()
            else:
                result.record_failure()

        logger.info(f"News processing complete: {result}")
        return result

    def summarize(self, article: NewsArticle) -> str:
        prompt = (
            f"{_article_block(article)}\n\n"
            "Please provide a brief, positive summary of this political news article in 2-3 sentences.\n"
            "Focus on the positive achievements, progress, or inspirational aspects."
        )
        summary = self.providers.text.complete(SUMMARY_SYSTEM_PROMPT, prompt, max_tokens=SUMMARY_MAX_TOKENS)
        if summary:
            return summary
        return article.description or NO_SUMMARY_TEXT

    def extract_topics(self, article: NewsArticle) -> List[str]:
        """
        Ask for 3-5 topics as {"topics": [...]}.

        Returns ['politics'] when the call or the decode fails. A
        well-formed empty list is returned as is.
        """
        prompt = (
            f"{_article_block(article)}\n\n"
            "Please extract 3-5 relevant political topics or issues from this article.\n"
            'Return them as a JSON object of the form {"topics": ["topic", ...]}.'
        )
        data = self.providers.text.complete_json(
            TOPICS_SYSTEM_PROMPT,
            prompt,
            max_tokens=TOPICS_MAX_TOKENS,
            on_failure=FailureMode.RETURN_DEFAULT,
            default={'topics': DEFAULT_TOPICS},
        )
        if data is None:
            return list(DEFAULT_TOPICS)

        topics = data.get('topics', [])
        if not isinstance(topics, list) or not all(isinstance(t, str) for t in topics):
            logger.error(f"Topic extraction returned an invalid topics value: {topics!r}")
            return list(DEFAULT_TOPICS)
        return [t.strip() for t in topics if t.strip()]

    def process_article(self, article: NewsArticle) -> bool:
        summary = self.summarize(article)
        topics = self.extract_topics(article)

        published_at = parse_iso_timestamp(article.published_at)
        now = self.clock()
        score = importance(len(topics), published_at, now)

        row = {
            'title': article.title,
            'summary': summary,
            'source_url': article.url,
            'image_url': article.image_url,
            'published_date': published_at.date() if published_at else None,
            'topics': topics,
            'importance_score': score,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.store.insert(InspirationPost, [row])
        except StoreError as e:
            logger.error(f"Error inserting article {article.title}: {e}")
            return False

        logger.info(f"Successfully inserted article: {article.title}")
        return True
