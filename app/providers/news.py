"""
NewsAPI client.

Fetches the latest English-language articles for the inspiration feed.
"""

import logging
from typing import Any, List, Optional

import requests

from app.errors import ProviderResponseError
from app.providers import NewsArticle

logger = logging.getLogger(__name__)


class NewsApiClient:
    """GET /everything, newest first. Returns [] on any failure."""

    def __init__(self, api_key: str, base_url: str = 'https://newsapi.org/v2', timeout: int = 30,
                 language: str = 'en'):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.language = language

    def fetch_articles(self, query: str, page_size: int = 20) -> List[NewsArticle]:
        try:
            response = requests.get(
                f'{self.base_url}/everything',
                params={
                    'q': query,
                    'language': self.language,
                    'sortBy': 'publishedAt',
                    'pageSize': page_size,
                    'apiKey': self.api_key,
                },
                timeout=self.timeout
            )
            response.raise_for_status()
            articles = decode_news_response(response.json())
        except requests.RequestException as e:
            logger.error(f"News API error: {e}")
            return []
        except (ValueError, ProviderResponseError) as e:
            logger.error(f"News API returned an unexpected body: {e}")
            return []

        logger.info(f"Fetched {len(articles)} articles from News API")
        return articles


def decode_news_response(body: Any) -> List[NewsArticle]:
    """
    Validate an {articles: [...]} body.

    Articles without a title or url cannot be stored and are dropped.
    """
    if not isinstance(body, dict) or not isinstance(body.get('articles'), list):
        raise ProviderResponseError("news response has no 'articles' list")

    articles = []
    for item in body['articles']:
        if not isinstance(item, dict):
            raise ProviderResponseError(f"article is not an object: {item!r}")
        title = item.get('title')
        url = item.get('url')
        if not title or not url:
            logger.debug(f"Dropping article without title/url: {item!r}")
            continue
        articles.append(NewsArticle(
            title=str(title),
            url=str(url),
            content=_optional_str(item, 'content'),
            description=_optional_str(item, 'description'),
            published_at=_optional_str(item, 'publishedAt'),
            image_url=_optional_str(item, 'urlToImage'),
        ))
    return articles


def _optional_str(item: dict, key: str) -> Optional[str]:
    """Optional text fields of any other type are treated as missing."""
    value = item.get(key)
    return value if isinstance(value, str) else None
