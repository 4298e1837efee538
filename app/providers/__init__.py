"""
External provider clients.

Each provider is described by a small capability protocol so enrichers can
be handed deterministic fakes in tests. build_providers() turns the
EtlSettings snapshot into concrete clients; a provider whose key is not
configured is left as None and the jobs that need it skip with a warning.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    title: str
    content: str
    url: str


@dataclass(frozen=True)
class NewsArticle:
    title: str
    url: str
    content: Optional[str] = None
    description: Optional[str] = None
    published_at: Optional[str] = None
    image_url: Optional[str] = None


class FailureMode(Enum):
    """What complete_json() and extract_structured() hand back on failure."""
    RETURN_NONE = 'none'
    RETURN_DEFAULT = 'default'


class SearchProvider(Protocol):
    def search(self, query: str, include_domains: Sequence[str], max_results: int) -> List[SearchResult]:
        ...


class TextProvider(Protocol):
    def complete(self, system: str, prompt: str, max_tokens: int = 150) -> Optional[str]:
        ...

    def complete_json(
        self,
        system: str,
        prompt: str,
        max_tokens: Optional[int] = None,
        *,
        on_failure: FailureMode = FailureMode.RETURN_NONE,
        default: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        ...

    def extract_structured(
        self,
        context_text: str,
        schema_hint: str,
        *,
        value_range: Tuple[float, float] = (-1.0, 1.0),
        on_failure: FailureMode = FailureMode.RETURN_NONE,
        default: Optional[Dict[str, float]] = None,
    ) -> Optional[Dict[str, float]]:
        ...


class EmbeddingProvider(Protocol):
    def embed(self, text: str) -> Optional[List[float]]:
        ...


class NewsProvider(Protocol):
    def fetch_articles(self, query: str, page_size: int) -> List[NewsArticle]:
        ...


@dataclass
class Providers:
    search: Optional[SearchProvider] = None
    text: Optional[TextProvider] = None
    embeddings: Optional[EmbeddingProvider] = None
    news: Optional[NewsProvider] = None


def build_providers(settings) -> Providers:
    """Construct the provider clients the settings have keys for."""
    from app.providers.embeddings import OpenAIEmbeddingClient
    from app.providers.llm import OpenAITextClient
    from app.providers.news import NewsApiClient
    from app.providers.search import TavilySearchClient

    providers = Providers()

    if settings.tavily_api_key:
        providers.search = TavilySearchClient(
            api_key=settings.tavily_api_key,
            base_url=settings.tavily_base_url,
            timeout=settings.provider_timeout,
        )
    else:
        logger.warning("TAVILY_API_KEY not set, search provider disabled")

    if settings.openai_api_key:
        providers.text = OpenAITextClient(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.completion_model,
            summary_model=settings.summary_model,
            timeout=settings.provider_timeout,
        )
        providers.embeddings = OpenAIEmbeddingClient(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.embedding_model,
            dimensions=settings.embedding_dimensions,
            timeout=settings.provider_timeout,
        )
    else:
        logger.warning("OPENAI_API_KEY not set, completion and embedding providers disabled")

    if settings.news_api_key:
        providers.news = NewsApiClient(
            api_key=settings.news_api_key,
            base_url=settings.news_api_base_url,
            timeout=settings.provider_timeout,
        )
    else:
        logger.warning("NEWS_API_KEY not set, news provider disabled")

    return providers
