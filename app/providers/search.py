"""
Tavily search client.

Used by the search-augmented enrichment strategy to collect context
snippets about a candidate or bill from a fixed set of civic domains.
"""

import logging
from typing import Any, List, Sequence

import requests

from app.errors import ProviderResponseError
from app.providers import SearchResult

logger = logging.getLogger(__name__)


class TavilySearchClient:
    """Issues one POST /search per query. Never raises to the caller."""

    def __init__(self, api_key: str, base_url: str = 'https://api.tavily.com', timeout: int = 30,
                 search_depth: str = 'advanced'):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.search_depth = search_depth

    def search(self, query: str, include_domains: Sequence[str], max_results: int) -> List[SearchResult]:
        try:
            response = requests.post(
                f'{self.base_url}/search',
                json={
                    'query': query,
                    'search_depth': self.search_depth,
                    'include_domains': list(include_domains),
                    'max_results': max_results,
                },
                headers={
                    'Content-Type': 'application/json',
                    'X-Api-Key': self.api_key,
                },
                timeout=self.timeout
            )
            response.raise_for_status()
            results = decode_search_response(response.json())
        except requests.RequestException as e:
            logger.error(f"Tavily search failed for '{query}': {e}")
            return []
        except (ValueError, ProviderResponseError) as e:
            logger.error(f"Tavily returned an unexpected body for '{query}': {e}")
            return []

        logger.info(f"Tavily returned {len(results)} results for '{query}'")
        return results


def decode_search_response(body: Any) -> List[SearchResult]:
    """Validate a {results: [{title, content, url}]} body."""
    if not isinstance(body, dict) or not isinstance(body.get('results'), list):
        raise ProviderResponseError("search response has no 'results' list")

    results = []
    for item in body['results']:
        if not isinstance(item, dict):
            raise ProviderResponseError(f"search result is not an object: {item!r}")
        results.append(SearchResult(
            title=str(item.get('title') or ''),
            content=str(item.get('content') or ''),
            url=str(item.get('url') or ''),
        ))
    return results


def format_search_context(results: Sequence[SearchResult]) -> str:
    """Render search snippets as the extraction prompt's context block."""
    return '\n\n'.join(f"Title: {r.title}\nContent: {r.content}" for r in results)
