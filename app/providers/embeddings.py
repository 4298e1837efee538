"""
Embedding client (OpenAI-compatible /embeddings).

One input string per call. A vector is only returned when it has exactly
the configured dimensionality, so the embedding column never holds vectors
of mixed length.
"""

import logging
import math
from typing import Any, List, Optional

import openai

from app.errors import ProviderResponseError

logger = logging.getLogger(__name__)


class OpenAIEmbeddingClient:

    def __init__(self, api_key: str, base_url: str = 'https://api.openai.com/v1',
                 model: str = 'text-embedding-ada-002', dimensions: int = 1536,
                 timeout: int = 30, client=None):
        self.model = model
        self.dimensions = dimensions
        self.client = client or openai.OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    def embed(self, text: str) -> Optional[List[float]]:
        """Return the embedding for text, or None on any failure."""
        if not text or not text.strip():
            logger.warning("Refusing to embed empty text")
            return None

        try:
            response = self.client.embeddings.create(model=self.model, input=text)
            return decode_embedding(response, self.dimensions)
        except (openai.OpenAIError, ProviderResponseError) as e:
            logger.error(f"Embedding error: {e}")
            return None


def decode_embedding(response: Any, dimensions: int) -> List[float]:
    """Pull data[0].embedding out of a response and check its length."""
    try:
        vector = response.data[0].embedding
    except (AttributeError, IndexError, TypeError) as e:
        raise ProviderResponseError(f"embedding response has no data[0].embedding: {e}") from e

    if not isinstance(vector, (list, tuple)):
        raise ProviderResponseError(f"embedding is {type(vector).__name__}, expected a list")
    if len(vector) != dimensions:
        raise ProviderResponseError(f"embedding has {len(vector)} dimensions, expected {dimensions}")

    values = []
    for value in vector:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ProviderResponseError(f"embedding contains a non-numeric value: {value!r}")
        values.append(float(value))
    return values
