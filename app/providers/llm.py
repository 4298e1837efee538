"""
Chat-completion client (OpenAI-compatible).

Three call shapes are used by the ETL:
- complete(): free text, e.g. article summaries
- complete_json(): a JSON object, e.g. {"topics": [...]}
- extract_structured(): an issue -> strength mapping decoded and clamped
  into the caller's value range

Failures never raise. complete() returns None; complete_json() and
extract_structured() return None or the caller's default depending on the
FailureMode they were given.
"""

import json
import logging
import math
import re
from typing import Any, Dict, Optional, Tuple

import openai

from app.errors import ProviderResponseError
from app.providers import FailureMode

logger = logging.getLogger(__name__)


def extract_json(text: str) -> Any:
    """
    Robustly extract JSON from an LLM response.
    Handles markdown code blocks and trailing text after the object.
    """
    if not text:
        raise ValueError("Empty response from LLM")

    text = text.strip()

    code_block_match = re.search(r'```(?:json)?\s*([\s\S]*?)```', text)
    if code_block_match:
        text = code_block_match.group(1).strip()

    if text.startswith('{'):
        brace_count = 0
        end_pos = 0
        for i, char in enumerate(text):
            if char == '{':
                brace_count += 1
            elif char == '}':
                brace_count -= 1
                if brace_count == 0:
                    end_pos = i + 1
                    break
        if end_pos > 0:
            text = text[:end_pos]

    return json.loads(text)


def decode_issue_mapping(payload: Any, value_range: Tuple[float, float]) -> Dict[str, float]:
    """
    Validate an extraction payload as a non-empty {issue: number} mapping.

    Values outside value_range are clamped to it. Booleans, strings, nested
    objects and non-finite numbers are rejected.
    """
    if not isinstance(payload, dict):
        raise ProviderResponseError(f"expected a JSON object, got {type(payload).__name__}")
    if not payload:
        raise ProviderResponseError("extraction returned an empty mapping")

    low, high = value_range
    mapping = {}
    for key, value in payload.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ProviderResponseError(f"value for {key!r} is not numeric: {value!r}")
        if not math.isfinite(value):
            raise ProviderResponseError(f"value for {key!r} is not finite")
        mapping[str(key)] = min(max(float(value), low), high)
    return mapping


class OpenAITextClient:

    def __init__(self, api_key: str, base_url: str = 'https://api.openai.com/v1',
                 model: str = 'gpt-4-turbo', summary_model: str = 'gpt-3.5-turbo',
                 timeout: int = 30, client=None):
        self.model = model
        self.summary_model = summary_model
        self.client = client or openai.OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    def _chat(self, model: str, system: str, prompt: str, max_tokens: Optional[int] = None,
              json_mode: bool = False) -> str:
        kwargs = {
            'model': model,
            'messages': [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt}
            ],
        }
        if max_tokens:
            kwargs['max_tokens'] = max_tokens
        if json_mode:
            kwargs['response_format'] = {"type": "json_object"}

        response = self.client.chat.completions.create(**kwargs)
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise ProviderResponseError(f"completion response has no message content: {e}") from e
        if not content:
            raise ProviderResponseError("Empty response from completion provider")
        return content

    def complete(self, system: str, prompt: str, max_tokens: int = 150) -> Optional[str]:
        """Return the completion text, or None on any failure."""
        try:
            return self._chat(self.summary_model, system, prompt, max_tokens=max_tokens).strip()
        except (openai.OpenAIError, ProviderResponseError) as e:
            logger.error(f"Completion failed: {e}")
            return None

    def complete_json(
        self,
        system: str,
        prompt: str,
        max_tokens: Optional[int] = None,
        *,
        on_failure: FailureMode = FailureMode.RETURN_NONE,
        default: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Return the completion decoded as a JSON object.

        On failure returns None, or a copy of default when on_failure is
        FailureMode.RETURN_DEFAULT.
        """
        try:
            content = self._chat(self.summary_model, system, prompt, max_tokens=max_tokens, json_mode=True)
            data = extract_json(content)
            if not isinstance(data, dict):
                raise ProviderResponseError(f"JSON completion returned {type(data).__name__}, expected an object")
            return data
        except (openai.OpenAIError, ProviderResponseError, ValueError) as e:
            logger.error(f"JSON completion failed: {e}")

        return _failure_value(on_failure, default)

    def extract_structured(
        self,
        context_text: str,
        schema_hint: str,
        *,
        value_range: Tuple[float, float] = (-1.0, 1.0),
        on_failure: FailureMode = FailureMode.RETURN_NONE,
        default: Optional[Dict[str, float]] = None,
    ) -> Optional[Dict[str, float]]:
        """
        Ask the model for an {issue: strength} object and decode it.

        schema_hint is the system instruction describing the mapping to
        produce; context_text is the user message. On failure returns None,
        or a copy of default when on_failure is FailureMode.RETURN_DEFAULT.
        """
        try:
            content = self._chat(self.model, schema_hint, context_text, json_mode=True)
            return decode_issue_mapping(extract_json(content), value_range)
        except (openai.OpenAIError, ProviderResponseError, ValueError) as e:
            logger.error(f"Structured extraction failed: {e}")

        return _failure_value(on_failure, default)


def _failure_value(on_failure: FailureMode, default: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if on_failure is FailureMode.RETURN_DEFAULT and default is not None:
        return dict(default)
    return None
