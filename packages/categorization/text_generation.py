"""
Adapter for the external text-generation service (Gemini).

Providers and proxies wrap their output differently: a Gemini envelope, a
server proxy that nests it under ``raw`` or ``result``, a bare JSON string,
or sometimes an already-parsed object. :func:`normalize_response` is the one
place that guesses the shape; everything downstream receives a
:data:`TextGenerationResult`.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Protocol, Union

import httpx

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_URL = (
    "https://generativelanguage.googleapis.com/v1/models/gemini-pro:generateContent"
)

_FENCE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)
_ENVELOPE_KEYS = ("raw", "result")
# Gemini keys present even when the reply carries no text (safety block, empty candidates)
_GEMINI_KEYS = ("candidates", "promptFeedback")


class CategorizationUnavailable(Exception):
    """The text-generation service failed, timed out or gave no usable output."""


@dataclass(frozen=True)
class RecognizedMapping:
    mapping: Dict[str, str]
    recognized: Literal[True] = field(default=True, init=False)


@dataclass(frozen=True)
class UnrecognizedText:
    raw_text: str
    recognized: Literal[False] = field(default=False, init=False)


TextGenerationResult = Union[RecognizedMapping, UnrecognizedText]


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> TextGenerationResult:
        ...


def _as_string_mapping(value: Any) -> Optional[Dict[str, str]]:
    if not isinstance(value, dict) or not value:
        return None
    if all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
        return dict(value)
    return None


def _gemini_text(payload: Dict[str, Any]) -> Optional[str]:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return None
    texts = [p.get("text") for p in parts if isinstance(p, dict)]
    texts = [t for t in texts if isinstance(t, str)]
    return "".join(texts) if texts else None


def _parse_text(text: str) -> TextGenerationResult:
    stripped = text.strip()
    fenced = _FENCE.match(stripped)
    if fenced:
        stripped = fenced.group(1)
    try:
        decoded = json.loads(stripped)
    except json.JSONDecodeError:
        return UnrecognizedText(raw_text=text)
    mapping = _as_string_mapping(decoded)
    if mapping is None:
        return UnrecognizedText(raw_text=text)
    return RecognizedMapping(mapping=mapping)


def normalize_response(payload: Any) -> TextGenerationResult:
    """Reduce any provider payload to a recognized mapping or raw text.

    A reply with no text at all (a blocked or empty Gemini response, or
    ``None``) yields an empty ``raw_text``.
    """
    if payload is None:
        return UnrecognizedText(raw_text="")
    if isinstance(payload, str):
        return _parse_text(payload)

    if isinstance(payload, dict):
        text = _gemini_text(payload)
        if text is not None:
            return _parse_text(text)
        if any(key in payload for key in _GEMINI_KEYS):
            return UnrecognizedText(raw_text="")
        for key in _ENVELOPE_KEYS:
            if key in payload:
                return normalize_response(payload[key])
        mapping = _as_string_mapping(payload)
        if mapping is not None:
            return RecognizedMapping(mapping=mapping)

    try:
        raw_text = json.dumps(payload, ensure_ascii=False)
    except (TypeError, ValueError):
        raw_text = str(payload)
    return UnrecognizedText(raw_text=raw_text)


class GeminiTextGenerator:
    """Single-shot Gemini ``generateContent`` client.

    The transport timeout is the only timeout; there are no retries.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_GEMINI_URL,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise ValueError("Gemini API key is required")
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._client = client

    async def _post(self, client: httpx.AsyncClient, prompt: str) -> httpx.Response:
        return await client.post(
            self.api_url,
            params={"key": self.api_key},
            json={"contents": [{"parts": [{"text": prompt}]}]},
            timeout=self.timeout,
        )

    async def generate(self, prompt: str) -> TextGenerationResult:
        try:
            if self._client is not None:
                response = await self._post(self._client, prompt)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, prompt)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise CategorizationUnavailable(
                f"Gemini responded {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise CategorizationUnavailable(f"Gemini request failed: {e!r}") from e
        except ValueError as e:
            raise CategorizationUnavailable("Gemini returned a non-JSON body") from e

        return normalize_response(payload)
