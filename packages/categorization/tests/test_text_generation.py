"""Tests for the text-generation adapter and response normalization."""

import json

import httpx
import pytest

from packages.categorization.text_generation import (
    CategorizationUnavailable,
    GeminiTextGenerator,
    RecognizedMapping,
    UnrecognizedText,
    normalize_response,
)


def _gemini_envelope(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestNormalizeResponse:
    def test_json_string(self):
        result = normalize_response('{"UBER TRIP": "Transport"}')
        assert result == RecognizedMapping({"UBER TRIP": "Transport"})
        assert result.recognized is True

    def test_fenced_json(self):
        text = '```json\n{"SWIGGY": "Food"}\n```'
        assert normalize_response(text) == RecognizedMapping({"SWIGGY": "Food"})

    def test_gemini_envelope(self):
        payload = _gemini_envelope('{"NETFLIX.COM": "Entertainment"}')
        assert normalize_response(payload) == RecognizedMapping({"NETFLIX.COM": "Entertainment"})

    @pytest.mark.parametrize("key", ["raw", "result"])
    def test_proxy_wrappers(self, key):
        payload = {key: _gemini_envelope('{"SWIGGY": "Food"}')}
        assert normalize_response(payload) == RecognizedMapping({"SWIGGY": "Food"})

    def test_already_structured_mapping(self):
        assert normalize_response({"SWIGGY": "Food"}) == RecognizedMapping({"SWIGGY": "Food"})

    def test_prose_is_unrecognized(self):
        result = normalize_response("Sure! Here are your categories: SWIGGY is Food.")
        assert isinstance(result, UnrecognizedText)
        assert result.recognized is False
        assert "SWIGGY" in result.raw_text

    @pytest.mark.parametrize(
        "payload",
        ['["Food"]', '{"SWIGGY": 3}', "{}", '{"SWIGGY": {"category": "Food"}}'],
    )
    def test_non_string_mappings_are_unrecognized(self, payload):
        assert isinstance(normalize_response(payload), UnrecognizedText)

    def test_non_text_payload(self):
        assert isinstance(normalize_response(42), UnrecognizedText)
        assert isinstance(normalize_response(None), UnrecognizedText)

    @pytest.mark.parametrize(
        "payload",
        [
            {"promptFeedback": {"blockReason": "SAFETY"}},
            {"candidates": []},
            {"candidates": [{"finishReason": "SAFETY"}]},
            None,
        ],
    )
    def test_reply_without_text_is_empty(self, payload):
        assert normalize_response(payload) == UnrecognizedText(raw_text="")


def _generator(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiTextGenerator(api_key="test-key", api_url="https://gemini.test/generate", client=client)


@pytest.mark.asyncio
class TestGeminiTextGenerator:
    async def test_posts_prompt_with_key(self):
        seen = {}

        def handler(request):
            seen["key"] = request.url.params["key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_gemini_envelope('{"SWIGGY": "Food"}'))

        result = await _generator(handler).generate("categorize please")

        assert seen["key"] == "test-key"
        assert seen["body"] == {"contents": [{"parts": [{"text": "categorize please"}]}]}
        assert result == RecognizedMapping({"SWIGGY": "Food"})

    async def test_http_error_status(self):
        generator = _generator(lambda request: httpx.Response(503, text="overloaded"))
        with pytest.raises(CategorizationUnavailable, match="503"):
            await generator.generate("x")

    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(CategorizationUnavailable):
            await _generator(handler).generate("x")

    async def test_non_json_body(self):
        generator = _generator(lambda request: httpx.Response(200, text="<html>oops</html>"))
        with pytest.raises(CategorizationUnavailable):
            await generator.generate("x")


def test_gemini_requires_api_key():
    with pytest.raises(ValueError):
        GeminiTextGenerator(api_key="")
