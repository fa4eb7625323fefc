"""Tests for the code generation client."""

import json

import httpx
import pytest
from pydantic import ValidationError

from codegen_share.config.generator import GeneratorSettings
from codegen_share.exceptions import DependencyFailureError
from codegen_share.generation import SUPPORTED_LANGUAGES, CodeGenerationRequest
from codegen_share.generation.client import CodeGenerator, build_prompt


REQUEST = CodeGenerationRequest(prompt="reverse a string", language="python")


def gemini_reply(text: str) -> dict[str, object]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class Recorder:
    """MockTransport handler replaying canned responses and recording requests."""

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_generator(recorder: Recorder, **overrides: object) -> CodeGenerator:
    settings = GeneratorSettings(
        **{"api_key": "test-key", "max_attempts": 2, **overrides}
    )
    return CodeGenerator(
        settings, http_client=httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    )


class TestRequestModel:
    """Tests for CodeGenerationRequest validation."""

    def test_language_whitelist(self) -> None:
        with pytest.raises(ValidationError):
            CodeGenerationRequest(prompt="x", language="keylogger")

    def test_prompt_bounds(self) -> None:
        with pytest.raises(ValidationError):
            CodeGenerationRequest(prompt="", language="python")
        with pytest.raises(ValidationError):
            CodeGenerationRequest(prompt="x" * 1001, language="python")
        assert CodeGenerationRequest(prompt="x" * 1000, language="python")

    def test_supported_languages(self) -> None:
        assert "python" in SUPPORTED_LANGUAGES
        assert "rust" in SUPPORTED_LANGUAGES
        assert len(SUPPORTED_LANGUAGES) == len(set(SUPPORTED_LANGUAGES))


class TestGenerate:
    """Tests for CodeGenerator.generate."""

    def test_prompt_template(self) -> None:
        prompt = build_prompt(REQUEST)

        assert prompt.startswith("Generate production-ready code in python")
        assert "reverse a string" in prompt

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        recorder = Recorder(httpx.Response(200, json=gemini_reply("def f(): ...")))
        generator = make_generator(recorder)

        assert await generator.generate(REQUEST) == "def f(): ..."

        request = recorder.requests[0]
        assert request.url.path.endswith("/models/gemini-2.0-flash:generateContent")
        assert request.headers["x-goog-api-key"] == "test-key"
        body = json.loads(request.content)
        assert body["contents"][0]["parts"][0]["text"] == build_prompt(REQUEST)

    @pytest.mark.asyncio
    async def test_not_configured(self) -> None:
        recorder = Recorder()
        generator = make_generator(recorder, api_key=None)

        assert generator.configured is False
        with pytest.raises(DependencyFailureError, match="not configured"):
            await generator.generate(REQUEST)
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_transient_error_retried(self) -> None:
        recorder = Recorder(
            httpx.Response(503),
            httpx.Response(200, json=gemini_reply("ok")),
        )

        assert await make_generator(recorder).generate(REQUEST) == "ok"
        assert len(recorder.requests) == 2

    @pytest.mark.asyncio
    async def test_transport_error_exhausts_attempts(self) -> None:
        recorder = Recorder(
            httpx.ConnectError("refused"),
            httpx.ConnectError("refused"),
        )

        with pytest.raises(DependencyFailureError) as exc_info:
            await make_generator(recorder).generate(REQUEST)

        assert exc_info.value.status_code == 502
        assert exc_info.value.retryable is True
        assert len(recorder.requests) == 2

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self) -> None:
        recorder = Recorder(httpx.Response(403, json={"error": "forbidden"}))

        with pytest.raises(DependencyFailureError) as exc_info:
            await make_generator(recorder).generate(REQUEST)

        assert exc_info.value.retryable is False
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("payload", "message"),
        [
            ({"candidates": []}, "No response"),
            ({"candidates": [{"content": {"parts": [{"text": ""}]}}]}, "Empty response"),
        ],
    )
    async def test_unusable_answer(self, payload: dict, message: str) -> None:
        recorder = Recorder(httpx.Response(200, json=payload))

        with pytest.raises(DependencyFailureError, match=message):
            await make_generator(recorder).generate(REQUEST)

    @pytest.mark.asyncio
    async def test_close_leaves_injected_client_open(self) -> None:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(Recorder()))
        generator = CodeGenerator(GeneratorSettings(api_key="k"), http_client)

        await generator.close()

        assert http_client.is_closed is False
        await http_client.aclose()
