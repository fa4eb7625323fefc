"""Gemini generateContent client.

Only the text of the first candidate is used; the quality of the generated
code is the provider's business.
"""

from typing import Any

import httpx
from structlog import get_logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from codegen_share.config.generator import GeneratorSettings
from codegen_share.exceptions import DependencyFailureError
from codegen_share.generation.models import CodeGenerationRequest


logger = get_logger(__name__)

PROMPT_TEMPLATE = (
    "Generate production-ready code in {language} for the following request:\n"
    "{prompt}\n\n"
    "Please provide only the code without any explanations. Ensure the code "
    "follows best practices, includes proper error handling, and is "
    "well-documented."
)


class _TransientGenerationError(Exception):
    """Provider answered with a status worth retrying."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Provider returned HTTP {status_code}")
        self.status_code = status_code


def _should_retry(exc: BaseException) -> bool:
    return isinstance(exc, _TransientGenerationError | httpx.TransportError)


def _log_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "generation_retry",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


def build_prompt(request: CodeGenerationRequest) -> str:
    """Render the instruction sent to the model."""
    return PROMPT_TEMPLATE.format(language=request.language, prompt=request.prompt)


def _extract_text(data: dict[str, Any]) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as e:
        raise DependencyFailureError("No response from code generation API") from e
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    if not text:
        raise DependencyFailureError("Empty response from code generation API")
    return text


class CodeGenerator:
    """Thin async client for the generation API.

    Transport errors, 429 and 5xx answers are retried with exponential
    backoff; anything else fails at once with DependencyFailureError.
    """

    def __init__(
        self,
        settings: GeneratorSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            settings: Generator settings, defaults from the environment
            http_client: Optional shared client (tests pass a mock transport)

        """
        self.settings = settings or GeneratorSettings()
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def configured(self) -> bool:
        return bool(self.settings.api_key)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.timeout_seconds)
        return self._client

    @property
    def endpoint(self) -> str:
        base = self.settings.base_url.rstrip("/")
        return f"{base}/models/{self.settings.model}:generateContent"

    async def generate(self, request: CodeGenerationRequest) -> str:
        """Generate code for a validated request.

        Raises:
            DependencyFailureError: If the API is not configured, unreachable
                or returns an unusable answer

        """
        if not self.settings.api_key:
            raise DependencyFailureError(
                "Code generation is not configured", retryable=False
            )

        body = {"contents": [{"parts": [{"text": build_prompt(request)}]}]}
        try:
            async for attempt in AsyncRetrying(
                wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
                stop=stop_after_attempt(self.settings.max_attempts),
                retry=retry_if_exception(_should_retry),
                before_sleep=_log_retry,
                reraise=True,
            ):
                with attempt:
                    data = await self._post(body)
        except _TransientGenerationError as e:
            logger.error("generation_failed", status_code=e.status_code)
            raise DependencyFailureError(f"Code generation failed: {e}") from e
        except httpx.HTTPError as e:
            logger.error("generation_failed", error=str(e))
            raise DependencyFailureError(
                f"Code generation failed: {type(e).__name__}"
            ) from e

        code = _extract_text(data)
        logger.info("code_generated", language=request.language, chars=len(code))
        return code

    async def _post(self, body: dict[str, Any]) -> dict[str, Any]:
        response = await self._get_client().post(
            self.endpoint,
            json=body,
            headers={"x-goog-api-key": self.settings.api_key or ""},
        )
        if response.status_code == 429 or response.status_code >= 500:
            raise _TransientGenerationError(response.status_code)
        if response.status_code >= 400:
            logger.error(
                "generation_rejected",
                status_code=response.status_code,
                response_preview=response.text[:200],
            )
            raise DependencyFailureError(
                f"Code generation failed: HTTP {response.status_code}",
                retryable=False,
            )
        try:
            data: dict[str, Any] = response.json()
        except ValueError as e:
            raise DependencyFailureError(
                "Code generation API returned invalid JSON"
            ) from e
        return data

    async def close(self) -> None:
        """Close the HTTP client if this generator created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
