"""Shared fixtures for the codegen-share test suite."""

from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta

import httpx
import pytest
from fastapi.testclient import TestClient

from codegen_share.api.app import create_app
from codegen_share.auth.passwords import PasswordHasher
from codegen_share.config.settings import Settings
from codegen_share.container import ServiceContainer, build_container
from codegen_share.generation.client import CodeGenerator


# scrypt at N=2**10 keeps the suite fast; production uses 2**14
FAST_COST = 2**10
TEST_SECRET = "test-session-secret-32-chars-long!!"


class FakeClock:
    """Injectable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime.now(UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def gemini_reply(text: str) -> dict[str, object]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(cost=FAST_COST)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        security={"session_secret": TEST_SECRET, "scrypt_cost": FAST_COST},
        rate_limit={"ceiling": 3, "reset_interval_seconds": 60},
        generator={"api_key": "test-api-key", "max_attempts": 1},
    )


@pytest.fixture
def generator_handler() -> Callable[[httpx.Request], httpx.Response]:
    """Default fake of the generation API; tests replace it as needed."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=gemini_reply("print('hello')"))

    return handler


@pytest.fixture
def container(
    settings: Settings,
    hasher: PasswordHasher,
    clock: FakeClock,
    generator_handler: Callable[[httpx.Request], httpx.Response],
) -> ServiceContainer:
    generator = CodeGenerator(
        settings.generator,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(generator_handler)),
    )
    return build_container(settings, clock=clock, hasher=hasher, generator=generator)


@pytest.fixture
def client(settings: Settings, container: ServiceContainer) -> Iterator[TestClient]:
    app = create_app(settings, container)
    yield TestClient(app)
