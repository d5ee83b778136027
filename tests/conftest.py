"""
Shared pytest fixtures.

Provider calls are always replaced by in-process fakes; no test touches the
network.
"""

import asyncio

import pytest

from contentgen.core.session import GenerationSession


class FakeGenerator:
    """Records calls and answers with a fixed payload or exception."""

    def __init__(self, payload: str = "generated", error: BaseException | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls: list[tuple] = []

    def __call__(self, prompt, response_type):
        self.calls.append((prompt, response_type))
        if self.error is not None:
            raise self.error
        return self.payload


class GatedGenerator:
    """Async generator that blocks until `release()` is called."""

    def __init__(self, payload: str = "generated") -> None:
        self.payload = payload
        self.calls: list[tuple] = []
        self.started = asyncio.Event()
        self._gate = asyncio.Event()

    async def __call__(self, prompt, response_type):
        self.calls.append((prompt, response_type))
        self.started.set()
        await self._gate.wait()
        return self.payload

    def release(self) -> None:
        self._gate.set()


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def session(fake_generator: FakeGenerator) -> GenerationSession:
    return GenerationSession(generator=fake_generator)


@pytest.fixture
def make_generator():
    """Factory for `FakeGenerator` with a custom payload or error."""
    return FakeGenerator


@pytest.fixture
def gated_generator() -> GatedGenerator:
    return GatedGenerator()
