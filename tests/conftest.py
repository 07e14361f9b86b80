"""Shared fixtures for search function tests."""

from datetime import date
from pathlib import Path
from typing import AsyncIterator, List

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


class FakeSelectSource:
    """Stands in for S3SelectClient: yields preset chunks and records calls."""

    def __init__(self, chunks: List[bytes], error: Exception = None):
        self.chunks = chunks
        self.error = error
        self.expressions: List[str] = []
        self.closed = False

    async def select_records(self, expression: str) -> AsyncIterator[bytes]:
        self.expressions.append(expression)
        try:
            for chunk in self.chunks:
                yield chunk
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True


def select_output(path: Path) -> bytes:
    """Dataset file as S3 Select returns it with FileHeaderInfo=USE: header dropped."""
    lines = path.read_bytes().splitlines(keepends=True)
    return b"".join(lines[1:])


def split_chunks(data: bytes, size: int) -> List[bytes]:
    return [data[i:i + size] for i in range(0, len(data), size)]


@pytest.fixture
def today() -> date:
    return date(2026, 10, 19)


@pytest.fixture
def profiles_payload() -> bytes:
    return select_output(FIXTURES / "profiles.csv")


@pytest.fixture
def fake_source(profiles_payload: bytes) -> FakeSelectSource:
    # Small chunks so rows (and the multi-byte name) straddle chunk boundaries
    return FakeSelectSource(split_chunks(profiles_payload, 7))
