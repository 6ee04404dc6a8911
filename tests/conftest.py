from datetime import datetime, timezone

import pytest

from timebank.clock import from_datetime

T0 = from_datetime(datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc))


class FakeClock:
    def __init__(self, start: int = T0) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, milliseconds: int) -> None:
        self.now += milliseconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
