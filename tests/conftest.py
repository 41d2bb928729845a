from __future__ import annotations

import pytest

from fakes.timing import FakeSleep
from fakes.relay import ScriptedRelay


@pytest.fixture
def relay() -> ScriptedRelay:
    return ScriptedRelay()


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()
