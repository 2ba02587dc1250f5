from __future__ import annotations

import pytest
from _fakes import FakeApi, RecordingHost


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()
