import pytest

from gaze_bridge.configs import BridgeSettings
from gaze_bridge.core import BridgeRunner
from gaze_bridge.factories import create_context

from fakes import FakeControl, FakeIngest, FakeRemote


@pytest.fixture
def settings():
    return BridgeSettings(remote={"enabled": True, "timeout_ms": 50})


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def context(settings, remote):
    return create_context(settings, remote=remote)


@pytest.fixture
def ingest():
    return FakeIngest()


@pytest.fixture
def control():
    return FakeControl()


@pytest.fixture
def runner(context, ingest, control):
    return BridgeRunner(context, ingest=ingest, control=control)
