import pytest

from gaze_bridge.configs import RemoteConfig
from gaze_bridge.core import RecorderState, RecordingStateMachine
from gaze_bridge.errors import UpstreamUnreachableError
from gaze_bridge.utils import Stopwatch

from fakes import FakeClock, FakeRemote


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recorder(remote, clock):
    return RecordingStateMachine(
        remote=remote,
        remote_config=RemoteConfig(timeout_ms=50),
        stopwatch_factory=lambda: Stopwatch(clock),
    )


async def test_start_notifies_remote_and_records(recorder, remote):
    assert recorder.state is RecorderState.STOPPED

    assert await recorder.start() == "ack"
    assert recorder.state is RecorderState.RECORDING
    assert recorder.is_recording
    assert remote.requests == [b"R"]


async def test_start_twice_does_not_call_remote_again(recorder, remote):
    await recorder.start()
    assert await recorder.start() == "already recording"
    assert remote.requests == [b"R"]
    assert recorder.is_recording


async def test_stop_replies_elapsed_seconds(recorder, remote, clock):
    await recorder.start()
    clock.advance(2.5)

    reply = await recorder.stop()

    assert float(reply) == pytest.approx(2.5)
    assert reply == "2.500000"
    assert recorder.state is RecorderState.STOPPED
    assert remote.requests == [b"R", b"r"]


async def test_stop_without_start(recorder, remote):
    reply = await recorder.stop()
    assert reply == "no timer"
    assert remote.requests == []
    with pytest.raises(ValueError):
        float(reply)


async def test_stop_twice(recorder, remote):
    await recorder.start()
    await recorder.stop()
    reply = await recorder.stop()
    assert reply == "not recording"
    assert remote.requests == [b"R", b"r"]


async def test_stopwatch_is_reused_across_sessions(recorder, clock):
    await recorder.start()
    watch = recorder.stopwatch
    clock.advance(1)
    await recorder.stop()
    clock.advance(60)
    await recorder.start()
    clock.advance(4)

    assert await recorder.stop() == "4.000000"
    assert recorder.stopwatch is watch
    assert watch.total_elapsed == pytest.approx(5)


async def test_unreachable_remote_on_start_is_fatal():
    recorder = RecordingStateMachine(remote=FakeRemote(unreachable=True))
    with pytest.raises(UpstreamUnreachableError):
        await recorder.start()
    assert recorder.state is RecorderState.STOPPED
    assert recorder.stopwatch is None


async def test_unreachable_remote_on_stop_keeps_recording(recorder, remote):
    await recorder.start()
    remote.unreachable = True
    with pytest.raises(UpstreamUnreachableError):
        await recorder.stop()
    assert recorder.is_recording


async def test_custom_remote_commands(remote):
    recorder = RecordingStateMachine(
        remote=remote,
        remote_config=RemoteConfig(start_command="start_recording", stop_command="stop_recording"),
    )
    await recorder.start()
    await recorder.stop()
    assert remote.requests == [b"start_recording", b"stop_recording"]


async def test_without_remote():
    recorder = RecordingStateMachine()
    assert await recorder.start() == "ack"
    assert float(await recorder.stop()) >= 0.0
