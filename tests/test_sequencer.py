import asyncio

import pytest

from conftest import ScriptedCamera, make_frame
from photobooth.imaging.transform import mirror
from photobooth.orchestrator import errors
from photobooth.orchestrator.clock import FakeClock
from photobooth.orchestrator.contracts import SequencerState
from photobooth.orchestrator.state_machine import CaptureSequencer


class RecordingClock(FakeClock):
    """Records (state, countdown) at every suspension point."""

    def __init__(self, status):
        super().__init__()
        self.status = status
        self.trace = []

    async def sleep(self, seconds):
        self.trace.append((self.status.state, self.status.countdown))
        await super().sleep(seconds)


class CancellingClock(FakeClock):
    def __init__(self, cancel_on_sleep):
        super().__init__()
        self.cancel_on_sleep = cancel_on_sleep
        self.sequencer = None

    async def sleep(self, seconds):
        await super().sleep(seconds)
        if len(self.sleeps) == self.cancel_on_sleep:
            self.sequencer.cancel()


def _run(seq, shots):
    return asyncio.run(seq.start(shots))


@pytest.mark.parametrize("shots", [1, 2, 3, 4])
def test_every_shot_is_attempted(shots, status, session):
    frames = [make_frame(seed=i) for i in range(shots)]
    clock = FakeClock()
    seq = CaptureSequencer(ScriptedCamera(frames), session, status, clock=clock)

    report = _run(seq, shots)

    assert report.ok
    assert report.attempted == shots
    assert report.captured == len(session.captured) == shots
    # three countdown ticks and one pause per shot
    assert clock.sleeps == [1.0] * (4 * shots)
    assert status.state == SequencerState.IDLE
    assert status.countdown is None
    assert status.busy is False


def test_captured_frames_are_mirrored_in_capture_order(status, session):
    frames = [make_frame(seed=1), make_frame(seed=2), make_frame(seed=3)]
    seq = CaptureSequencer(ScriptedCamera(frames), session, status, clock=FakeClock())

    _run(seq, 3)

    assert session.captured == [mirror(f) for f in frames]


def test_countdown_runs_three_two_one_then_pauses(status, session):
    clock = RecordingClock(status)
    seq = CaptureSequencer(ScriptedCamera([make_frame()]), session, status, clock=clock)

    _run(seq, 1)

    assert clock.trace == [
        (SequencerState.COUNTING_DOWN, 3),
        (SequencerState.COUNTING_DOWN, 2),
        (SequencerState.COUNTING_DOWN, 1),
        (SequencerState.INTER_SHOT_PAUSE, None),
    ]


def test_failed_grab_is_dropped_and_sequence_completes(status, session):
    ok1, ok2 = make_frame(seed=1), make_frame(seed=2)
    camera = ScriptedCamera([ok1, None, ok2])
    clock = FakeClock()
    seq = CaptureSequencer(camera, session, status, clock=clock)

    report = _run(seq, 3)

    assert report.ok
    assert camera.calls == 3
    assert report.attempted == 3
    assert report.dropped == 1
    assert len(session.captured) == 2
    assert session.captured == [mirror(ok1), mirror(ok2)]
    # dropped slot goes straight to the next countdown, no pause
    assert len(clock.sleeps) == 3 * 3 + 2


def test_grab_exception_counts_as_dropped(status, session):
    camera = ScriptedCamera([RuntimeError("device unplugged"), make_frame()])
    seq = CaptureSequencer(camera, session, status, clock=FakeClock())

    report = _run(seq, 2)

    assert report.ok
    assert report.dropped == 1
    assert len(session.captured) == 1
    assert any("device unplugged" in line for line in status.logs)


@pytest.mark.parametrize("shots", [0, -1, 5])
def test_out_of_range_shot_count_is_rejected_quietly(shots, status, session):
    session.captured.append(make_frame())
    camera = ScriptedCamera([])
    seq = CaptureSequencer(camera, session, status, clock=FakeClock())

    report = _run(seq, shots)

    assert not report.ok
    assert report.error_code == errors.ERR_BAD_SHOT_COUNT
    assert camera.calls == 0
    assert len(session.captured) == 1


def test_camera_not_ready_is_a_noop(status, session):
    previous = make_frame(seed=9)
    session.captured.append(previous)
    camera = ScriptedCamera([make_frame()], ready=False)
    clock = FakeClock()
    seq = CaptureSequencer(camera, session, status, clock=clock)

    report = _run(seq, 1)

    assert report.error_code == errors.ERR_CAMERA_UNAVAILABLE
    assert session.captured == [previous]
    assert clock.sleeps == []


def test_start_clears_previous_capture(status, session):
    session.captured.extend([make_frame(seed=7), make_frame(seed=8)])
    fresh = make_frame(seed=1)
    seq = CaptureSequencer(ScriptedCamera([fresh]), session, status, clock=FakeClock())

    _run(seq, 1)

    assert session.captured == [mirror(fresh)]


def test_busy_sequencer_rejects_start(status, session):
    status.set_busy(True)
    seq = CaptureSequencer(ScriptedCamera([make_frame()]), session, status, clock=FakeClock())

    report = _run(seq, 1)

    assert report.error_code == errors.ERR_BUSY
    assert status.busy is True


def test_flash_fires_at_each_capture(status, session):
    clock = FakeClock()
    seq = CaptureSequencer(ScriptedCamera([make_frame()]), session, status, clock=clock)

    _run(seq, 1)

    assert status.flash_at == 3.0
    assert status.flash_active(3.1)
    assert not status.flash_active(3.5)


def test_cancel_during_countdown_stops_the_sequence(status, session):
    camera = ScriptedCamera([make_frame(), make_frame()])
    clock = CancellingClock(cancel_on_sleep=2)
    seq = CaptureSequencer(camera, session, status, clock=clock)
    clock.sequencer = seq

    report = _run(seq, 2)

    assert report.cancelled
    assert report.attempted == 0
    assert camera.calls == 0
    assert len(clock.sleeps) == 2
    assert status.state == SequencerState.IDLE
    assert status.busy is False


def test_cancel_during_pause_keeps_captured_frames(status, session):
    first = make_frame(seed=4)
    camera = ScriptedCamera([first, make_frame(seed=5)])
    clock = CancellingClock(cancel_on_sleep=4)
    seq = CaptureSequencer(camera, session, status, clock=clock)
    clock.sequencer = seq

    report = _run(seq, 2)

    assert report.cancelled
    assert report.captured == 1
    assert session.captured == [mirror(first)]


def test_cancel_when_idle_is_refused(status, session):
    seq = CaptureSequencer(ScriptedCamera([]), session, status, clock=FakeClock())
    assert seq.cancel() is False
