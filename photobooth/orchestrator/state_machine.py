import time
from photobooth.imaging.transform import mirror
from photobooth.orchestrator.clock import AsyncioClock
from photobooth.orchestrator.contracts import (
    CaptureSession, SequenceReport, SequencerState as S, MIN_SHOTS, MAX_SHOTS,
)
from photobooth.orchestrator import errors

COUNTDOWN_FROM = 3


class CaptureSequencer:
    """
    Timed multi-shot capture:
      Idle → CountingDown(3,2,1) → Capturing → InterShotPause → ... → Idle

    Every tick and pause is an await on the injected clock. A failed grab is
    dropped and the loop moves straight on to the next countdown.
    """

    def __init__(self, camera, session: CaptureSession, status_store, clock=None,
                 tick_s: float = 1.0, pause_s: float = 1.0):
        self.camera = camera
        self.session = session
        self.status = status_store
        self.clock = clock or AsyncioClock()
        self.tick_s = tick_s
        self.pause_s = pause_s
        self._cancel_requested = False

    def _enter(self, state: S, countdown: int | None = None):
        self.status.state = state
        self.status.countdown = countdown

    def cancel(self) -> bool:
        if not self.status.busy:
            return False
        self._cancel_requested = True
        self.status.log("sequencer: cancel requested")
        return True

    async def _suspend(self, seconds: float) -> bool:
        """Wait on the clock; False once a cancel has been requested."""
        await self.clock.sleep(seconds)
        return not self._cancel_requested

    async def start(self, shot_count: int) -> SequenceReport:
        if not MIN_SHOTS <= shot_count <= MAX_SHOTS:
            self.status.log(f"sequencer: rejected shot_count={shot_count}")
            return SequenceReport(ok=False, requested=shot_count, error_code=errors.ERR_BAD_SHOT_COUNT)

        if self.status.busy:
            return SequenceReport(ok=False, requested=shot_count, error_code=errors.ERR_BUSY)

        if not self.camera.ready:
            self.status.log("sequencer: camera not ready, ignoring start")
            return SequenceReport(ok=False, requested=shot_count, error_code=errors.ERR_CAMERA_UNAVAILABLE)

        self.status.set_busy(True)
        self._cancel_requested = False
        self.session.captured.clear()
        report = SequenceReport(ok=True, requested=shot_count)
        t0 = time.time()
        try:
            self.status.log(f"sequencer: start shots={shot_count}")
            for shot in range(1, shot_count + 1):
                # 1) countdown 3, 2, 1
                for n in range(COUNTDOWN_FROM, 0, -1):
                    self._enter(S.COUNTING_DOWN, n)
                    if not await self._suspend(self.tick_s):
                        report.cancelled = True
                        break
                if report.cancelled:
                    break

                # 2) flash + grab
                self._enter(S.CAPTURING)
                self.status.flash_at = self.clock.now()
                report.attempted += 1
                try:
                    frame = self.camera.get_still_frame()
                except Exception as e:
                    self.status.log(f"sequencer: shot {shot} grab error {type(e).__name__}: {e}")
                    frame = None
                if frame is None:
                    report.dropped += 1
                    self.status.log(f"sequencer: shot {shot}/{shot_count} dropped")
                    continue

                self.session.captured.append(mirror(frame))
                report.captured += 1
                self.status.log(f"sequencer: shot {shot}/{shot_count} captured {frame.width}x{frame.height}")

                # 3) pause before the next shot
                self._enter(S.INTER_SHOT_PAUSE)
                if not await self._suspend(self.pause_s):
                    report.cancelled = True
                    break

            report.duration_ms = int((time.time() - t0) * 1000)
            self.status.log(
                f"sequencer: done attempted={report.attempted} captured={report.captured}"
                f" dropped={report.dropped} cancelled={report.cancelled} dt={report.duration_ms}ms"
            )
            return report

        except Exception as e:
            report.ok = False
            report.error_code = errors.ERR_UNKNOWN
            report.duration_ms = int((time.time() - t0) * 1000)
            self.status.last_error = f"{type(e).__name__}: {e}"
            self.status.log(f"sequencer: error {type(e).__name__}: {e}")
            return report
        finally:
            self._enter(S.IDLE)
            self._cancel_requested = False
            self.status.set_busy(False)
