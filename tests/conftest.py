import numpy as np
import pytest

from photobooth.adapters.camera.base import FrameSource
from photobooth.orchestrator.contracts import Frame, CaptureSession
from photobooth.services.status_store import StatusStore


def make_frame(width=64, height=48, seed=0, channels=3) -> Frame:
    rng = np.random.default_rng(seed)
    return Frame(rng.integers(0, 256, size=(height, width, channels), dtype=np.uint8))


def solid_frame(bgr, width=64, height=48) -> Frame:
    return Frame(np.full((height, width, 3), bgr, dtype=np.uint8))


class ScriptedCamera(FrameSource):
    """Serves frames in order; a None entry is a failed grab, an Exception is raised."""

    def __init__(self, script, ready=True):
        self.script = list(script)
        self.ready = ready
        self.last_error = None
        self.calls = 0

    def request_access(self) -> bool:
        self.ready = True
        return True

    def get_still_frame(self):
        item = self.script[self.calls]
        self.calls += 1
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def session():
    return CaptureSession()
