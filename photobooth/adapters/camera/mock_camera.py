"""Mock camera: synthetic numbered test-card frames for running without a webcam."""
import cv2
import numpy as np
from photobooth.adapters.camera.base import FrameSource
from photobooth.orchestrator.contracts import Frame


class MockCamera(FrameSource):
    def __init__(self, status_store, width: int = 640, height: int = 360):
        self.status = status_store
        self.width = width
        self.height = height
        self.ready = False
        self.last_error = None
        self._shots = 0

    def request_access(self) -> bool:
        self.ready = True
        self.status.log("mock_camera: ready")
        return True

    def get_still_frame(self) -> Frame | None:
        if not self.ready:
            return None
        self._shots += 1
        img = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        # left half darker than right, so a mirrored still is easy to spot
        img[:, : self.width // 2] = (90, 60, 40)
        img[:, self.width // 2 :] = (200, 170, 120)
        cv2.putText(
            img, f"#{self._shots}", (20, self.height - 30),
            cv2.FONT_HERSHEY_SIMPLEX, 2.0, (255, 255, 255), 3, cv2.LINE_AA,
        )
        self.status.log(f"mock_camera: serving frame #{self._shots}")
        return Frame(img)
