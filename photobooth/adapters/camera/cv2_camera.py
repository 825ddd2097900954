"""
OpenCV webcam frame source.
CAMERA_INDEX env var (default 0) selects the webcam device.
"""
import os
import cv2
from photobooth.adapters.camera.base import FrameSource, ACCESS_DENIED_MSG
from photobooth.orchestrator.contracts import Frame

# same constraints the booth page asks the browser for
FRAME_WIDTH = 1280
FRAME_HEIGHT = 720


class CV2Camera(FrameSource):
    def __init__(self, status_store, index: int | None = None):
        self.status = status_store
        self._index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self._cap = None
        self.ready = False
        self.last_error = None

    def request_access(self) -> bool:
        if self._cap is None or not self._cap.isOpened():
            self._cap = cv2.VideoCapture(self._index)
            if self._cap.isOpened():
                self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, FRAME_WIDTH)
                self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, FRAME_HEIGHT)
        self.ready = self._cap.isOpened()
        if self.ready:
            self.last_error = None
            self.status.log(f"cv2_camera: device {self._index} open")
        else:
            self.last_error = ACCESS_DENIED_MSG
            self.status.log(f"cv2_camera: failed to open device {self._index}")
        return self.ready

    def get_still_frame(self) -> Frame | None:
        if self._cap is None or not self._cap.isOpened():
            self.ready = False
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None:
            self.status.log("cv2_camera: frame capture failed")
            return None
        return Frame(frame)

    def release(self):
        if self._cap and self._cap.isOpened():
            self._cap.release()
        self._cap = None
        self.ready = False
