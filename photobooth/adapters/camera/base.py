from abc import ABC, abstractmethod
from typing import Optional

from photobooth.orchestrator.contracts import Frame

ACCESS_DENIED_MSG = "Camera access denied. Please enable it in your system settings."


class FrameSource(ABC):
    ready: bool = False
    last_error: Optional[str] = None

    @abstractmethod
    def request_access(self) -> bool:
        """Open the device. Returns readiness; may be called again after a denial."""
        ...

    @abstractmethod
    def get_still_frame(self) -> Frame | None:
        """Grab one still. Returns None on failure."""
        ...

    def release(self):
        pass
