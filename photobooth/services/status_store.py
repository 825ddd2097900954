from dataclasses import dataclass, field
from typing import Optional, List

from photobooth.orchestrator.contracts import SequencerState

FLASH_S = 0.2


@dataclass
class StatusStore:
    busy: bool = False
    state: SequencerState = SequencerState.IDLE
    countdown: Optional[int] = None     # 3, 2, 1 while counting down, else None
    flash_at: Optional[float] = None    # clock time of the last shutter flash
    last_error: Optional[str] = None
    logs: List[str] = field(default_factory=list)

    def set_busy(self, v: bool):
        self.busy = v

    def flash_active(self, now: float) -> bool:
        return self.flash_at is not None and now - self.flash_at < FLASH_S

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > 200:
            self.logs = self.logs[-200:]
