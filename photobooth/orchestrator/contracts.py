from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

import numpy as np

RGB = tuple[int, int, int]

DEFAULT_CAPTION = "My Photo Booth ✨"
MIN_SHOTS = 1
MAX_SHOTS = 4


class SequencerState(str, Enum):
    IDLE = "idle"
    COUNTING_DOWN = "counting_down"
    CAPTURING = "capturing"
    INTER_SHOT_PAUSE = "inter_shot_pause"


@dataclass(frozen=True, eq=False)
class Frame:
    """Raster image: uint8 array of shape (h, w, 3) BGR or (h, w, 4) BGRA.

    The pixel buffer is made read-only so a Frame cannot change once produced.
    """
    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] not in (3, 4):
            raise ValueError(f"frame must be HxWx3 or HxWx4, got {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"frame must be uint8, got {self.pixels.dtype}")
        self.pixels.flags.writeable = False

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def has_alpha(self) -> bool:
        return self.pixels.shape[2] == 4

    def __eq__(self, other):
        if not isinstance(other, Frame):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and np.array_equal(self.pixels, other.pixels)

    __hash__ = None


# ── Themes ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Solid:
    color: RGB = (255, 255, 255)


@dataclass(frozen=True)
class Gradient:
    top: RGB = (0xFF, 0x9A, 0x9E)      # #ff9a9e
    bottom: RGB = (0xFA, 0xD0, 0xC4)   # #fad0c4


@dataclass(frozen=True)
class Confetti:
    dot_count: int = 100
    radius: int = 4


@dataclass(frozen=True, eq=False)
class Custom:
    background: Optional[Frame] = None


ThemeConfig = Union[Solid, Gradient, Confetti, Custom]

THEME_NAMES = {Solid: "white", Gradient: "gradient", Confetti: "confetti", Custom: "custom"}


def theme_name(theme: ThemeConfig) -> str:
    return THEME_NAMES[type(theme)]


# ── Session ─────────────────────────────────────────────────────────────────

@dataclass
class CaptureSession:
    captured: list[Frame] = field(default_factory=list)
    theme: ThemeConfig = field(default_factory=Solid)
    caption: str = DEFAULT_CAPTION
    logo: Optional[Frame] = None
    shot_count: int = 1

    def cycle_shot_count(self, step: int) -> int:
        """Step the shot count by +1/-1, wrapping within 1..4."""
        span = MAX_SHOTS - MIN_SHOTS + 1
        self.shot_count = (self.shot_count - MIN_SHOTS + step) % span + MIN_SHOTS
        return self.shot_count


@dataclass
class SequenceReport:
    ok: bool
    requested: int
    attempted: int = 0
    captured: int = 0
    dropped: int = 0
    cancelled: bool = False
    duration_ms: int = 0
    error_code: Optional[str] = None
