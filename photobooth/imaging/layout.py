from dataclasses import dataclass

from photobooth.orchestrator.errors import CompositeError

MAX_STRIP_WIDTH = 480
VIEWPORT_MARGIN = 40
PHOTO_RATIO = 0.9       # photo width / strip width
PHOTO_ASPECT = 0.72     # photo height / photo width
BORDER_RATIO = 0.05     # border / strip width
FOOTER = 120
CAPTION_OFFSET = 50     # caption baseline above the bottom edge
CAPTION_RATIO = 0.05    # caption font height / strip width
LOGO_OFFSET = 110       # logo top edge above the bottom edge
LOGO_RATIO = 0.15       # logo side / strip width


@dataclass(frozen=True)
class StripLayout:
    width: int
    photo_width: int
    photo_height: int
    border: int
    photo_count: int

    @property
    def slot_height(self) -> int:
        return self.photo_height + 2 * self.border

    @property
    def tile_width(self) -> int:
        return self.photo_width + 2 * self.border

    @property
    def height(self) -> int:
        return self.slot_height * self.photo_count + FOOTER

    def tile_origin(self, index: int) -> tuple[int, int]:
        return (self.width - self.tile_width) // 2, index * self.slot_height

    def photo_origin(self, index: int) -> tuple[int, int]:
        return (self.width - self.photo_width) // 2, index * self.slot_height + self.border

    @property
    def caption_height(self) -> int:
        return int(self.width * CAPTION_RATIO)

    @property
    def caption_baseline(self) -> int:
        return self.height - CAPTION_OFFSET

    @property
    def logo_size(self) -> int:
        return int(self.width * LOGO_RATIO)

    @property
    def logo_origin(self) -> tuple[int, int]:
        return self.width // 2 - self.logo_size // 2, self.height - LOGO_OFFSET


def compute_layout(photo_count: int, viewport_width: int, max_width: int = MAX_STRIP_WIDTH) -> StripLayout:
    width = min(max_width, viewport_width - VIEWPORT_MARGIN)
    photo_width = int(width * PHOTO_RATIO)
    photo_height = int(photo_width * PHOTO_ASPECT)
    border = int(width * BORDER_RATIO)
    if width <= 0 or photo_width <= 0 or photo_height <= 0:
        raise CompositeError(f"viewport width {viewport_width} too narrow for a strip")
    return StripLayout(
        width=width,
        photo_width=photo_width,
        photo_height=photo_height,
        border=border,
        photo_count=photo_count,
    )
