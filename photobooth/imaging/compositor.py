"""
Strip compositor.

The strip is drawn as an ordered list of layers over a transparent BGRA
canvas. The z-order is fixed:

  1. background   theme fill over the whole strip
  2. tile:<i>     white bordered tile + photo, one per captured frame, top to bottom
  3. caption      black text centred 50px above the bottom edge
  4. logo         optional square logo, top edge 110px above the bottom edge

Each layer reports whether it drew anything, so a skipped layer (custom
background or logo that failed to decode, empty caption) leaves the rest of
the strip intact.
"""
from dataclasses import dataclass, field

import cv2
import numpy as np

from photobooth.imaging import themes
from photobooth.imaging.layout import StripLayout, compute_layout, MAX_STRIP_WIDTH
from photobooth.orchestrator.contracts import CaptureSession, Frame, ThemeConfig

TILE_COLOR = (255, 255, 255, 255)
CAPTION_COLOR = (0, 0, 0, 255)
CAPTION_FONT = cv2.FONT_HERSHEY_SIMPLEX


@dataclass
class CompositeResult:
    pixels: np.ndarray          # BGRA, layout.height x layout.width
    layout: StripLayout
    layers_drawn: list[str] = field(default_factory=list)

    @property
    def photo_count(self) -> int:
        return self.layout.photo_count


# ── Drawing helpers ─────────────────────────────────────────────────────────

def _as_bgra(img: np.ndarray) -> np.ndarray:
    if img.shape[2] == 4:
        return img
    return cv2.cvtColor(img, cv2.COLOR_BGR2BGRA)


def blit(canvas: np.ndarray, img: np.ndarray, x: int, y: int, w: int, h: int):
    """Stretch img to w x h and draw it at (x, y), alpha-blending BGRA sources."""
    if w <= 0 or h <= 0:
        return
    src = cv2.resize(img, (w, h), interpolation=cv2.INTER_LINEAR)
    has_alpha = src.shape[2] == 4
    src = _as_bgra(src)

    ch, cw = canvas.shape[:2]
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + w, cw), min(y + h, ch)
    if x0 >= x1 or y0 >= y1:
        return
    patch = src[y0 - y:y1 - y, x0 - x:x1 - x]
    region = canvas[y0:y1, x0:x1]

    if not has_alpha:
        region[:] = patch
        return

    # source-over
    sa = patch[:, :, 3:4].astype(np.float64) / 255.0
    da = region[:, :, 3:4].astype(np.float64) / 255.0
    out_a = sa + da * (1.0 - sa)
    safe_a = np.where(out_a > 0, out_a, 1.0)
    out_rgb = (patch[:, :, :3] * sa + region[:, :, :3] * da * (1.0 - sa)) / safe_a
    region[:, :, :3] = np.rint(out_rgb).astype(np.uint8)
    region[:, :, 3:4] = np.rint(out_a * 255.0).astype(np.uint8)


def printable(text: str) -> str:
    """Hershey fonts only carry printable ASCII; drop everything else."""
    return "".join(ch for ch in text if 32 <= ord(ch) < 127).strip()


# ── Layers ──────────────────────────────────────────────────────────────────

class Layer:
    name = "layer"

    def draw(self, canvas: np.ndarray, layout: StripLayout) -> bool:
        raise NotImplementedError


class BackgroundLayer(Layer):
    name = "background"

    def __init__(self, theme: ThemeConfig, rng: np.random.Generator | None = None):
        self.theme = theme
        self.rng = rng

    def draw(self, canvas, layout):
        fill = themes.render_background(layout, self.theme, rng=self.rng)
        if fill is None:
            return False
        canvas[:] = fill
        return True


class TileLayer(Layer):
    def __init__(self, index: int, frame: Frame):
        self.index = index
        self.frame = frame
        self.name = f"tile:{index}"

    def draw(self, canvas, layout):
        tx, ty = layout.tile_origin(self.index)
        cv2.rectangle(
            canvas,
            (tx, ty),
            (tx + layout.tile_width - 1, ty + layout.slot_height - 1),
            TILE_COLOR,
            thickness=-1,
        )
        px, py = layout.photo_origin(self.index)
        blit(canvas, self.frame.pixels, px, py, layout.photo_width, layout.photo_height)
        return True


class CaptionLayer(Layer):
    name = "caption"

    def __init__(self, text: str):
        self.text = printable(text)

    def draw(self, canvas, layout):
        if not self.text:
            return False
        pixel_height = max(layout.caption_height, 1)
        thickness = max(1, round(pixel_height / 12))
        scale = cv2.getFontScaleFromHeight(CAPTION_FONT, pixel_height, thickness)
        (tw, _), _ = cv2.getTextSize(self.text, CAPTION_FONT, scale, thickness)
        x = (layout.width - tw) // 2
        cv2.putText(
            canvas, self.text, (x, layout.caption_baseline),
            CAPTION_FONT, scale, CAPTION_COLOR, thickness, cv2.LINE_AA,
        )
        return True


class LogoLayer(Layer):
    name = "logo"

    def __init__(self, logo: Frame):
        self.logo = logo

    def draw(self, canvas, layout):
        x, y = layout.logo_origin
        blit(canvas, self.logo.pixels, x, y, layout.logo_size, layout.logo_size)
        return True


# ── Compositor ──────────────────────────────────────────────────────────────

class StripCompositor:
    def __init__(self, status_store, max_width: int = MAX_STRIP_WIDTH, rng: np.random.Generator | None = None):
        self.status = status_store
        self.max_width = max_width
        self.rng = rng

    def layers(self, session: CaptureSession) -> list[Layer]:
        stack: list[Layer] = [BackgroundLayer(session.theme, rng=self.rng)]
        stack.extend(TileLayer(i, frame) for i, frame in enumerate(session.captured))
        stack.append(CaptionLayer(session.caption))
        if session.logo is not None:
            stack.append(LogoLayer(session.logo))
        return stack

    def render(self, session: CaptureSession, viewport_width: int) -> CompositeResult | None:
        """Composite the session into one strip. None when nothing was captured.

        Raises CompositeError when the viewport leaves no room for a strip.
        """
        if not session.captured:
            self.status.log("compositor: nothing captured, skipping")
            return None

        layout = compute_layout(len(session.captured), viewport_width, max_width=self.max_width)
        canvas = np.zeros((layout.height, layout.width, 4), dtype=np.uint8)
        drawn = []
        for layer in self.layers(session):
            if layer.draw(canvas, layout):
                drawn.append(layer.name)
            else:
                self.status.log(f"compositor: layer {layer.name} skipped")

        self.status.log(
            f"compositor: {layout.width}x{layout.height} photos={layout.photo_count} layers={','.join(drawn)}"
        )
        return CompositeResult(pixels=canvas, layout=layout, layers_drawn=drawn)
