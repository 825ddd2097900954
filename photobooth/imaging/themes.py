"""
Background fills for the strip.

Every renderer returns a BGRA array of exactly layout.height x layout.width.
Solid, Gradient and Custom are pure functions of their inputs; Confetti draws
from a numpy Generator, fresh per render unless one is injected.
"""
import colorsys
from dataclasses import dataclass

import cv2
import numpy as np

from photobooth.imaging.layout import StripLayout
from photobooth.orchestrator.contracts import (
    RGB, ThemeConfig, Solid, Gradient, Confetti, Custom,
)

CONFETTI_SATURATION = 0.70
CONFETTI_LIGHTNESS = 0.60
CONFETTI_BASE: RGB = (255, 255, 255)


def bgra(color: RGB) -> tuple[int, int, int, int]:
    r, g, b = color
    return b, g, r, 255


def parse_color(value: str) -> RGB:
    """'#rrggbb' / 'rrggbb' / '#rgb' -> (r, g, b)."""
    s = value.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        raise ValueError(f"bad colour '{value}'")
    return int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)


@dataclass(frozen=True)
class ConfettiDot:
    x: int
    y: int
    hue: float
    color: RGB


def hsl_to_rgb(hue_deg: float, saturation: float, lightness: float) -> RGB:
    r, g, b = colorsys.hls_to_rgb(hue_deg / 360.0, lightness, saturation)
    return round(r * 255), round(g * 255), round(b * 255)


def confetti_dots(layout: StripLayout, theme: Confetti, rng: np.random.Generator) -> list[ConfettiDot]:
    dots = []
    for _ in range(theme.dot_count):
        hue = float(rng.uniform(0.0, 360.0))
        x = float(rng.uniform(0.0, layout.width))
        y = float(rng.uniform(0.0, layout.height))
        dots.append(ConfettiDot(
            x=int(x),
            y=int(y),
            hue=hue,
            color=hsl_to_rgb(hue, CONFETTI_SATURATION, CONFETTI_LIGHTNESS),
        ))
    return dots


def _fill(layout: StripLayout, color: RGB) -> np.ndarray:
    canvas = np.empty((layout.height, layout.width, 4), dtype=np.uint8)
    canvas[:] = bgra(color)
    return canvas


def _solid(layout: StripLayout, theme: Solid) -> np.ndarray:
    return _fill(layout, theme.color)


def _gradient(layout: StripLayout, theme: Gradient) -> np.ndarray:
    # sample each row at its centre, top colour at y=0, bottom colour at y=height
    t = (np.arange(layout.height, dtype=np.float64) + 0.5) / layout.height
    top = np.array(bgra(theme.top), dtype=np.float64)
    bottom = np.array(bgra(theme.bottom), dtype=np.float64)
    rows = top[None, :] + (bottom - top)[None, :] * t[:, None]
    rows = np.rint(rows).astype(np.uint8)
    return np.ascontiguousarray(np.broadcast_to(rows[:, None, :], (layout.height, layout.width, 4)))


def _confetti(layout: StripLayout, theme: Confetti, rng: np.random.Generator) -> np.ndarray:
    canvas = _fill(layout, CONFETTI_BASE)
    for dot in confetti_dots(layout, theme, rng):
        cv2.circle(canvas, (dot.x, dot.y), theme.radius, bgra(dot.color), thickness=-1, lineType=cv2.LINE_AA)
    return canvas


def _custom(layout: StripLayout, theme: Custom) -> np.ndarray | None:
    if theme.background is None:
        return None
    src = theme.background.pixels
    stretched = cv2.resize(src, (layout.width, layout.height), interpolation=cv2.INTER_LINEAR)
    if stretched.shape[2] == 3:
        stretched = cv2.cvtColor(stretched, cv2.COLOR_BGR2BGRA)
    return stretched


def render_background(layout: StripLayout, theme: ThemeConfig, rng: np.random.Generator | None = None) -> np.ndarray | None:
    """Fill for the whole strip, or None when a custom image is unavailable."""
    if isinstance(theme, Solid):
        return _solid(layout, theme)
    if isinstance(theme, Gradient):
        return _gradient(layout, theme)
    if isinstance(theme, Confetti):
        return _confetti(layout, theme, rng if rng is not None else np.random.default_rng())
    if isinstance(theme, Custom):
        return _custom(layout, theme)
    raise TypeError(f"unknown theme {type(theme).__name__}")
