"""
Decoding of imported images (custom backgrounds, logos) and PNG encoding of
single frames for preview.
"""
import base64
import binascii

import cv2
import numpy as np

from photobooth.orchestrator.contracts import Frame


def decode_image(data: bytes) -> Frame | None:
    """Decode PNG/JPEG/... bytes into a Frame, keeping alpha. None on failure."""
    if not data:
        return None
    arr = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(arr, cv2.IMREAD_UNCHANGED)
    if img is None:
        return None
    if img.dtype != np.uint8:
        # 16-bit PNGs
        img = (img // 257).astype(np.uint8)
    if img.ndim == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    if img.shape[2] not in (3, 4):
        return None
    return Frame(np.ascontiguousarray(img))


def decode_base64_image(payload: str) -> Frame | None:
    """Accept raw base64 or a data URL (data:image/png;base64,...)."""
    if payload.startswith("data:"):
        _, _, payload = payload.partition(",")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None
    return decode_image(data)


def encode_png(frame: Frame) -> bytes:
    ok, buf = cv2.imencode(".png", frame.pixels)
    if not ok:
        raise ValueError("png encode failed")
    return bytes(buf)
