import cv2

from photobooth.orchestrator.contracts import Frame


def mirror(frame: Frame) -> Frame:
    """Flip horizontally so stills match the mirrored live preview.

    mirror(mirror(f)) == f
    """
    return Frame(cv2.flip(frame.pixels, 1))
