ERR_BUSY = "ERR_BUSY"
ERR_BAD_SHOT_COUNT = "ERR_BAD_SHOT_COUNT"
ERR_CAMERA_UNAVAILABLE = "ERR_CAMERA_UNAVAILABLE"
ERR_COMPOSITE_FAILED = "ERR_COMPOSITE_FAILED"
ERR_DECODE_FAILED = "ERR_DECODE_FAILED"
ERR_UNKNOWN = "ERR_UNKNOWN"


class CompositeError(RuntimeError):
    """Drawing surface could not be set up; nothing is exported."""

    code = ERR_COMPOSITE_FAILED
