from pydantic import BaseModel, Field
from typing import Literal, Optional

ThemeName = Literal["white", "gradient", "confetti", "custom"]


class StatusResponse(BaseModel):
    busy: bool
    state: str
    countdown: Optional[int] = None   # 3/2/1 while counting down
    flash: bool = False               # shutter flash overlay, ~200ms after each grab
    photo_count: int
    shot_count: int
    theme: ThemeName
    caption: str
    has_logo: bool
    camera_ready: bool
    camera_error: Optional[str] = None
    last_error: Optional[str] = None
    logs: list[str]


class CameraResponse(BaseModel):
    ok: bool
    ready: bool
    error: Optional[str] = None


class ShotCountRequest(BaseModel):
    shot_count: int = Field(ge=1, le=4)


class ShotCountResponse(BaseModel):
    ok: bool
    shot_count: int


class CaptureRequest(BaseModel):
    # None → use the session's selected shot count
    shot_count: Optional[int] = None


class CaptureResponse(BaseModel):
    ok: bool
    requested: int
    attempted: int
    captured: int
    dropped: int
    cancelled: bool
    duration_ms: int
    error_code: Optional[str] = None


class ThemeRequest(BaseModel):
    theme: ThemeName
    color: Optional[str] = None       # '#rrggbb', only for "white" (solid)


class ImageUploadRequest(BaseModel):
    image: str  # base64 or data URL


class CaptionRequest(BaseModel):
    caption: str


class OkResponse(BaseModel):
    ok: bool
    error: Optional[str] = None
