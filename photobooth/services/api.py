import os
from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response
from dotenv import load_dotenv
from photobooth.services.models import (
    StatusResponse, CameraResponse, ShotCountRequest, ShotCountResponse,
    CaptureRequest, CaptureResponse, ThemeRequest, ImageUploadRequest,
    CaptionRequest, OkResponse,
)
from photobooth.services.status_store import StatusStore
from photobooth.orchestrator.contracts import (
    CaptureSession, Solid, Gradient, Confetti, Custom, theme_name,
)
from photobooth.orchestrator.state_machine import CaptureSequencer
from photobooth.orchestrator import errors
from photobooth.imaging.compositor import StripCompositor
from photobooth.imaging.decode import decode_base64_image, encode_png
from photobooth.imaging.export import ExportEncoder, MemorySink, DirectorySink
from photobooth.imaging.layout import MAX_STRIP_WIDTH
from photobooth.imaging.themes import parse_color

load_dotenv(dotenv_path="photobooth/.env", override=False)

app = FastAPI(title="photobooth strip")

status = StatusStore()
session = CaptureSession()

# Camera adapter: CAMERA_ADAPTER env var, cv2 (default) | mock
camera_adapter = os.getenv("CAMERA_ADAPTER", "cv2").lower()
if camera_adapter == "mock":
    from photobooth.adapters.camera.mock_camera import MockCamera
    camera = MockCamera(status)
else:
    from photobooth.adapters.camera.cv2_camera import CV2Camera
    camera = CV2Camera(status)
status.log(f"camera adapter: {type(camera).__name__}")

tick_s = float(os.getenv("TICK_SECONDS", "1.0"))
sequencer = CaptureSequencer(camera, session, status, tick_s=tick_s, pause_s=tick_s)

compositor = StripCompositor(status, max_width=int(os.getenv("STRIP_MAX_WIDTH", str(MAX_STRIP_WIDTH))))
encoder = ExportEncoder(status)
download_sink = MemorySink()

# Optional second sink: also drop every exported strip into EXPORT_DIR
export_dir = os.getenv("EXPORT_DIR")
dir_sink = DirectorySink(export_dir) if export_dir else None
if dir_sink:
    status.log(f"export: also writing to {export_dir}")

DEFAULT_VIEWPORT = 1280


def _busy_response():
    return JSONResponse(status_code=409, content={"ok": False, "error": errors.ERR_BUSY})


@app.get("/status", response_model=StatusResponse)
def get_status():
    return StatusResponse(
        busy=status.busy,
        state=status.state.value,
        countdown=status.countdown,
        flash=status.flash_active(sequencer.clock.now()),
        photo_count=len(session.captured),
        shot_count=session.shot_count,
        theme=theme_name(session.theme),
        caption=session.caption,
        has_logo=session.logo is not None,
        camera_ready=camera.ready,
        camera_error=camera.last_error,
        last_error=status.last_error,
        logs=status.logs,
    )


@app.post("/camera/request", response_model=CameraResponse)
def request_camera():
    """Open the camera. Safe to call again after a denial."""
    ready = camera.request_access()
    return CameraResponse(ok=ready, ready=ready, error=camera.last_error)


@app.post("/shots", response_model=ShotCountResponse)
def set_shots(req: ShotCountRequest):
    session.shot_count = req.shot_count
    status.log(f"SHOTS: {session.shot_count}")
    return ShotCountResponse(ok=True, shot_count=session.shot_count)


@app.post("/shots/next", response_model=ShotCountResponse)
def next_shots():
    return ShotCountResponse(ok=True, shot_count=session.cycle_shot_count(+1))


@app.post("/shots/prev", response_model=ShotCountResponse)
def prev_shots():
    return ShotCountResponse(ok=True, shot_count=session.cycle_shot_count(-1))


@app.post("/capture", response_model=CaptureResponse)
async def capture(req: CaptureRequest):
    """Run a full countdown/capture sequence. Returns once every shot was attempted."""
    shot_count = req.shot_count if req.shot_count is not None else session.shot_count
    rr = await sequencer.start(shot_count)
    return CaptureResponse(
        ok=rr.ok,
        requested=rr.requested,
        attempted=rr.attempted,
        captured=rr.captured,
        dropped=rr.dropped,
        cancelled=rr.cancelled,
        duration_ms=rr.duration_ms,
        error_code=rr.error_code,
    )


@app.post("/cancel", response_model=OkResponse)
def cancel():
    if sequencer.cancel():
        return OkResponse(ok=True)
    return OkResponse(ok=False, error="not capturing")


@app.post("/theme", response_model=OkResponse)
def set_theme(req: ThemeRequest):
    if req.theme == "white":
        try:
            session.theme = Solid(parse_color(req.color)) if req.color else Solid()
        except ValueError as e:
            return OkResponse(ok=False, error=str(e))
    elif req.theme == "gradient":
        session.theme = Gradient()
    elif req.theme == "confetti":
        session.theme = Confetti()
    elif not isinstance(session.theme, Custom):
        # no image yet: background layer is skipped until one is uploaded
        session.theme = Custom()
    status.log(f"THEME: {req.theme}")
    return OkResponse(ok=True)


@app.post("/theme/background", response_model=OkResponse)
def upload_background(req: ImageUploadRequest):
    frame = decode_base64_image(req.image)
    session.theme = Custom(background=frame)
    if frame is None:
        status.log("THEME: custom background failed to decode")
        return OkResponse(ok=False, error=errors.ERR_DECODE_FAILED)
    status.log(f"THEME: custom background {frame.width}x{frame.height}")
    return OkResponse(ok=True)


@app.post("/logo", response_model=OkResponse)
def upload_logo(req: ImageUploadRequest):
    frame = decode_base64_image(req.image)
    session.logo = frame
    if frame is None:
        status.log("LOGO: failed to decode")
        return OkResponse(ok=False, error=errors.ERR_DECODE_FAILED)
    status.log(f"LOGO: {frame.width}x{frame.height}")
    return OkResponse(ok=True)


@app.delete("/logo", response_model=OkResponse)
def clear_logo():
    session.logo = None
    status.log("LOGO: cleared")
    return OkResponse(ok=True)


@app.post("/caption", response_model=OkResponse)
def set_caption(req: CaptionRequest):
    session.caption = req.caption
    status.log(f"CAPTION: {req.caption}")
    return OkResponse(ok=True)


@app.get("/photos/{index}")
def get_photo(index: int):
    """Preview one captured (already mirrored) still."""
    if not 0 <= index < len(session.captured):
        return JSONResponse(status_code=404, content={"ok": False, "error": "no such photo"})
    return Response(content=encode_png(session.captured[index]), media_type="image/png")


@app.get("/strip")
def download_strip(viewport_width: int = DEFAULT_VIEWPORT):
    """Composite the session and download photobooth-strip.png."""
    if status.busy:
        return _busy_response()
    try:
        result = compositor.render(session, viewport_width)
    except errors.CompositeError as e:
        status.log(f"STRIP: composite failed: {e}")
        return JSONResponse(status_code=422, content={"ok": False, "error": e.code})

    artifact = encoder.save(result, download_sink)
    if artifact is None:
        return Response(status_code=204)
    if dir_sink:
        dir_sink.deliver(artifact)
    return Response(
        content=artifact.data,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )


@app.get("/health")
def health():
    checks = {
        "api": True,
        "camera_adapter": type(camera).__name__,
        "camera_ready": camera.ready,
        "export_dir": export_dir,
    }
    checks["all_ok"] = checks["api"]
    return checks
