"""
Offline demo: capture a strip from the mock camera and write it to disk.

Usage:
  python -m photobooth.scripts.render_demo [shots] [theme] [out_dir]

theme is one of white | gradient | confetti. Ticks are skipped with the
fake clock so the run is instant.
"""
import asyncio
import sys

from photobooth.adapters.camera.mock_camera import MockCamera
from photobooth.imaging.compositor import StripCompositor
from photobooth.imaging.export import ExportEncoder, DirectorySink
from photobooth.orchestrator.clock import FakeClock
from photobooth.orchestrator.contracts import CaptureSession, Solid, Gradient, Confetti
from photobooth.orchestrator.state_machine import CaptureSequencer
from photobooth.services.status_store import StatusStore

THEMES = {"white": Solid, "gradient": Gradient, "confetti": Confetti}


def main():
    shots = int(sys.argv[1]) if len(sys.argv) > 1 else 3
    theme = sys.argv[2] if len(sys.argv) > 2 else "gradient"
    out_dir = sys.argv[3] if len(sys.argv) > 3 else "."
    if theme not in THEMES:
        print(f"[ERROR] unknown theme '{theme}', pick one of {sorted(THEMES)}")
        sys.exit(1)

    status = StatusStore()
    session = CaptureSession(theme=THEMES[theme]())
    camera = MockCamera(status)
    camera.request_access()

    sequencer = CaptureSequencer(camera, session, status, clock=FakeClock())
    report = asyncio.run(sequencer.start(shots))
    print(f"  captured {report.captured}/{report.requested}")

    result = StripCompositor(status).render(session, viewport_width=1280)
    artifact = ExportEncoder(status).save(result, DirectorySink(out_dir))
    if artifact is None:
        print("  nothing captured, no file written")
        sys.exit(1)
    print(f"  wrote {out_dir}/{artifact.filename} ({len(artifact.data)} bytes)")


if __name__ == "__main__":
    main()
