"""
PNG export of a composited strip.

The encoder never deals with paths itself: it hands named bytes to an
ExportSink. MemorySink backs the HTTP download; DirectorySink drops the file
into EXPORT_DIR.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import cv2

from photobooth.imaging.compositor import CompositeResult

STRIP_FILENAME = "photobooth-strip.png"
MEDIA_TYPE = "image/png"


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    data: bytes
    media_type: str = MEDIA_TYPE


class ExportSink(ABC):
    @abstractmethod
    def deliver(self, artifact: ExportArtifact):
        """Hand the named bytes to the user."""
        ...


class MemorySink(ExportSink):
    def __init__(self):
        self.last: ExportArtifact | None = None

    def deliver(self, artifact: ExportArtifact):
        self.last = artifact


class DirectorySink(ExportSink):
    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def deliver(self, artifact: ExportArtifact):
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / artifact.filename).write_bytes(artifact.data)


class ExportEncoder:
    def __init__(self, status_store, filename: str = STRIP_FILENAME):
        self.status = status_store
        self.filename = filename

    def encode(self, result: CompositeResult) -> bytes:
        ok, buf = cv2.imencode(".png", result.pixels)
        if not ok:
            raise ValueError("png encode failed")
        return bytes(buf)

    def save(self, result: CompositeResult | None, sink: ExportSink) -> ExportArtifact | None:
        """Encode and deliver the strip. No-op for an empty capture."""
        if result is None or result.photo_count == 0:
            self.status.log("export: nothing to save")
            return None
        artifact = ExportArtifact(filename=self.filename, data=self.encode(result))
        sink.deliver(artifact)
        self.status.log(f"export: {artifact.filename} {len(artifact.data)} bytes -> {type(sink).__name__}")
        return artifact
