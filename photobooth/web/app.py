"""
Server entrypoint.

Usage:
    CAMERA_ADAPTER=mock python -m photobooth.web.app
"""
import os
import uvicorn
from fastapi import FastAPI

from photobooth.services.api import app as api_app

app = FastAPI(title="photobooth web")

# mounted last: the catch-all prefix "" would shadow routes above it
app.mount("", api_app)


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print(f"Photobooth starting on http://localhost:{port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
