"""
Static serving of audio assets under ``/uploads``.
"""
import os
from pathlib import Path

from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

from mock_me.core.storage import AUDIO_MEDIA_TYPES


class AudioStaticFiles(StaticFiles):
    """StaticFiles with headers browsers need to stream cross-origin audio."""

    def file_response(
        self,
        full_path: "os.PathLike[str] | str",
        stat_result: os.stat_result,
        scope: Scope,
        status_code: int = 200,
    ) -> Response:
        response = super().file_response(full_path, stat_result, scope, status_code)
        response.headers["Content-Type"] = AUDIO_MEDIA_TYPES.get(
            Path(full_path).suffix.lower(), "application/octet-stream"
        )
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Accept-Ranges"] = "bytes"
        response.headers["Cache-Control"] = "no-cache"
        response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"
        return response
