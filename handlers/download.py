# handlers/download.py
import logging
from typing import Optional

from fastapi import APIRouter, Query, Response
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.types import Receive, Scope, Send

from config import BASE_URL, EXAMPLE_VIDEO_URL
from services.ytdlp import StreamJob, ToolStartError

router = APIRouter()

CONTENT_TYPE = "video/mp4"
DISPOSITION = 'attachment; filename="video.mp4"'


class RelayResponse(StreamingResponse):
    """Streams a ``StreamJob`` and kills its process however the response ends."""

    def __init__(self, job: StreamJob) -> None:
        super().__init__(
            job.iter_bytes(),
            media_type=CONTENT_TYPE,
            headers={"Content-Disposition": DISPOSITION},
        )
        self.job = job

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            self.job.cancel()


@router.get("/download")
async def download(url: Optional[str] = Query(None), itag: Optional[str] = Query(None)):
    url = (url or "").strip()
    itag = (itag or "").strip()
    if not url or not itag:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Missing parameters",
                "required": ["url", "itag"],
                "example": f"{BASE_URL}/download?url={EXAMPLE_VIDEO_URL}&itag=22",
            },
        )

    logging.info(f"[DL] Starting download for itag {itag} from {url}")
    try:
        job = await StreamJob.start(url, itag)
    except ToolStartError as e:
        logging.error(f"[DL] process error: {e}")
        return Response(status_code=500)

    return RelayResponse(job)
