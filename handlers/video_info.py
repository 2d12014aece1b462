# handlers/video_info.py
import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from config import BASE_URL, EXAMPLE_VIDEO_URL
from core.formats import ParseError, parse_metadata, summarize_formats
from services.ytdlp import ToolExecutionError, read_metadata

router = APIRouter()

SOLUTION_HINT = (
    "Please check the URL and try again. "
    "If the problem persists, the video may not be available."
)


def _failure(details: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": "Failed to fetch video info",
            "details": details,
            "solution": SOLUTION_HINT,
        },
    )


@router.get("/video-info")
async def video_info(url: Optional[str] = Query(None)):
    """Formats available for ``url``, one per resolution plus one mp3."""
    url = (url or "").strip()
    if not url:
        return JSONResponse(
            status_code=400,
            content={
                "error": "URL is required",
                "example": f"{BASE_URL}/video-info?url={EXAMPLE_VIDEO_URL}",
            },
        )

    try:
        raw = await read_metadata(url)
        summary = summarize_formats(parse_metadata(raw))
    except ToolExecutionError as e:
        logging.error(f"[INFO] yt-dlp error for {url}: {e}")
        return _failure(str(e))
    except ParseError as e:
        logging.exception(f"[INFO] JSON parse error for {url}")
        return _failure(str(e))

    logging.info(f"[INFO] {len(summary.formats)} formats for {url}")
    return summary.to_dict()
