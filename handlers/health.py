# handlers/health.py
import shutil

from fastapi import APIRouter

from config import YTDLP_PATH

router = APIRouter()


def ytdlp_available() -> bool:
    return shutil.which(YTDLP_PATH) is not None


@router.get("/health")
def health():
    ok = ytdlp_available()
    return {"status": "ok" if ok else "bad", "ytdlp": ok}
