#server.py
import asyncio
import errno
import logging
import os
import socket
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from config import BASE_URL, CORS_ORIGINS, HOST, PORT, PUBLIC_DIR
from core.faults import fatal_fault_seen, install_fault_handlers, loop_exception_handler
from handlers import download, health, video_info
from logging_setup import setup_logging

BANNER = f"""
YouTube Downloader Server Started!
----------------------------------
Local: {BASE_URL}

Endpoints:
- GET /video-info?url=YOUTUBE_URL
- GET /download?url=YOUTUBE_URL&itag=FORMAT_ITAG

Press Ctrl+C to stop
"""


@asynccontextmanager
async def lifespan(app_: FastAPI):
    asyncio.get_running_loop().set_exception_handler(loop_exception_handler)
    logging.info(BANNER)
    yield
    logging.info("[SERVER] stopped")


class ErrorBarrier:
    """Turns request faults into a JSON 500 so they never reach the server loop."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_tracked(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracked)
        except Exception:
            logging.exception(f"[SERVER] unhandled error in {scope.get('path')}")
            # headers are already out, the response just ends
            if started:
                return
            response = JSONResponse(status_code=500, content={"error": "Internal server error"})
            await response(scope, receive, send)


def create_app() -> FastAPI:
    app = FastAPI(title="tubegate", lifespan=lifespan)
    app.add_middleware(ErrorBarrier)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(video_info.router)
    app.include_router(download.router)
    app.include_router(health.router)
    if os.path.isdir(PUBLIC_DIR):
        app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="public")
    return app


def _bind(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        logging.error(f"[SERVER] failed to start: {e}")
        if e.errno == errno.EADDRINUSE:
            logging.error(f"[SERVER] Port {port} is already in use. Try changing the PORT environment variable.")
        sys.exit(1)
    return sock


def main():
    setup_logging()
    install_fault_handlers()
    sock = _bind(HOST, PORT)
    server = uvicorn.Server(uvicorn.Config(create_app(), log_config=None))
    server.run(sockets=[sock])
    if fatal_fault_seen():
        sys.exit(1)


if __name__ == "__main__":
    main()
