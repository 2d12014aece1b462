"""Interface to the yt-dlp executable with an asyncio-friendly surface."""

from __future__ import annotations

import asyncio
import logging
from asyncio.subprocess import DEVNULL, PIPE, Process
from typing import AsyncIterator, List, Optional

from config import CHUNK_SIZE, YTDLP_PATH


class ToolExecutionError(RuntimeError):
    """Raised when yt-dlp fails or produces no output."""


class ToolStartError(ToolExecutionError):
    """Raised when the yt-dlp process cannot be started at all."""


def info_command(url: str) -> List[str]:
    return [YTDLP_PATH, "-J", "--no-warnings", "--no-check-certificate", url]


def download_command(url: str, itag: str) -> List[str]:
    return [YTDLP_PATH, "-f", itag, "-o", "-", "--no-warnings", "--no-progress", url]


async def _spawn(command: List[str]) -> Process:
    try:
        return await asyncio.create_subprocess_exec(
            *command, stdin=DEVNULL, stdout=PIPE, stderr=PIPE
        )
    except OSError as exc:
        raise ToolStartError(f"Could not start {command[0]}: {exc}") from exc


def _kill(process: Process) -> bool:
    if process.returncode is not None:
        return False
    try:
        process.kill()
    except ProcessLookupError:
        return False
    return True


# What: Run ``yt-dlp -J`` and return its raw stdout.
# Inputs: ``url`` - media link supplied by the client.
# Outputs: JSON bytes; raises ToolStartError/ToolExecutionError.
async def read_metadata(url: str) -> bytes:
    process = await _spawn(info_command(url))
    try:
        stdout, stderr = await process.communicate()
    finally:
        # the request was cancelled while yt-dlp was still running
        if _kill(process):
            logging.warning(f"[YTDLP] metadata call for {url} aborted, pid {process.pid} killed")

    code = process.returncode
    if code != 0 or not stdout:
        details = stderr.decode("utf-8", "replace").strip() or "No output"
        raise ToolExecutionError(f"yt-dlp failed with code {code}: {details}")
    return stdout


class StreamJob:
    """One ``yt-dlp -o -`` process whose stdout is relayed to a single client.

    A job is used once: ``start`` spawns the process and begins logging its
    stderr, ``iter_bytes`` yields stdout chunks as they arrive and ``cancel``
    kills the process if it is still running (for example after the client
    went away). ``cancel`` is safe to call any number of times.
    """

    def __init__(self, process: Process, url: str, itag: str) -> None:
        self.process = process
        self.url = url
        self.itag = itag
        self._stderr_task: Optional[asyncio.Task] = None

    @classmethod
    async def start(cls, url: str, itag: str) -> "StreamJob":
        process = await _spawn(download_command(url, itag))
        job = cls(process, url, itag)
        job._stderr_task = asyncio.create_task(job._drain_stderr())
        logging.info(f"[DL] started yt-dlp pid {process.pid} for itag {itag} from {url}")
        return job

    @property
    def running(self) -> bool:
        return self.process.returncode is None

    async def _drain_stderr(self) -> None:
        stream = self.process.stderr
        if stream is None:
            return
        pending = b""
        while True:
            chunk = await stream.read(4096)
            if not chunk:
                break
            pending += chunk
            *lines, pending = pending.split(b"\n")
            for line in lines:
                self._log_stderr(line)
        self._log_stderr(pending)

    def _log_stderr(self, line: bytes) -> None:
        text = line.decode("utf-8", "replace").strip()
        if text:
            logging.warning(f"[DL] yt-dlp (itag {self.itag}): {text}")

    async def iter_bytes(self, chunk_size: Optional[int] = None) -> AsyncIterator[bytes]:
        """Yield stdout verbatim; the next read waits until the consumer takes the chunk."""

        stream = self.process.stdout
        size = chunk_size or CHUNK_SIZE
        try:
            if stream is not None:
                while True:
                    chunk = await stream.read(size)
                    if not chunk:
                        break
                    yield chunk

            code = await self.process.wait()
            if self._stderr_task is not None:
                await self._stderr_task
            if code != 0:
                logging.error(f"[DL] download failed with code {code} for itag {self.itag} from {self.url}")
            else:
                logging.info(f"[DL] finished itag {self.itag} from {self.url}")
        finally:
            self.cancel()

    def cancel(self) -> bool:
        """Kill the process if it is still running; ``True`` when it was."""

        killed = _kill(self.process)
        if killed:
            logging.warning(f"[DL] client gone, killed yt-dlp pid {self.process.pid} (itag {self.itag})")
        return killed
