"""Last-resort handlers for faults that escape every request."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
import threading
from types import TracebackType
from typing import Any, Dict, Optional, Type

_fatal = threading.Event()


def fatal_fault_seen() -> bool:
    """``True`` once a fault has asked the server to stop."""

    return _fatal.is_set()


# What: Ask the server to stop the same way Ctrl+C/SIGTERM would.
# Inputs: None.
# Outputs: None; uvicorn runs its shutdown (lifespan, open responses) and
#     ``server.main`` exits non-zero afterwards.
def request_shutdown() -> None:
    if _fatal.is_set():
        return
    _fatal.set()
    for handler in logging.getLogger().handlers:
        handler.flush()
    signal.raise_signal(signal.SIGTERM)


def _excepthook(
    exc_type: Type[BaseException],
    exc: BaseException,
    tb: Optional[TracebackType],
) -> None:
    logging.critical("[FAULT] uncaught exception", exc_info=(exc_type, exc, tb))


def _thread_excepthook(args: threading.ExceptHookArgs) -> None:
    if args.exc_type is SystemExit:
        return
    name = args.thread.name if args.thread else "?"
    logging.critical(
        f"[FAULT] uncaught exception in thread {name}, shutting down",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )
    request_shutdown()


# What: Handle errors the event loop could not hand to any awaiting code.
# Inputs: ``loop``/``context`` as passed by asyncio.
# Outputs: None. Errors of tasks/futures nobody awaited are only logged;
#     errors raised by plain loop callbacks stop the server.
def loop_exception_handler(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    exc = context.get("exception")
    message = context.get("message") or "unhandled error in event loop"

    if "future" in context or "task" in context:
        if exc is not None:
            logging.error(f"[FAULT] {message}", exc_info=exc)
        else:
            logging.error(f"[FAULT] {message}")
        return

    logging.critical(f"[FAULT] {message}, shutting down", exc_info=exc)
    request_shutdown()


def install_fault_handlers(loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
    """Hook the interpreter, threads and (optionally) an event loop."""

    sys.excepthook = _excepthook
    threading.excepthook = _thread_excepthook
    if loop is not None:
        loop.set_exception_handler(loop_exception_handler)
