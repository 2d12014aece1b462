"""Utility helpers used by the format normalizer."""

from __future__ import annotations

from typing import Optional

NOT_APPLICABLE = "N/A"
MEGABYTE = 1024 * 1024


# What: Greatest common divisor via the Euclidean algorithm.
# Inputs: ``a``/``b`` - non-negative integers.
# Outputs: The largest integer dividing both (``a`` when ``b`` is zero).
def gcd(a: int, b: int) -> int:
    while b:
        a, b = b, a % b
    return a


# What: Reduce pixel dimensions to an aspect ratio string.
# Inputs: ``width``/``height`` - pixel sizes, ``None`` or ``0`` when unknown.
# Outputs: A string like ``"16:9"`` or ``"N/A"``.
def aspect_ratio(width: Optional[int], height: Optional[int]) -> str:
    if not width or not height:
        return NOT_APPLICABLE
    width, height = int(width), int(height)
    divisor = gcd(width, height)
    return f"{width // divisor}:{height // divisor}"


# What: Render a yt-dlp size field as megabytes.
# Inputs: ``filesize`` - exact byte count; ``filesize_approx`` - estimate.
# Outputs: ``"12.40 MB"``, ``"~12.40 MB"`` for estimates, or ``"N/A"``.
def format_size(filesize: Optional[float], filesize_approx: Optional[float] = None) -> str:
    if filesize:
        return f"{filesize / MEGABYTE:.2f} MB"
    if filesize_approx:
        return f"~{filesize_approx / MEGABYTE:.2f} MB"
    return NOT_APPLICABLE
