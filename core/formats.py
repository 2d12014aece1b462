"""Helpers for representing yt-dlp format information."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set, Union

from core.utils import NOT_APPLICABLE, aspect_ratio, format_size

# Resolution key -> label. Only these sizes are offered as video downloads.
ALLOWED_RESOLUTIONS: Mapping[str, str] = {
    "3840x2160": "2160p (4K)",
    "2560x1440": "1440p (2K)",
    "1920x1080": "1080p (HD)",
    "1280x720": "720p (HD)",
    "854x480": "480p (SD)",
    "640x360": "360p (SD)",
    "426x240": "240p (SD)",
    "256x144": "144p (SD)",
}

VIDEO_CONTAINER = "mp4"
AUDIO_CONTAINER = "mp3"
AUDIO_LABEL = "Audio (MP3)"
AUDIO_RESOLUTION = "audio"
UNTITLED = "Untitled"


class ParseError(ValueError):
    """Raised when yt-dlp metadata is not the JSON document we expect."""


@dataclass
class FormatOption:
    """Single downloadable format entry shown to the user."""

    itag: str
    quality_label: str
    resolution: str
    aspect_ratio: str
    container: str
    size: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "itag": self.itag,
            "qualityLabel": self.quality_label,
            "resolution": self.resolution,
            "aspectRatio": self.aspect_ratio,
            "container": self.container,
            "size": self.size,
        }


@dataclass
class VideoSummary:
    """Title, artwork and the normalized list of downloadable formats."""

    title: str
    thumbnail: str = ""
    duration: str = ""
    formats: List[FormatOption] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "thumbnail": self.thumbnail,
            "duration": self.duration,
            "formats": [option.to_dict() for option in self.formats],
        }


# What: Decode the ``yt-dlp -J`` output.
# Inputs: ``raw`` - stdout of the metadata call, text or bytes.
# Outputs: The top-level JSON object; raises ParseError otherwise.
def parse_metadata(raw: Union[str, bytes]) -> Dict[str, Any]:
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ParseError("Failed to parse video information") from exc
    if not isinstance(payload, dict):
        raise ParseError("Failed to parse video information")
    return payload


def _has_size(entry: Mapping[str, Any]) -> bool:
    return bool(entry.get("filesize") or entry.get("filesize_approx"))


def _thumbnail(info: Mapping[str, Any]) -> str:
    if info.get("thumbnail"):
        return info["thumbnail"]
    thumbnails = info.get("thumbnails") or []
    if isinstance(thumbnails, list) and thumbnails and isinstance(thumbnails[-1], dict):
        return thumbnails[-1].get("url") or ""
    return ""


def _video_option(entry: Mapping[str, Any], resolution: str, label: str) -> FormatOption:
    return FormatOption(
        itag=str(entry.get("format_id")),
        quality_label=label,
        resolution=resolution,
        aspect_ratio=aspect_ratio(entry.get("width"), entry.get("height")),
        container=VIDEO_CONTAINER,
        size=format_size(entry.get("filesize"), entry.get("filesize_approx")),
    )


def _audio_option(entry: Mapping[str, Any]) -> FormatOption:
    return FormatOption(
        itag=str(entry.get("format_id")),
        quality_label=AUDIO_LABEL,
        resolution=AUDIO_RESOLUTION,
        aspect_ratio=NOT_APPLICABLE,
        container=AUDIO_CONTAINER,
        size=format_size(entry.get("filesize"), entry.get("filesize_approx")),
    )


# What: Reduce yt-dlp's format list to one option per allowed resolution
#     plus a single mp3 option.
# Inputs: ``info`` - parsed ``yt-dlp -J`` object.
# Outputs: ``VideoSummary`` with options in source order.
def summarize_formats(info: Mapping[str, Any]) -> VideoSummary:
    formats = info.get("formats")
    if formats is None:
        formats = []
    if not isinstance(formats, list):
        raise ParseError("Failed to parse video information")

    summary = VideoSummary(
        title=info.get("title") or UNTITLED,
        thumbnail=_thumbnail(info),
        duration=info.get("duration_string") or "",
    )

    # Dedup is by exact dimensions only: the first entry of a given size wins
    # even if a later one has a higher bitrate.
    seen: Set[str] = set()
    audio_added = False

    for entry in formats:
        if not isinstance(entry, dict):
            raise ParseError("Failed to parse video information")

        ext = entry.get("ext")
        resolution = f"{entry.get('width')}x{entry.get('height')}"
        label: Optional[str] = ALLOWED_RESOLUTIONS.get(resolution)
        sized = _has_size(entry)

        if ext == VIDEO_CONTAINER and label and sized and resolution not in seen:
            summary.formats.append(_video_option(entry, resolution, label))
            seen.add(resolution)

        if not audio_added and ext == AUDIO_CONTAINER and sized:
            summary.formats.append(_audio_option(entry))
            audio_added = True

    return summary
