"""
Media source descriptions and type detection helpers.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional

# Extensions treated as video when no type check claims the URL
_VIDEO_EXTENSIONS = re.compile(r"(mp4|m4v|ogg|ogv|webm|webmv|flv|wmv|mpeg|mov)", re.IGNORECASE)

# URL -> mime type (or None). Renderers register their own checks here.
TYPE_CHECKS: List[Callable[[str], Optional[str]]] = []


@dataclass(frozen=True)
class MediaFile:
    """A candidate media source."""

    src: str
    type: Optional[str] = None


class TimeRanges:
    """Read-only list of [start, end] time ranges, like HTMLMediaElement.buffered."""

    def __init__(self, ranges=None):
        self._ranges = list(ranges or [])

    @classmethod
    def single(cls, start: float, end: float) -> "TimeRanges":
        """Create a TimeRanges holding one segment."""
        return cls([(start, end)])

    @property
    def length(self) -> int:
        return len(self._ranges)

    def start(self, index: int) -> float:
        return self._ranges[index][0]

    def end(self, index: int) -> float:
        return self._ranges[index][1]

    def __len__(self) -> int:
        return len(self._ranges)

    def __repr__(self) -> str:
        return f"TimeRanges({self._ranges})"


def register_type_check(check: Callable[[str], Optional[str]]) -> None:
    """Add a URL type check, ignoring duplicates."""
    if check not in TYPE_CHECKS:
        TYPE_CHECKS.append(check)


def get_mime_from_type(media_type: Optional[str]) -> Optional[str]:
    """
    Strip codec parameters from a type attribute.

    `video/mp4; codecs="avc1.42E01E, mp4a.40.2"` becomes `video/mp4`.
    """
    if media_type and ';' in media_type:
        return media_type[:media_type.index(';')]
    return media_type


def get_extension(url: str) -> str:
    """Get the file extension of a URL, ignoring the query string."""
    path = url.split('?')[0]
    if '.' not in path:
        return ''
    return path[path.rfind('.') + 1:]


def normalize_extension(extension: str) -> str:
    """Map extension variants onto their standard name."""
    if extension in ('mp4', 'm4v'):
        return 'mp4'
    if extension in ('webm', 'webma', 'webmv'):
        return 'webm'
    if extension in ('ogg', 'oga', 'ogv'):
        return 'ogg'
    return extension


def get_type_from_file(url: str) -> str:
    """
    Get the media type of a URL.

    Registered type checks run first; otherwise the type is derived from
    the file extension.
    """
    for check in TYPE_CHECKS:
        media_type = check(url)
        if media_type is not None:
            return media_type

    ext = get_extension(url)
    kind = 'video' if _VIDEO_EXTENSIONS.search(ext) else 'audio'
    return f"{kind}/{normalize_extension(ext)}"


def format_type(url: Optional[str], media_type: Optional[str] = None) -> Optional[str]:
    """Get the format of a media source from its URL or its declared type."""
    if url and not media_type:
        return get_type_from_file(url)
    return get_mime_from_type(media_type)
