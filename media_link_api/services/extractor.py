from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ..errors import EmptyResultError
from ..models import Record

Extractor = Callable[[Any], Optional[str]]


def _plain(value: Any) -> Optional[str]:
    if isinstance(value, list):
        # First string entry of a list of links.
        value = next((item for item in value if isinstance(item, str) and item), None)
    if isinstance(value, str) and value:
        return value
    return None


def _video(value: Any) -> Optional[str]:
    # Some actors nest the link: {"video": {"url": ...}}
    if isinstance(value, dict):
        return _plain(value.get("url")) or _plain(value.get("downloadUrl"))
    return _plain(value)


# Probed in order; the first hit wins.
CANDIDATE_FIELDS: List[Tuple[str, Extractor]] = [
    ("video", _video),
    ("url", _plain),
    ("downloadUrl", _plain),
    ("videoUrl", _plain),
    ("src", _plain),
    ("play", _plain),
]


@dataclass
class ExtractionResult:
    video: Optional[str]
    raw: Record


def pick_media_url(record: Record, candidates: Sequence[Tuple[str, Extractor]] = CANDIDATE_FIELDS) -> Optional[str]:
    for key, extract in candidates:
        found = extract(record.get(key))
        if found:
            return found
    return None


def extract_media_url(records: Sequence[Record]) -> ExtractionResult:
    if not records:
        raise EmptyResultError("No items returned by actor")
    first = records[0]
    return ExtractionResult(video=pick_media_url(first), raw=first)
