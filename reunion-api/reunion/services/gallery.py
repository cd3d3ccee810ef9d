# reunion/services/gallery.py
# Server-side version of the gallery's tab/search/shuffle + infinite-scroll paging.
from __future__ import annotations

import random
from typing import List, Optional, Tuple

from reunion.schemas.media import MediaItem


def filter_media(items: List[MediaItem], kind: str = "all", query: Optional[str] = None) -> List[MediaItem]:
    """kind: 'all' | 'photo' | 'video'; query matches the file name, case-insensitive."""
    out = items if kind == "all" else [m for m in items if m.kind == kind]
    if query:
        q = query.lower()
        out = [m for m in out if q in m.name.lower()]
    return list(out)


def shuffle_media(items: List[MediaItem], seed: Optional[int] = None) -> List[MediaItem]:
    """Fisher-Yates shuffle on a copy; same seed, same order."""
    out = list(items)
    random.Random(seed).shuffle(out)
    return out


def paginate(items: List[MediaItem], offset: int = 0, limit: Optional[int] = None) -> Tuple[List[MediaItem], bool]:
    """Slice [offset, offset+limit) and report whether more items follow."""
    if limit is None:
        return items[offset:], False
    page = items[offset:offset + limit]
    return page, offset + limit < len(items)
