# reunion/services/stats.py
# Landing-page counters built from the two sources.
# Contacts are required; media is best effort (a Drive outage must not take
# down friend/city stats).
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from reunion.core.logging import get_logger
from reunion.schemas.media import ContactRecord, MediaItem, StatsSnapshot

log = get_logger("stats")


def unique_cities(contacts: List[ContactRecord]) -> List[str]:
    """Trimmed, non-empty, case-sensitive unique cities in first-seen order."""
    seen: dict = {}
    for c in contacts:
        city = (c.city or "").strip()
        if city:
            seen.setdefault(city, None)
    return list(seen)


def snapshot(contacts: List[ContactRecord], media: Optional[List[MediaItem]]) -> StatsSnapshot:
    media = media or []
    cities = unique_cities(contacts)
    return StatsSnapshot(
        total_friends=len(contacts),
        total_photos=sum(1 for m in media if m.kind == "photo"),
        total_videos=sum(1 for m in media if m.kind == "video"),
        cities=cities,
        unique_cities_count=len(cities),
    )


def build_stats(fetch_contacts: Callable[[], List[ContactRecord]],
                fetch_media: Callable[[], List[MediaItem]]) -> StatsSnapshot:
    """
    Run both fetches concurrently. Contact errors propagate; media errors are
    logged and counted as zero photos/videos.
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        contacts_f = pool.submit(fetch_contacts)
        media_f = pool.submit(fetch_media)

        media: Optional[List[MediaItem]] = None
        try:
            media = media_f.result()
        except Exception as e:
            log.warning("Media unavailable for stats, counting 0 photos/videos: %s", e)

        contacts = contacts_f.result()

    return snapshot(contacts, media)
