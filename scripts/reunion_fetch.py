#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
reunion_fetch.py: print contacts, media or stats straight from Google Sheets / Drive.

Usage (from repo root, after `pip install -e .`):
  python scripts/reunion_fetch.py contacts             # compact table
  python scripts/reunion_fetch.py contacts -q dhaka    # directory search
  python scripts/reunion_fetch.py media -n 20          # newest 20 photos/videos
  python scripts/reunion_fetch.py media --tsv          # tab-separated output
  python scripts/reunion_fetch.py stats

Notes:
  - Reads GOOGLE_API_KEY / GOOGLE_DRIVE_FOLDER_ID / GOOGLE_SHEET_ID from the
    environment (or .env), falling back to reunion.toml.
"""

import argparse
import sys
from typing import List, Optional

from reunion.core.config import SETTINGS, Settings
from reunion.core.errors import ReunionError
from reunion.core.logging import setup_logging
from reunion.services.drive import fetch_media
from reunion.services.sheets import fetch_contacts, search_contacts
from reunion.services.stats import build_stats


def human_bytes(n: Optional[int]) -> str:
    if n is None:
        return ""
    step = 1024.0
    units = ["B","KiB","MiB","GiB","TiB"]
    s = float(n)
    for u in units:
        if s < step or u == units[-1]:
            return f"{s:.0f}{u}" if u == "B" else f"{s:.1f}{u}"
        s /= step
    return f"{n}B"


def shorten(s: Optional[str], max_len: int = 40) -> str:
    if not s:
        return ""
    if len(s) <= max_len:
        return s
    keep = max_len - 1
    head = keep // 2
    tail = keep - head
    return s[:head] + "…" + s[-tail:]


def print_table(headers: List[str], rows: List[dict], tsv: bool, empty_msg: str) -> None:
    if not rows:
        print(empty_msg); return
    if tsv:
        print("\t".join(headers))
        for r in rows:
            print("\t".join(r[h] for h in headers))
        return
    col_widths = [max(len(h), *(len(r[h]) for r in rows)) for h in headers]
    sep = "  "
    header_line = sep.join(h.ljust(w) for h, w in zip(headers, col_widths))
    print(header_line); print("-" * len(header_line))
    for r in rows:
        print(sep.join(r[h].ljust(w) for h, w in zip(headers, col_widths)))


def show_contacts(settings: Settings, args) -> None:
    contacts = search_contacts(fetch_contacts(settings.sheet_id, timeout=settings.timeout), args.query)
    rows = [{
        "id":    c.id,
        "name":  shorten(c.name, 30),
        "phone": c.phone,
        "email": shorten(c.email, 30),
        "blood": c.blood_group or "",
        "city":  c.city or "",
        "imgs":  str(len(c.image_urls)),
    } for c in contacts[:args.limit]]
    print_table(["id","name","phone","email","blood","city","imgs"], rows, args.tsv, "No contacts found.")


def show_media(settings: Settings, args) -> None:
    items = fetch_media(
        settings.api_key, settings.drive_folder_id,
        media_only=settings.media_only, page_size=settings.page_size,
        thumb_size=settings.thumb_size, timeout=settings.timeout,
    )
    rows = [{
        "id8":     m.id[:8],
        "kind":    m.kind,
        "size":    human_bytes(m.size_bytes),
        "dims":    f"{m.width}x{m.height}" if m.width and m.height else "",
        "dur":     f"{m.video_duration_seconds}s" if m.video_duration_seconds is not None else "",
        "created": m.created_at or "",
        "name":    shorten(m.name, 40),
    } for m in items[:args.limit]]
    print_table(["id8","kind","size","dims","dur","created","name"], rows, args.tsv, "No media found.")


def show_stats(settings: Settings, args) -> None:
    stats = build_stats(
        lambda: fetch_contacts(settings.sheet_id, timeout=settings.timeout),
        lambda: fetch_media(settings.api_key, settings.drive_folder_id,
                            media_only=settings.media_only, page_size=settings.page_size,
                            timeout=settings.timeout),
    )
    print(f"friends: {stats.total_friends}")
    print(f"photos:  {stats.total_photos}")
    print(f"videos:  {stats.total_videos}")
    print(f"cities:  {stats.unique_cities_count}  ({', '.join(stats.cities)})")


# ---------- main ----------

def main() -> int:
    ap = argparse.ArgumentParser(description="Show Reunion contacts/media/stats from the live sources.")
    ap.add_argument("what", choices=["contacts", "media", "stats"])
    ap.add_argument("-n", "--limit", type=int, default=50, help="How many rows to show (default: 50)")
    ap.add_argument("-q", "--query", help="Contact search (name/email/phone/whatsapp/blood group)")
    ap.add_argument("--tsv", action="store_true", help="Tab-separated output")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (repeatable)")
    ap.add_argument("--log-level", default=None, choices=["DEBUG","INFO","WARNING","ERROR","CRITICAL"])
    ap.add_argument("--json-logs", action="store_true", help="JSON-formatted log lines")
    args = ap.parse_args()

    # quiet by default so tables stay readable; -v brings INFO back
    setup_logging(SETTINGS.log_level, json_logs=args.json_logs, verbose=args.verbose,
                  quiet=not args.verbose, log_level_arg=args.log_level)

    handlers = {"contacts": show_contacts, "media": show_media, "stats": show_stats}
    try:
        handlers[args.what](SETTINGS, args)
    except ReunionError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        missing = SETTINGS.missing()
        if missing:
            print(f"Tip: set {', '.join(missing)} in the environment or .env.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
