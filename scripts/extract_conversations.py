#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
extract_conversations.py: pull "funny moments" out of a Messenger export.

Usage (from repo root):
  python scripts/extract_conversations.py                                   # defaults below
  python scripts/extract_conversations.py friends_conversations/message_1.json -o data/funny_conversations.json
  python scripts/extract_conversations.py export.json --limit 20 -v

Output is a JSON list of {category, summary, messages:[{sender, timestamp, content}]},
served by GET /api/conversations.
"""

import argparse
import json
import sys
from pathlib import Path

from reunion.core.config import SETTINGS
from reunion.core.logging import setup_logging
from reunion.services.conversations import extract_moments


def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def main() -> int:
    ap = argparse.ArgumentParser(description="Extract funny conversation moments from a Messenger export.")
    ap.add_argument("input", nargs="?", default=str(repo_root() / "friends_conversations" / "message_1.json"),
                    help="Messenger export JSON (default: friends_conversations/message_1.json)")
    ap.add_argument("-o", "--output", default=str(SETTINGS.conversations_path),
                    help="Where to write the moments JSON (default from [conversations].path)")
    ap.add_argument("--limit", type=int, default=50, help="Keep at most N moments (default: 50)")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (repeatable)")
    ap.add_argument("-q", "--quiet", action="store_true", help="Only warnings and errors")
    ap.add_argument("--log-level", default=None, choices=["DEBUG","INFO","WARNING","ERROR","CRITICAL"])
    ap.add_argument("--json-logs", action="store_true", help="JSON-formatted log lines")
    args = ap.parse_args()

    log = setup_logging(SETTINGS.log_level, json_logs=args.json_logs, verbose=args.verbose,
                        quiet=args.quiet, log_level_arg=args.log_level)

    src = Path(args.input).expanduser()
    if not src.is_file():
        log.error(f"Export not found: {src}")
        return 1
    try:
        export = json.loads(src.read_text(encoding="utf-8"))
    except ValueError as e:
        log.error(f"Could not parse {src}: {e}")
        return 1

    moments = extract_moments(export, limit=args.limit)

    out = Path(args.output).expanduser()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(
        json.dumps([m.model_dump(by_alias=True) for m in moments], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    log.info(f"Successfully extracted {len(moments)} funny moments to {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
