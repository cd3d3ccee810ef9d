# reunion/utils/thumbs.py
# Drive thumbnail URLs carry their size as an "=s<N>" token (e.g. ...=s220).
# This is an undocumented Google convention, so the rewrite lives behind one
# small callable type that DriveFetcher takes as a parameter.
import re
from typing import Callable, Optional

ThumbnailRewriter = Callable[[Optional[str], Optional[str], int], Optional[str]]

_SIZE_TOKEN = re.compile(r"=s\d+")


def upscale_thumbnail(thumbnail_url: Optional[str], content_url: Optional[str], size: int = 1200) -> Optional[str]:
    """
    Ask for a bigger thumbnail than Drive hands out by default.
    - "...=s220"            -> "...=s1200" (first token only)
    - no =s<N> token        -> unchanged
    - no thumbnail at all   -> content_url
    """
    if not thumbnail_url:
        return content_url
    return _SIZE_TOKEN.sub(f"=s{size}", thumbnail_url, count=1)
