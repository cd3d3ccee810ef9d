# reunion/services/sheets.py
# Contact directory from a link-shared Google Sheet (gviz JSON endpoint, no auth).
#
# Expected columns (positional fallback when headers are missing/unknown):
#   A Name | B Phone | C Email | D Image URL(s), "|"-separated | E Blood Group
#   F Facebook | G LinkedIn | H WhatsApp | I City (current location)
from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional

import requests

from reunion.core.errors import ConfigurationError, ParseError, UpstreamAPIError
from reunion.core.logging import get_logger
from reunion.schemas.media import ContactRecord

log = get_logger("sheets")

GVIZ_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:json"

# google.visualization.Query.setResponse({...});  (often preceded by /*O_o*/)
_ENVELOPE = re.compile(r"google\.visualization\.Query\.setResponse\(([\s\S]*)\);?\s*$")

FIELDS = ("name", "phone", "email", "images", "blood_group",
          "facebook", "linkedin", "whatsapp", "city")

# header label (lowercased, trimmed) -> field
HEADER_ALIASES: Dict[str, str] = {
    "name": "name", "full name": "name",
    "phone": "phone", "phone number": "phone", "mobile": "phone",
    "email": "email", "e-mail": "email", "email address": "email",
    "image": "images", "images": "images", "image url": "images", "image urls": "images",
    "image url (multiple urls separated by |)": "images",
    "photo": "images", "photos": "images",
    "blood group": "blood_group", "blood": "blood_group",
    "facebook": "facebook", "facebook profile": "facebook",
    "linkedin": "linkedin", "linkedin profile": "linkedin",
    "whatsapp": "whatsapp", "whatsapp number": "whatsapp",
    "city": "city", "current city": "city", "location": "city",
    "city (current location)": "city",
}


def unwrap_envelope(text: str) -> Dict[str, Any]:
    """Strip the setResponse(...) wrapper and parse the JSON inside."""
    m = _ENVELOPE.search(text or "")
    if not m or not m.group(1).strip():
        raise ParseError("Invalid response format from Google Sheets")
    try:
        data = json.loads(m.group(1))
    except ValueError as e:
        raise ParseError(f"Invalid JSON in Google Sheets response: {e}") from e
    if not isinstance(data, dict):
        raise ParseError("Invalid response format from Google Sheets")
    return data


def column_map(cols: List[Dict[str, Any]]) -> Dict[str, Optional[int]]:
    """
    field -> column index, built once per fetch.
    Recognised header labels win. A field whose header isn't recognised keeps
    its positional column from the layout above, unless a recognised header
    already claimed that column (then it reads as blank).
    """
    by_header: Dict[str, int] = {}
    for i, col in enumerate(cols or []):
        label = str((col or {}).get("label") or "").strip().lower()
        field = HEADER_ALIASES.get(label)
        if field and field not in by_header:
            by_header[field] = i
    claimed = set(by_header.values())
    out: Dict[str, Optional[int]] = {}
    for pos, field in enumerate(FIELDS):
        if field in by_header:
            out[field] = by_header[field]
        else:
            out[field] = None if pos in claimed else pos
    return out


def cell_text(cell: Optional[Dict[str, Any]]) -> str:
    """gviz cell -> trimmed string ('' for null). 1712345678.0 -> '1712345678'."""
    if not cell:
        return ""
    v = cell.get("v")
    if v is None:
        return ""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    return str(v).strip()


def split_images(raw: str) -> List[str]:
    return [u.strip() for u in (raw or "").split("|") if u.strip()]


def parse_sheet(data: Dict[str, Any]) -> List[ContactRecord]:
    """gviz payload -> contacts, in row order. Rows without a name are skipped."""
    if data.get("status") == "error":
        errors = data.get("errors") or [{}]
        msg = errors[0].get("detailed_message") or errors[0].get("message") or "unknown error"
        raise UpstreamAPIError(f"Google Sheets query error: {msg}")

    table = data.get("table") or {}
    cols = column_map(table.get("cols") or [])
    contacts: List[ContactRecord] = []

    for index, row in enumerate(table.get("rows") or []):
        cells = (row or {}).get("c") or []

        def value(field: str) -> str:
            i = cols[field]
            return cell_text(cells[i]) if i is not None and i < len(cells) else ""

        name = value("name")
        if not name:
            continue  # blank or header row

        images = split_images(value("images"))
        contacts.append(ContactRecord(
            id=f"contact-{index + 1}",
            name=name,
            email=value("email"),
            phone=value("phone"),
            image_url=images[0] if images else None,
            image_urls=images,
            blood_group=value("blood_group") or None,
            facebook=value("facebook") or None,
            linkedin=value("linkedin") or None,
            whatsapp=value("whatsapp") or None,
            city=value("city") or None,
        ))
    return contacts


def fetch_contacts(sheet_id: str, *, session=None, timeout: float = 30) -> List[ContactRecord]:
    """All contact rows of the sheet. Any failure raises; there are no partial results."""
    if not sheet_id:
        raise ConfigurationError("Google Sheet ID not configured.")

    own_session = session is None
    session = session or requests.Session()
    url = GVIZ_URL.format(sheet_id=sheet_id)
    try:
        resp = session.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise UpstreamAPIError(f"Could not reach Google Sheets: {e}") from e
    finally:
        if own_session:
            session.close()

    if not resp.ok:
        raise UpstreamAPIError(f"Failed to fetch sheet: {resp.status_code}", status=resp.status_code)

    contacts = parse_sheet(unwrap_envelope(resp.text))
    log.info("Sheets: %d contacts", len(contacts))
    return contacts


def search_contacts(contacts: List[ContactRecord], query: Optional[str]) -> List[ContactRecord]:
    """
    Directory search box: case-insensitive on name/email/blood group,
    plain substring on phone/whatsapp.
    """
    if not query:
        return list(contacts)
    q = query.lower()
    out = []
    for c in contacts:
        if (q in c.name.lower()
                or q in c.email.lower()
                or query in c.phone
                or (c.whatsapp and query in c.whatsapp)
                or (c.blood_group and q in c.blood_group.lower())):
            out.append(c)
    return out
