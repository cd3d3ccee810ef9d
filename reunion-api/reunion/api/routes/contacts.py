# reunion/api/routes/contacts.py
# GET /api/contacts: the contact directory (optionally filtered with ?q=).
from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from reunion.api.deps import get_session
from reunion.core.config import Settings, get_settings
from reunion.core.errors import ConfigurationError
from reunion.core.logging import get_logger
from reunion.schemas.media import ContactsResponse
from reunion.services.sheets import fetch_contacts, search_contacts

api_router = APIRouter(tags=["contacts"])
log = get_logger("api.contacts")


@api_router.get("/contacts", response_model=ContactsResponse, response_model_exclude_none=True)
def list_contacts(
    response: Response,
    q: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    session=Depends(get_session),
):
    try:
        contacts = fetch_contacts(settings.sheet_id, session=session, timeout=settings.timeout)
    except ConfigurationError as e:
        log.error("Contacts unavailable: %s", e.message)
        return JSONResponse({"success": False, "error": e.message, "contacts": []}, status_code=500)
    except Exception:
        log.exception("Failed to fetch contacts")
        return JSONResponse(
            {"success": False, "error": "Failed to fetch contacts from Google Sheets", "contacts": []},
            status_code=500,
        )

    contacts = search_contacts(contacts, q)
    response.headers["Cache-Control"] = settings.cache_control["contacts"]
    return ContactsResponse(success=True, contacts=contacts, count=len(contacts))
