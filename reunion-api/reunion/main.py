# reunion/main.py: only app wiring, no endpoints here.
#
# How to run (from repo root):
#   pip install -e .
#   uvicorn reunion.main:app --reload --port 8000
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# import routers
from reunion.api.routes import contacts, conversations, health, photos, stats
from reunion.core.config import SETTINGS
from reunion.core.errors import ReunionError
from reunion.core.logging import setup_logging

setup_logging(SETTINGS.log_level, SETTINGS.json_logs)

app = FastAPI(title="Reunion API", version="0.1")

# CORS (allow the web front-end in dev)
app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# Errors leave the API as {"error": "..."} with the matching status.
@app.exception_handler(ReunionError)
async def reunion_error_handler(request: Request, exc: ReunionError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


# Unparseable query params (limit=abc, shuffle=maybe) are a 400 like the other bad-param checks.
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(p) for p in first.get("loc", ()) if p not in ("query", "path", "header")]
    msg = first.get("msg", "Invalid request")
    return JSONResponse({"error": f"{'.'.join(loc)}: {msg}" if loc else msg}, status_code=400)


# API routers
app.include_router(contacts.api_router, prefix="/api")
app.include_router(photos.api_router, prefix="/api")
app.include_router(stats.api_router, prefix="/api")
app.include_router(conversations.api_router, prefix="/api")
app.include_router(health.api_router, prefix="/api")
