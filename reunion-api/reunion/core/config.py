# reunion/core/config.py
# Loads Reunion settings from a TOML file (defaults + overrides) and the environment.
# - Reads REUNION_CONFIG or falls back to ./reunion.toml, parent dirs, then reunion/reunion.toml
# - Secrets/identifiers (API key, folder id, sheet id) come from env vars / .env and win over TOML
# - Exposes SETTINGS + get_settings() (FastAPI dependency, overridable in tests)

from __future__ import annotations
from pathlib import Path
import os
from typing import Dict, List, Optional
import tomli as tomllib  # py3.11+: tomllib in stdlib; using tomli for compatibility
from dotenv import load_dotenv


# -------------------- Defaults (used if TOML omits keys) --------------------
_DEFAULTS = {
    "google": {
        "api_key": "",
        "drive_folder_id": "",
        "sheet_id": "",
        "page_size": 100,          # Drive files.list pageSize
        "thumb_size": 1200,        # =s<N> requested for gallery thumbnails
        "media_only": False,       # True => constrain the Drive query to image/ + video/ MIME types
        "timeout": 30,             # seconds, per upstream request
    },
    "ratelimit": {
        "limit": 100,              # requests per window per client
        "window_seconds": 60,
    },
    "http": {
        # Origin guard on /api/photos: substrings an Origin header must contain. [] disables it.
        "allowed_origins": ["localhost", "127.0.0.1"],
        # CORS (allow Next/Vite dev)
        "cors_origins": ["http://localhost:3000", "http://127.0.0.1:3000"],
    },
    "cache": {
        "contacts": "public, s-maxage=60, stale-while-revalidate=60",
        "photos":   "public, max-age=60, s-maxage=300, stale-while-revalidate=600",
        "stats":    "public, max-age=120, s-maxage=300, stale-while-revalidate=600",
        "conversations": "public, max-age=3600",
    },
    "conversations": {
        "path": "data/funny_conversations.json",   # resolved under the config file's dir if relative
    },
    "logging": {
        "level": "INFO",
        "json": False,
    },
}

# env var -> (section, key)
_ENV_OVERRIDES = {
    "GOOGLE_API_KEY":         ("google", "api_key"),
    "GOOGLE_DRIVE_FOLDER_ID": ("google", "drive_folder_id"),
    "GOOGLE_SHEET_ID":        ("google", "sheet_id"),
    "REUNION_LOG_LEVEL":      ("logging", "level"),
}


# -------------------- Read + merge TOML --------------------

def _find_config_path() -> Path | None:
    """Find reunion.toml without user input.
    Priority:
      1) REUNION_CONFIG
      2) ./reunion.toml (CWD)
      3) ascend parents from CWD looking for reunion.toml
      4) reunion/reunion.toml (next to the package)
    """
    cfg_env = os.getenv("REUNION_CONFIG")
    if cfg_env:
        p = Path(cfg_env).expanduser()
        if p.exists():
            return p

    cur = Path.cwd()
    while True:
        candidate = cur / "reunion.toml"
        if candidate.exists():
            return candidate
        if cur.parent == cur:
            break  # reached filesystem root
        cur = cur.parent

    pkg_default = Path(__file__).resolve().parents[1] / "reunion.toml"
    if pkg_default.exists():
        return pkg_default

    return None


def load_config_toml(path: Optional[Path] = None) -> dict:
    """Load TOML from `path` (or the best match) and return {} if not found."""
    path = path or _find_config_path()
    if path and path.exists():
        with path.open("rb") as f:
            return tomllib.load(f)
    return {}


def merge_config(cfg: dict, environ: Optional[Dict[str, str]] = None) -> dict:
    """Merge TOML sections over defaults, then apply non-empty env overrides."""
    environ = os.environ if environ is None else environ
    merged = {section: {**defaults, **cfg.get(section, {})} for section, defaults in _DEFAULTS.items()}
    for var, (section, key) in _ENV_OVERRIDES.items():
        val = (environ.get(var) or "").strip()
        if val:
            merged[section][key] = val
    return merged


# -------------------- Settings container --------------------
class Settings:
    """
    Lightweight container for everything the API reads at request time.
    Identifiers are kept as plain strings; empty string means "not configured".
    """
    def __init__(self, cfg: dict, base_dir: Optional[Path] = None) -> None:
        g = cfg["google"]
        self.api_key: str         = str(g.get("api_key") or "").strip()
        self.drive_folder_id: str = str(g.get("drive_folder_id") or "").strip()
        self.sheet_id: str        = str(g.get("sheet_id") or "").strip()
        self.page_size: int       = int(g.get("page_size", 100))
        self.thumb_size: int      = int(g.get("thumb_size", 1200))
        self.media_only: bool     = bool(g.get("media_only", False))
        self.timeout: float       = float(g.get("timeout", 30))

        rl = cfg["ratelimit"]
        self.rate_limit: int            = int(rl.get("limit", 100))
        self.rate_window_seconds: float = float(rl.get("window_seconds", 60))

        h = cfg["http"]
        self.allowed_origins: List[str] = [str(o) for o in h.get("allowed_origins", [])]
        self.cors_origins: List[str]    = [str(o) for o in h.get("cors_origins", [])]

        self.cache_control: Dict[str, str] = {k: str(v) for k, v in cfg["cache"].items()}

        conv = Path(cfg["conversations"]["path"]).expanduser()
        base = base_dir or Path.cwd()
        self.conversations_path: Path = conv if conv.is_absolute() else (base / conv)

        lg = cfg["logging"]
        self.log_level: str  = str(lg.get("level", "INFO")).upper()
        self.json_logs: bool = bool(lg.get("json", False))

    def missing(self) -> List[str]:
        """Names of required settings that are empty."""
        out = []
        if not self.api_key:         out.append("GOOGLE_API_KEY")
        if not self.drive_folder_id: out.append("GOOGLE_DRIVE_FOLDER_ID")
        if not self.sheet_id:        out.append("GOOGLE_SHEET_ID")
        return out

    def __repr__(self) -> str:
        return (
            f"Settings(api_key={'***' if self.api_key else ''}, "
            f"drive_folder_id={self.drive_folder_id}, sheet_id={self.sheet_id}, "
            f"page_size={self.page_size}, thumb_size={self.thumb_size}, media_only={self.media_only}, "
            f"rate_limit={self.rate_limit}/{self.rate_window_seconds}s, "
            f"allowed_origins={self.allowed_origins})"
        )


def build_settings(cfg: Optional[dict] = None, environ: Optional[Dict[str, str]] = None) -> Settings:
    """Build Settings from a raw TOML dict (or the discovered file) + environment."""
    path = None
    if cfg is None:
        path = _find_config_path()
        cfg = load_config_toml(path)
    base_dir = path.parent if path else None
    return Settings(merge_config(cfg, environ), base_dir=base_dir)


load_dotenv()
SETTINGS = build_settings()


def get_settings() -> Settings:
    """FastAPI dependency; tests swap it via app.dependency_overrides."""
    return SETTINGS
