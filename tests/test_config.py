from pathlib import Path

from reunion.core.config import build_settings, load_config_toml, merge_config


def test_defaults_when_nothing_configured():
    s = build_settings({}, environ={})
    assert s.api_key == "" and s.drive_folder_id == "" and s.sheet_id == ""
    assert s.page_size == 100
    assert s.thumb_size == 1200
    assert s.rate_limit == 100 and s.rate_window_seconds == 60
    assert s.media_only is False
    assert s.missing() == ["GOOGLE_API_KEY", "GOOGLE_DRIVE_FOLDER_ID", "GOOGLE_SHEET_ID"]


def test_env_overrides_toml():
    cfg = {"google": {"api_key": "from-toml", "sheet_id": "sheet-toml", "page_size": 50}}
    env = {"GOOGLE_API_KEY": "from-env", "GOOGLE_DRIVE_FOLDER_ID": "folder-env", "GOOGLE_SHEET_ID": "  "}
    merged = merge_config(cfg, env)
    assert merged["google"]["api_key"] == "from-env"
    assert merged["google"]["drive_folder_id"] == "folder-env"
    # blank env values don't clobber TOML
    assert merged["google"]["sheet_id"] == "sheet-toml"
    assert merged["google"]["page_size"] == 50
    # untouched sections keep defaults
    assert merged["ratelimit"]["limit"] == 100


def test_toml_file_and_relative_paths(tmp_path, monkeypatch):
    (tmp_path / "reunion.toml").write_text(
        '[google]\nsheet_id = "abc"\nmedia_only = true\n'
        '[ratelimit]\nlimit = 5\n'
        '[conversations]\npath = "data/moments.json"\n'
        '[http]\nallowed_origins = []\n',
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("REUNION_CONFIG", raising=False)
    for var in ("GOOGLE_API_KEY", "GOOGLE_DRIVE_FOLDER_ID", "GOOGLE_SHEET_ID", "REUNION_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    assert load_config_toml()["google"]["sheet_id"] == "abc"
    s = build_settings()
    assert s.sheet_id == "abc"
    assert s.media_only is True
    assert s.rate_limit == 5
    assert s.allowed_origins == []
    assert s.conversations_path.resolve() == (Path(tmp_path) / "data" / "moments.json").resolve()


def test_repr_hides_api_key():
    s = build_settings({"google": {"api_key": "secret"}}, environ={})
    assert "secret" not in repr(s)
