import pytest
import requests

from reunion.core.errors import ConfigurationError, EmptyResultError, UpstreamAPIError
from reunion.services.drive import build_query, fetch_media, media_kind, to_media_item


def _page(files, token=None):
    body = {"files": files}
    if token:
        body["nextPageToken"] = token
    return body


def test_pagination_aggregates_every_page(fake_session, fake_response, make_drive_file):
    pages = [
        _page([make_drive_file(i) for i in range(0, 100)], "P2"),
        _page([make_drive_file(i) for i in range(100, 200)], "P3"),
        _page([make_drive_file(i) for i in range(200, 240)]),
    ]
    s = fake_session({"googleapis.com/drive": [fake_response(body=p) for p in pages]})

    items = fetch_media("key", "folder", session=s)

    assert len(items) == 240
    assert len({m.id for m in items}) == 240
    assert len(s.calls) == 3
    assert "pageToken" not in s.calls[0][1]
    assert s.calls[1][1]["pageToken"] == "P2"
    assert s.calls[2][1]["pageToken"] == "P3"
    assert [m.id for m in items[:2]] == ["file-0", "file-1"]


def test_query_and_projection_sent(fake_session, fake_response, make_drive_file):
    s = fake_session({"drive": [fake_response(body=_page([make_drive_file(1)]))]})
    fetch_media("key", "folder-x", session=s, page_size=50)
    params = s.calls[0][1]
    assert params["q"] == "'folder-x' in parents and trashed=false"
    assert params["key"] == "key"
    assert params["pageSize"] == 50
    assert "nextPageToken" in params["fields"]
    assert "videoMediaMetadata" in params["fields"]


def test_build_query_media_only():
    q = build_query("abc", media_only=True)
    assert q.startswith("'abc' in parents and trashed=false and (")
    assert "mimeType contains 'image/'" in q and "mimeType contains 'video/'" in q


def test_media_kind():
    assert media_kind("image/heic") == "photo"
    assert media_kind("video/mp4") == "video"
    assert media_kind("application/pdf") is None
    assert media_kind(None) is None


def test_only_non_media_files_is_empty_result(fake_session, fake_response, make_drive_file):
    files = [make_drive_file(1, mime="application/pdf"), make_drive_file(2, mime="text/plain")]
    s = fake_session({"drive": [fake_response(body=_page(files))]})
    with pytest.raises(EmptyResultError):
        fetch_media("key", "folder", session=s)


def test_first_page_failure_is_fatal(fake_session, fake_response):
    err = {"error": {"code": 403, "message": "The caller does not have permission"}}
    s = fake_session({"drive": [fake_response(status=403, body=err, reason="Forbidden")]})
    with pytest.raises(UpstreamAPIError) as ei:
        fetch_media("key", "folder", session=s)
    assert ei.value.status == 403
    assert "The caller does not have permission" in ei.value.message


def test_first_page_transport_error(fake_session):
    s = fake_session({"drive": [requests.ConnectionError("boom")]})
    with pytest.raises(UpstreamAPIError) as ei:
        fetch_media("key", "folder", session=s)
    assert ei.value.status is None
    assert ei.value.status_code == 500


def test_later_page_failure_keeps_partial_results(fake_session, fake_response, make_drive_file):
    s = fake_session({"drive": [
        fake_response(body=_page([make_drive_file(i) for i in range(100)], "P2")),
        fake_response(status=500, text="oops", reason="Internal Server Error"),
    ]})
    items = fetch_media("key", "folder", session=s)
    assert len(items) == 100
    assert len(s.calls) == 2


def test_duplicate_ids_across_pages_are_dropped(fake_session, fake_response, make_drive_file):
    s = fake_session({"drive": [
        fake_response(body=_page([make_drive_file(1), make_drive_file(2)], "P2")),
        fake_response(body=_page([make_drive_file(2), make_drive_file(3)])),
    ]})
    items = fetch_media("key", "folder", session=s)
    assert [m.id for m in items] == ["file-1", "file-2", "file-3"]


def test_missing_configuration(fake_session):
    s = fake_session({})
    with pytest.raises(ConfigurationError):
        fetch_media("", "folder", session=s)
    with pytest.raises(ConfigurationError):
        fetch_media("key", "", session=s)
    assert s.calls == []


def test_video_projection(make_drive_file):
    f = make_drive_file(
        7, mime="video/mp4", size="123456",
        videoMediaMetadata={"width": 1920, "height": 1080, "durationMillis": "65432"},
        imageMediaMetadata={"width": 1, "height": 1},
    )
    item = to_media_item(f)
    assert item.kind == "video"
    assert (item.width, item.height) == (1920, 1080)
    assert item.video_duration_seconds == 65
    assert item.size_bytes == 123456
    assert item.thumbnail_url.endswith("=s1200")


def test_photo_projection_without_thumbnail_or_size(make_drive_file):
    f = make_drive_file(3, imageMediaMetadata={"width": 4000, "height": 3000})
    del f["thumbnailLink"]
    del f["size"]
    item = to_media_item(f)
    assert item.kind == "photo"
    assert item.thumbnail_url == f["webContentLink"]
    assert item.size_bytes == 0
    assert item.video_duration_seconds is None
    assert (item.width, item.height) == (4000, 3000)


def test_non_media_projection_is_none(make_drive_file):
    assert to_media_item(make_drive_file(1, mime="application/vnd.google-apps.folder")) is None
