from scripts.reunion_fetch import human_bytes, shorten


def test_human_bytes():
    assert human_bytes(None) == ""
    assert human_bytes(0) == "0B"
    assert human_bytes(512) == "512B"
    assert human_bytes(2048) == "2.0KiB"
    assert human_bytes(5 * 1024 ** 3) == "5.0GiB"


def test_shorten_keeps_both_ends():
    assert shorten(None) == ""
    assert shorten("short.jpg") == "short.jpg"
    out = shorten("a" * 30 + "_tail.jpg", 20)
    assert len(out) == 20
    assert out.startswith("aaaa") and out.endswith("tail.jpg")
    assert "…" in out
