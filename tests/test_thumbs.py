from reunion.utils.thumbs import upscale_thumbnail

CONTENT = "https://drive.google.com/uc?id=abc&export=download"


def test_size_token_rewritten():
    out = upscale_thumbnail("https://lh3.googleusercontent.com/thumbnail?=s220", CONTENT)
    assert out == "https://lh3.googleusercontent.com/thumbnail?=s1200"


def test_embedded_size_token():
    out = upscale_thumbnail("https://lh3.googleusercontent.com/drive-storage/AJQWt=s220-c", CONTENT)
    assert "=s1200" in out
    assert "=s220" not in out


def test_custom_size():
    assert upscale_thumbnail("https://x/y=s220", CONTENT, size=640) == "https://x/y=s640"


def test_url_without_token_unchanged():
    url = "https://lh3.googleusercontent.com/d/abc=w720"
    assert upscale_thumbnail(url, CONTENT) == url


def test_missing_thumbnail_falls_back_to_content_url():
    assert upscale_thumbnail(None, CONTENT) == CONTENT
    assert upscale_thumbnail("", CONTENT) == CONTENT
