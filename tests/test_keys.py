import re

import pytest

from upload_gateway.utils.keys import build_object_key, sanitize_filename

SAFE_RE = re.compile(r"^[a-zA-Z0-9._-]+$")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("clip.mp4", "clip.mp4"),
        ("my clip (1).mp4", "my_clip__1_.mp4"),
        ("../../etc/passwd", ".._.._etc_passwd"),
        ("vidéo été.mov", "vid_o__t_.mov"),
        ("a/b\\c?d#e.webm", "a_b_c_d_e.webm"),
    ],
)
def test_sanitize_filename(raw, expected):
    assert sanitize_filename(raw) == expected
    assert SAFE_RE.match(sanitize_filename(raw))


@pytest.mark.parametrize("raw", ["clip.mp4", "my clip (1).mp4", "ünïcødé?.png", "  spaced  .txt"])
def test_sanitize_is_idempotent(raw):
    once = sanitize_filename(raw)
    assert sanitize_filename(once) == once


def test_build_object_key_shape():
    key = build_object_key("holiday video.mp4")
    assert re.match(r"^uploads/\d{13}-[0-9a-f]{8}-holiday_video\.mp4$", key)


def test_build_object_key_custom_prefix():
    assert build_object_key("a.png", prefix="gallery/").startswith("gallery/")


def test_build_object_key_is_unique_for_same_filename():
    keys = {build_object_key("same.mp4") for _ in range(200)}
    assert len(keys) == 200


def test_build_object_key_rejects_blank_filename():
    with pytest.raises(ValueError):
        build_object_key("   ")
