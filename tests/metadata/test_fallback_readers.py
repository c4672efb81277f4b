import json
from pathlib import Path

from PIL import Image
from PIL.PngImagePlugin import PngInfo

from cgs_backend.features.metadata.fallback_readers import read_image_size, read_png_text_chunk
from cgs_backend.features.metadata.file_stat import coerce_dimension, media_type, parse_duration, stat_media_file

GRAPH_JSON = json.dumps({"1": {"class_type": "KSampler", "inputs": {"seed": 3}}})


def _write_png(path: Path, size=(8, 4), text: dict | None = None) -> Path:
    info = PngInfo()
    for key, value in (text or {}).items():
        info.add_text(key, value)
    Image.new("RGB", size, (255, 0, 0)).save(path, format="PNG", pnginfo=info)
    return path


def test_png_prompt_chunk_roundtrip(tmp_path: Path):
    png = _write_png(tmp_path / "a.png", text={"prompt": GRAPH_JSON, "workflow": "{}"})
    assert read_png_text_chunk(str(png)) == GRAPH_JSON
    assert read_png_text_chunk(str(png), "WORKFLOW") == "{}"
    assert read_png_text_chunk(str(png), "missing") is None


def test_png_chunk_reader_ignores_other_formats(tmp_path: Path):
    jpg = tmp_path / "a.jpg"
    Image.new("RGB", (4, 4)).save(jpg, format="JPEG")
    assert read_png_text_chunk(str(jpg)) is None

    junk = tmp_path / "junk.png"
    junk.write_bytes(b"not an image")
    assert read_png_text_chunk(str(junk)) is None
    assert read_png_text_chunk(str(tmp_path / "missing.png")) is None


def test_read_image_size(tmp_path: Path):
    png = _write_png(tmp_path / "a.png", size=(16, 9))
    assert read_image_size(str(png)) == (16, 9)
    assert read_image_size(str(tmp_path / "missing.png")) == (0, 0)


def test_stat_image_uses_pillow_dimensions(tmp_path: Path):
    sub = tmp_path / "sub"
    sub.mkdir()
    png = _write_png(sub / "a.png", size=(20, 10))

    res = stat_media_file(str(png), root=str(tmp_path))
    assert res.ok
    attrs = res.data
    assert attrs.name == "a.png"
    assert attrs.type == "image/png"
    assert attrs.relative_path == str(Path("sub") / "a.png")
    assert attrs.size == png.stat().st_size
    assert attrs.last_modified == int(png.stat().st_mtime * 1000)
    assert (attrs.width, attrs.height) == (20, 10)
    assert not attrs.is_video
    assert "frameRate" not in attrs.to_dict()


def test_stat_prefers_tag_dimensions(tmp_path: Path):
    png = _write_png(tmp_path / "a.png", size=(20, 10))
    attrs = stat_media_file(str(png), tags={"ImageWidth": "640 px", "ImageHeight": 480}).data
    assert (attrs.width, attrs.height) == (640, 480)
    assert attrs.relative_path == "a.png"


def test_stat_video_reads_timing_tags(tmp_path: Path):
    clip = tmp_path / "clip.mp4"
    clip.write_bytes(b"\x00" * 32)
    tags = {"ImageWidth": 1920, "ImageHeight": 1080, "VideoFrameRate": "29.97", "Duration": "0:01:05"}
    attrs = stat_media_file(str(clip), root=str(tmp_path), tags=tags).data
    assert attrs.is_video
    assert attrs.type == "video/mp4"
    assert attrs.frame_rate == 29.97
    assert attrs.duration == 65.0
    wire = attrs.to_dict()
    assert wire["frameRate"] == 29.97
    assert wire["duration"] == 65.0
    assert wire["fullPath"] == str(clip)


def test_stat_missing_file(tmp_path: Path):
    res = stat_media_file(str(tmp_path / "gone.png"))
    assert not res.ok
    assert res.code == "NOT_FOUND"


def test_small_helpers():
    assert coerce_dimension("512px") == 512
    assert coerce_dimension(0) is None
    assert coerce_dimension("wide") is None
    assert parse_duration(3) == 3.0
    assert parse_duration("12.5 s") == 12.5
    assert parse_duration(None) is None
    assert media_type("x.WEBM") == "video/webm"
    assert media_type("x.jpeg") == "image/jpeg"
