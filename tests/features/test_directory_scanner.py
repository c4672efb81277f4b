import os
from pathlib import Path

import pytest

from cgs_backend.features.index import DirectoryScanner, scan_directory
from cgs_backend.features.index import fs_walker
from cgs_backend.features.index.fs_walker import FileSystemWalker, is_supported_media
from cgs_backend.features.metadata.record import FileAttributes, ParameterRecord, empty_record
from cgs_backend.shared import ErrorCode, Result


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")
    return path


def _attrs(path: str) -> FileAttributes:
    return FileAttributes(
        name=os.path.basename(path),
        type="image/png",
        full_path=path,
        relative_path=os.path.basename(path),
        size=1,
        last_modified=1,
    )


class _FakeMetadata:
    """Records with a workflow for names containing "gen", empty ones otherwise."""

    def __init__(self):
        self.seen: list[str] = []

    async def get_record(self, file_path: str, root=None):
        self.seen.append(file_path)
        name = os.path.basename(file_path)
        if name.startswith("broken"):
            raise RuntimeError("decoder exploded")
        if name.startswith("denied"):
            return Result.Err(ErrorCode.EXIFTOOL_ERROR, "denied")
        if "gen" in name:
            return Result.Ok(ParameterRecord(source="ComfyUI", workflow="{}", file=_attrs(file_path)))
        return Result.Ok(empty_record(_attrs(file_path)), quality="none")


def _tree(root: Path) -> None:
    _touch(root / "gen_a.png")
    _touch(root / "plain.jpg")
    _touch(root / "notes.txt")
    _touch(root / "sub" / "gen_b.webp")
    _touch(root / "sub" / "deeper" / "gen_c.mp4")
    _touch(root / "sub" / "broken.png")
    _touch(root / "denied.jpeg")


@pytest.mark.asyncio
async def test_scan_returns_only_records_with_metadata(tmp_path: Path):
    _tree(tmp_path)
    fake = _FakeMetadata()
    res = await DirectoryScanner(metadata=fake, concurrency=2).scan(str(tmp_path))

    assert res.ok
    names = sorted(record.file.name for record in res.data)
    assert names == ["gen_a.png", "gen_b.webp", "gen_c.mp4"]
    assert res.meta["scanned"] == 6
    assert res.meta["with_metadata"] == 3
    assert res.meta["skipped_dirs"] == 0
    assert not any(path.endswith("notes.txt") for path in fake.seen)


@pytest.mark.asyncio
async def test_scan_skips_existing_paths(tmp_path: Path):
    _tree(tmp_path)
    fake = _FakeMetadata()
    existing = [str(tmp_path / "gen_a.png")]
    res = await scan_directory(str(tmp_path), existing_paths=existing, metadata=fake)

    assert res.ok
    assert "gen_a.png" not in {record.file.name for record in res.data}
    assert str(tmp_path / "gen_a.png") not in fake.seen
    assert res.meta["scanned"] == 5


@pytest.mark.asyncio
async def test_scan_missing_root_is_an_error(tmp_path: Path):
    res = await DirectoryScanner(metadata=_FakeMetadata()).scan(str(tmp_path / "nope"))
    assert not res.ok
    assert res.code == "NOT_FOUND"
    assert "Could not read directory" in res.error


def test_walker_skips_unreadable_subdirectories(monkeypatch, tmp_path: Path):
    _touch(tmp_path / "ok" / "a.png")
    _touch(tmp_path / "locked" / "b.png")
    real_scandir = os.scandir

    def _scandir(path):
        if str(path).endswith("locked"):
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(fs_walker.os, "scandir", _scandir)
    walker = FileSystemWalker()
    files = list(walker.iter_files(str(tmp_path)))
    assert [os.path.basename(f) for f in files] == ["a.png"]
    assert walker.skipped_dirs == 1


def test_walker_root_errors_propagate(tmp_path: Path):
    with pytest.raises(OSError):
        list(FileSystemWalker().iter_files(str(tmp_path / "missing")))


def test_walker_visits_in_name_order(tmp_path: Path):
    _touch(tmp_path / "z.png")
    _touch(tmp_path / "a" / "x.png")
    _touch(tmp_path / "a" / "deep" / "w.png")
    _touch(tmp_path / "b" / "y.png")
    _touch(tmp_path / "c" / "v.png")
    files = list(FileSystemWalker().iter_files(str(tmp_path)))
    rel = [os.path.relpath(f, tmp_path).replace(os.sep, "/") for f in files]
    assert rel == ["z.png", "a/x.png", "a/deep/w.png", "b/y.png", "c/v.png"]


def test_supported_media_extensions():
    assert is_supported_media("a.PNG")
    assert is_supported_media("clip.mov")
    assert not is_supported_media("a.gif")
    assert not is_supported_media("README")
