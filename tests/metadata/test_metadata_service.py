import json
from pathlib import Path

import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo

from cgs_backend.features.metadata.service import MetadataService
from cgs_backend.shared import ErrorCode, Result

GRAPH = {
    "1": {"class_type": "KSampler", "inputs": {"seed": 11, "positive": ["2", 0]}},
    "2": {"class_type": "CLIPTextEncode", "inputs": {"text": "a fox"}},
}


class _FakeExifTool:
    def __init__(self, result: Result):
        self._result = result
        self.calls: list[str] = []

    def is_available(self) -> bool:
        return self._result.code != ErrorCode.TOOL_MISSING.value

    async def aread(self, path: str) -> Result:
        self.calls.append(path)
        return self._result


def _png_with_prompt(path: Path) -> Path:
    info = PngInfo()
    info.add_text("prompt", json.dumps(GRAPH))
    Image.new("RGB", (12, 6)).save(path, format="PNG", pnginfo=info)
    return path


@pytest.mark.asyncio
async def test_service_reads_png_chunk_and_file_attributes(tmp_path: Path):
    png = _png_with_prompt(tmp_path / "fox.png")
    service = MetadataService(exiftool=_FakeExifTool(Result.Ok({"ImageWidth": 12, "ImageHeight": 6})))

    res = await service.get_record(str(png), root=str(tmp_path))
    assert res.ok
    assert res.meta["quality"] == "full"
    assert res.meta["source_key"] == "png:prompt"
    record = res.data
    assert record.prompt == "a fox"
    assert record.seed == "11"
    assert record.file.name == "fox.png"
    assert (record.file.width, record.file.height) == (12, 6)


@pytest.mark.asyncio
async def test_service_degrades_when_exiftool_missing(tmp_path: Path):
    png = _png_with_prompt(tmp_path / "fox.png")
    service = MetadataService(exiftool=_FakeExifTool(Result.Err(ErrorCode.TOOL_MISSING, "missing")))

    res = await service.get_record(str(png))
    assert res.ok
    assert res.data.prompt == "a fox"
    assert (res.data.file.width, res.data.file.height) == (12, 6)


@pytest.mark.asyncio
async def test_service_propagates_tag_reader_failure(tmp_path: Path):
    png = _png_with_prompt(tmp_path / "fox.png")
    service = MetadataService(exiftool=_FakeExifTool(Result.Err(ErrorCode.EXIFTOOL_ERROR, "boom")))

    res = await service.get_record(str(png))
    assert not res.ok
    assert res.code == "EXIFTOOL_ERROR"


@pytest.mark.asyncio
async def test_service_rejects_unsupported_files(tmp_path: Path):
    fake = _FakeExifTool(Result.Ok({}))
    service = MetadataService(exiftool=fake)
    res = await service.get_record(str(tmp_path / "notes.txt"))
    assert res.code == "INVALID_INPUT"
    assert fake.calls == []


@pytest.mark.asyncio
async def test_service_reports_stat_failure(tmp_path: Path):
    service = MetadataService(exiftool=_FakeExifTool(Result.Ok({"Parameters": "x\nSteps: 2"})))
    res = await service.get_record(str(tmp_path / "gone.jpg"))
    assert not res.ok
    assert res.code == "NOT_FOUND"


@pytest.mark.asyncio
async def test_service_text_payload_from_tags(tmp_path: Path):
    jpg = tmp_path / "shot.jpg"
    Image.new("RGB", (3, 2)).save(jpg, format="JPEG")
    tags = {"UserComment": "a boat\nSteps: 8, Size: 300x200"}
    service = MetadataService(exiftool=_FakeExifTool(Result.Ok(tags)))

    res = await service.get_record(str(jpg))
    assert res.meta["quality"] == "partial"
    assert res.data.prompt == "a boat"
    assert res.data.steps == "8"
    # Pillow dimensions win over the parsed Size
    assert (res.data.file.width, res.data.file.height) == (3, 2)
