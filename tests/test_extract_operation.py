"""提取操作与组合操作的测试。"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from PIL import Image

from acextract.catalog.base import AssetsCatalog, MemoryCatalog, MemoryImageSet, MemoryNamedImage
from acextract.core.exceptions import OutputPathIsNotDirectoryError
from acextract.core.models import BatchResult, FileOutcome
from acextract.processing.extract import ExtractOperation
from acextract.processing.operation import CompoundOperation, Operation


def _image(color: str | tuple = "blue", mode: str = "RGBA") -> Image.Image:
    return Image.new(mode, (8, 8), color)


def _catalog(*named_images: MemoryNamedImage) -> MemoryCatalog:
    return MemoryCatalog(image_sets=[MemoryImageSet(name="set", named_images=list(named_images))])


def _run(output: Path, catalog: MemoryCatalog, mode: str | None = None, **kwargs) -> BatchResult:
    result = BatchResult()
    ExtractOperation(output, mode=mode, reporter=result.record, **kwargs).read(catalog)
    return result


def test_normal_mode_writes_png_files(tmp_path: Path) -> None:
    output = tmp_path / "nested" / "output"
    catalog = _catalog(
        MemoryNamedImage(name="icon.png", image=_image()),
        MemoryNamedImage(name="icon@2x.png", image=_image("red")),
    )

    result = _run(output, catalog)

    assert len(result.succeeded) == 2
    assert not result.failed
    with Image.open(output / "icon@2x.png") as img:
        assert img.format == "PNG"
        assert img.size == (8, 8)
    assert not (output / "icon.imageset").exists()


def test_png_encoding_does_not_depend_on_extension(tmp_path: Path) -> None:
    catalog = _catalog(MemoryNamedImage(name="photo", image=_image(mode="CMYK", color=(255, 0, 0, 0))))

    _run(tmp_path, catalog)

    with Image.open(tmp_path / "photo") as img:
        assert img.format == "PNG"


def test_output_path_pointing_to_file_is_fatal(tmp_path: Path) -> None:
    output = tmp_path / "taken"
    output.write_text("file")
    outcomes: list[FileOutcome] = []
    catalog = _catalog(MemoryNamedImage(name="icon.png", image=_image()))

    with pytest.raises(OutputPathIsNotDirectoryError):
        ExtractOperation(output, reporter=outcomes.append).read(catalog)

    assert outcomes == []


def test_existing_output_directory_is_accepted(tmp_path: Path) -> None:
    catalog = _catalog(MemoryNamedImage(name="icon.png", image=_image()))

    _run(tmp_path, catalog)
    result = _run(tmp_path, catalog)

    assert len(result.succeeded) == 1


def test_tilde_is_expanded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    operation = ExtractOperation("~/out")

    assert operation.output_path == tmp_path / "out"


def test_unknown_mode_falls_back_to_normal(tmp_path: Path) -> None:
    assert ExtractOperation(tmp_path, mode="bogus").mode == "normal"
    assert ExtractOperation(tmp_path).mode == "normal"
    assert ExtractOperation(tmp_path, mode="dir").mode == "dir"


def test_missing_data_is_isolated(tmp_path: Path) -> None:
    catalog = _catalog(
        MemoryNamedImage(name="a.png", image=_image()),
        MemoryNamedImage(name="broken.png"),
        MemoryNamedImage(name="b.png", image=_image()),
        MemoryNamedImage(name="c.png", image=_image()),
    )

    result = _run(tmp_path, catalog)

    assert [o.name for o in result.succeeded] == ["a.png", "b.png", "c.png"]
    assert len(result.failed) == 1
    assert result.failed[0].name == "broken.png"
    assert result.failed[0].status == "error-missing-data"
    assert not (tmp_path / "broken.png").exists()
    assert (tmp_path / "c.png").exists()


def test_vector_rendition_is_skipped_by_default(tmp_path: Path) -> None:
    catalog = _catalog(MemoryNamedImage(name="glyph.pdf", vector=b"%PDF-1.4"))

    result = _run(tmp_path, catalog)

    assert len(result.skipped) == 1
    assert result.skipped[0].status == "skipped-vector"
    assert not result.failed
    assert not (tmp_path / "glyph.pdf").exists()


def test_vector_rendition_fails_with_fail_policy(tmp_path: Path) -> None:
    catalog = _catalog(
        MemoryNamedImage(name="glyph.pdf", vector=b"%PDF-1.4"),
        MemoryNamedImage(name="icon.png", image=_image()),
    )

    result = _run(tmp_path, catalog, vector_policy="fail")

    assert [o.status for o in result.failed] == ["error-vector"]
    assert len(result.succeeded) == 1


def test_dir_mode_builds_imageset(tmp_path: Path) -> None:
    catalog = _catalog(
        MemoryNamedImage(name="logo.png", image=_image()),
        MemoryNamedImage(name="logo@3x.png", image=_image()),
    )

    result = _run(tmp_path, catalog, mode="dir")

    directory = tmp_path / "logo.imageset"
    assert {o.output_path for o in result.succeeded} == {directory / "logo.png", directory / "logo@3x.png"}
    assert (directory / "logo.png").exists()
    assert (directory / "logo@3x.png").exists()
    data = json.loads((directory / "Contents.json").read_text(encoding="utf-8"))
    assert [img.get("filename") for img in data["images"]] == ["logo.png", None, "logo@3x.png"]
    assert data["info"] == {"author": "xcode", "version": 1}


def test_dir_mode_merges_existing_contents(tmp_path: Path) -> None:
    directory = tmp_path / "logo.imageset"
    directory.mkdir()
    existing = {
        "images": [
            {"filename": "logo.png", "idiom": "universal", "scale": "1x"},
            {"idiom": "universal", "scale": "2x"},
            {"idiom": "universal", "scale": "3x"},
        ],
        "info": {"author": "xcode", "version": 1},
    }
    (directory / "Contents.json").write_text(json.dumps(existing), encoding="utf-8")

    _run(tmp_path, _catalog(MemoryNamedImage(name="logo@2x.png", image=_image())), mode="dir")

    data = json.loads((directory / "Contents.json").read_text(encoding="utf-8"))
    assert data["images"][0]["filename"] == "logo.png"
    assert data["images"][1]["filename"] == "logo@2x.png"
    assert "filename" not in data["images"][2]


def test_dir_mode_invalid_contents_is_isolated(tmp_path: Path) -> None:
    broken = tmp_path / "bad.imageset"
    broken.mkdir()
    (broken / "Contents.json").write_text('{"images": [{"scale": "abc"}]}', encoding="utf-8")
    catalog = _catalog(
        MemoryNamedImage(name="bad@2x.png", image=_image()),
        MemoryNamedImage(name="good.png", image=_image()),
    )

    result = _run(tmp_path, catalog, mode="dir")

    assert [o.status for o in result.failed] == ["error-contents"]
    assert (tmp_path / "good.imageset" / "good.png").exists()


class _RecordingOperation(Operation):
    def __init__(self, calls: list[str], label: str, fail: bool = False) -> None:
        self.calls = calls
        self.label = label
        self.fail = fail

    def read(self, catalog: AssetsCatalog) -> None:
        self.calls.append(self.label)
        if self.fail:
            raise RuntimeError(self.label)


def test_compound_operation_runs_in_order() -> None:
    calls: list[str] = []
    compound = CompoundOperation([_RecordingOperation(calls, "a"), _RecordingOperation(calls, "b")])

    assert compound.read(MemoryCatalog()) is None
    assert calls == ["a", "b"]


def test_compound_operation_stops_at_first_failure(tmp_path: Path) -> None:
    calls: list[str] = []
    blocker = tmp_path / "file"
    blocker.write_text("x")
    compound = CompoundOperation(
        [
            _RecordingOperation(calls, "first"),
            ExtractOperation(blocker),
            _RecordingOperation(calls, "never"),
        ]
    )

    with pytest.raises(OutputPathIsNotDirectoryError):
        compound.read(_catalog(MemoryNamedImage(name="a.png", image=_image())))

    assert calls == ["first"]


class _UnreadableImage:
    name = "unreadable.png"

    def raster_image(self) -> Image.Image:
        raise OSError("truncated rendition")

    def vector_data(self) -> None:
        return None


def test_raster_accessor_error_is_isolated(tmp_path: Path) -> None:
    catalog = MemoryCatalog(
        image_sets=[
            MemoryImageSet(name="bad", named_images=[_UnreadableImage()]),  # type: ignore[list-item]
            MemoryImageSet(name="good", named_images=[MemoryNamedImage(name="good.png", image=_image())]),
        ]
    )

    result = _run(tmp_path, catalog)

    assert [(o.name, o.status) for o in result.failed] == [("unreadable.png", "error-save")]
    assert [o.name for o in result.succeeded] == ["good.png"]
    assert (tmp_path / "good.png").exists()


def test_png_write_error_is_isolated(tmp_path: Path) -> None:
    (tmp_path / "blocked.png").mkdir()
    catalog = _catalog(
        MemoryNamedImage(name="blocked.png", image=_image()),
        MemoryNamedImage(name="after.png", image=_image()),
    )

    result = _run(tmp_path, catalog)

    assert [(o.name, o.status) for o in result.failed] == [("blocked.png", "error-save")]
    assert [o.name for o in result.succeeded] == ["after.png"]
    assert (tmp_path / "after.png").exists()


def test_contents_write_error_is_isolated(tmp_path: Path) -> None:
    (tmp_path / "logo.imageset").write_text("not a directory")
    catalog = _catalog(
        MemoryNamedImage(name="logo@2x.png", image=_image()),
        MemoryNamedImage(name="arrow.png", image=_image()),
    )

    result = _run(tmp_path, catalog, mode="dir")

    assert [(o.name, o.status) for o in result.failed] == [("logo@2x.png", "error-save")]
    assert [o.name for o in result.succeeded] == ["arrow.png"]
    assert (tmp_path / "arrow.imageset" / "arrow.png").exists()


def test_successful_items_are_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="acextract.processing.extract")

    _run(tmp_path, _catalog(MemoryNamedImage(name="icon.png", image=_image())))

    assert "提取完成 icon.png" in caplog.text
