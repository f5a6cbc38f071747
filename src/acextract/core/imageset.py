"""``.imageset`` 目录与 Contents.json 描述文件。

同一逻辑图片的 1x/2x/3x 资源会被依次写入同一个 ``<name>.imageset`` 目录，
每次写入都会读取已有的 Contents.json，更新对应倍率的一项后整体重写。
读改写之间没有加锁，不支持多个进程同时写同一输出目录。
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from acextract.core.exceptions import CannotSaveImageError, InvalidDataError
from acextract.core.scale import (
    CANONICAL_SCALES,
    DEFAULT_IDIOM,
    Slot,
    canonical_slots,
    detect_scale,
    parse_scale,
    pure_name,
)

LOGGER = logging.getLogger(__name__)

CONTENTS_FILENAME = "Contents.json"
IMAGESET_SUFFIX = ".imageset"


@dataclass(slots=True)
class AuthoringInfo:
    """Contents.json 中的 info 字段。"""

    author: str = "xcode"
    version: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {"author": self.author, "version": self.version}


@dataclass(slots=True)
class ImageSetDescriptor:
    """一个 ``.imageset`` 目录的描述信息。"""

    images: list[Slot]
    info: AuthoringInfo = field(default_factory=AuthoringInfo)

    @classmethod
    def create(cls, filename: str) -> "ImageSetDescriptor":
        return cls(images=canonical_slots(filename))

    @classmethod
    def from_dict(cls, data: Any) -> "ImageSetDescriptor":
        """从 JSON 对象构建描述信息，结构不合法时抛出 InvalidDataError。"""

        if not isinstance(data, dict):
            raise InvalidDataError("Contents.json 顶层必须是对象")
        raw_images = data.get("images")
        if not isinstance(raw_images, list):
            raise InvalidDataError("Contents.json 缺少 images 列表")

        slots = [Slot(scale=scale) for scale in CANONICAL_SCALES]
        for raw in raw_images:
            if not isinstance(raw, dict):
                raise InvalidDataError(f"images 项必须是对象: {raw!r}")
            scale = parse_scale(raw.get("scale"))
            filename = raw.get("filename")
            if filename is not None and not isinstance(filename, str):
                raise InvalidDataError(f"filename 必须为字符串: {filename!r}")
            idiom = raw.get("idiom", DEFAULT_IDIOM)
            if not isinstance(idiom, str):
                raise InvalidDataError(f"idiom 必须为字符串: {idiom!r}")
            slots[scale.index] = Slot(scale=scale, filename=filename, idiom=idiom)

        info = AuthoringInfo()
        raw_info = data.get("info")
        if isinstance(raw_info, dict):
            author = raw_info.get("author", info.author)
            version = raw_info.get("version", info.version)
            if not isinstance(author, str) or not isinstance(version, int) or isinstance(version, bool):
                raise InvalidDataError(f"info 字段不合法: {raw_info!r}")
            info = AuthoringInfo(author=author, version=version)
        elif raw_info is not None:
            raise InvalidDataError("info 字段必须是对象")

        return cls(images=slots, info=info)

    @classmethod
    def parse(cls, payload: bytes | str) -> "ImageSetDescriptor":
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise InvalidDataError(f"Contents.json 不是合法的 JSON: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: Path) -> "ImageSetDescriptor":
        """读取已有的 Contents.json。"""

        try:
            payload = path.read_bytes()
        except OSError as exc:
            raise InvalidDataError(f"无法读取 {path}") from exc
        return cls.parse(payload)

    def update(self, filename: str) -> None:
        """把文件名写入与其倍率对应的一项，其余项保持不变。"""

        self.images[detect_scale(filename).index].filename = filename

    def to_dict(self) -> dict[str, Any]:
        return {
            "images": [slot.to_dict() for slot in self.images],
            "info": self.info.to_dict(),
        }

    def serialize(self) -> bytes:
        """按 Xcode 的格式输出 JSON。"""

        text = json.dumps(self.to_dict(), indent=2, separators=(",", " : "), ensure_ascii=False)
        return text.encode("utf-8")


def imageset_dir_for(image_path: Path) -> Path:
    """``out/Icon@2x.png`` -> ``out/Icon.imageset``"""

    return image_path.parent / f"{pure_name(image_path.name)}{IMAGESET_SUFFIX}"


def prepare_imageset_dir(image_path: Path) -> Path:
    """创建或更新图片所属的 ``.imageset`` 目录，返回图片的实际写入路径。"""

    filename = image_path.name
    directory = imageset_dir_for(image_path)
    contents_path = directory / CONTENTS_FILENAME

    # 已存在则合并
    if contents_path.exists():
        descriptor = ImageSetDescriptor.load(contents_path)
        descriptor.update(filename)
        LOGGER.debug("更新 %s: %s", contents_path, filename)
    else:
        descriptor = ImageSetDescriptor.create(filename)
        LOGGER.debug("新建 %s: %s", contents_path, filename)

    try:
        directory.mkdir(parents=True, exist_ok=True)
        contents_path.write_bytes(descriptor.serialize())
    except OSError as exc:
        raise CannotSaveImageError(f"写入 {contents_path} 失败") from exc
    return directory / filename
