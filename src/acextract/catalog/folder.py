"""以目录形式存在的资源目录。

把一个已解码的资源目录（例如其他工具从 .car 导出的文件）当作 catalog 使用：
按逻辑名称（去掉扩展名与倍率后缀）把文件分组为图片集。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterator, Optional, Sequence

from PIL import Image, UnidentifiedImageError

from acextract.core.exceptions import InvalidConfigurationError
from acextract.core.scale import pure_name

LOGGER = logging.getLogger(__name__)

RASTER_EXTENSIONS = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".gif"}
VECTOR_EXTENSIONS = {".pdf", ".svg"}
DEFAULT_PATTERNS = ("*",)


@dataclass(slots=True)
class FileNamedImage:
    """磁盘上的单个资源文件。"""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    def raster_image(self) -> Optional[Image.Image]:
        if self.path.suffix.lower() not in RASTER_EXTENSIONS:
            return None
        try:
            with Image.open(self.path) as img:
                img.load()
                return img.copy()
        except (UnidentifiedImageError, OSError) as exc:
            LOGGER.debug("无法识别图像文件 %s: %s", self.path, exc)
            return None

    def vector_data(self) -> Optional[bytes]:
        if self.path.suffix.lower() not in VECTOR_EXTENSIONS:
            return None
        try:
            return self.path.read_bytes()
        except OSError as exc:
            LOGGER.debug("无法读取矢量文件 %s: %s", self.path, exc)
            return None


@dataclass(slots=True)
class FileImageSet:
    name: str
    named_images: list[FileNamedImage] = field(default_factory=list)


def _iter_candidate_files(path: Path, recursive: bool) -> Iterator[Path]:
    """遍历路径下的所有文件。"""

    iterator = path.rglob("*") if recursive else path.glob("*")
    for candidate in iterator:
        if candidate.is_file():
            yield candidate


def _matches_any(name: str, patterns: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(fnmatch(lowered, pattern.lower()) for pattern in patterns)


class FolderCatalog:
    """把目录中的图片按逻辑名称分组。"""

    def __init__(
        self,
        root: Path,
        recursive: bool = True,
        include_patterns: Sequence[str] = DEFAULT_PATTERNS,
    ) -> None:
        self.root = root.expanduser()
        if not self.root.is_dir():
            raise InvalidConfigurationError(f"输入目录不存在: {self.root}")
        self.recursive = recursive
        self.include_patterns = include_patterns or DEFAULT_PATTERNS
        self._image_sets: Optional[list[FileImageSet]] = None

    @property
    def image_sets(self) -> list[FileImageSet]:
        if self._image_sets is None:
            self._image_sets = self._scan()
        return self._image_sets

    def _scan(self) -> list[FileImageSet]:
        groups: dict[str, FileImageSet] = {}
        supported = RASTER_EXTENSIONS | VECTOR_EXTENSIONS

        for candidate in _iter_candidate_files(self.root, self.recursive):
            if candidate.suffix.lower() not in supported:
                continue
            if not _matches_any(candidate.name, self.include_patterns):
                continue
            set_name = pure_name(candidate.name)
            group = groups.setdefault(set_name, FileImageSet(name=set_name))
            group.named_images.append(FileNamedImage(path=candidate))

        image_sets = sorted(groups.values(), key=lambda s: s.name.lower())
        for image_set in image_sets:
            image_set.named_images.sort(key=lambda img: img.name.lower())
        LOGGER.info("在 %s 中发现 %d 个图片集", self.root, len(image_sets))
        return image_sets
