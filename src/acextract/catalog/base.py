"""资源目录（catalog）的访问接口。

提取逻辑只依赖这里定义的最小接口：目录提供若干图片集，
每个图片集提供若干命名图片，命名图片给出位图或矢量数据。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol

from PIL import Image


class NamedImage(Protocol):
    """单个倍率/变体的图片资源。"""

    @property
    def name(self) -> str: ...

    def raster_image(self) -> Optional[Image.Image]:
        """返回解码后的位图，调用者负责关闭；没有位图时返回 None。"""

    def vector_data(self) -> Optional[bytes]:
        """返回 PDF/SVG 等矢量数据；没有时返回 None。"""


class ImageSet(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def named_images(self) -> Iterable[NamedImage]: ...


class AssetsCatalog(Protocol):
    @property
    def image_sets(self) -> Iterable[ImageSet]: ...


@dataclass(slots=True)
class MemoryNamedImage:
    """内存中的图片资源。"""

    name: str
    image: Optional[Image.Image] = None
    vector: Optional[bytes] = None

    def raster_image(self) -> Optional[Image.Image]:
        if self.image is None:
            return None
        return self.image.copy()

    def vector_data(self) -> Optional[bytes]:
        return self.vector


@dataclass(slots=True)
class MemoryImageSet:
    name: str
    named_images: list[MemoryNamedImage] = field(default_factory=list)


@dataclass(slots=True)
class MemoryCatalog:
    image_sets: list[MemoryImageSet] = field(default_factory=list)
