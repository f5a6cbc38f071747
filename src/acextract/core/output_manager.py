"""输出目录检查与 PNG 写入模块。"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from acextract.core.exceptions import (
    CannotSaveImageError,
    OutputDirectoryCreationError,
    OutputPathIsNotDirectoryError,
)

LOGGER = logging.getLogger(__name__)

PNG_MODES = {"1", "L", "LA", "I", "P", "RGB", "RGBA"}


class OutputManager:
    """负责输出目录与图片写入。"""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def ensure_output_dir(self) -> None:
        """检查输出目录，不存在则创建。

        输出路径指向已存在的文件时抛出 OutputPathIsNotDirectoryError。
        """

        if self.output_dir.exists() and not self.output_dir.is_dir():
            raise OutputPathIsNotDirectoryError(f"输出路径不是目录: {self.output_dir}")
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputDirectoryCreationError(f"无法创建输出目录: {self.output_dir}") from exc
        LOGGER.debug("输出目录就绪: %s", self.output_dir)

    def destination_for(self, name: str) -> Path:
        return self.output_dir / name

    def save_png(self, image: Image.Image, destination: Path) -> None:
        """将 PIL Image 以 PNG 格式写入磁盘（不依赖文件扩展名）。"""

        image_to_save = image
        try:
            if image.mode not in PNG_MODES:
                image_to_save = image.convert("RGBA")
            image_to_save.save(destination, format="PNG")
        except (OSError, ValueError) as exc:
            raise CannotSaveImageError(f"写入文件失败: {destination}") from exc
        finally:
            if image_to_save is not image:
                image_to_save.close()
