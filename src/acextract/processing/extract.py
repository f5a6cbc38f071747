"""提取操作：把资源目录中的所有图片写成 PNG 文件。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from PIL import Image

from acextract.catalog.base import AssetsCatalog, NamedImage
from acextract.core.config import MODE_DIR, VECTOR_FAIL, ExtractConfig
from acextract.core.exceptions import (
    ACExtractError,
    CannotCreatePDFDocumentError,
    CannotSaveImageError,
    InvalidDataError,
    RenditionMissingDataError,
)
from acextract.core.imageset import prepare_imageset_dir
from acextract.core.models import STATUS_EXTRACTED, STATUS_SKIPPED_VECTOR, FileOutcome
from acextract.core.output_manager import OutputManager
from acextract.processing.operation import Operation

LOGGER = logging.getLogger(__name__)

Reporter = Optional[Callable[[FileOutcome], None]]

ERROR_STATUSES: dict[type[ACExtractError], str] = {
    RenditionMissingDataError: "error-missing-data",
    CannotSaveImageError: "error-save",
    CannotCreatePDFDocumentError: "error-vector",
    InvalidDataError: "error-contents",
}


class ExtractOperation(Operation):
    """遍历所有图片集与图片并逐个导出。

    单张图片失败只记录结果，不影响其余图片；输出目录不可用时整体失败。
    dir 模式会读改写同一个 Contents.json，必须在单线程中按顺序执行。
    """

    def __init__(
        self,
        path: str | Path,
        mode: Optional[str] = None,
        *,
        vector_policy: Optional[str] = None,
        reporter: Reporter = None,
    ) -> None:
        self.config = ExtractConfig.build(path, mode=mode, vector_policy=vector_policy)
        self.output_manager = OutputManager(self.config.output_dir)
        self.reporter = reporter

    @property
    def output_path(self) -> Path:
        return self.config.output_dir

    @property
    def mode(self) -> str:
        return self.config.mode

    def read(self, catalog: AssetsCatalog) -> None:
        self.output_manager.ensure_output_dir()
        for image_set in catalog.image_sets:
            for named_image in image_set.named_images:
                self._extract_named_image(named_image)

    def _extract_named_image(self, named_image: NamedImage) -> FileOutcome:
        name = named_image.name
        LOGGER.debug("Extracting: %s", name)
        destination = self.output_manager.destination_for(name)
        try:
            outcome = self._save(named_image, destination)
        except ACExtractError as exc:
            LOGGER.warning("提取失败 %s: %s", name, exc)
            outcome = FileOutcome(name=name, status=_error_status(exc), message=str(exc))
        self._report(outcome)
        return outcome

    def _save(self, named_image: NamedImage, destination: Path) -> FileOutcome:
        name = named_image.name
        if named_image.vector_data() is not None:
            if self.config.vector_policy == VECTOR_FAIL:
                raise CannotCreatePDFDocumentError(f"不支持导出矢量资源: {name}")
            LOGGER.info("跳过矢量资源: %s", name)
            return FileOutcome(name=name, status=STATUS_SKIPPED_VECTOR, message="vector rendition")

        try:
            image = named_image.raster_image()
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise CannotSaveImageError(f"无法获取位图数据: {name}") from exc
        if image is None:
            raise RenditionMissingDataError(f"资源缺少图像数据: {name}")

        try:
            # 不同模式，生成不同目录
            if self.config.mode == MODE_DIR:
                destination = prepare_imageset_dir(destination)
            self.output_manager.save_png(image, destination)
        finally:
            image.close()

        LOGGER.info("提取完成 %s -> %s", name, destination)
        return FileOutcome(name=name, status=STATUS_EXTRACTED, output_path=destination)

    def _report(self, outcome: FileOutcome) -> None:
        if self.reporter is not None:
            self.reporter(outcome)


def _error_status(exc: ACExtractError) -> str:
    for error_type, status in ERROR_STATUSES.items():
        if isinstance(exc, error_type):
            return status
    return "error"
