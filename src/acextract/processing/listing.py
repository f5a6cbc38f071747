"""列出资源目录内容的操作。"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from acextract.catalog.base import AssetsCatalog
from acextract.processing.operation import Operation

LOGGER = logging.getLogger(__name__)


class ListOperation(Operation):
    """输出图片集名称；verbose >= 1 时同时输出每个图片的名称。"""

    def __init__(self, verbose: int = 0, sink: Optional[Callable[[str], None]] = None) -> None:
        self.verbose = verbose
        self.sink = sink or LOGGER.info

    def read(self, catalog: AssetsCatalog) -> None:
        for image_set in catalog.image_sets:
            self.sink(image_set.name)
            if self.verbose < 1:
                continue
            for named_image in image_set.named_images:
                self.sink(f"  {named_image.name}")
