"""对资源目录执行的操作。"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from acextract.catalog.base import AssetsCatalog


class Operation(ABC):
    """作用于资源目录的一个操作单元。"""

    @abstractmethod
    def read(self, catalog: AssetsCatalog) -> None:
        """对 catalog 执行操作，失败时抛出异常。"""


class CompoundOperation(Operation):
    """按顺序执行多个操作，任意一个失败即中止并原样抛出。"""

    def __init__(self, operations: Sequence[Operation]) -> None:
        self.operations = list(operations)

    def read(self, catalog: AssetsCatalog) -> None:
        for operation in self.operations:
            operation.read(catalog)
