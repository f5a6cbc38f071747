"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

STATUS_EXTRACTED = "extracted"
STATUS_SKIPPED_VECTOR = "skipped-vector"


@dataclass(slots=True)
class FileOutcome:
    """记录单个资源的提取结果（用于报告/日志）。"""

    name: str
    status: str
    output_path: Optional[Path] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.status.startswith("error")


@dataclass(slots=True)
class BatchResult:
    """一次提取的全部结果。"""

    succeeded: list[FileOutcome] = field(default_factory=list)
    skipped: list[FileOutcome] = field(default_factory=list)
    failed: list[FileOutcome] = field(default_factory=list)

    def record(self, outcome: FileOutcome) -> None:
        if outcome.status == STATUS_EXTRACTED:
            self.succeeded.append(outcome)
        elif outcome.status.startswith("skipped"):
            self.skipped.append(outcome)
        else:
            self.failed.append(outcome)

    def all_outcomes(self) -> list[FileOutcome]:
        """返回所有结果记录，方便生成报告。"""

        return [*self.succeeded, *self.skipped, *self.failed]
