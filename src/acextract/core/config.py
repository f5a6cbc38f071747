"""提取任务的配置模型。"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from acextract.core.exceptions import InvalidConfigurationError

LOGGER = logging.getLogger(__name__)

ExtractMode = str  # normal | dir
VectorPolicy = str  # skip | fail

MODE_NORMAL: ExtractMode = "normal"
MODE_DIR: ExtractMode = "dir"
EXTRACT_MODES = (MODE_NORMAL, MODE_DIR)

VECTOR_SKIP: VectorPolicy = "skip"
VECTOR_FAIL: VectorPolicy = "fail"
VECTOR_POLICIES = (VECTOR_SKIP, VECTOR_FAIL)


def resolve_mode(value: Optional[str]) -> ExtractMode:
    """解析输出模式，未知取值回退为 normal。"""

    if value is None:
        return MODE_NORMAL
    if value in EXTRACT_MODES:
        return value
    LOGGER.debug("未知的输出模式 %r，回退为 %s", value, MODE_NORMAL)
    return MODE_NORMAL


def resolve_vector_policy(value: Optional[str]) -> VectorPolicy:
    """解析矢量资源处理策略。"""

    if value is None:
        return VECTOR_SKIP
    if value not in VECTOR_POLICIES:
        raise InvalidConfigurationError(f"未知的矢量处理策略: {value}")
    return value


@dataclass(slots=True)
class ExtractConfig:
    """单次提取任务的配置。"""

    output_dir: Path
    mode: ExtractMode = MODE_NORMAL
    vector_policy: VectorPolicy = VECTOR_SKIP

    @classmethod
    def build(
        cls,
        path: str | Path,
        mode: Optional[str] = None,
        vector_policy: Optional[str] = None,
    ) -> "ExtractConfig":
        return cls(
            output_dir=Path(path).expanduser(),
            mode=resolve_mode(mode),
            vector_policy=resolve_vector_policy(vector_policy),
        )
