"""图片倍率（1x/2x/3x）的识别与序列化。

倍率由文件名中的 ``@Nx`` 后缀决定，例如 ``icon@2x.png``。
序列化时使用 Contents.json 中的写法 ``"2x"``。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from pathlib import PurePath
from typing import Any, Optional

from acextract.core.exceptions import InvalidDataError

DEFAULT_IDIOM = "universal"

_DIGITS_RE = re.compile(r"\d+")


class Scale(IntEnum):
    """资源倍率，取值即放大倍数。"""

    ONE = 1
    TWO = 2
    THREE = 3

    @property
    def tail(self) -> str:
        return f"@{self.value}x"

    @property
    def content_value(self) -> str:
        return f"{self.value}x"

    @property
    def index(self) -> int:
        return self.value - 1


CANONICAL_SCALES: tuple[Scale, ...] = tuple(Scale)


@dataclass(slots=True)
class Slot:
    """Contents.json 中 images 列表的一项。"""

    scale: Scale
    filename: Optional[str] = None
    idiom: str = DEFAULT_IDIOM

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.filename:
            data["filename"] = self.filename
        data["idiom"] = self.idiom
        data["scale"] = format_scale(self.scale)
        return data


def detect_scale(filename: str) -> Scale:
    """按 1x、2x、3x 顺序在文件名中查找倍率后缀，默认 1x。"""

    lowered = filename.lower()
    for scale in CANONICAL_SCALES:
        if scale.tail in lowered:
            return scale
    return Scale.ONE


def parse_scale(value: Any) -> Scale:
    """解析 ``"2x"`` 形式的倍率字符串。"""

    if not isinstance(value, str):
        raise InvalidDataError(f"倍率必须为字符串: {value!r}")
    match = _DIGITS_RE.search(value)
    if match is None:
        raise InvalidDataError(f"无法解析倍率: {value!r}")
    try:
        return Scale(int(match.group(0)))
    except ValueError as exc:
        raise InvalidDataError(f"不支持的倍率: {value!r}") from exc


def format_scale(scale: Scale) -> str:
    return scale.content_value


def canonical_slots(filename: str) -> list[Slot]:
    """生成三个倍率的占位项，并填入与文件名倍率对应的一项。"""

    slots = [Slot(scale=scale) for scale in CANONICAL_SCALES]
    slots[detect_scale(filename).index].filename = filename
    return slots


def pure_name(filename: str) -> str:
    """去掉扩展名与倍率后缀，得到图片集的逻辑名称。

    ``Icon@2X.png`` -> ``Icon``
    """

    name = PurePath(filename).name
    suffix = PurePath(name).suffix
    if suffix:
        name = name.replace(suffix, "")
    tail = detect_scale(name).tail
    return name.replace(tail, "").replace(tail.upper(), "")
