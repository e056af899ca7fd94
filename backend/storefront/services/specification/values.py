"""规格值类型

数据库中规格值一律以文本存储，业务层在边界处解析为带类型的值：
TextValue / NumberValue / BooleanValue / EnumValue。
"""

import math
import re
from dataclasses import dataclass

from storefront.models.specification import SpecDataType

# 开头的十进制数字，其后的单位等文本忽略
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_TRUE_TOKENS = frozenset({"true", "1"})
_FALSE_TOKENS = frozenset({"false", "0"})


@dataclass(frozen=True, slots=True)
class TextValue:
    value: str


@dataclass(frozen=True, slots=True)
class NumberValue:
    value: float


@dataclass(frozen=True, slots=True)
class BooleanValue:
    value: bool


@dataclass(frozen=True, slots=True)
class EnumValue:
    value: str


SpecValue = TextValue | NumberValue | BooleanValue | EnumValue


def parse_number(raw: str) -> float | None:
    """解析开头的有限数字（"16GB" 解析为 16，"abc"、"inf" 无效）"""
    match = _LEADING_NUMBER.match(raw.lstrip())
    if match is None:
        return None
    number = float(match.group())
    if not math.isfinite(number):
        return None
    return number


def parse_boolean(raw: str) -> bool | None:
    """解析布尔值，只接受 true/false/1/0（不区分大小写）"""
    token = raw.strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    return None


def coerce_stored_value(raw: str, data_type: str) -> SpecValue | None:
    """把存储的文本值按其自身数据类型转换

    - number: 无法解析时返回 None（不参与任何匹配）
    - boolean: "true"/"1" 为真，其余为假
    - enum / text: 原样
    """
    if data_type == SpecDataType.NUMBER.value:
        number = parse_number(raw)
        return NumberValue(number) if number is not None else None
    if data_type == SpecDataType.BOOLEAN.value:
        return BooleanValue(raw.strip().lower() in _TRUE_TOKENS)
    if data_type == SpecDataType.ENUM.value:
        return EnumValue(raw)
    return TextValue(raw)


def matches_filter(stored: SpecValue | None, expected: bool | float | str) -> bool:
    """严格相等匹配：布尔与数字不互相等价"""
    if stored is None:
        return False
    if isinstance(stored, BooleanValue):
        return isinstance(expected, bool) and stored.value is expected
    if isinstance(stored, NumberValue):
        return isinstance(expected, (int, float)) and not isinstance(expected, bool) and stored.value == expected
    return isinstance(expected, str) and stored.value == expected


def format_number(number: float) -> str:
    """数字转文本：整数去掉小数部分（8.0 -> "8"）"""
    if number.is_integer():
        return str(int(number))
    return repr(number)
