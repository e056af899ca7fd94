"""规格值解析测试"""

import pytest

from storefront.services.specification.values import (
    BooleanValue,
    EnumValue,
    NumberValue,
    TextValue,
    coerce_stored_value,
    format_number,
    matches_filter,
    parse_boolean,
    parse_number,
)


class TestParseNumber:
    """测试数字解析"""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("16", 16.0),
            (" 3.5 ", 3.5),
            ("-2", -2.0),
            ("1e3", 1000.0),
            (".5", 0.5),
            ("16GB", 16.0),
            ("3.5 GHz", 3.5),
            ("850W", 850.0),
        ],
    )
    def test_valid_numbers(self, raw, expected):
        """测试合法数字（忽略数字后的单位）"""
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "GB16", "abc", "-", "nan", "inf", "-Infinity", "1e400"])
    def test_invalid_numbers(self, raw):
        """测试非法或非有限数字"""
        assert parse_number(raw) is None


class TestParseBoolean:
    """测试布尔解析"""

    @pytest.mark.parametrize("raw", ["true", "TRUE", "True", "1", " true "])
    def test_true_tokens(self, raw):
        assert parse_boolean(raw) is True

    @pytest.mark.parametrize("raw", ["false", "False", "0"])
    def test_false_tokens(self, raw):
        assert parse_boolean(raw) is False

    @pytest.mark.parametrize("raw", ["yes", "no", "", "2"])
    def test_other_tokens(self, raw):
        assert parse_boolean(raw) is None


class TestCoerceStoredValue:
    """测试存储值转换"""

    def test_number(self):
        assert coerce_stored_value("32", "number") == NumberValue(32.0)

    def test_unparsable_number(self):
        """测试无法解析的数字不参与匹配"""
        assert coerce_stored_value("about 32", "number") is None

    def test_boolean(self):
        assert coerce_stored_value("1", "boolean") == BooleanValue(True)
        assert coerce_stored_value("yes", "boolean") == BooleanValue(False)

    def test_enum_and_text(self):
        assert coerce_stored_value("DDR5", "enum") == EnumValue("DDR5")
        assert coerce_stored_value("Acme", "text") == TextValue("Acme")


class TestMatchesFilter:
    """测试严格相等匹配"""

    def test_boolean_does_not_match_number(self):
        """测试布尔值与数字不等价"""
        assert matches_filter(BooleanValue(True), True) is True
        assert matches_filter(BooleanValue(True), 1) is False
        assert matches_filter(NumberValue(1.0), True) is False
        assert matches_filter(NumberValue(1.0), 1) is True

    def test_number_does_not_match_string(self):
        """测试数字与字符串不等价"""
        assert matches_filter(NumberValue(16.0), "16") is False
        assert matches_filter(NumberValue(16.0), 16.0) is True

    def test_text(self):
        assert matches_filter(TextValue("Acme"), "Acme") is True
        assert matches_filter(TextValue("Acme"), "acme") is False

    def test_missing_value(self):
        assert matches_filter(None, "Acme") is False


class TestFormatNumber:
    """测试数字格式化"""

    def test_integral(self):
        assert format_number(8.0) == "8"

    def test_fractional(self):
        assert format_number(3.5) == "3.5"
