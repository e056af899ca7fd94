"""规格值校验测试"""

import pytest

from storefront.schemas.specification import TemplateBase
from storefront.services.specification.validation import validate_specification_value


def _template(**overrides) -> TemplateBase:
    data = {"name": "ram", "display_name": "RAM", "data_type": "text"}
    data.update(overrides)
    return TemplateBase(**data)


class TestRequired:
    """测试必填"""

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_required_blank(self, raw):
        """测试必填项为空"""
        result = validate_specification_value(_template(is_required=True), raw)
        assert result.is_valid is False
        assert result.errors == ["RAM is required"]
        assert result.normalized_value is None

    def test_optional_blank(self):
        """测试可选项留空"""
        result = validate_specification_value(_template(data_type="number"), "")
        assert result.is_valid is True
        assert result.errors == []
        assert result.normalized_value is None


class TestNumber:
    """测试数字类型"""

    def test_valid(self):
        result = validate_specification_value(_template(data_type="number"), "16")
        assert result.is_valid is True
        assert result.normalized_value == 16.0

    def test_leading_number_with_unit(self):
        """测试数字后带单位按开头的数字解析"""
        result = validate_specification_value(_template(data_type="number"), "16GB")
        assert result.is_valid is True
        assert result.normalized_value == 16.0

    def test_invalid(self):
        """测试不以数字开头的文本不是数字"""
        result = validate_specification_value(_template(data_type="number"), "sixteen")
        assert result.is_valid is False
        assert result.errors == ["RAM must be a number"]
        assert result.normalized_value is None


class TestBoolean:
    """测试布尔类型"""

    @pytest.mark.parametrize(("raw", "expected"), [("TRUE", True), ("0", False), ("false", False)])
    def test_valid(self, raw, expected):
        result = validate_specification_value(_template(display_name="Wi-Fi", data_type="boolean"), raw)
        assert result.is_valid is True
        assert result.normalized_value is expected

    def test_invalid(self):
        result = validate_specification_value(_template(display_name="Wi-Fi", data_type="boolean"), "yes")
        assert result.errors == ["Wi-Fi must be true or false"]


class TestEnum:
    """测试枚举类型"""

    def test_member(self):
        template = _template(display_name="Type", data_type="enum", enum_values=["DDR4", "DDR5"])
        result = validate_specification_value(template, "DDR5")
        assert result.is_valid is True
        assert result.normalized_value == "DDR5"

    def test_not_member(self):
        template = _template(display_name="Type", data_type="enum", enum_values=["DDR4", "DDR5"])
        result = validate_specification_value(template, "DDR3")
        assert result.errors == ["Type must be one of: DDR4, DDR5"]

    def test_no_enum_values_accepts_anything(self):
        """测试未定义可选值时不限制"""
        result = validate_specification_value(_template(data_type="enum"), "anything")
        assert result.is_valid is True


class TestText:
    """测试文本类型"""

    def test_any_text(self):
        result = validate_specification_value(_template(), "Intel Core i7")
        assert result.is_valid is True
        assert result.normalized_value == "Intel Core i7"
