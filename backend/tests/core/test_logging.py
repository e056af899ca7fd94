"""日志模块测试"""

import json

import pytest

from storefront.core.db import get_database_provider, set_database_provider
from storefront.core.db.provider import SQLiteProvider
from storefront.core.logging import Logger, get_logger, logger


@pytest.fixture
def restore_logging():
    """测试结束后按 settings 恢复全局日志配置（需排在 capsys 之前）"""
    yield
    logger.configure()


def _json_lines(text: str) -> list[dict]:
    return [json.loads(line) for line in text.splitlines() if line.startswith("{")]


class TestLoggerConfigure:
    """测试日志配置"""

    def test_configure_fresh_logger(self, restore_logging, tmp_path, capsys):
        """测试全新实例配置后可写日志"""
        fresh = Logger()
        fresh.configure(mode="json", level="DEBUG", log_file=str(tmp_path / "app.log"))
        fresh.info("hello", module="test", level="custom")

        entries = _json_lines(capsys.readouterr().err)
        configured = next(e for e in entries if e["message"] == "日志系统已配置")
        assert configured["log_level"] == "DEBUG"
        hello = next(e for e in entries if e["message"] == "hello")
        assert hello["module"] == "test"
        assert hello["level"] == "INFO"

    def test_auto_configure_on_first_call(self, restore_logging, tmp_path, monkeypatch):
        """测试首次写日志时自动配置"""
        from storefront.core.config import settings

        monkeypatch.setattr(settings, "LOG_FILE", str(tmp_path / "auto.log"))
        fresh = Logger()
        fresh.warning("first")
        assert fresh._configured is True

    def test_bound_logger_context(self, restore_logging, tmp_path, capsys):
        """测试绑定日志器携带模块名与上下文"""
        logger.configure(mode="json", level="DEBUG", log_file=str(tmp_path / "bound.log"))
        get_logger("specification.engine").error("search failed", category_id="c1", message_count=2)

        entry = next(e for e in _json_lines(capsys.readouterr().err) if e["message"] == "search failed")
        assert entry["module"] == "specification.engine"
        assert entry["category_id"] == "c1"
        assert entry["level"] == "ERROR"

    def test_exception_includes_error_type(self, restore_logging, tmp_path, capsys):
        """测试 exception 记录异常类型"""
        logger.configure(mode="json", level="DEBUG", log_file=str(tmp_path / "exc.log"))
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            get_logger("test").exception("failed")

        entry = next(e for e in _json_lines(capsys.readouterr().err) if e["message"] == "failed")
        assert entry["exception"]["type"] == "RuntimeError"


@pytest.mark.anyio
class TestAppLifespan:
    """测试应用生命周期（启动时配置日志并建表）"""

    async def test_startup_and_shutdown(self, restore_logging):
        from storefront.main import app

        set_database_provider(SQLiteProvider("sqlite+aiosqlite:///:memory:"))
        try:
            async with app.router.lifespan_context(app):
                assert get_database_provider().backend_name == "sqlite"
        finally:
            set_database_provider(None)
