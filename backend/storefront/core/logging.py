"""日志系统 - loguru + rich

三种输出模式（LOG_MODE）：
- simple: 一行一条，只有模块名和消息
- detailed: 时间、级别、位置与上下文，异常使用 rich traceback
- json: 一行一个 JSON 对象，便于日志采集

文件日志始终为 loguru 序列化 JSON，按 LOG_FILE_ROTATION 轮转。

    from storefront.core.logging import get_logger

    logger = get_logger("specification.registry")
    logger.info("应用预设模板", category_id=category_id, count=5)
"""

import json
import sys
import traceback
from enum import Enum
from pathlib import Path
from typing import Any

from loguru import logger as loguru_logger
from rich.console import Console
from rich.traceback import install as install_rich_traceback

from storefront.core.config import settings
from storefront.core.paths import get_project_root


class LogLevel(str, Enum):
    """日志级别"""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogMode(str, Enum):
    """日志模式"""

    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


console = Console(force_terminal=True, color_system="auto")

_LEVEL_COLORS = {
    "DEBUG": "dim cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold red",
}

_MAX_DEPTH = 4
_MAX_REPR = 2000


def _plain(value: Any, depth: int = 0) -> Any:
    """上下文值转为可序列化结构"""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if depth >= _MAX_DEPTH:
        return "..."
    if isinstance(value, dict):
        return {str(k): _plain(v, depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(v, depth + 1) for v in value]
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "model_dump"):
        return _plain(value.model_dump(mode="json"), depth + 1)
    text = repr(value)
    return text if len(text) <= _MAX_REPR else text[:_MAX_REPR] + "..."


def _markup_safe(text: str) -> str:
    """转义 loguru 颜色标记与 format 占位符"""
    return text.replace("<", "\\<").replace(">", "\\>").replace("{", "{{").replace("}", "}}")


def _source(record: dict) -> str:
    """记录位置（相对 backend 目录）"""
    file_obj = record["file"]
    try:
        path = Path(file_obj.path).resolve().relative_to(get_project_root())
    except ValueError:
        path = Path(file_obj.name)
    return f"{path}:{record['line']}"


def _context(record: dict) -> dict[str, Any]:
    return {k: v for k, v in record["extra"].items() if k != "module"}


def format_simple(record: dict) -> str:
    """简洁格式"""
    color = _LEVEL_COLORS.get(record["level"].name, "white")
    module = record["extra"].get("module", "app")
    return f"<{color}>[{module}]</{color}> {_markup_safe(record['message'])}\n"


def format_detailed(record: dict) -> str:
    """详细格式"""
    level = record["level"].name
    color = _LEVEL_COLORS.get(level, "white")
    time = record["time"].strftime("%H:%M:%S.%f")[:-3]
    module = record["extra"].get("module", "app")

    line = (
        f"<dim>{time}</dim> <{color}>{level:8}</{color}> <magenta>[{module}]</magenta> "
        f"<cyan>{_markup_safe(_source(record))}</cyan>"
    )
    context = _context(record)
    if context:
        pairs = ", ".join(f"{k}={v!r}" for k, v in context.items())
        line += f" <dim>| {_markup_safe(pairs)}</dim>"
    line += f"\n    → {_markup_safe(record['message'])}\n"

    exception = record["exception"]
    if exception and exception.value:
        formatted = "".join(traceback.format_exception(exception.type, exception.value, exception.traceback))
        line += f"<red>{_markup_safe(formatted)}</red>\n"
    return line


def format_json(record: dict) -> str:
    """JSON 格式（单行）"""
    entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "module": record["extra"].get("module", "app"),
        "source": _source(record),
        "message": record["message"],
    }
    # 上下文不覆盖固定字段
    for key, value in _context(record).items():
        entry.setdefault(key, value)
    exception = record["exception"]
    if exception and exception.value:
        entry["exception"] = {
            "type": exception.type.__name__ if exception.type else None,
            "message": str(exception.value),
        }
    # 返回值会再经过 format_map，大括号需要转义
    text = json.dumps(entry, ensure_ascii=False, default=str)
    return text.replace("{", "{{").replace("}", "}}") + "\n"


_FORMATTERS = {
    LogMode.SIMPLE: format_simple,
    LogMode.DETAILED: format_detailed,
    LogMode.JSON: format_json,
}


class Logger:
    """统一日志接口，首次写日志时按 settings 自动配置"""

    def __init__(self) -> None:
        self._configured = False

    def configure(
        self,
        mode: LogMode | str | None = None,
        level: LogLevel | str | None = None,
        log_file: str | None = None,
    ) -> None:
        """配置日志输出

        Args:
            mode: 日志模式，默认 LOG_MODE
            level: 日志级别，默认 LOG_LEVEL
            log_file: 文件日志路径，默认 LOG_FILE（留空为 logs/app.log）
        """
        mode = LogMode(str(mode or settings.LOG_MODE).lower())
        level = LogLevel(str(level or settings.LOG_LEVEL).upper())
        log_path = Path(log_file or settings.LOG_FILE or "logs/app.log")

        loguru_logger.remove()
        if mode == LogMode.DETAILED:
            install_rich_traceback(console=console, show_locals=False, width=120)

        loguru_logger.add(
            sys.stderr,
            format=_FORMATTERS[mode],
            level=level.value,
            colorize=mode != LogMode.JSON,
            backtrace=mode == LogMode.DETAILED,
            diagnose=False,
        )

        log_path.parent.mkdir(parents=True, exist_ok=True)
        loguru_logger.add(
            str(log_path),
            format="{message}",
            level=level.value,
            rotation=settings.LOG_FILE_ROTATION,
            retention=settings.LOG_FILE_RETENTION,
            compression="gz",
            serialize=True,
        )

        # 先置位再写日志，避免递归配置
        self._configured = True
        self.info("日志系统已配置", module="logging", mode=mode.value, log_level=level.value, file=str(log_path))

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        module: str = "app",
        exc_info: bool = False,
        _depth: int = 0,
        **extra: Any,
    ) -> None:
        if not self._configured:
            self.configure()
        context = {str(k): _plain(v) for k, v in extra.items()}
        # 调用栈：调用方 -> [BoundLogger.x ->] Logger.x -> Logger.log -> loguru
        loguru_logger.bind(module=module, **context).opt(depth=2 + _depth, exception=exc_info).log(
            level.upper(), message
        )

    def debug(self, message: str, /, *, module: str = "app", _depth: int = 0, **extra: Any) -> None:
        self.log("debug", message, module=module, _depth=_depth, **extra)

    def info(self, message: str, /, *, module: str = "app", _depth: int = 0, **extra: Any) -> None:
        self.log("info", message, module=module, _depth=_depth, **extra)

    def warning(self, message: str, /, *, module: str = "app", _depth: int = 0, **extra: Any) -> None:
        self.log("warning", message, module=module, _depth=_depth, **extra)

    def error(
        self,
        message: str,
        /,
        *,
        module: str = "app",
        exc_info: bool = False,
        _depth: int = 0,
        **extra: Any,
    ) -> None:
        self.log("error", message, module=module, exc_info=exc_info, _depth=_depth, **extra)

    def exception(self, message: str, /, *, module: str = "app", _depth: int = 0, **extra: Any) -> None:
        """错误日志并附带当前异常堆栈"""
        self.log("error", message, module=module, exc_info=True, _depth=_depth, **extra)

    def bind(self, **context: Any) -> "BoundLogger":
        return BoundLogger(self, context)


class BoundLogger:
    """绑定了固定上下文（通常是 module）的日志器"""

    def __init__(self, parent: Logger, context: dict[str, Any]) -> None:
        self._parent = parent
        self._context = context

    def debug(self, message: str, /, **extra: Any) -> None:
        self._parent.debug(message, _depth=1, **{**self._context, **extra})

    def info(self, message: str, /, **extra: Any) -> None:
        self._parent.info(message, _depth=1, **{**self._context, **extra})

    def warning(self, message: str, /, **extra: Any) -> None:
        self._parent.warning(message, _depth=1, **{**self._context, **extra})

    def error(self, message: str, /, exc_info: bool = False, **extra: Any) -> None:
        self._parent.error(message, exc_info=exc_info, _depth=1, **{**self._context, **extra})

    def exception(self, message: str, /, **extra: Any) -> None:
        self._parent.exception(message, _depth=1, **{**self._context, **extra})


logger = Logger()


def get_logger(module: str) -> BoundLogger:
    """获取模块日志器"""
    return logger.bind(module=module)
