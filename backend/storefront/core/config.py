"""应用配置管理"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.core.paths import get_project_root


class Settings(BaseSettings):
    """应用配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ========== 数据库配置 ==========
    DATABASE_BACKEND: str = "sqlite"  # sqlite, postgres
    DATABASE_PATH: str = "./data/storefront.db"

    # PostgreSQL（DATABASE_BACKEND=postgres 时生效）
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "storefront"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "storefront"
    DATABASE_POOL_SIZE: int = 5
    DATABASE_POOL_MAX_OVERFLOW: int = 10
    DATABASE_POOL_TIMEOUT: int = 30

    # 服务配置
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    CORS_ORIGINS: str = "http://localhost:3000"

    # 日志配置
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_MODE: str = "detailed"  # simple, detailed, json
    LOG_FILE: str = "./logs/app.log"  # 日志文件路径，留空则使用默认路径
    LOG_FILE_ROTATION: str = "10 MB"  # 日志文件轮转大小
    LOG_FILE_RETENTION: str = "7 days"  # 日志文件保留时间

    # ========== ENV_JSON 目录配置 ==========
    # 目录内文件命名规则：<ENV_VAR_NAME>.json（如 CATEGORY_PRESETS_JSON.json）
    # 加载优先级：.env 中的环境变量 > .env.json 目录中的文件
    ENV_JSON_DIR: str = ""  # 示例：.env.json

    # ========== 规格模板配置 ==========
    # 额外的分类预设模板（JSON 数组），同 slug 覆盖内置预设
    # 示例：[{"category_name": "Keyboards", "category_slug": "keyboards", "templates": [...]}]
    CATEGORY_PRESETS_JSON: str = ""
    # 启动时为所有分类补齐预设模板
    SPEC_TEMPLATES_AUTO_INIT: bool = False

    # 展示文案
    SPEC_NOT_SPECIFIED_LABEL: str = "Not specified"
    SPEC_YES_LABEL: str = "Yes"
    SPEC_NO_LABEL: str = "No"

    @property
    def database_url(self) -> str:
        """数据库 URL"""
        if self.DATABASE_BACKEND == "postgres":
            return (
                f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )
        return f"sqlite+aiosqlite:///{self.DATABASE_PATH}"

    @property
    def cors_origins_list(self) -> list[str]:
        """
        CORS 允许的源列表

        支持逗号分隔字符串或 ENV_JSON_DIR/CORS_ORIGINS.json 中的 JSON 数组
        """
        parsed = self._load_json_from_env_or_file("CORS_ORIGINS", "")
        if isinstance(parsed, list):
            return [str(origin).strip() for origin in parsed]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def category_presets(self) -> list[dict[str, Any]]:
        """
        解析额外的分类预设配置

        优先级：环境变量 > 文件；格式不正确时返回空列表
        """
        parsed = self._load_json_from_env_or_file("CATEGORY_PRESETS_JSON", self.CATEGORY_PRESETS_JSON)
        if not isinstance(parsed, list):
            return []
        return [item for item in parsed if isinstance(item, dict)]

    def ensure_data_dir(self) -> None:
        """确保数据目录存在"""
        if self.DATABASE_BACKEND == "sqlite":
            Path(self.DATABASE_PATH).parent.mkdir(parents=True, exist_ok=True)

    def _load_json_from_env_or_file(self, var_name: str, env_value: str) -> Any:
        """
        通用 JSON 配置加载函数，支持从环境变量或 .env.json 目录加载

        加载优先级：
        1. 优先使用 .env 中的环境变量（env_value）
        2. 若环境变量为空，尝试从 ENV_JSON_DIR/<var_name>.json 加载
        3. 若都不存在，返回 None

        Args:
            var_name: 环境变量名（如 "CATEGORY_PRESETS_JSON"）
            env_value: .env 中的环境变量值

        Returns:
            解析后的 JSON 对象（dict/list），失败返回 None
        """
        raw = (env_value or "").strip()
        if raw:
            try:
                return json.loads(raw)
            except json.JSONDecodeError:
                # 环境变量解析失败，继续尝试文件
                pass

        if not self.ENV_JSON_DIR:
            return None

        env_dir = Path(self.ENV_JSON_DIR)
        if not env_dir.is_absolute():
            env_dir = (get_project_root() / env_dir).resolve()
        json_file = env_dir / f"{var_name}.json"
        if not json_file.exists():
            return None

        try:
            return json.loads(json_file.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return None


@lru_cache
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()


settings = get_settings()
