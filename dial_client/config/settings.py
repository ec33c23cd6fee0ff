"""配置管理模块。

支持从环境变量（DIAL_ 前缀）、.env 以及 config.yaml 加载配置。
核心客户端不读取这里的全局配置，只有 CLI 会据此构造传输层与客户端。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dial_client.domain.exceptions import ConfigurationError

DEFAULT_SYSTEM_PROMPT = "You are an assistant who answers concisely and informatively."


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("DIAL_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.append(Path.cwd() / "config.yaml")

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class DialSettings(BaseSettings):
    """DIAL 连接与日志配置。"""

    base_uri: Optional[str] = Field(default=None, description="DIAL 服务基础 URL")
    deployment: Optional[str] = Field(default=None, description="默认 deployment 名称")
    api_key: Optional[str] = Field(default=None, description="通过 api-key 请求头发送的密钥")
    ca_bundle: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DIAL_CA_BUNDLE", "CURL_CA_BUNDLE", "SSL_CERT_FILE"),
        description="自定义 CA 证书路径",
    )
    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, description="默认系统提示词")
    log_dir: Optional[str] = Field(default=None, description="日志目录，不设置则不写日志文件")
    log_redact_content: bool = Field(default=False, description="是否截断日志内容")

    model_config = SettingsConfigDict(
        env_prefix="DIAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("api_key", "ca_bundle", "base_uri", "deployment")
    @classmethod
    def blank_as_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v.strip() if v is not None else v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )

    def require_connection(self) -> None:
        """CLI 发起请求前的校验：base_uri 与 deployment 必须存在。"""
        if not self.base_uri or not self.deployment:
            raise ConfigurationError(
                code="MISSING_CONFIG",
                message="Set env vars: DIAL_BASE_URI, DIAL_DEPLOYMENT (optional: DIAL_API_KEY)",
            )


def load_settings(**overrides: Any) -> DialSettings:
    return DialSettings(**overrides)
