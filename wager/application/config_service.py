"""
ConfigService - 配置管理服务

负责集中化管理注册表配置和日志配置，按配置文件名（profile）提供预设。
"""

import logging
import os
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, asdict, replace
from enum import Enum

from ..core.errors import RegistryConfigError
from .types import QueryResult


class ConfigType(Enum):
    """配置类型枚举"""
    REGISTRY = "registry"
    LOGGING = "logging"


@dataclass(frozen=True)
class RegistryConfig:
    """注册表配置"""
    timeout_window: float = 300
    enable_invariant_checks: bool = True
    # 以下两项是加固选项，会改变可观察行为，默认关闭
    require_admin_for_forfeit: bool = False
    forfeit_requires_timeout: bool = False

    def __post_init__(self):
        if self.timeout_window < 0:
            raise RegistryConfigError(f"timeout_window不能为负数: {self.timeout_window}")


@dataclass(frozen=True)
class LoggingConfig:
    """日志配置"""
    log_level: str = 'INFO'
    enable_console_logging: bool = True
    enable_file_logging: bool = False
    log_file_path: str = "logs/wager.log"
    log_format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    def __post_init__(self):
        if self.log_level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise RegistryConfigError(f"无效的日志级别: {self.log_level}")


_DEFAULT_CLASSES = {
    ConfigType.REGISTRY: RegistryConfig,
    ConfigType.LOGGING: LoggingConfig,
}


class ConfigService:
    """配置管理服务"""

    def __init__(self):
        """初始化配置服务"""
        self.logger = logging.getLogger(__name__)
        self._configs: Dict[ConfigType, Dict[str, Any]] = {}
        self._load_default_configs()

    def _load_default_configs(self):
        """加载默认配置"""
        self._configs[ConfigType.REGISTRY] = {
            'default': RegistryConfig(),
            'hardened': RegistryConfig(
                require_admin_for_forfeit=True,
                forfeit_requires_timeout=True
            ),
            'fast': RegistryConfig(timeout_window=30),
        }

        self._configs[ConfigType.LOGGING] = {
            'default': LoggingConfig(),
            'debug': LoggingConfig(log_level='DEBUG'),
            'production': LoggingConfig(
                log_level='WARNING',
                enable_console_logging=False,
                enable_file_logging=True
            ),
        }

        self.logger.info("默认配置加载完成")

    def _get(self, config_type: ConfigType, profile: str) -> QueryResult:
        config_profiles = self._configs.get(config_type, {})
        if profile not in config_profiles:
            self.logger.warning(f"未找到{config_type.value}配置 '{profile}'，使用默认配置")
            profile = "default"
        config = config_profiles.get(profile, _DEFAULT_CLASSES[config_type]())
        return QueryResult.ok(config)

    def get_registry_config(self, profile: str = "default") -> QueryResult[RegistryConfig]:
        """
        获取注册表配置

        Args:
            profile: 配置文件名 (default, hardened, fast)

        Returns:
            查询结果，包含注册表配置
        """
        return self._get(ConfigType.REGISTRY, profile)

    def get_logging_config(self, profile: str = "default") -> QueryResult[LoggingConfig]:
        """
        获取日志配置

        Args:
            profile: 配置文件名 (default, debug, production)
        """
        return self._get(ConfigType.LOGGING, profile)

    def register_profile(self, config_type: ConfigType, profile: str, config: Any) -> QueryResult[bool]:
        """注册或覆盖一个配置文件"""
        expected = _DEFAULT_CLASSES[config_type]
        if not isinstance(config, expected):
            return QueryResult.invalid(
                f"{config_type.value}配置必须是{expected.__name__}",
                error_code="INVALID_CONFIG_TYPE"
            )
        self._configs[config_type][profile] = config
        self.logger.info(f"已注册{config_type.value}配置 '{profile}'")
        return QueryResult.ok(True)

    def update_config(self, config_type: ConfigType, profile: str, updates: Dict[str, Any]) -> QueryResult[bool]:
        """
        更新已有配置文件的部分字段

        Args:
            config_type: 配置类型
            profile: 配置文件名
            updates: 要更新的字段
        """
        config_profiles = self._configs.get(config_type, {})
        if profile not in config_profiles:
            return QueryResult.invalid(
                f"配置 '{profile}' 不存在",
                error_code="PROFILE_NOT_FOUND"
            )

        current = config_profiles[profile]
        unknown = set(updates) - set(asdict(current))
        if unknown:
            return QueryResult.invalid(
                f"未知配置字段: {sorted(unknown)}",
                error_code="UNKNOWN_CONFIG_FIELD"
            )

        try:
            config_profiles[profile] = replace(current, **updates)
        except RegistryConfigError as e:
            return QueryResult.from_error(e)

        self.logger.info(f"配置 '{profile}' 已更新: {updates}")
        return QueryResult.ok(True)

    def list_available_profiles(self, config_type: ConfigType) -> QueryResult[List[str]]:
        """列出某类配置的所有配置文件名"""
        return QueryResult.ok(sorted(self._configs.get(config_type, {})))


def configure_logging(config: LoggingConfig) -> None:
    """根据日志配置设置根日志处理器"""
    handlers: List[logging.Handler] = []
    if config.enable_console_logging:
        handlers.append(logging.StreamHandler())
    if config.enable_file_logging:
        os.makedirs(os.path.dirname(config.log_file_path) or ".", exist_ok=True)
        handlers.append(logging.FileHandler(config.log_file_path, encoding='utf-8'))
    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format=config.log_format,
        handlers=handlers,
        force=True
    )


_config_service_instance: Optional[ConfigService] = None


def get_config_service() -> ConfigService:
    """获取全局配置服务实例"""
    global _config_service_instance
    if _config_service_instance is None:
        _config_service_instance = ConfigService()
    return _config_service_instance
