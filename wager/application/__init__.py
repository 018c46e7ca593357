"""
Application Module - 应用服务层

Classes:
    GameCommandService: 游戏命令服务
    GameQueryService: 游戏查询服务
    ConfigService: 配置管理服务
"""

from .types import CommandResult, QueryResult, ResultStatus
from .config_service import (
    ConfigService,
    ConfigType,
    RegistryConfig,
    LoggingConfig,
    configure_logging,
    get_config_service,
)
from .command_service import GameCommandService
from .query_service import GameQueryService

__all__ = [
    'CommandResult',
    'QueryResult',
    'ResultStatus',
    'ConfigService',
    'ConfigType',
    'RegistryConfig',
    'LoggingConfig',
    'configure_logging',
    'get_config_service',
    'GameCommandService',
    'GameQueryService',
]
