"""
Core Module - 纯领域逻辑层

该模块包含对赌游戏的核心业务逻辑。
核心模块只能依赖其他核心模块，不能依赖应用层。

Modules:
    errors: 业务异常定义
    game: 游戏状态机、游戏注册表
    funds: 资金账本和托管
    events: 领域事件系统
    invariant: 数学不变量检查
    access: 管理员权限能力
"""

from .errors import (
    WagerError,
    InvalidStakeError,
    GameNotFoundError,
    InvalidStateError,
    FeeMismatchError,
    TimeoutExceededError,
    TransferFailureError,
    UnauthorizedError,
    RegistryConfigError,
)
from .game import GameRegistry, GameState, GameResult, ManualClock, SystemClock
from .funds import FundsLedger

__all__ = [
    'WagerError',
    'InvalidStakeError',
    'GameNotFoundError',
    'InvalidStateError',
    'FeeMismatchError',
    'TimeoutExceededError',
    'TransferFailureError',
    'UnauthorizedError',
    'RegistryConfigError',
    'GameRegistry',
    'GameState',
    'GameResult',
    'ManualClock',
    'SystemClock',
    'FundsLedger',
]
