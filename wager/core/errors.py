"""
对赌游戏业务异常定义
所有异常都是前置条件违反，单次调用范围内生效，不会留下部分状态
"""

from typing import Optional


class WagerError(Exception):
    """对赌游戏基础异常类"""

    error_code = "WAGER_ERROR"

    def __init__(self, message: str, game_id: Optional[int] = None):
        super().__init__(message)
        self.game_id = game_id


class InvalidStakeError(WagerError):
    """押注金额无效异常（为零或负数）"""

    error_code = "INVALID_STAKE"


class GameNotFoundError(WagerError):
    """游戏不存在异常"""

    error_code = "GAME_NOT_FOUND"


class InvalidStateError(WagerError):
    """游戏状态不允许该操作"""

    error_code = "INVALID_STATE"


class FeeMismatchError(WagerError):
    """加入金额与入场费不一致"""

    error_code = "FEE_MISMATCH"


class TimeoutExceededError(WagerError):
    """结算超出超时窗口"""

    error_code = "TIMEOUT_EXCEEDED"


class TransferFailureError(WagerError):
    """资金转移失败，整个操作必须回滚"""

    error_code = "TRANSFER_FAILURE"


class UnauthorizedError(WagerError):
    """调用者没有所需的管理员权限"""

    error_code = "UNAUTHORIZED"


class RegistryConfigError(WagerError):
    """注册表配置错误异常"""

    error_code = "INVALID_CONFIG"
