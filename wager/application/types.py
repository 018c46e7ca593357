"""
Application Layer Types - 应用层类型定义

命令结果和查询结果。失败结果由 WagerError 构造，携带其 error_code 和 game_id，
调用方无需捕获异常即可知道是哪个游戏、因为什么被拒绝。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar
from enum import Enum, auto

from ..core.errors import WagerError

T = TypeVar('T')


class ResultStatus(Enum):
    """操作结果状态"""
    SUCCESS = auto()
    VALIDATION_ERROR = auto()           # 输入本身不合法
    BUSINESS_RULE_VIOLATION = auto()    # 输入合法，但游戏状态、超时或转账不允许
    INVARIANT_VIOLATION = auto()        # 操作已提交，但之后的不变量检查失败


@dataclass(frozen=True)
class CommandResult:
    """命令执行结果"""
    status: ResultStatus
    message: str = ""
    error_code: Optional[str] = None
    game_id: Optional[int] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    @property
    def payouts(self) -> Dict[str, int]:
        """结算命令的 {收款地址: 金额}，其他命令为空"""
        return self.data.get('payouts', {})

    @classmethod
    def succeeded(cls, message: str, data: Dict[str, Any]) -> 'CommandResult':
        return cls(ResultStatus.SUCCESS, message, game_id=data.get('game_id'), data=data)

    @classmethod
    def rejected(cls, error: WagerError, status: ResultStatus) -> 'CommandResult':
        """由被拒绝操作抛出的业务异常构造失败结果"""
        return cls(status, str(error), error.error_code, error.game_id)

    @classmethod
    def invariant_violated(cls, message: str, game_ids: Tuple[int, ...],
                           data: Dict[str, Any]) -> 'CommandResult':
        """操作已提交但破坏了不变量；data 仍是该操作的结果"""
        return cls(
            ResultStatus.INVARIANT_VIOLATION,
            message,
            error_code="INVARIANT_VIOLATION",
            game_id=game_ids[0] if game_ids else data.get('game_id'),
            data={**data, 'violated_game_ids': list(game_ids)}
        )


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """查询结果"""
    status: ResultStatus
    data: Optional[T] = None
    message: str = ""
    error_code: Optional[str] = None
    game_id: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    @classmethod
    def ok(cls, data: T) -> 'QueryResult[T]':
        return cls(ResultStatus.SUCCESS, data)

    @classmethod
    def invalid(cls, message: str, error_code: str) -> 'QueryResult[T]':
        return cls(ResultStatus.VALIDATION_ERROR, message=message, error_code=error_code)

    @classmethod
    def from_error(cls, error: WagerError) -> 'QueryResult[T]':
        return cls(
            ResultStatus.VALIDATION_ERROR,
            message=str(error),
            error_code=error.error_code,
            game_id=error.game_id
        )
