"""
不变量检查器基础类
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from ..game.types import RegistrySnapshot
from .types import InvariantType, InvariantViolation, InvariantCheckResult

__all__ = ['BaseInvariantChecker']


class BaseInvariantChecker(ABC):
    """
    不变量检查器基础抽象类

    子类在 _perform_check 中对每个违反调用 _violation()，
    检查过程本身抛出的异常也记为一条违反。
    """

    def __init__(self, invariant_type: InvariantType):
        self.invariant_type = invariant_type
        self._violations: List[InvariantViolation] = []

    @abstractmethod
    def _perform_check(self, snapshot: RegistrySnapshot) -> None:
        """检查快照，通过 _violation() 记录每一处违反"""

    def check(self, snapshot: RegistrySnapshot) -> InvariantCheckResult:
        self._violations = []
        try:
            self._perform_check(snapshot)
        except Exception as e:
            self._violation(f"检查过程中发生异常: {e}", exception_type=type(e).__name__)
        return InvariantCheckResult(self.invariant_type, tuple(self._violations))

    def _violation(self, description: str, game_id: Optional[int] = None, **context: Any) -> None:
        self._violations.append(InvariantViolation(
            invariant_type=self.invariant_type,
            description=description,
            game_id=game_id,
            context=context
        ))
