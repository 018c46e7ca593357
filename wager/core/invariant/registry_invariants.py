"""
注册表不变量检查器

整合所有不变量检查器，提供统一的检查接口。
"""

from typing import Dict

from ..game.types import RegistrySnapshot
from .types import InvariantType, InvariantCheckResult, InvariantError
from .checkers import PotIntegrityChecker, FundsConservationChecker, StateConsistencyChecker

__all__ = ['RegistryInvariants']


class RegistryInvariants:
    """注册表不变量检查器"""

    def __init__(self):
        self._checkers = {
            InvariantType.POT_INTEGRITY: PotIntegrityChecker(),
            InvariantType.FUNDS_CONSERVATION: FundsConservationChecker(),
            InvariantType.STATE_CONSISTENCY: StateConsistencyChecker()
        }

    def check_all(self, snapshot: RegistrySnapshot,
                  raise_on_violation: bool = False) -> Dict[InvariantType, InvariantCheckResult]:
        """检查所有不变量

        Args:
            snapshot: 注册表快照
            raise_on_violation: 是否在发现违反时抛出异常

        Returns:
            Dict[InvariantType, InvariantCheckResult]: 检查结果字典

        Raises:
            InvariantError: 当raise_on_violation=True且有任何违反时
        """
        results = {
            invariant_type: checker.check(snapshot)
            for invariant_type, checker in self._checkers.items()
        }

        if raise_on_violation:
            violations = [v for result in results.values() for v in result.violations]
            if violations:
                raise InvariantError(violations)

        return results

    def is_valid_state(self, snapshot: RegistrySnapshot) -> bool:
        """检查注册表状态是否有效"""
        return all(result.is_valid for result in self.check_all(snapshot).values())
