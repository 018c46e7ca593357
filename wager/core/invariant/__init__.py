"""
Invariant Module - 数学不变量

Classes:
    RegistryInvariants: 注册表不变量检查器
    PotIntegrityChecker: 奖池完整性检查器
    FundsConservationChecker: 资金守恒检查器
    StateConsistencyChecker: 状态一致性检查器
    BaseInvariantChecker: 不变量检查器基类

Types:
    InvariantType: 不变量类型枚举
    InvariantViolation: 不变量违反记录（带游戏ID）
    InvariantCheckResult: 不变量检查结果
    InvariantError: 不变量错误异常
"""

from .types import (
    InvariantType,
    InvariantViolation,
    InvariantCheckResult,
    InvariantError
)
from .base_checker import BaseInvariantChecker
from .checkers import PotIntegrityChecker, FundsConservationChecker, StateConsistencyChecker
from .registry_invariants import RegistryInvariants

__all__ = [
    'RegistryInvariants',
    'PotIntegrityChecker',
    'FundsConservationChecker',
    'StateConsistencyChecker',
    'BaseInvariantChecker',
    'InvariantType',
    'InvariantViolation',
    'InvariantCheckResult',
    'InvariantError'
]
