"""
不变量检查类型

违反记录带有所涉及的游戏ID，game_id 为 None 表示违反涉及整个注册表
（例如资金总量不守恒）。
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

__all__ = [
    'InvariantType',
    'InvariantViolation',
    'InvariantCheckResult',
    'InvariantError'
]


class InvariantType(Enum):
    """不变量类型枚举"""
    POT_INTEGRITY = auto()          # 奖池完整性
    FUNDS_CONSERVATION = auto()     # 资金守恒
    STATE_CONSISTENCY = auto()      # 状态一致性


@dataclass(frozen=True)
class InvariantViolation:
    """不变量违反记录"""
    invariant_type: InvariantType
    description: str
    game_id: Optional[int] = None
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.description:
            raise ValueError("description不能为空")

    def __str__(self) -> str:
        return f"{self.invariant_type.name}: {self.description}"


@dataclass(frozen=True)
class InvariantCheckResult:
    """单个不变量的检查结果，没有违反记录即为通过"""
    invariant_type: InvariantType
    violations: Tuple[InvariantViolation, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def game_ids(self) -> FrozenSet[int]:
        return frozenset(v.game_id for v in self.violations if v.game_id is not None)


class InvariantError(Exception):
    """注册表状态违反不变量"""

    def __init__(self, violations: Iterable[InvariantViolation]):
        self.violations = tuple(violations)
        super().__init__(
            f"发现{len(self.violations)}个不变量违反: " + "; ".join(str(v) for v in self.violations)
        )

    @property
    def game_ids(self) -> Tuple[int, ...]:
        """涉及的游戏ID，按升序排列"""
        return tuple(sorted({v.game_id for v in self.violations if v.game_id is not None}))
