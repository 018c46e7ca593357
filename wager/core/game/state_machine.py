"""
游戏状态机

以显式转换表描述允许的状态转换，不合法的转换抛出 InvalidStateError。
"""

from typing import Dict, FrozenSet, Optional

from ..errors import InvalidStateError
from .types import GameState

__all__ = ['ALLOWED_TRANSITIONS', 'can_transition', 'ensure_transition', 'ensure_state']


ALLOWED_TRANSITIONS: Dict[GameState, FrozenSet[GameState]] = {
    GameState.CREATED: frozenset({GameState.CREATED, GameState.ACTIVE, GameState.ABANDONED}),
    GameState.ACTIVE: frozenset({GameState.ABANDONED}),
    GameState.ABANDONED: frozenset(),
}


def can_transition(source: GameState, target: GameState) -> bool:
    """检查是否可以从 source 转换到 target"""
    return target in ALLOWED_TRANSITIONS[source]


def ensure_state(current: GameState, required: GameState, operation: str,
                 game_id: Optional[int] = None) -> None:
    """
    断言游戏处于操作要求的状态

    Raises:
        InvalidStateError: 当前状态与要求不一致
    """
    if current is not required:
        raise InvalidStateError(
            f"游戏{game_id}处于{current.value}状态，{operation}要求{required.value}状态",
            game_id
        )


def ensure_transition(current: GameState, target: GameState, operation: str,
                      game_id: Optional[int] = None) -> None:
    """
    断言转换合法

    Raises:
        InvalidStateError: 转换表不允许该转换
    """
    if not can_transition(current, target):
        raise InvalidStateError(
            f"{operation}: 不能从 {current.value} 转换到 {target.value}",
            game_id
        )
