"""
游戏模块

提供游戏状态机、游戏注册表和时钟。
"""

from .types import GameState, GameResult, Game, GameSnapshot, RegistrySnapshot
from .state_machine import ALLOWED_TRANSITIONS, can_transition, ensure_state, ensure_transition
from .clock import SystemClock, ManualClock
from .registry import GameRegistry, DEFAULT_TIMEOUT_WINDOW

__all__ = [
    'GameState',
    'GameResult',
    'Game',
    'GameSnapshot',
    'RegistrySnapshot',
    'ALLOWED_TRANSITIONS',
    'can_transition',
    'ensure_state',
    'ensure_transition',
    'SystemClock',
    'ManualClock',
    'GameRegistry',
    'DEFAULT_TIMEOUT_WINDOW',
]
