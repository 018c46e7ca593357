"""
游戏类型定义

定义游戏状态、结算结果、游戏记录以及只读快照。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

__all__ = [
    'GameState',
    'GameResult',
    'Game',
    'GameSnapshot',
    'RegistrySnapshot',
]


class GameState(Enum):
    """游戏状态枚举，未创建的游戏没有记录，因此不需要 NONE 成员"""
    CREATED = "created"
    ACTIVE = "active"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self is GameState.ABANDONED


class GameResult(Enum):
    """结算结果，值即 GAME_ENDED 事件中的结果代码"""
    WIN = 1
    TIE = 2
    REFUND = 3
    FORFEIT = 4


@dataclass
class Game:
    """游戏记录，只能由注册表修改"""
    game_id: int
    entry_fee: int
    pot: int
    state: GameState
    last_activity: float
    created_at: float
    players: List[str] = field(default_factory=list)
    result: Optional[GameResult] = None

    def __post_init__(self):
        """验证游戏记录的有效性"""
        if self.game_id < 1:
            raise ValueError("game_id必须从1开始")
        if self.entry_fee <= 0:
            raise ValueError("entry_fee必须大于0")
        if self.pot < 0:
            raise ValueError("pot不能为负数")
        if not self.players:
            raise ValueError("players至少包含创建者")

    @property
    def creator(self) -> str:
        return self.players[0]

    def to_snapshot(self) -> 'GameSnapshot':
        return GameSnapshot(
            game_id=self.game_id,
            players=tuple(self.players),
            entry_fee=self.entry_fee,
            pot=self.pot,
            state=self.state,
            last_activity=self.last_activity,
            created_at=self.created_at,
            result=self.result
        )


@dataclass(frozen=True)
class GameSnapshot:
    """游戏只读快照"""
    game_id: int
    players: Tuple[str, ...]
    entry_fee: int
    pot: int
    state: GameState
    last_activity: float
    created_at: float
    result: Optional[GameResult] = None

    @property
    def creator(self) -> str:
        return self.players[0]

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def is_live(self) -> bool:
        return not self.state.is_terminal

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式，用于序列化"""
        return {
            'game_id': self.game_id,
            'players': list(self.players),
            'entry_fee': self.entry_fee,
            'pot': self.pot,
            'state': self.state.value,
            'last_activity': self.last_activity,
            'created_at': self.created_at,
            'result': self.result.name if self.result else None
        }


@dataclass(frozen=True)
class RegistrySnapshot:
    """注册表快照，供不变量检查和查询使用"""
    games: Tuple[GameSnapshot, ...]
    number_of_games: int
    escrow_balance: int
    wallet_total: int
    total_supply: int
    timeout_window: float

    @property
    def live_pot_total(self) -> int:
        return sum(game.pot for game in self.games if game.is_live)

    @property
    def stranded_funds(self) -> int:
        """托管中不属于任何未结算奖池的余额"""
        return self.escrow_balance - self.live_pot_total
