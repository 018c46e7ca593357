"""
Game Query Service - 游戏查询服务

处理所有游戏只读操作，遵循CQRS模式。
"""

from typing import Any, Callable, Dict, List, Optional

from ..core.errors import WagerError
from ..core.events import DomainEvent, EventBus, get_event_bus
from ..core.game import GameRegistry, GameSnapshot, GameState
from .types import QueryResult


class GameQueryService:
    """游戏查询服务"""

    def __init__(self, registry: GameRegistry, event_bus: Optional[EventBus] = None):
        """
        初始化查询服务

        Args:
            registry: 游戏注册表
            event_bus: 事件总线，用于查询事件历史
        """
        self._registry = registry
        self._event_bus = event_bus or get_event_bus()

    def get_game_count(self) -> QueryResult[int]:
        return QueryResult.ok(self._registry.number_of_games)

    def get_player_count(self, game_id: int) -> QueryResult[int]:
        return self._query(lambda: self._registry.player_count(game_id))

    def get_pot(self, game_id: int) -> QueryResult[int]:
        return self._query(lambda: self._registry.pot_of(game_id))

    def is_game_active(self, game_id: int) -> QueryResult[bool]:
        return self._query(lambda: self._registry.is_active(game_id))

    def get_game(self, game_id: int) -> QueryResult[GameSnapshot]:
        return self._query(lambda: self._registry.get_game(game_id))

    def list_games(self, state: Optional[GameState] = None) -> QueryResult[List[Dict[str, Any]]]:
        """列出游戏，返回可序列化的字典列表"""
        return QueryResult.ok([game.to_dict() for game in self._registry.list_games(state)])

    def get_balance(self, address: str) -> QueryResult[int]:
        return QueryResult.ok(self._registry.ledger.get_balance(address))

    def get_stranded_funds(self) -> QueryResult[int]:
        return QueryResult.ok(self._registry.stranded_funds())

    def get_game_events(self, game_id: int) -> QueryResult[List[DomainEvent]]:
        """获取某个游戏的事件历史"""
        return QueryResult.ok(self._event_bus.get_event_history(aggregate_id=game_id))

    def get_events_since(self, sequence: int) -> QueryResult[List[DomainEvent]]:
        """获取序号大于 sequence 的事件，按提交顺序排列，供索引器增量同步"""
        return QueryResult.ok(self._event_bus.get_events_since(sequence))

    @staticmethod
    def _query(fetch: Callable[[], Any]) -> QueryResult:
        try:
            return QueryResult.ok(fetch())
        except WagerError as e:
            return QueryResult.from_error(e)
