"""
Domain Events - 领域事件定义

该模块定义了对赌游戏注册表向外部观察者/索引器发布的事件。
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any, Optional
from enum import Enum, auto
import time
import uuid


class EventType(Enum):
    """事件类型枚举"""
    GAME_CREATED = auto()
    PLAYER_JOINED = auto()
    GAME_ACTIVATED = auto()
    GAME_ENDED = auto()


@dataclass(frozen=True)
class DomainEvent:
    """
    领域事件基类

    Attributes:
        event_id: 事件唯一标识符
        event_type: 事件类型
        aggregate_id: 聚合根ID（游戏ID）
        timestamp: 事件创建时间戳
        data: 事件数据，包含注册表时钟下的 activity_timestamp
        version: 事件版本号
        correlation_id: 关联ID，用于追踪相关事件
        sequence: 事件总线分配的全局序号，0表示尚未发布
    """
    event_id: str
    event_type: EventType
    aggregate_id: int
    timestamp: float
    data: Dict[str, Any]
    version: int = 1
    correlation_id: Optional[str] = None
    sequence: int = 0

    @classmethod
    def create(
        cls,
        event_type: EventType,
        aggregate_id: int,
        data: Dict[str, Any],
        correlation_id: Optional[str] = None
    ) -> DomainEvent:
        """
        创建领域事件的工厂方法

        Args:
            event_type: 事件类型
            aggregate_id: 游戏ID
            data: 事件数据
            correlation_id: 关联ID

        Returns:
            DomainEvent: 创建的事件实例
        """
        return cls(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            aggregate_id=aggregate_id,
            timestamp=time.time(),
            data=data,
            correlation_id=correlation_id
        )

    def to_dict(self) -> Dict[str, Any]:
        """将事件转换为字典格式，用于序列化"""
        return {
            'event_id': self.event_id,
            'event_type': self.event_type.name,
            'aggregate_id': self.aggregate_id,
            'timestamp': self.timestamp,
            'data': self.data,
            'version': self.version,
            'correlation_id': self.correlation_id,
            'sequence': self.sequence
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DomainEvent:
        """从字典创建事件实例，用于反序列化"""
        return cls(
            event_id=data['event_id'],
            event_type=EventType[data['event_type']],
            aggregate_id=data['aggregate_id'],
            timestamp=data['timestamp'],
            data=data['data'],
            version=data.get('version', 1),
            correlation_id=data.get('correlation_id'),
            sequence=data.get('sequence', 0)
        )


# 具体事件类型定义

@dataclass(frozen=True)
class GameCreatedEvent(DomainEvent):
    """游戏创建事件"""

    @classmethod
    def create(
        cls,
        game_id: int,
        creator: str,
        entry_fee: int,
        activity_timestamp: float,
        correlation_id: Optional[str] = None
    ) -> GameCreatedEvent:
        data = {
            'creator': creator,
            'entry_fee': entry_fee,
            'activity_timestamp': activity_timestamp
        }
        base_event = DomainEvent.create(EventType.GAME_CREATED, game_id, data, correlation_id)
        return cls(**base_event.__dict__)


@dataclass(frozen=True)
class PlayerJoinedEvent(DomainEvent):
    """玩家加入事件"""

    @classmethod
    def create(
        cls,
        game_id: int,
        player: str,
        pot: int,
        player_count: int,
        activity_timestamp: float,
        correlation_id: Optional[str] = None
    ) -> PlayerJoinedEvent:
        data = {
            'player': player,
            'pot': pot,
            'player_count': player_count,
            'activity_timestamp': activity_timestamp
        }
        base_event = DomainEvent.create(EventType.PLAYER_JOINED, game_id, data, correlation_id)
        return cls(**base_event.__dict__)


@dataclass(frozen=True)
class GameActivatedEvent(DomainEvent):
    """游戏激活事件"""

    @classmethod
    def create(
        cls,
        game_id: int,
        player_count: int,
        pot: int,
        activity_timestamp: float,
        correlation_id: Optional[str] = None
    ) -> GameActivatedEvent:
        data = {
            'player_count': player_count,
            'pot': pot,
            'activity_timestamp': activity_timestamp
        }
        base_event = DomainEvent.create(EventType.GAME_ACTIVATED, game_id, data, correlation_id)
        return cls(**base_event.__dict__)


@dataclass(frozen=True)
class GameEndedEvent(DomainEvent):
    """游戏结束事件，携带结果代码和每个收款地址的金额"""

    @classmethod
    def create(
        cls,
        game_id: int,
        result: str,
        result_code: int,
        payouts: Dict[str, int],
        stranded: int,
        activity_timestamp: float,
        correlation_id: Optional[str] = None
    ) -> GameEndedEvent:
        data = {
            'result': result,
            'result_code': result_code,
            'payouts': payouts,
            'stranded': stranded,
            'activity_timestamp': activity_timestamp
        }
        base_event = DomainEvent.create(EventType.GAME_ENDED, game_id, data, correlation_id)
        return cls(**base_event.__dict__)
