"""
Events Module - 领域事件

Classes:
    DomainEvent: 领域事件基类
    EventBus: 为事件编号并同步分发的事件总线

Event Types:
    EventType: 事件类型枚举
    GameCreatedEvent: 游戏创建事件
    PlayerJoinedEvent: 玩家加入事件
    GameActivatedEvent: 游戏激活事件
    GameEndedEvent: 游戏结束事件

Functions:
    get_event_bus: 获取全局事件总线实例
"""

from .domain_events import (
    EventType,
    DomainEvent,
    GameCreatedEvent,
    PlayerJoinedEvent,
    GameActivatedEvent,
    GameEndedEvent,
)

from .event_bus import (
    EventHandler,
    EventBus,
    get_event_bus,
)

__all__ = [
    "EventType",
    "DomainEvent",
    "GameCreatedEvent",
    "PlayerJoinedEvent",
    "GameActivatedEvent",
    "GameEndedEvent",
    "EventHandler",
    "EventBus",
    "get_event_bus",
]
