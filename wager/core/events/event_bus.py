"""
Event Bus - 事件总线

注册表在提交每个操作之后发布事件。总线在锁内为事件分配单调递增的序号，
事件历史按序号保存，外部索引器可以用 get_events_since() 按提交顺序增量追赶。

处理器是接收 DomainEvent 的普通可调用对象，同步执行；单个处理器抛出的异常
会被记录，不影响其他处理器，也不会回滚已经提交的游戏操作。
"""

from __future__ import annotations
from collections import defaultdict, deque
from dataclasses import replace
from typing import Callable, Deque, Dict, List, Optional
import logging
import threading

from .domain_events import DomainEvent, EventType

__all__ = ['EventHandler', 'EventBus', 'get_event_bus']

EventHandler = Callable[[DomainEvent], None]


class EventBus:
    """同步事件总线，保留最近 max_history_size 个已编号事件"""

    def __init__(self, max_history_size: int = 1000):
        self._handlers: Dict[EventType, List[EventHandler]] = defaultdict(list)
        self._global_handlers: List[EventHandler] = []
        self._history: Deque[DomainEvent] = deque(maxlen=max_history_size)
        self._sequence = 0
        self._lock = threading.RLock()
        self._logger = logging.getLogger(__name__)

    @property
    def last_sequence(self) -> int:
        """最近一次发布分配的序号，尚未发布时为0"""
        with self._lock:
            return self._sequence

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        with self._lock:
            self._global_handlers.append(handler)

    def publish(self, event: DomainEvent) -> DomainEvent:
        """
        为事件编号、记入历史并分发给处理器

        Returns:
            带有序号的事件，处理器收到的也是这个实例
        """
        with self._lock:
            self._sequence += 1
            event = replace(event, sequence=self._sequence)
            self._history.append(event)
            handlers = self._handlers[event.event_type] + self._global_handlers

        self._logger.debug(
            f"事件 #{event.sequence} {event.event_type.name} (游戏 {event.aggregate_id})"
        )

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self._logger.error(f"事件 #{event.sequence} 的处理器 {handler!r} 失败: {e}")

        return event

    def get_event_history(self,
                          event_type: Optional[EventType] = None,
                          aggregate_id: Optional[int] = None,
                          limit: Optional[int] = None) -> List[DomainEvent]:
        """
        按序号顺序返回保留的事件

        Args:
            event_type: 只返回该类型的事件
            aggregate_id: 只返回该游戏的事件
            limit: 只返回最后 limit 个
        """
        with self._lock:
            events = list(self._history)

        if event_type is not None:
            events = [e for e in events if e.event_type is event_type]
        if aggregate_id is not None:
            events = [e for e in events if e.aggregate_id == aggregate_id]
        if limit:
            events = events[-limit:]
        return events

    def get_events_since(self, sequence: int) -> List[DomainEvent]:
        """返回序号大于 sequence 的保留事件，供索引器增量同步"""
        with self._lock:
            return [e for e in self._history if e.sequence > sequence]


_global_event_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """获取全局事件总线实例"""
    global _global_event_bus
    if _global_event_bus is None:
        _global_event_bus = EventBus()
    return _global_event_bus
