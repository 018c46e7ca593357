"""
Wager Test Configuration - pytest配置文件

提供通用的测试fixture：
- 可手动推进的时钟
- 预先充值的资金账本
- 独立的事件总线和事件记录器
- 使用以上依赖的游戏注册表
"""

import pytest
from typing import List

from wager.core.events import DomainEvent, EventBus
from wager.core.funds import FundsLedger
from wager.core.game import GameRegistry, ManualClock


STARTING_BALANCE = 1000
ADDRESSES = ("alice", "bob", "carol", "dave")


@pytest.fixture
def clock():
    """从t=1000开始的手动时钟"""
    return ManualClock(start=1000)


@pytest.fixture
def ledger():
    """每个地址初始余额1000的资金账本"""
    return FundsLedger({address: STARTING_BALANCE for address in ADDRESSES})


@pytest.fixture
def event_bus():
    """独立的事件总线，避免测试之间共享全局历史"""
    return EventBus()


@pytest.fixture
def recorded_events(event_bus) -> List[DomainEvent]:
    """记录所有发布到事件总线的事件"""
    events: List[DomainEvent] = []
    event_bus.subscribe_all(events.append)
    return events


@pytest.fixture
def registry(ledger, clock, event_bus):
    """默认配置（超时窗口300）的游戏注册表"""
    return GameRegistry(ledger=ledger, clock=clock, event_bus=event_bus)


@pytest.fixture
def active_game(registry):
    """alice创建、bob加入并已激活的游戏，入场费10"""
    game_id = registry.create_game("alice", 10)
    registry.join_game(game_id, "bob", 10)
    registry.activate_game(game_id)
    return game_id


def pytest_configure(config):
    """pytest配置"""
    config.addinivalue_line(
        "markers", "property_test: 标记基于属性的测试"
    )
    config.addinivalue_line(
        "markers", "performance: 标记性能测试"
    )
