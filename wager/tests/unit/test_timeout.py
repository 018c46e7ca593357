"""
超时窗口单元测试

resolve_win / resolve_tie 受超时窗口约束，边界值包含在窗口内。
"""

import pytest

from wager.core.access import AllowListAdmin, OpenAccess
from wager.core.errors import (
    InvalidStateError,
    RegistryConfigError,
    TimeoutExceededError,
    UnauthorizedError,
)
from wager.core.game import DEFAULT_TIMEOUT_WINDOW, GameRegistry, GameState, ManualClock, SystemClock


class TestResolveTimeout:
    """测试结算超时"""

    def test_default_window_is_300(self, registry):
        assert DEFAULT_TIMEOUT_WINDOW == 300
        assert registry.timeout_window == 300

    def test_resolve_at_exact_boundary_succeeds(self, registry, clock, active_game):
        clock.set(1000 + 300)

        assert registry.resolve_win(active_game, "alice") == {"alice": 20}

    def test_resolve_one_past_boundary_fails(self, registry, ledger, clock, active_game):
        clock.set(1000 + 300 + 1)

        with pytest.raises(TimeoutExceededError):
            registry.resolve_win(active_game, "alice")

        assert registry.is_active(active_game)
        assert registry.pot_of(active_game) == 20
        assert ledger.get_escrow_balance() == 20

    def test_tie_respects_timeout(self, registry, clock, active_game):
        clock.advance(301)

        with pytest.raises(TimeoutExceededError):
            registry.resolve_tie(active_game, "alice", "bob")

    def test_window_measured_from_last_join_not_activation(self, registry, clock):
        """测试窗口从最后一次加入开始计算，激活不刷新时间"""
        game_id = registry.create_game("alice", 10)
        clock.advance(200)
        registry.join_game(game_id, "bob", 10)
        clock.advance(250)
        registry.activate_game(game_id)
        clock.advance(50)

        # 距加入300，距创建500
        assert registry.resolve_win(game_id, "bob") == {"bob": 20}

    def test_timed_out_game_can_still_be_forfeited(self, registry, clock, active_game):
        """测试超时后唯一的出路是没收"""
        clock.advance(1000)

        with pytest.raises(TimeoutExceededError):
            registry.resolve_win(active_game, "alice")
        assert registry.forfeit_to_arbiter(active_game, "dave") == {"dave": 20}

    def test_custom_window(self, ledger, clock, event_bus):
        registry = GameRegistry(ledger, timeout_window=10, clock=clock, event_bus=event_bus)
        game_id = registry.create_game("alice", 10)
        registry.activate_game(game_id)
        clock.advance(11)

        with pytest.raises(TimeoutExceededError):
            registry.resolve_win(game_id, "alice")

    def test_negative_window_rejected(self, ledger, clock, event_bus):
        with pytest.raises(RegistryConfigError):
            GameRegistry(ledger, timeout_window=-1, clock=clock, event_bus=event_bus)


class TestForfeitHardening:
    """测试默认关闭的没收加固选项"""

    def test_admin_requirement_needs_capability(self, ledger, clock, event_bus):
        with pytest.raises(RegistryConfigError):
            GameRegistry(ledger, clock=clock, event_bus=event_bus, require_admin_for_forfeit=True)

    def test_admin_required_for_forfeit(self, ledger, clock, event_bus):
        registry = GameRegistry(
            ledger, clock=clock, event_bus=event_bus,
            admin=AllowListAdmin(["operator"]), require_admin_for_forfeit=True
        )
        game_id = registry.create_game("alice", 10)
        registry.activate_game(game_id)

        with pytest.raises(UnauthorizedError):
            registry.forfeit_to_arbiter(game_id, "mallory", caller="mallory")
        with pytest.raises(UnauthorizedError):
            registry.forfeit_to_arbiter(game_id, "mallory")
        assert registry.is_active(game_id)

        assert registry.forfeit_to_arbiter(game_id, "dave", caller="operator") == {"dave": 10}

    def test_forfeit_waits_for_timeout_when_required(self, ledger, clock, event_bus):
        registry = GameRegistry(ledger, clock=clock, event_bus=event_bus, forfeit_requires_timeout=True)
        game_id = registry.create_game("alice", 10)
        registry.activate_game(game_id)
        clock.advance(300)

        with pytest.raises(InvalidStateError):
            registry.forfeit_to_arbiter(game_id, "dave")
        assert registry.state_of(game_id) is GameState.ACTIVE

        clock.advance(1)
        assert registry.forfeit_to_arbiter(game_id, "dave") == {"dave": 10}

    def test_open_access_admits_any_caller(self, ledger, clock, event_bus):
        registry = GameRegistry(
            ledger, clock=clock, event_bus=event_bus,
            admin=OpenAccess(), require_admin_for_forfeit=True
        )
        game_id = registry.create_game("alice", 10)
        registry.activate_game(game_id)

        assert registry.forfeit_to_arbiter(game_id, "dave", caller="anyone") == {"dave": 10}


class TestClocks:
    """测试时钟"""

    def test_manual_clock_never_goes_backwards(self):
        clock = ManualClock(start=50)
        assert clock.advance(10) == 60

        with pytest.raises(ValueError):
            clock.advance(-1)
        with pytest.raises(ValueError):
            clock.set(59)

    def test_system_clock_is_default(self, ledger, event_bus):
        registry = GameRegistry(ledger, event_bus=event_bus)
        game_id = registry.create_game("alice", 10)

        assert isinstance(SystemClock()(), int)
        assert registry.get_game(game_id).created_at > 0
