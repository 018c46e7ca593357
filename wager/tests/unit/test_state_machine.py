"""
状态机单元测试

测试显式转换表和状态断言。
"""

import pytest

from wager.core.errors import InvalidStateError
from wager.core.game import (
    ALLOWED_TRANSITIONS,
    GameState,
    can_transition,
    ensure_state,
    ensure_transition,
)


class TestTransitionTable:
    """测试转换表"""

    def test_every_state_has_an_entry(self):
        assert set(ALLOWED_TRANSITIONS) == set(GameState)

    @pytest.mark.parametrize("source,target", [
        (GameState.CREATED, GameState.CREATED),
        (GameState.CREATED, GameState.ACTIVE),
        (GameState.CREATED, GameState.ABANDONED),
        (GameState.ACTIVE, GameState.ABANDONED),
    ])
    def test_allowed_transitions(self, source, target):
        assert can_transition(source, target)
        ensure_transition(source, target, "测试")

    @pytest.mark.parametrize("source,target", [
        (GameState.ACTIVE, GameState.CREATED),
        (GameState.ACTIVE, GameState.ACTIVE),
        (GameState.ABANDONED, GameState.CREATED),
        (GameState.ABANDONED, GameState.ACTIVE),
        (GameState.ABANDONED, GameState.ABANDONED),
    ])
    def test_forbidden_transitions(self, source, target):
        assert not can_transition(source, target)
        with pytest.raises(InvalidStateError):
            ensure_transition(source, target, "测试", game_id=1)

    def test_abandoned_is_terminal(self):
        assert GameState.ABANDONED.is_terminal
        assert not GameState.CREATED.is_terminal
        assert not GameState.ACTIVE.is_terminal


class TestEnsureState:
    """测试状态断言"""

    def test_matching_state_passes(self):
        ensure_state(GameState.ACTIVE, GameState.ACTIVE, "结算")

    def test_mismatch_carries_game_id(self):
        with pytest.raises(InvalidStateError) as exc_info:
            ensure_state(GameState.CREATED, GameState.ACTIVE, "结算", game_id=4)

        assert exc_info.value.game_id == 4
        assert exc_info.value.error_code == "INVALID_STATE"
