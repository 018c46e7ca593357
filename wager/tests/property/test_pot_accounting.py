"""
Property-based Tests for Pot Accounting - 奖池记账属性测试

使用hypothesis验证在任意入场费、玩家序列和结算方式下：
- 奖池始终等于入场费 × 玩家数
- 结算后奖池清零，资金守恒
- 平局余数只会滞留在托管中，不会凭空产生或消失
"""

import pytest
from hypothesis import given, settings, strategies as st
from typing import List, Tuple

from wager.core.events import EventBus
from wager.core.funds import FundsLedger
from wager.core.game import GameRegistry, GameState, ManualClock
from wager.core.invariant import RegistryInvariants


ADDRESSES = ["p0", "p1", "p2", "p3", "p4"]
OUTCOMES = ["win", "tie", "refund", "forfeit"]

fee_strategy = st.integers(min_value=1, max_value=500)
joiners_strategy = st.lists(st.sampled_from(ADDRESSES), max_size=6)
game_plan_strategy = st.tuples(fee_strategy, joiners_strategy, st.sampled_from(OUTCOMES))


def build_registry() -> Tuple[GameRegistry, FundsLedger]:
    """每个样例使用独立的账本和注册表"""
    ledger = FundsLedger({address: 100_000 for address in ADDRESSES})
    registry = GameRegistry(ledger, clock=ManualClock(start=1000), event_bus=EventBus())
    return registry, ledger


def settle(registry: GameRegistry, game_id: int, outcome: str):
    players = registry.players_of(game_id)
    if outcome == "refund":
        return registry.refund(game_id)
    registry.activate_game(game_id)
    if outcome == "win":
        return registry.resolve_win(game_id, players[-1])
    if outcome == "tie":
        return registry.resolve_tie(game_id, players[0], players[-1])
    return registry.forfeit_to_arbiter(game_id, "arbiter")


@pytest.mark.property_test
@given(fee_strategy, joiners_strategy)
def test_pot_tracks_entry_fee_times_players(fee: int, joiners: List[str]):
    """Property test: 每次加入后奖池等于入场费乘以玩家数"""
    registry, ledger = build_registry()
    game_id = registry.create_game("p0", fee)

    for joiner in joiners:
        registry.join_game(game_id, joiner, fee)
        assert registry.pot_of(game_id) == fee * registry.player_count(game_id)

    assert registry.player_count(game_id) == len(joiners) + 1
    assert ledger.get_escrow_balance() == registry.pot_of(game_id)


@pytest.mark.property_test
@given(fee_strategy, joiners_strategy, st.sampled_from(OUTCOMES))
def test_settlement_empties_pot(fee: int, joiners: List[str], outcome: str):
    """Property test: 任意结算方式都清空奖池，支付加余数等于原奖池"""
    registry, ledger = build_registry()
    game_id = registry.create_game("p0", fee)
    for joiner in joiners:
        registry.join_game(game_id, joiner, fee)
    pot = registry.pot_of(game_id)

    payouts = settle(registry, game_id, outcome)

    assert registry.state_of(game_id) is GameState.ABANDONED
    assert registry.pot_of(game_id) == 0
    assert sum(payouts.values()) + registry.stranded_funds() == pot
    assert registry.stranded_funds() == (pot % 2 if outcome == "tie" else 0)
    assert ledger.validate_conservation()


@pytest.mark.property_test
@settings(max_examples=50)
@given(st.lists(game_plan_strategy, min_size=1, max_size=8), st.data())
def test_invariants_hold_across_many_games(plans, data):
    """Property test: 多个游戏交错进行时不变量始终成立"""
    registry, ledger = build_registry()
    invariants = RegistryInvariants()
    total_supply = ledger.get_total_supply()

    game_ids = []
    for fee, joiners, _ in plans:
        game_id = registry.create_game("p0", fee)
        for joiner in joiners:
            registry.join_game(game_id, joiner, fee)
        game_ids.append(game_id)
        assert invariants.is_valid_state(registry.snapshot())

    order = data.draw(st.permutations(list(range(len(plans)))))
    for index in order:
        settle(registry, game_ids[index], plans[index][2])
        assert invariants.is_valid_state(registry.snapshot())

    assert registry.number_of_games == len(plans)
    assert all(not registry.is_active(game_id) for game_id in game_ids)
    assert ledger.get_total_supply() == total_supply
