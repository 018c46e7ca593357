"""
具体不变量检查器

- PotIntegrityChecker: 奖池与入场费、玩家数一致
- FundsConservationChecker: 钱包 + 托管 == 总供应量，托管足以覆盖未结算奖池
- StateConsistencyChecker: 结算结果与状态一致，ID连续
"""

from ..game.types import GameState, RegistrySnapshot
from .base_checker import BaseInvariantChecker
from .types import InvariantType

__all__ = ['PotIntegrityChecker', 'FundsConservationChecker', 'StateConsistencyChecker']


class PotIntegrityChecker(BaseInvariantChecker):
    """奖池完整性检查器"""

    def __init__(self):
        super().__init__(InvariantType.POT_INTEGRITY)

    def _perform_check(self, snapshot: RegistrySnapshot) -> None:
        for game in snapshot.games:
            if game.player_count < 1:
                self._violation(f"游戏{game.game_id}没有玩家", game.game_id)
            if game.entry_fee <= 0:
                self._violation(f"游戏{game.game_id}入场费无效: {game.entry_fee}", game.game_id)

            if game.is_live:
                expected = game.entry_fee * game.player_count
                if game.pot != expected:
                    self._violation(
                        f"游戏{game.game_id}奖池{game.pot}不等于入场费×玩家数{expected}",
                        game.game_id, pot=game.pot, expected_pot=expected
                    )
            elif game.pot != 0:
                self._violation(f"已结束的游戏{game.game_id}奖池未清零", game.game_id, pot=game.pot)


class FundsConservationChecker(BaseInvariantChecker):
    """资金守恒检查器"""

    def __init__(self):
        super().__init__(InvariantType.FUNDS_CONSERVATION)

    def _perform_check(self, snapshot: RegistrySnapshot) -> None:
        accounted = snapshot.wallet_total + snapshot.escrow_balance
        if accounted != snapshot.total_supply:
            self._violation(
                f"资金不守恒: 钱包{snapshot.wallet_total} + 托管{snapshot.escrow_balance} != 总量{snapshot.total_supply}",
                difference=accounted - snapshot.total_supply
            )

        if snapshot.escrow_balance < snapshot.live_pot_total:
            self._violation(
                f"托管{snapshot.escrow_balance}不足以覆盖未结算奖池{snapshot.live_pot_total}",
                shortfall=snapshot.live_pot_total - snapshot.escrow_balance
            )


class StateConsistencyChecker(BaseInvariantChecker):
    """状态一致性检查器"""

    def __init__(self):
        super().__init__(InvariantType.STATE_CONSISTENCY)

    def _perform_check(self, snapshot: RegistrySnapshot) -> None:
        actual_ids = [game.game_id for game in snapshot.games]
        if actual_ids != list(range(1, snapshot.number_of_games + 1)):
            self._violation(
                "游戏ID不连续或超出计数范围",
                number_of_games=snapshot.number_of_games, game_ids=actual_ids
            )

        for game in snapshot.games:
            if (game.state is GameState.ABANDONED) != (game.result is not None):
                self._violation(
                    f"游戏{game.game_id}状态{game.state.value}与结算结果{game.result}不一致",
                    game.game_id
                )
