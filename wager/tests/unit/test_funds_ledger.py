"""
资金账本单元测试
"""

import pytest

from wager.core.errors import TransferFailureError
from wager.core.funds import FundsLedger, FundsTransaction, TransactionType


class TestFundsLedger:
    """测试资金账本"""

    def test_initial_state(self, ledger):
        assert ledger.get_balance("alice") == 1000
        assert ledger.get_balance("nobody") == 0
        assert ledger.get_escrow_balance() == 0
        assert ledger.get_total_supply() == 4000
        assert ledger.validate_conservation()

    def test_negative_initial_balance_rejected(self):
        with pytest.raises(ValueError):
            FundsLedger({"alice": -1})

    def test_deposit_increases_supply(self, ledger):
        ledger.deposit("erin", 50)

        assert ledger.get_balance("erin") == 50
        assert ledger.get_total_supply() == 4050
        assert ledger.validate_conservation()

    def test_escrow_and_release(self, ledger):
        ledger.escrow_from("alice", 100, game_id=1)
        ledger.release_to("bob", 60, game_id=1)

        assert ledger.get_balance("alice") == 900
        assert ledger.get_balance("bob") == 1060
        assert ledger.get_escrow_balance() == 40
        assert ledger.validate_conservation()

    def test_escrow_insufficient_balance(self, ledger):
        with pytest.raises(TransferFailureError):
            ledger.escrow_from("alice", 1001)

        assert ledger.get_balance("alice") == 1000

    def test_release_more_than_escrow(self, ledger):
        ledger.escrow_from("alice", 10)

        with pytest.raises(TransferFailureError):
            ledger.release_to("bob", 11)

    def test_rejecting_recipient(self, ledger):
        ledger.escrow_from("alice", 10)
        ledger.reject_transfers_to("bob")

        with pytest.raises(TransferFailureError):
            ledger.release_to("bob", 10)

        ledger.accept_transfers_to("bob")
        ledger.release_to("bob", 10)
        assert ledger.get_balance("bob") == 1010

    @pytest.mark.parametrize("amount", [0, -1])
    def test_non_positive_amounts_rejected(self, ledger, amount):
        with pytest.raises(ValueError):
            ledger.deposit("alice", amount)
        with pytest.raises(ValueError):
            ledger.escrow_from("alice", amount)
        with pytest.raises(ValueError):
            ledger.release_to("alice", amount)

    def test_atomic_rolls_back_on_error(self, ledger):
        """测试原子单元内任一操作失败时全部回滚"""
        ledger.escrow_from("alice", 100)
        history_before = len(ledger.get_transaction_history())

        with pytest.raises(TransferFailureError):
            with ledger.atomic():
                ledger.release_to("bob", 50)
                ledger.release_to("carol", 80)

        assert ledger.get_balance("bob") == 1000
        assert ledger.get_escrow_balance() == 100
        assert len(ledger.get_transaction_history()) == history_before

    def test_atomic_commits_on_success(self, ledger):
        ledger.escrow_from("alice", 100)

        with ledger.atomic():
            ledger.release_to("bob", 50)
            ledger.release_to("carol", 50)

        assert ledger.get_escrow_balance() == 0
        assert ledger.get_balance("carol") == 1050

    def test_transaction_history_filters(self, ledger):
        ledger.escrow_from("alice", 10, game_id=1)
        ledger.escrow_from("bob", 10, game_id=2)
        ledger.release_to("alice", 10, game_id=2)

        assert [t.transaction_type for t in ledger.get_transaction_history(address="alice")] == [
            TransactionType.ESCROW, TransactionType.RELEASE
        ]
        assert len(ledger.get_transaction_history(game_id=2)) == 2

    def test_snapshot(self, ledger):
        ledger.escrow_from("alice", 10)
        snapshot = ledger.create_snapshot()

        assert snapshot.escrow_balance == 10
        assert snapshot.wallet_total + snapshot.escrow_balance == snapshot.total_supply
        assert snapshot.balances["alice"] == 990


class TestFundsTransaction:
    """测试交易记录"""

    def test_create_generates_unique_ids(self):
        first = FundsTransaction.create(TransactionType.ESCROW, "alice", 5)
        second = FundsTransaction.create(TransactionType.ESCROW, "alice", 5)

        assert first.transaction_id != second.transaction_id
        assert first.transaction_id.startswith("escrow_")

    def test_invalid_transaction(self):
        with pytest.raises(ValueError):
            FundsTransaction.create(TransactionType.RELEASE, "", 5)
        with pytest.raises(ValueError):
            FundsTransaction.create(TransactionType.RELEASE, "alice", 0)
