"""
资金账本

管理所有地址的钱包余额以及注册表的托管余额。
所有资金操作都可以包裹在 atomic() 中，失败时整体回滚。
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set
import logging
import threading
import time

from ..errors import TransferFailureError
from .transaction import FundsTransaction, TransactionType

__all__ = ['FundsLedger', 'FundsLedgerSnapshot']


@dataclass(frozen=True)
class FundsLedgerSnapshot:
    """资金账本快照"""
    balances: Dict[str, int]
    escrow_balance: int
    total_supply: int
    transaction_count: int
    timestamp: float

    @property
    def wallet_total(self) -> int:
        return sum(self.balances.values())


class FundsLedger:
    """
    资金账本

    钱包余额 + 托管余额 == 总供应量，托管余额是所有未结算奖池
    以及平分时无法整除而滞留的余额之和。
    """

    def __init__(self, initial_balances: Optional[Dict[str, int]] = None):
        """
        初始化资金账本

        Args:
            initial_balances: 初始钱包余额
        """
        self._balances: Dict[str, int] = dict(initial_balances) if initial_balances else {}
        for address, balance in self._balances.items():
            if balance < 0:
                raise ValueError(f"地址{address}的初始余额不能为负数: {balance}")

        self._escrow = 0
        self._total_supply = sum(self._balances.values())
        self._rejecting: Set[str] = set()
        self._history: List[FundsTransaction] = []
        self._lock = threading.RLock()
        self._logger = logging.getLogger(__name__)

    # 查询

    def get_balance(self, address: str) -> int:
        """获取地址的钱包余额"""
        with self._lock:
            return self._balances.get(address, 0)

    def get_escrow_balance(self) -> int:
        """获取托管余额"""
        with self._lock:
            return self._escrow

    def get_total_supply(self) -> int:
        """获取系统资金总量，用于守恒检查"""
        with self._lock:
            return self._total_supply

    def get_wallet_total(self) -> int:
        with self._lock:
            return sum(self._balances.values())

    def get_transaction_history(self, address: Optional[str] = None,
                                game_id: Optional[int] = None) -> List[FundsTransaction]:
        """
        获取交易历史

        Args:
            address: 可选，只获取特定地址的交易
            game_id: 可选，只获取特定游戏的交易

        Returns:
            交易历史列表
        """
        with self._lock:
            history = self._history[:]
        if address is not None:
            history = [t for t in history if t.address == address]
        if game_id is not None:
            history = [t for t in history if t.game_id == game_id]
        return history

    # 收款方行为

    def reject_transfers_to(self, address: str) -> None:
        """标记地址拒收付款，模拟原生转账失败"""
        with self._lock:
            self._rejecting.add(address)

    def accept_transfers_to(self, address: str) -> None:
        with self._lock:
            self._rejecting.discard(address)

    # 资金操作

    def deposit(self, address: str, amount: int, description: str = "") -> None:
        """
        外部充值到钱包，增加总供应量

        Args:
            address: 钱包地址
            amount: 充值金额
            description: 交易描述
        """
        if amount <= 0:
            raise ValueError("充值金额必须为正数")

        with self._lock:
            self._balances[address] = self._balances.get(address, 0) + amount
            self._total_supply += amount
            self._record(TransactionType.DEPOSIT, address, amount, description)

    def escrow_from(self, address: str, amount: int, description: str = "",
                    game_id: Optional[int] = None) -> None:
        """
        从钱包转入托管

        Raises:
            TransferFailureError: 钱包余额不足
        """
        if amount <= 0:
            raise ValueError("托管金额必须为正数")

        with self._lock:
            available = self._balances.get(address, 0)
            if available < amount:
                raise TransferFailureError(
                    f"地址{address}余额不足: 需要{amount}, 可用{available}", game_id
                )
            self._balances[address] = available - amount
            self._escrow += amount
            self._record(TransactionType.ESCROW, address, amount, description, game_id)

    def release_to(self, address: str, amount: int, description: str = "",
                   game_id: Optional[int] = None) -> None:
        """
        从托管支付到钱包

        Raises:
            TransferFailureError: 收款方拒收或托管余额不足
        """
        if amount <= 0:
            raise ValueError("支付金额必须为正数")

        with self._lock:
            if address in self._rejecting:
                raise TransferFailureError(f"收款地址{address}拒绝接收{amount}", game_id)
            if self._escrow < amount:
                raise TransferFailureError(
                    f"托管余额不足: 需要{amount}, 托管{self._escrow}", game_id
                )
            self._escrow -= amount
            self._balances[address] = self._balances.get(address, 0) + amount
            self._record(TransactionType.RELEASE, address, amount, description, game_id)

    @contextmanager
    def atomic(self) -> Iterator['FundsLedger']:
        """
        原子资金单元

        进入时保存余额、托管和历史长度，块内抛出任何异常都会恢复到进入时的状态，
        然后重新抛出异常。
        """
        with self._lock:
            balances = dict(self._balances)
            escrow = self._escrow
            total_supply = self._total_supply
            history_length = len(self._history)
            try:
                yield self
            except BaseException:
                self._balances = balances
                self._escrow = escrow
                self._total_supply = total_supply
                del self._history[history_length:]
                self._logger.debug("资金操作回滚到%d条交易记录", history_length)
                raise

    def create_snapshot(self) -> FundsLedgerSnapshot:
        """创建当前状态的快照"""
        with self._lock:
            return FundsLedgerSnapshot(
                balances=dict(self._balances),
                escrow_balance=self._escrow,
                total_supply=self._total_supply,
                transaction_count=len(self._history),
                timestamp=time.time()
            )

    def validate_conservation(self) -> bool:
        """验证资金守恒：钱包总额 + 托管 == 总供应量，且无负余额"""
        with self._lock:
            if any(balance < 0 for balance in self._balances.values()) or self._escrow < 0:
                return False
            return sum(self._balances.values()) + self._escrow == self._total_supply

    def _record(self, transaction_type: TransactionType, address: str, amount: int,
                description: str, game_id: Optional[int] = None) -> None:
        self._history.append(
            FundsTransaction.create(transaction_type, address, amount, description, game_id)
        )
