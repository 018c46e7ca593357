"""
资金交易记录

定义资金交易的类型和记录结构。
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional, Dict, Any
import itertools
import time

__all__ = ['TransactionType', 'FundsTransaction']

_sequence = itertools.count(1)


class TransactionType(Enum):
    """资金交易类型"""
    DEPOSIT = auto()     # 外部充值到钱包
    ESCROW = auto()      # 钱包 -> 托管
    RELEASE = auto()     # 托管 -> 钱包


@dataclass(frozen=True)
class FundsTransaction:
    """资金交易记录"""
    transaction_id: str
    transaction_type: TransactionType
    address: str
    amount: int
    timestamp: float
    description: str
    game_id: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """验证交易记录的有效性"""
        if not self.transaction_id:
            raise ValueError("transaction_id不能为空")
        if not self.address:
            raise ValueError("address不能为空")
        if self.amount <= 0:
            raise ValueError("amount必须为正数")
        if self.timestamp <= 0:
            raise ValueError("timestamp必须为正数")

    @classmethod
    def create(cls, transaction_type: TransactionType, address: str, amount: int,
               description: str = "", game_id: Optional[int] = None) -> 'FundsTransaction':
        """创建交易记录，ID由类型和全局序号组成"""
        return cls(
            transaction_id=f"{transaction_type.name.lower()}_{next(_sequence)}",
            transaction_type=transaction_type,
            address=address,
            amount=amount,
            timestamp=time.time(),
            description=description,
            game_id=game_id
        )
