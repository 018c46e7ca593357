"""
资金管理模块

提供钱包余额、托管余额和原子资金操作。
"""

from .ledger import FundsLedger, FundsLedgerSnapshot
from .transaction import FundsTransaction, TransactionType

__all__ = [
    'FundsLedger',
    'FundsLedgerSnapshot',
    'FundsTransaction',
    'TransactionType',
]
