"""
Game Command Service - 游戏命令服务

处理所有游戏状态变更操作，遵循CQRS模式。
命令服务负责：
- 调用注册表执行变更操作
- 把业务异常转换为 CommandResult
- 在每次成功的命令之后验证数学不变量
"""

from typing import Any, Callable, Dict, Optional
import logging

from ..core.access import AdminCapability
from ..core.errors import (
    WagerError,
    InvalidStakeError,
    FeeMismatchError,
    GameNotFoundError,
)
from ..core.events import EventBus
from ..core.funds import FundsLedger
from ..core.game import GameRegistry
from ..core.invariant import RegistryInvariants, InvariantError
from .config_service import ConfigService, RegistryConfig, get_config_service
from .types import CommandResult, ResultStatus

# 输入本身不合法的错误，其余业务异常视为业务规则违反
_VALIDATION_ERRORS = (InvalidStakeError, FeeMismatchError, GameNotFoundError)


class GameCommandService:
    """游戏命令服务"""

    def __init__(self,
                 registry: Optional[GameRegistry] = None,
                 config_service: Optional[ConfigService] = None,
                 profile: str = "default",
                 ledger: Optional[FundsLedger] = None,
                 clock: Optional[Callable[[], float]] = None,
                 event_bus: Optional[EventBus] = None,
                 admin: Optional[AdminCapability] = None):
        """
        初始化命令服务

        Args:
            registry: 游戏注册表，如果为None则按配置创建
            config_service: 配置服务，如果为None则使用全局配置服务
            profile: 注册表配置文件名
            ledger: 创建注册表时使用的资金账本
            clock: 创建注册表时使用的时钟
            event_bus: 创建注册表时使用的事件总线
            admin: 创建注册表时使用的管理员能力
        """
        self._logger = logging.getLogger(__name__)
        self._config_service = config_service or get_config_service()
        self._config: RegistryConfig = self._config_service.get_registry_config(profile).data
        self._registry = registry or GameRegistry.from_config(
            self._config, ledger or FundsLedger(), clock=clock, event_bus=event_bus, admin=admin
        )
        self._invariants = RegistryInvariants()

    @property
    def registry(self) -> GameRegistry:
        return self._registry

    def create_game(self, creator: str, stake: int) -> CommandResult:
        """
        创建新游戏

        Returns:
            命令执行结果，data包含game_id
        """
        return self._execute(
            "创建游戏",
            lambda: {'game_id': self._registry.create_game(creator, stake), 'entry_fee': stake}
        )

    def join_game(self, game_id: int, joiner: str, amount: int) -> CommandResult:
        def join() -> Dict[str, Any]:
            self._registry.join_game(game_id, joiner, amount)
            return {
                'game_id': game_id,
                'pot': self._registry.pot_of(game_id),
                'player_count': self._registry.player_count(game_id)
            }
        return self._execute("加入游戏", join)

    def activate_game(self, game_id: int) -> CommandResult:
        def activate() -> Dict[str, Any]:
            self._registry.activate_game(game_id)
            return {'game_id': game_id}
        return self._execute("激活游戏", activate)

    def resolve_win(self, game_id: int, winner: str) -> CommandResult:
        return self._execute(
            "结算胜负",
            lambda: {'game_id': game_id, 'payouts': self._registry.resolve_win(game_id, winner)}
        )

    def resolve_tie(self, game_id: int, first: str, second: str) -> CommandResult:
        return self._execute(
            "平局结算",
            lambda: {'game_id': game_id, 'payouts': self._registry.resolve_tie(game_id, first, second)}
        )

    def refund(self, game_id: int) -> CommandResult:
        return self._execute(
            "退款",
            lambda: {'game_id': game_id, 'payouts': self._registry.refund(game_id)}
        )

    def forfeit_to_arbiter(self, game_id: int, arbiter: str,
                           caller: Optional[str] = None) -> CommandResult:
        return self._execute(
            "没收奖池",
            lambda: {
                'game_id': game_id,
                'payouts': self._registry.forfeit_to_arbiter(game_id, arbiter, caller=caller)
            }
        )

    def _execute(self, operation: str, action: Callable[[], Dict[str, Any]]) -> CommandResult:
        """执行命令并把异常转换为命令结果"""
        try:
            data = action()
        except _VALIDATION_ERRORS as e:
            self._logger.info(f"{operation}被拒绝: {e}")
            return CommandResult.rejected(e, ResultStatus.VALIDATION_ERROR)
        except WagerError as e:
            self._logger.warning(f"{operation}违反业务规则: {e}")
            return CommandResult.rejected(e, ResultStatus.BUSINESS_RULE_VIOLATION)

        if self._config.enable_invariant_checks:
            try:
                self._verify_invariants(operation)
            except InvariantError as e:
                return CommandResult.invariant_violated(f"{operation}后{e}", e.game_ids, data)

        return CommandResult.succeeded(f"{operation}成功", data)

    def _verify_invariants(self, operation: str) -> None:
        """验证注册表不变量，有违反时抛出 InvariantError"""
        try:
            self._invariants.check_all(self._registry.snapshot(), raise_on_violation=True)
        except InvariantError as e:
            self._logger.critical(f"{operation}后检测到不变量违反，涉及游戏 {list(e.game_ids)}")
            raise
