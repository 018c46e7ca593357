"""
游戏注册表

游戏ID到游戏记录的映射，以及每个游戏的状态机和奖池结算操作。

每个变更操作都是一个不可分割的单元：注册表锁保证操作之间不交错，
资金转移在 FundsLedger.atomic() 中执行，全部成功后才修改游戏记录，
因此任何一步失败都不会留下部分状态。事件在单元提交之后、释放锁之前发布，
事件总线分配的序号顺序即操作的提交顺序。
"""

from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple
import logging
import threading

from ..access import AdminCapability
from ..errors import (
    FeeMismatchError,
    GameNotFoundError,
    InvalidStakeError,
    InvalidStateError,
    RegistryConfigError,
    TimeoutExceededError,
    UnauthorizedError,
)
from ..events import (
    DomainEvent,
    EventBus,
    GameActivatedEvent,
    GameCreatedEvent,
    GameEndedEvent,
    PlayerJoinedEvent,
    get_event_bus,
)
from ..funds import FundsLedger
from .clock import SystemClock
from .state_machine import ensure_state, ensure_transition
from .types import Game, GameResult, GameSnapshot, GameState, RegistrySnapshot

if TYPE_CHECKING:
    from ...application.config_service import RegistryConfig

__all__ = ['GameRegistry', 'DEFAULT_TIMEOUT_WINDOW']

DEFAULT_TIMEOUT_WINDOW = 300


class GameRegistry:
    """
    游戏注册表

    任何调用者都可以激活、结算、没收或退款任意存在的游戏，
    唯一的防线是状态和超时前置条件。require_admin_for_forfeit 与
    forfeit_requires_timeout 是默认关闭的加固选项。
    """

    def __init__(self,
                 ledger: FundsLedger,
                 timeout_window: float = DEFAULT_TIMEOUT_WINDOW,
                 clock: Optional[Callable[[], float]] = None,
                 event_bus: Optional[EventBus] = None,
                 admin: Optional[AdminCapability] = None,
                 require_admin_for_forfeit: bool = False,
                 forfeit_requires_timeout: bool = False):
        """
        初始化游戏注册表

        Args:
            ledger: 资金账本，托管所有奖池
            timeout_window: 结算超时窗口（时间单位与时钟一致）
            clock: 返回当前时间的可调用对象，默认使用系统时钟
            event_bus: 事件总线，如果为None则使用全局事件总线
            admin: 管理员能力
            require_admin_for_forfeit: 没收操作是否要求管理员调用
            forfeit_requires_timeout: 没收操作是否要求超时窗口已结束
        """
        if timeout_window < 0:
            raise RegistryConfigError(f"timeout_window不能为负数: {timeout_window}")
        if require_admin_for_forfeit and admin is None:
            raise RegistryConfigError("require_admin_for_forfeit需要提供管理员能力")

        self._ledger = ledger
        self._timeout_window = timeout_window
        self._clock = clock or SystemClock()
        self._event_bus = event_bus or get_event_bus()
        self._admin = admin
        self._require_admin_for_forfeit = require_admin_for_forfeit
        self._forfeit_requires_timeout = forfeit_requires_timeout

        self._games: Dict[int, Game] = {}
        self._number_of_games = 0
        self._lock = threading.RLock()
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: 'RegistryConfig', ledger: FundsLedger,
                    clock: Optional[Callable[[], float]] = None,
                    event_bus: Optional[EventBus] = None,
                    admin: Optional[AdminCapability] = None) -> 'GameRegistry':
        """根据注册表配置创建注册表"""
        return cls(
            ledger=ledger,
            timeout_window=config.timeout_window,
            clock=clock,
            event_bus=event_bus,
            admin=admin,
            require_admin_for_forfeit=config.require_admin_for_forfeit,
            forfeit_requires_timeout=config.forfeit_requires_timeout
        )

    @property
    def ledger(self) -> FundsLedger:
        return self._ledger

    @property
    def timeout_window(self) -> float:
        return self._timeout_window

    @property
    def number_of_games(self) -> int:
        """已分配的最大游戏ID，也就是游戏总数"""
        with self._lock:
            return self._number_of_games

    # 变更操作

    def create_game(self, creator: str, stake: int) -> int:
        """
        创建游戏并托管创建者的押注

        Args:
            creator: 创建者地址，成为0号玩家
            stake: 押注金额，同时成为入场费

        Returns:
            新游戏ID

        Raises:
            InvalidStakeError: 押注金额不是正整数
            TransferFailureError: 创建者余额不足
        """
        self._require_positive_amount(stake)

        with self._lock:
            game_id = self._number_of_games + 1
            now = self._clock()
            self._ledger.escrow_from(creator, stake, "创建游戏", game_id)

            self._games[game_id] = Game(
                game_id=game_id,
                entry_fee=stake,
                pot=stake,
                state=GameState.CREATED,
                last_activity=now,
                created_at=now,
                players=[creator]
            )
            self._number_of_games = game_id

            self._logger.info(f"游戏 {game_id} 由 {creator} 创建，入场费 {stake}")
            self._publish(GameCreatedEvent.create(game_id, creator, stake, now))
        return game_id

    def join_game(self, game_id: int, joiner: str, amount: int) -> None:
        """
        加入游戏，金额必须与入场费完全一致

        Raises:
            GameNotFoundError: 游戏不存在
            InvalidStateError: 游戏不处于created状态
            InvalidStakeError: 金额不是正整数
            FeeMismatchError: 金额与入场费不一致
            TransferFailureError: 加入者余额不足
        """
        with self._lock:
            game = self._require_game(game_id)
            ensure_state(game.state, GameState.CREATED, "加入游戏", game_id)
            self._require_positive_amount(amount, game_id)
            if amount != game.entry_fee:
                raise FeeMismatchError(
                    f"游戏{game_id}入场费为{game.entry_fee}，收到{amount}", game_id
                )

            now = self._clock()
            self._ledger.escrow_from(joiner, amount, "加入游戏", game_id)

            game.players.append(joiner)
            game.pot += amount
            game.last_activity = now
            pot, player_count = game.pot, len(game.players)

            self._logger.info(f"{joiner} 加入游戏 {game_id}，奖池 {pot}")
            self._publish(PlayerJoinedEvent.create(game_id, joiner, pot, player_count, now))

    def activate_game(self, game_id: int) -> None:
        """
        激活游戏。激活不可逆，激活后永久无法退款

        Raises:
            GameNotFoundError: 游戏不存在
            InvalidStateError: 游戏不处于created状态
        """
        with self._lock:
            game = self._require_game(game_id)
            ensure_state(game.state, GameState.CREATED, "激活游戏", game_id)
            ensure_transition(game.state, GameState.ACTIVE, "激活游戏", game_id)
            game.state = GameState.ACTIVE
            now = self._clock()
            pot, player_count = game.pot, len(game.players)

            self._logger.info(f"游戏 {game_id} 已激活，{player_count} 名玩家")
            self._publish(GameActivatedEvent.create(game_id, player_count, pot, now))

    def resolve_win(self, game_id: int, winner: str) -> Dict[str, int]:
        """
        将整个奖池支付给赢家

        赢家不必是游戏玩家，调用者身份也不做校验。

        Returns:
            {收款地址: 金额}

        Raises:
            GameNotFoundError, InvalidStateError, TimeoutExceededError, TransferFailureError
        """
        with self._lock:
            game = self._require_game(game_id)
            ensure_state(game.state, GameState.ACTIVE, "结算胜负", game_id)
            now = self._clock()
            self._ensure_within_timeout(game, now)
            payouts, stranded = self._settle(game, GameResult.WIN, [(winner, game.pot)], now)

            self._announce_end(game_id, GameResult.WIN, payouts, stranded, now)
        return payouts

    def resolve_tie(self, game_id: int, first: str, second: str) -> Dict[str, int]:
        """
        平局：奖池整除2后分别支付给两个地址

        奇数奖池的1单位余数既不支付也不保留给任何人，滞留在托管中。

        Returns:
            {收款地址: 金额}
        """
        with self._lock:
            game = self._require_game(game_id)
            ensure_state(game.state, GameState.ACTIVE, "平局结算", game_id)
            now = self._clock()
            self._ensure_within_timeout(game, now)
            half = game.pot // 2
            payouts, stranded = self._settle(
                game, GameResult.TIE, [(first, half), (second, half)], now
            )

            self._announce_end(game_id, GameResult.TIE, payouts, stranded, now)
        return payouts

    def refund(self, game_id: int) -> Dict[str, int]:
        """
        按加入顺序向每位玩家退还入场费，只能在激活之前调用

        Returns:
            {收款地址: 金额}
        """
        with self._lock:
            game = self._require_game(game_id)
            ensure_state(game.state, GameState.CREATED, "退款", game_id)
            now = self._clock()
            refunds = [(player, game.entry_fee) for player in game.players]
            payouts, stranded = self._settle(game, GameResult.REFUND, refunds, now)

            self._announce_end(game_id, GameResult.REFUND, payouts, stranded, now)
        return payouts

    def forfeit_to_arbiter(self, game_id: int, arbiter: str,
                           caller: Optional[str] = None) -> Dict[str, int]:
        """
        将进行中游戏的整个奖池没收给仲裁者

        默认不检查超时，也不检查调用者，激活后立即可调用。

        Args:
            game_id: 游戏ID
            arbiter: 仲裁者地址
            caller: 调用者，仅在 require_admin_for_forfeit 开启时使用

        Returns:
            {收款地址: 金额}
        """
        with self._lock:
            game = self._require_game(game_id)
            ensure_state(game.state, GameState.ACTIVE, "没收奖池", game_id)
            if self._require_admin_for_forfeit and not self._admin.is_admin(caller):
                raise UnauthorizedError(f"{caller} 无权没收游戏{game_id}的奖池", game_id)

            now = self._clock()
            if self._forfeit_requires_timeout and now - game.last_activity <= self._timeout_window:
                raise InvalidStateError(f"游戏{game_id}的超时窗口尚未结束", game_id)

            payouts, stranded = self._settle(game, GameResult.FORFEIT, [(arbiter, game.pot)], now)

            self._logger.warning(f"游戏 {game_id} 的奖池被没收给 {arbiter}")
            self._announce_end(game_id, GameResult.FORFEIT, payouts, stranded, now)
        return payouts

    # 只读访问

    def player_count(self, game_id: int) -> int:
        with self._lock:
            return len(self._require_game(game_id).players)

    def pot_of(self, game_id: int) -> int:
        with self._lock:
            return self._require_game(game_id).pot

    def is_active(self, game_id: int) -> bool:
        """游戏是否处于active状态，不存在的游戏抛出 GameNotFoundError"""
        with self._lock:
            return self._require_game(game_id).state is GameState.ACTIVE

    def state_of(self, game_id: int) -> GameState:
        with self._lock:
            return self._require_game(game_id).state

    def entry_fee_of(self, game_id: int) -> int:
        with self._lock:
            return self._require_game(game_id).entry_fee

    def players_of(self, game_id: int) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._require_game(game_id).players)

    def exists(self, game_id: int) -> bool:
        with self._lock:
            return game_id in self._games

    def get_game(self, game_id: int) -> GameSnapshot:
        with self._lock:
            return self._require_game(game_id).to_snapshot()

    def list_games(self, state: Optional[GameState] = None) -> List[GameSnapshot]:
        """按ID顺序列出游戏快照，可按状态过滤"""
        with self._lock:
            games = [self._games[game_id].to_snapshot() for game_id in sorted(self._games)]
        if state is not None:
            games = [game for game in games if game.state is state]
        return games

    def stranded_funds(self) -> int:
        """托管中不属于任何未结算奖池的余额（平局余数）"""
        return self.snapshot().stranded_funds

    def snapshot(self) -> RegistrySnapshot:
        """创建注册表和账本的一致快照"""
        with self._lock:
            ledger_snapshot = self._ledger.create_snapshot()
            return RegistrySnapshot(
                games=tuple(self._games[game_id].to_snapshot() for game_id in sorted(self._games)),
                number_of_games=self._number_of_games,
                escrow_balance=ledger_snapshot.escrow_balance,
                wallet_total=ledger_snapshot.wallet_total,
                total_supply=ledger_snapshot.total_supply,
                timeout_window=self._timeout_window
            )

    # 内部辅助

    def _require_game(self, game_id: int) -> Game:
        game = self._games.get(game_id)
        if game is None:
            raise GameNotFoundError(f"游戏{game_id}不存在", game_id)
        return game

    @staticmethod
    def _require_positive_amount(amount: int, game_id: Optional[int] = None) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidStakeError(f"金额必须为正整数: {amount!r}", game_id)

    def _ensure_within_timeout(self, game: Game, now: float) -> None:
        elapsed = now - game.last_activity
        if elapsed > self._timeout_window:
            raise TimeoutExceededError(
                f"游戏{game.game_id}距上次活动已过{elapsed}，超过窗口{self._timeout_window}",
                game.game_id
            )

    def _settle(self, game: Game, result: GameResult,
                transfers: List[Tuple[str, int]], now: float) -> Tuple[Dict[str, int], int]:
        """
        执行终结结算：全部转账成功后才将奖池清零并进入终止状态

        Returns:
            (按地址汇总的支付金额, 滞留在托管中的余数)
        """
        ensure_transition(game.state, GameState.ABANDONED, result.name, game.game_id)

        with self._ledger.atomic():
            for address, amount in transfers:
                if amount > 0:
                    self._ledger.release_to(address, amount, f"{result.name} 结算", game.game_id)

        payouts: Dict[str, int] = {}
        for address, amount in transfers:
            payouts[address] = payouts.get(address, 0) + amount
        stranded = game.pot - sum(payouts.values())

        game.pot = 0
        game.state = GameState.ABANDONED
        game.result = result
        game.last_activity = now
        return payouts, stranded

    def _announce_end(self, game_id: int, result: GameResult, payouts: Dict[str, int],
                      stranded: int, now: float) -> None:
        self._logger.info(f"游戏 {game_id} 结束: {result.name}, 支付 {payouts}, 滞留 {stranded}")
        self._publish(GameEndedEvent.create(game_id, result.name, result.value, payouts, stranded, now))

    def _publish(self, event: DomainEvent) -> None:
        """调用方必须持有注册表锁"""
        self._event_bus.publish(event)
