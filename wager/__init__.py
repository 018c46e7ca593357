"""
Wager - 对赌游戏注册表

管理并发、相互独立的对赌游戏：创建者押注开局，其他参与者按相同金额加入，
游戏结束后奖池被支付给赢家（或平分、退款、没收）。

Packages:
    core: 纯领域逻辑（游戏状态机、资金账本、事件、不变量）
    application: 应用服务层（配置、命令、查询）
"""

__version__ = "1.0.0"
__author__ = "Wager Registry Team"
