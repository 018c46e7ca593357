"""
管理员权限能力

注册表不继承任何访问控制基类，而是注入一个能力对象来判断调用者是否为管理员。
默认配置下没有任何操作检查调用者身份。
"""

from typing import Iterable, Optional, Protocol

__all__ = ['AdminCapability', 'AllowListAdmin', 'OpenAccess']


class AdminCapability(Protocol):
    """管理员能力协议"""

    def is_admin(self, caller: Optional[str]) -> bool:
        ...


class AllowListAdmin:
    """基于白名单的管理员能力"""

    def __init__(self, admins: Iterable[str]):
        self._admins = frozenset(admins)

    def is_admin(self, caller: Optional[str]) -> bool:
        return caller is not None and caller in self._admins


class OpenAccess:
    """任何调用者都视为管理员"""

    def is_admin(self, caller: Optional[str]) -> bool:
        return True
