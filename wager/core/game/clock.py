"""
时钟

注册表通过注入的时钟读取当前时间，测试中使用可手动推进的时钟。
"""

import time

__all__ = ['SystemClock', 'ManualClock']


class SystemClock:
    """系统时钟，返回截断为整数的秒数"""

    def __call__(self) -> int:
        return int(time.time())


class ManualClock:
    """手动推进的时钟"""

    def __init__(self, start: int = 1_000):
        self._now = start

    def __call__(self) -> int:
        return self._now

    def advance(self, units: int) -> int:
        if units < 0:
            raise ValueError("时间不能倒退")
        self._now += units
        return self._now

    def set(self, now: int) -> None:
        if now < self._now:
            raise ValueError("时间不能倒退")
        self._now = now
