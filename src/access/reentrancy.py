"""Single-entry lock для вызовов, которые передают управление внешнему коду."""

from contextlib import contextmanager
from typing import Iterator

from src.core.errors import ReentrantCall


class ReentrancyGuard:
    """
    Флаг входа на экземпляр: вложенный вход в любую защищённую операцию
    того же экземпляра отклоняется с ReentrantCall.
    """

    def __init__(self):
        self._entered = False

    @property
    def entered(self) -> bool:
        return self._entered

    @contextmanager
    def enter(self, operation: str) -> Iterator[None]:
        if self._entered:
            raise ReentrantCall(f"reentrant call into {operation}", operation=operation)
        self._entered = True
        try:
            yield
        finally:
            self._entered = False
