from __future__ import annotations

from threading import Lock

from lp_range.domain.exceptions import ReentrantCallError


class CallGuard:
    """Flag de chamada em andamento; liberado em qualquer saida do bloco `with`."""

    def __init__(self, name: str):
        self._name = name
        self._lock = Lock()
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        """True enquanto algum bloco `with` desta instancia estiver ativo."""
        return self._in_progress

    def __enter__(self) -> "CallGuard":
        with self._lock:
            if self._in_progress:
                raise ReentrantCallError(f"{self._name} is already in progress.")
            self._in_progress = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        with self._lock:
            self._in_progress = False
