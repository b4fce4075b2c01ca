from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Optional, Tuple, TypeVar

from .tree import Tree
from .types import DetailSignature

logger = logging.getLogger(__name__)

T = TypeVar("T")

TreeKey = Tuple[str, DetailSignature]
DigestKey = Tuple[str, DetailSignature, Tuple[str, ...]]


@dataclass(frozen=True)
class CacheSnapshot:
    enabled: bool
    trees: int
    digests: int


class DigestCache:
    """
    Процессный кэш деревьев и дайджестов.

      • деревья — по (имя, сигнатура деталей);
      • дайджесты — по (имя, сигнатура деталей, дополнительные токены).

    Свежесть содержимого шаблонов кэш не отслеживает: при изменении файлов
    вызывающий код обязан сделать clear(). Без TTL и вытеснения.

    Доступ к словарям защищён блокировкой; одновременные запросы одного
    ключа вычисляются один раз (single-flight), остальные ждут результат.
    """

    def __init__(self, enabled: Optional[bool] = None):
        env = os.environ.get("VD_DIGEST_CACHE", None)
        if env is not None:
            self.enabled = env.strip().lower() not in {"0", "false", "no", "off", ""}
        elif enabled is not None:
            self.enabled = bool(enabled)
        else:
            self.enabled = True
        self._lock = threading.RLock()
        self._trees: Dict[TreeKey, Tree] = {}
        self._digests: Dict[DigestKey, str] = {}
        self._inflight: Dict[Tuple[str, Hashable], threading.Lock] = {}

    def fetch_tree(self, key: TreeKey, build: Callable[[], Tree]) -> Tree:
        return self._fetch("tree", self._trees, key, build)

    def fetch_digest(self, key: DigestKey, compute: Callable[[], str]) -> str:
        return self._fetch("digest", self._digests, key, compute)

    def clear(self) -> None:
        with self._lock:
            self._trees.clear()
            self._digests.clear()
        logger.debug("Digest cache cleared")

    def snapshot(self) -> CacheSnapshot:
        with self._lock:
            return CacheSnapshot(enabled=self.enabled, trees=len(self._trees), digests=len(self._digests))

    # --------------------------- internals --------------------------- #

    def _fetch(self, bucket: str, store: Dict, key: Hashable, factory: Callable[[], T]) -> T:
        if not self.enabled:
            return factory()

        with self._lock:
            if key in store:
                return store[key]
            flight = self._inflight.setdefault((bucket, key), threading.Lock())

        with flight:
            try:
                with self._lock:
                    if key in store:
                        return store[key]
                value = factory()
                with self._lock:
                    store[key] = value
                return value
            finally:
                with self._lock:
                    if self._inflight.get((bucket, key)) is flight:
                        del self._inflight[(bucket, key)]


__all__ = ["DigestCache", "CacheSnapshot"]
