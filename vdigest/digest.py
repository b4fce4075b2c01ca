from __future__ import annotations

import hashlib
from typing import Callable, List, Optional, Sequence

from .tree import Tree

ContentDigest = Callable[[bytes], str]

_SEPARATOR = "-"


def sha1_hex(data: bytes) -> str:
    """Хеш содержимого одного файла шаблона."""
    return hashlib.sha1(data).hexdigest()


class DigestComputer:
    """
    Сворачивает дерево зависимостей в одну строку фиксированной длины.

    Каждый шаблон учитывается один раз (первое появление в прямом обходе),
    отсутствующие шаблоны ничего не вносят. Хеши дополнительных токенов
    добавляются в конце в переданном порядке.
    """

    def __init__(self, content_digest: Optional[ContentDigest] = None):
        self.content_digest = content_digest or sha1_hex

    def compute(self, tree: Tree, extra_dependencies: Sequence[str] = ()) -> str:
        if tree.missing:
            return ""

        parts: List[str] = []
        visited = set()
        for node in tree.root.walk():
            if node.key in visited:
                continue
            visited.add(node.key)
            if node.template is not None and not node.is_missing:
                parts.append(self.content_digest(node.template.source))

        # каждый токен хешируется отдельно: ["a-b"] и ["a", "b"] различаются
        parts.extend(sha1_hex(token.encode("utf-8")) for token in extra_dependencies)
        return hashlib.sha1(_SEPARATOR.join(parts).encode("utf-8")).hexdigest()


__all__ = ["DigestComputer", "sha1_hex", "ContentDigest"]
