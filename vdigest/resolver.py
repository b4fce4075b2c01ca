"""
Превращение символьной зависимости в конкретные имена шаблонов.
"""

from __future__ import annotations

import logging
from typing import List

import pathspec

from .lookup import TemplateLookup
from .paths import logical_name
from .types import DependencySpecifier, DetailSignature

logger = logging.getLogger(__name__)


class NameResolver:
    """
    Разрешает спецификаторы зависимостей через поставщика шаблонов.

    Конкретное имя разрешается само в себя (в логической форме).
    Wildcard ("events/*", "*/summary", "cards/item_*") — в список
    существующих шаблонов подходящего пространства имён, в порядке,
    который отдал поставщик.
    """

    def __init__(self, lookup: TemplateLookup):
        self.lookup = lookup

    def resolve(self, specifier: DependencySpecifier, details: DetailSignature) -> List[str]:
        if not specifier.is_wildcard:
            return [logical_name(specifier.name)]

        pattern = specifier.name.strip("/")
        namespace = wildcard_namespace(pattern)
        try:
            names = self.lookup.enumerate(namespace, details)
        except OSError as e:
            logger.warning("Cannot enumerate templates for %s: %s", specifier.name, e)
            return []

        matcher = pathspec.PathSpec.from_lines("gitwildmatch", [_anchored(pattern)])
        depth = None if pattern.startswith("*/") else pattern.count("/")
        return [
            name for name in names
            if matcher.match_file(name) and (depth is None or name.count("/") == depth)
        ]


def wildcard_namespace(pattern: str) -> str:
    """Литеральные сегменты до первого сегмента с "*": "a/b/*/c" -> "a/b"."""
    literal = []
    for segment in pattern.split("/"):
        if "*" in segment:
            break
        literal.append(segment)
    return "/".join(literal)


def _anchored(pattern: str) -> str:
    # ведущий "*/" означает любую глубину; остальное привязано к корню
    if pattern.startswith("*/"):
        return "**/" + pattern[2:]
    return "/" + pattern


__all__ = ["NameResolver", "wildcard_namespace"]
