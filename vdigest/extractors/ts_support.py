"""
Инфраструктура tree-sitter для синтаксического экстрактора.

Загрузка грамматик Ruby и ERB и минимальный набор операций над
разобранным документом: обход, поиск узлов по типу, текст узла.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Iterator, List, Optional

from tree_sitter import Language, Node, Parser


@lru_cache(maxsize=None)
def ruby_language() -> Language:
    import tree_sitter_ruby as tsruby
    return Language(tsruby.language())


@lru_cache(maxsize=None)
def erb_language() -> Language:
    import tree_sitter_embedded_template as tserb
    return Language(tserb.language())


class TreeSitterDocument(ABC):
    """Исходный текст вместе с его синтаксическим деревом."""

    def __init__(self, text: str):
        self.text = text
        self._data = text.encode("utf-8")
        self.tree = Parser(self.language()).parse(self._data)

    @abstractmethod
    def language(self) -> Language:
        pass

    @property
    def root_node(self) -> Node:
        return self.tree.root_node

    def walk_tree(self, start: Optional[Node] = None) -> Iterator[Node]:
        """Узлы поддерева в порядке документа (через TreeCursor)."""
        cursor = (start or self.root_node).walk()
        while True:
            yield cursor.node
            if cursor.goto_first_child():
                continue
            while not cursor.goto_next_sibling():
                if not cursor.goto_parent():
                    return

    def find_nodes_by_type(self, node_type: str, start: Optional[Node] = None) -> List[Node]:
        return [n for n in self.walk_tree(start) if n.type == node_type]

    def get_node_text(self, node: Node) -> str:
        return self._data[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def has_error(self) -> bool:
        return self.root_node.has_error


class RubyDocument(TreeSitterDocument):

    def language(self) -> Language:
        return ruby_language()


class ErbDocument(TreeSitterDocument):
    """
    ERB-шаблон: разметка со вставками кода.

    Код берётся только из <% %> и <%= %>; у <%# %> кода нет.
    """

    CODE_DIRECTIVES = ("directive", "output_directive")

    def language(self) -> Language:
        return erb_language()

    def code_fragments(self) -> List[str]:
        return [
            self.get_node_text(node)
            for node in self.find_nodes_by_type("code")
            if node.parent is not None and node.parent.type in self.CODE_DIRECTIVES
        ]

    def ruby_program(self) -> str:
        """Код всех вставок одной программой, по вставке на строку."""
        return "\n".join(self.code_fragments())


__all__ = ["TreeSitterDocument", "RubyDocument", "ErbDocument", "Node"]
