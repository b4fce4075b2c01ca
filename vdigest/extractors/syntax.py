"""
Экстрактор по синтаксическому дереву (tree-sitter).

ERB-шаблон разбирается грамматикой embedded-template, код всех вставок
склеивается в одну программу и разбирается грамматикой Ruby. Зависимости
ищутся среди узлов call с именем метода render, поэтому закомментированные
вызовы и вызовы внутри строк не учитываются.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..errors import UnparsableSourceError
from ..types import TemplateSource
from .base import WILDCARD, DependencyExtractor, TrackerStrategy
from .ts_support import ErbDocument, Node, RubyDocument, TreeSitterDocument

logger = logging.getLogger(__name__)

# Узлы-ссылки и число символов-сигилов перед именем
_REFERENCE_NODES = {
    "identifier": 0,
    "instance_variable": 1,
    "global_variable": 1,
    "class_variable": 2,
}

_SKIPPED_ARGUMENTS = {"block_argument", "splat_argument", "hash_splat_argument", "comment"}

_CHAIN_RECEIVERS = set(_REFERENCE_NODES) | {"call", "constant", "scope_resolution"}


class SyntaxTreeExtractor(DependencyExtractor):

    strategy = TrackerStrategy.SYNTAX

    def erb_render_calls(self, text: str, template: TemplateSource) -> List[List[Optional[str]]]:
        try:
            erb = ErbDocument(text)
            if erb.has_error():
                raise UnparsableSourceError(template.identifier, "malformed ERB")
            return self._render_calls(self._parse_ruby(erb.ruby_program(), template), template)
        except UnparsableSourceError as e:
            logger.warning("%s; dependencies ignored", e)
            return []

    def ruby_render_calls(self, text: str, template: TemplateSource) -> List[List[Optional[str]]]:
        try:
            return self._render_calls(self._parse_ruby(text, template), template)
        except UnparsableSourceError as e:
            logger.warning("%s; dependencies ignored", e)
            return []

    def _parse_ruby(self, code: str, template: TemplateSource) -> RubyDocument:
        doc = RubyDocument(code)
        if doc.has_error():
            raise UnparsableSourceError(template.identifier, "malformed Ruby code")
        return doc

    # --------------------------- вызовы render --------------------------- #

    def _render_calls(self, doc: TreeSitterDocument, template: TemplateSource) -> List[List[Optional[str]]]:
        calls: List[List[Optional[str]]] = []
        for node in doc.walk_tree():
            if node.type != "call":
                continue
            method = node.child_by_field_name("method")
            if method is None or doc.get_node_text(method) != "render":
                continue
            arguments = node.child_by_field_name("arguments")
            if arguments is None:
                continue
            names = self._call_dependencies(doc, arguments, template)
            if any(names):
                calls.append(names)
        return calls

    def _call_dependencies(self, doc: TreeSitterDocument, arguments: Node, template: TemplateSource) -> List[Optional[str]]:
        positional: List[Node] = []
        options: Dict[str, Node] = {}
        for arg in arguments.named_children:
            if arg.type == "pair":
                self._add_option(doc, arg, options)
            elif arg.type == "hash":
                for pair in arg.named_children:
                    if pair.type == "pair":
                        self._add_option(doc, pair, options)
            elif arg.type not in _SKIPPED_ARGUMENTS:
                positional.append(arg)

        # неизвестные опции просто не попадают в выборку ниже
        main = None
        for candidate in (
            options.get("partial"),
            positional[0] if positional else None,
            options.get("template"),
            options.get("collection"),
        ):
            main = self._template_name(doc, candidate, template)
            if main:
                break

        return [
            main,
            self._template_name(doc, options.get("layout"), template),
            self._template_name(doc, options.get("spacer_template"), template),
        ]

    @staticmethod
    def _add_option(doc: TreeSitterDocument, pair: Node, options: Dict[str, Node]) -> None:
        key = pair.child_by_field_name("key")
        value = pair.child_by_field_name("value")
        if key is None or value is None:
            return
        if key.type == "hash_key_symbol":
            options.setdefault(doc.get_node_text(key), value)
        elif key.type == "simple_symbol":
            options.setdefault(doc.get_node_text(key)[1:], value)

    def _template_name(self, doc: TreeSitterDocument, node: Optional[Node], template: TemplateSource) -> Optional[str]:
        if node is None:
            return None
        if node.type == "string":
            return self.static_dependency(self._string_parts(doc, node), template)
        if node.type in _REFERENCE_NODES:
            return self.dynamic_dependency(doc.get_node_text(node)[_REFERENCE_NODES[node.type]:])
        if node.type == "call":
            method = node.child_by_field_name("method")
            receiver = node.child_by_field_name("receiver")
            if receiver is not None and receiver.type not in _CHAIN_RECEIVERS:
                # "messages/show".freeze, [a, b].first: цепочка начинается не со ссылки
                return None
            if method is not None and method.type == "identifier":
                return self.dynamic_dependency(doc.get_node_text(method))
        return None

    @staticmethod
    def _string_parts(doc: TreeSitterDocument, node: Node) -> Optional[List[Optional[str]]]:
        parts: List[Optional[str]] = []
        for child in node.named_children:
            if child.type in ("string_content", "escape_sequence"):
                parts.append(doc.get_node_text(child))
            elif child.type == "interpolation":
                body = doc.get_node_text(child)[2:-1]
                if "'" in body or '"' in body:
                    return None
                parts.append(WILDCARD)
            else:
                return None
        return parts


__all__ = ["SyntaxTreeExtractor"]
