"""
Дерево зависимостей шаблона.

Построение — синхронный рекурсивный обход в глубину. Цепочка предков
текущей ветки передаётся явно: повторное появление шаблона из цепочки
(прямая или взаимная рекурсия) закрывает цикл листом-ссылкой на предка,
а не раскрывается заново.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from .extractors import DependencyExtractor
from .lookup import TemplateLookup
from .paths import logical_name
from .resolver import NameResolver
from .types import DetailSignature, NodeState, TemplateSource

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Node:
    name: str  # логическое имя ("messages/message")
    template: Optional[TemplateSource] = None
    state: NodeState = NodeState.UNVISITED
    children: List["Node"] = field(default_factory=list)
    ref: Optional["Node"] = None  # предок, на котором замкнулся цикл

    @classmethod
    def missing(cls, name: str) -> "Node":
        return cls(name=name, state=NodeState.MISSING)

    @classmethod
    def cycle(cls, ancestor: "Node") -> "Node":
        return cls(name=ancestor.name, template=ancestor.template, state=NodeState.CYCLE_CLOSED, ref=ancestor)

    @property
    def key(self) -> str:
        """Идентичность узла: конкретный файл шаблона (или имя, если не найден)."""
        if self.template is not None:
            return self.template.identifier
        return f"missing:{self.name}"

    @property
    def is_missing(self) -> bool:
        return self.state is NodeState.MISSING

    @property
    def dependencies(self) -> List[str]:
        return [child.name for child in self.children]

    def to_dep_map(self) -> Any:
        """Вложенная карта: имя листа или {имя: [карты детей]}."""
        if self.children:
            return {self.name: [child.to_dep_map() for child in self.children]}
        return self.name

    def walk(self) -> Iterator["Node"]:
        """Прямой (pre-order) обход; каждый узел-объект выдаётся один раз."""
        seen: Set[int] = set()
        stack = [self]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            yield node
            stack.extend(reversed(node.children))


@dataclass(eq=False)
class Tree:
    root: Node
    details: DetailSignature

    @property
    def name(self) -> str:
        return self.root.name

    @property
    def missing(self) -> bool:
        return self.root.is_missing

    def children(self) -> List[Tuple[str, List[Any]]]:
        """[(имя, внуки)] — для интроспекции и отчётов."""
        return [(child.name, [gc.to_dep_map() for gc in child.children]) for child in self.root.children]

    def nested_dependencies(self) -> List[Any]:
        return [child.to_dep_map() for child in self.root.children]


class TreeBuilder:
    """
    Строит дерево зависимостей по имени шаблона.

    Один и тот же шаблон в разных ветках одной сборки — одна зависимость:
    уже построенный узел переиспользуется. Идентичность узла — найденный
    файл, а не имя: шаблон "level/recursion" и партиал "level/_recursion"
    различаются.
    """

    def __init__(self, lookup: TemplateLookup, extractor: DependencyExtractor, resolver: Optional[NameResolver] = None):
        self.lookup = lookup
        self.extractor = extractor
        self.resolver = resolver or NameResolver(lookup)

    def build(self, name: str, details: DetailSignature) -> Tree:
        root = self._build(name, details, chain={}, done={}, root=True)
        return Tree(root=root, details=details)

    def _build(
        self,
        name: str,
        details: DetailSignature,
        *,
        chain: Dict[str, Node],
        done: Dict[str, Node],
        root: bool = False,
    ) -> Node:
        logical = logical_name(name)
        template = self._find(name, details, root)
        if template is None:
            missing_key = f"missing:{logical}"
            if missing_key not in done:
                # динамические имена партиалов отследить невозможно, не шумим
                if "#" not in name:
                    logger.error("Couldn't find template for digesting: %s", name)
                done[missing_key] = Node.missing(logical)
            return done[missing_key]

        key = template.identifier
        if key in chain:
            logger.debug("Dependency cycle closed at %s (%s)", logical, key)
            return Node.cycle(chain[key])
        if key in done:
            return done[key]

        node = Node(name=logical, template=template, state=NodeState.BUILDING)
        chain[key] = node
        try:
            seen: Set[str] = set()
            for specifier in self.extractor.extract(template):
                for dep in self.resolver.resolve(specifier, details):
                    if dep in seen:
                        continue
                    seen.add(dep)
                    node.children.append(self._build(dep, details, chain=chain, done=done))
        finally:
            del chain[key]

        node.state = NodeState.BUILT
        done[key] = node
        return node

    def _find(self, name: str, details: DetailSignature, root: bool) -> Optional[TemplateSource]:
        if "#" in name:
            return None
        if root:
            return self.lookup.find_root(name, details)
        return self.lookup.find_dependency(name, details)


__all__ = ["Node", "Tree", "TreeBuilder"]
