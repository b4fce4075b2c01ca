"""
Дайджест шаблона и всех его зависимостей.

    digestor = Digestor(FileSystemLookup([root / "app/views"]))
    digestor.digest("messages/show", DetailSignature(), ["v2"])

Дайджест меняется тогда и только тогда, когда меняется сам шаблон или
любая его транзитивная зависимость (после clear_cache()). Для
отсутствующего корневого шаблона возвращается пустая строка.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from .cache import DigestCache
from .config import DigestorConfig
from .digest import ContentDigest, DigestComputer
from .extractors import TrackerStrategy, create_extractor
from .lookup import FileSystemLookup, TemplateLookup
from .naming import NamingConvention
from .resolver import NameResolver
from .tree import Tree, TreeBuilder
from .types import DetailSignature

logger = logging.getLogger(__name__)


class Digestor:
    """
    Долгоживущий сервис: владеет кэшем и стратегией извлечения зависимостей.

    Сброс кэша — ответственность приложения (например, по событию
    изменения файлов шаблонов): Digestor свежесть содержимого не проверяет.
    """

    def __init__(
        self,
        lookup: TemplateLookup,
        *,
        strategy: TrackerStrategy | str = TrackerStrategy.PATTERN,
        naming: Optional[NamingConvention] = None,
        cache: Optional[DigestCache] = None,
        content_digest: Optional[ContentDigest] = None,
    ):
        self.lookup = lookup
        self.extractor = create_extractor(strategy, naming)
        self.builder = TreeBuilder(lookup, self.extractor, NameResolver(lookup))
        self.computer = DigestComputer(content_digest)
        self.cache = cache if cache is not None else DigestCache()

    @classmethod
    def from_config(cls, config: DigestorConfig) -> "Digestor":
        lookup = FileSystemLookup(config.view_paths, exclude=config.exclude)
        return cls(
            lookup,
            strategy=config.tracker,
            naming=config.naming,
            cache=DigestCache(enabled=config.cache),
        )

    @property
    def strategy(self) -> TrackerStrategy:
        return self.extractor.strategy

    def build_tree(self, name: str, details: DetailSignature) -> Tree:
        return self.cache.fetch_tree((name, details), lambda: self._build(name, details))

    def digest(self, name: str, details: DetailSignature, extra_dependencies: Sequence[str] = ()) -> str:
        extra = tuple(extra_dependencies)
        return self.cache.fetch_digest(
            (name, details, extra),
            lambda: self.computer.compute(self.build_tree(name, details), extra),
        )

    def dependencies(self, name: str, details: DetailSignature) -> List[str]:
        """Прямые зависимости шаблона."""
        return self.build_tree(name, details).root.dependencies

    def nested_dependencies(self, name: str, details: DetailSignature) -> List[Any]:
        """Все зависимости в виде вложенной карты."""
        return self.build_tree(name, details).nested_dependencies()

    def clear_cache(self) -> None:
        self.cache.clear()

    def _build(self, name: str, details: DetailSignature) -> Tree:
        logger.debug("Building dependency tree for %s [%s]", name, details.key)
        return self.builder.build(name, details)


__all__ = ["Digestor"]
