"""
Поиск шаблонов по имени и набору деталей.

Базовый класс реализует выбор лучшего кандидата и перечисление
пространства имён; наследники отвечают только за листинг и чтение
файлов своего хранилища.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Tuple

from ..paths import DEFAULT_FORMATS, TemplatePath, logical_name, partial_name, split_name
from ..types import DetailSignature, TemplateSource


class TemplateLookup(ABC):
    """
    Внешний поставщик исходников шаблонов.

    Содержимое не кэшируется: каждый вызов find() читает актуальную версию.
    """

    def __init__(self, formats: Sequence[str] = DEFAULT_FORMATS):
        self.formats = tuple(formats)

    # --------------------------- хранилище --------------------------- #

    @abstractmethod
    def origins(self) -> List[str]:
        """Источники в порядке приоритета (например, каталоги view paths)."""
        pass

    @abstractmethod
    def list_entries(self, origin: str, prefix: str, recursive: bool) -> Iterable[str]:
        """
        Относительные пути файлов внутри prefix.

        Args:
            origin: источник из origins()
            prefix: каталог ("" — корень)
            recursive: включать ли вложенные каталоги
        """
        pass

    @abstractmethod
    def read(self, origin: str, rel_path: str) -> bytes:
        pass

    def describe(self, origin: str, rel_path: str) -> str:
        return f"{origin}/{rel_path}"

    # --------------------------- PUBLIC API --------------------------- #

    def find(self, name: str, details: DetailSignature) -> Optional[TemplateSource]:
        """
        Находит шаблон ровно с таким виртуальным путём ("messages/_message"
        ищет только партиал, "messages/message" — только обычный шаблон).
        """
        prefix, base = split_name(name)
        partial = base.startswith("_")
        bare = base[1:] if partial else base

        for origin in self.origins():
            candidates: List[Tuple[str, TemplatePath]] = []
            for rel in self.list_entries(origin, prefix, recursive=False):
                path = TemplatePath.parse(rel, self.formats)
                if path.prefix != prefix or path.name != bare or path.partial != partial:
                    continue
                if path.kind is None or not _compatible(path, details):
                    continue
                candidates.append((rel, path))
            if candidates:
                candidates.sort(key=lambda c: _rank(c[1], details))
                rel, path = candidates[0]
                return self._load(origin, rel, path)
        return None

    def find_root(self, name: str, details: DetailSignature) -> Optional[TemplateSource]:
        """Корневой шаблон: сначала обычный, затем партиал с тем же именем."""
        return self.find(name, details) or self.find(partial_name(name), details)

    def find_dependency(self, name: str, details: DetailSignature) -> Optional[TemplateSource]:
        """Зависимость: сначала партиал, затем обычный шаблон."""
        return self.find(partial_name(name), details) or self.find(logical_name(name), details)

    def enumerate(self, namespace: str, details: DetailSignature) -> List[str]:
        """
        Логические имена всех подходящих шаблонов внутри namespace
        (рекурсивно), отсортированные и без повторов.
        """
        namespace = namespace.strip("/")
        names = set()
        for origin in self.origins():
            for rel in self.list_entries(origin, namespace, recursive=True):
                path = TemplatePath.parse(rel, self.formats)
                if path.kind is None or not _compatible(path, details):
                    continue
                names.add(path.logical_name)
        return sorted(names)

    def _load(self, origin: str, rel: str, path: TemplatePath) -> TemplateSource:
        return TemplateSource(
            virtual_path=path.virtual_path,
            identifier=self.describe(origin, rel),
            source=self.read(origin, rel),
            kind=path.kind,
            handler=path.handler,
            locale=path.locale,
            format=path.format,
            variant=path.variant,
            partial=path.partial,
        )


def _compatible(path: TemplatePath, details: DetailSignature) -> bool:
    return (
        _allowed(path.locale, details.locale)
        and _allowed(path.format, details.formats)
        and _allowed(path.variant, details.variants)
        and _allowed(path.handler, details.handlers)
    )


def _allowed(value: Optional[str], axis: Tuple[str, ...]) -> bool:
    return value is None or value in axis


def _rank(path: TemplatePath, details: DetailSignature) -> Tuple[int, ...]:
    # указанное значение выигрывает у отсутствующего, среди указанных решает порядок оси
    def pos(value: Optional[str], axis: Tuple[str, ...]) -> int:
        return axis.index(value) if value is not None else len(axis)

    return (
        pos(path.locale, details.locale),
        pos(path.format, details.formats),
        pos(path.variant, details.variants),
        pos(path.handler, details.handlers),
    )


__all__ = ["TemplateLookup"]
