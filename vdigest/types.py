from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


# ---- Виды шаблонов ----

class TemplateKind(str, Enum):
    """
    Вид шаблона. Определяет, какой экстрактор зависимостей применяется.

    ERB  — разметка со вставками кода <% ... %>;
    RUBY — весь файл является кодом (builder/jbuilder/ruby);
    RAW  — статический текст, зависимостей не бывает.
    """
    ERB = "erb"
    RUBY = "ruby"
    RAW = "raw"

    @classmethod
    def from_handler(cls, handler: str) -> Optional["TemplateKind"]:
        return _HANDLERS.get(handler)

    @classmethod
    def handlers(cls) -> Tuple[str, ...]:
        return tuple(_HANDLERS)


_HANDLERS = {
    "erb": TemplateKind.ERB,
    "builder": TemplateKind.RUBY,
    "jbuilder": TemplateKind.RUBY,
    "ruby": TemplateKind.RUBY,
    "raw": TemplateKind.RAW,
    "html": TemplateKind.RAW,
    "text": TemplateKind.RAW,
}


class NodeState(str, Enum):
    UNVISITED = "unvisited"
    BUILDING = "building"
    BUILT = "built"
    MISSING = "missing"
    CYCLE_CLOSED = "cycle_closed"


# ---- Детали поиска ----

@dataclass(frozen=True)
class DetailSignature:
    """
    Набор деталей поиска (локаль, форматы, варианты, обработчики).

    Порядок внутри каждой оси задаёт приоритет кандидатов.
    Экземпляр хешируемый и используется как часть ключей кэша.
    """
    locale: Tuple[str, ...] = ("en",)
    formats: Tuple[str, ...] = ("html",)
    variants: Tuple[str, ...] = ()
    handlers: Tuple[str, ...] = field(default_factory=TemplateKind.handlers)

    @property
    def key(self) -> str:
        return "|".join(",".join(axis) for axis in (self.locale, self.formats, self.variants, self.handlers))

    def with_options(
        self,
        *,
        locale: Optional[str] = None,
        fmt: Optional[str] = None,
        variant: Optional[str] = None,
    ) -> "DetailSignature":
        """Возвращает копию, где указанные значения поставлены первыми в своей оси."""
        return DetailSignature(
            locale=_prepend(self.locale, locale),
            formats=_prepend(self.formats, fmt),
            variants=_prepend(self.variants, variant),
            handlers=self.handlers,
        )


def _prepend(axis: Tuple[str, ...], value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return axis
    return (value,) + tuple(v for v in axis if v != value)


# ---- Исходники и зависимости ----

@dataclass(frozen=True)
class TemplateSource:
    """
    Найденный шаблон: содержимое и метаданные, по которым он был выбран.
    После чтения не меняется.
    """
    virtual_path: str  # "messages/_message"
    identifier: str  # полный путь источника (файл или ключ in-memory хранилища)
    source: bytes
    kind: TemplateKind
    handler: str = "erb"
    locale: Optional[str] = None
    format: Optional[str] = None
    variant: Optional[str] = None
    partial: bool = False

    @property
    def logical_name(self) -> str:
        from .paths import logical_name
        return logical_name(self.virtual_path)

    @property
    def text(self) -> str:
        return self.source.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class DependencySpecifier:
    """
    Символьное имя зависимости: конкретное имя шаблона или wildcard-шаблон.

    declared=True — зависимость объявлена явно аннотацией в исходнике.
    """
    name: str
    declared: bool = False

    @property
    def is_wildcard(self) -> bool:
        return "*" in self.name


__all__ = [
    "TemplateKind",
    "NodeState",
    "DetailSignature",
    "TemplateSource",
    "DependencySpecifier",
]
