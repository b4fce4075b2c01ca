"""
Грамматика имён файлов шаблонов.

    messages/_message.en.html+phone.erb
    └prefix─┘│└name─┘└lc┘└fmt┘└var┘└handler

Маркер партиала — подчёркивание в начале базового имени. Логическое имя
шаблона не содержит маркера: "messages/_message" -> "messages/message".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .types import TemplateKind

DEFAULT_FORMATS: Tuple[str, ...] = (
    "html", "text", "js", "css", "ics", "csv", "vcf", "vtt", "png", "jpeg", "gif",
    "bmp", "tiff", "svg", "mpeg", "mp3", "ogg", "m4a", "webm", "mp4", "otf", "ttf",
    "woff", "woff2", "xml", "rss", "atom", "yaml", "multipart_form", "url_encoded_form",
    "json", "pdf", "zip", "gzip",
)

_LOCALE_RE = re.compile(r"^[a-z]{2}(?:[-_][A-Z]{2})?$")


@dataclass(frozen=True)
class TemplatePath:
    prefix: str  # "" для шаблонов в корне
    name: str  # без маркера партиала
    partial: bool
    locale: Optional[str] = None
    format: Optional[str] = None
    variant: Optional[str] = None
    handler: Optional[str] = None

    @property
    def virtual_path(self) -> str:
        base = f"_{self.name}" if self.partial else self.name
        return f"{self.prefix}/{base}" if self.prefix else base

    @property
    def logical_name(self) -> str:
        return f"{self.prefix}/{self.name}" if self.prefix else self.name

    @property
    def kind(self) -> Optional[TemplateKind]:
        return TemplateKind.from_handler(self.handler) if self.handler else None

    @classmethod
    def parse(cls, path: str, formats: Iterable[str] = DEFAULT_FORMATS) -> "TemplatePath":
        """
        Разбирает относительный путь файла шаблона.

        Расширения снимаются справа налево: обработчик, затем формат с
        необязательным вариантом (html+phone), затем локаль. Всё, что не
        распознано, остаётся частью имени.
        """
        known_formats = set(formats)
        prefix, base = split_name(path)
        partial = base.startswith("_")
        if partial:
            base = base[1:]

        parts = base.split(".")
        name_parts, exts = parts[:1], parts[1:]

        handler = fmt = variant = locale = None
        if exts and TemplateKind.from_handler(exts[-1]) is not None:
            handler = exts.pop()
        if exts:
            head, _, var = exts[-1].partition("+")
            if head in known_formats:
                fmt = head
                variant = var or None
                exts.pop()
        if exts and _LOCALE_RE.match(exts[-1]):
            locale = exts.pop()

        name = ".".join(name_parts + exts)
        return cls(
            prefix=prefix,
            name=name,
            partial=partial,
            locale=locale,
            format=fmt,
            variant=variant,
            handler=handler,
        )


def split_name(name: str) -> Tuple[str, str]:
    """"messages/_message" -> ("messages", "_message"); "index" -> ("", "index")."""
    prefix, sep, base = name.rpartition("/")
    return (prefix if sep else ""), base


def directory_of(name: str) -> str:
    return split_name(name)[0]


def logical_name(name: str) -> str:
    prefix, base = split_name(name)
    if base.startswith("_"):
        base = base[1:]
    return f"{prefix}/{base}" if prefix else base


def partial_name(name: str) -> str:
    prefix, base = split_name(name)
    if not base.startswith("_"):
        base = f"_{base}"
    return f"{prefix}/{base}" if prefix else base


__all__ = [
    "DEFAULT_FORMATS",
    "TemplatePath",
    "split_name",
    "directory_of",
    "logical_name",
    "partial_name",
]
