"""
Общая часть экстракторов зависимостей.

Экстрактор получает исходник шаблона и возвращает упорядоченный список
символьных зависимостей. Стратегии различаются только способом поиска
вызовов render; правила превращения аргумента вызова в имя шаблона
общие и живут здесь.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from ..naming import NamingConvention
from ..paths import directory_of
from ..types import DependencySpecifier, TemplateKind, TemplateSource

# Явная аннотация в комментарии шаблона: <%# Template Dependency: messages/summary %>
EXPLICIT_DEPENDENCY = re.compile(r"#\s*Template Dependency:\s*([^\s%]+)")

# Фрагмент интерполяции внутри строкового литерала
WILDCARD = None

_SIGILS = "@$:"


class TrackerStrategy(str, Enum):
    PATTERN = "pattern"
    SYNTAX = "syntax"


class DependencyExtractor(ABC):
    """
    Базовый экстрактор. Без состояния между вызовами.

    Наследник реализует поиск вызовов render для кода (code) и возвращает
    по одному списку имён на каждый вызов.
    """

    strategy: TrackerStrategy

    def __init__(self, naming: Optional[NamingConvention] = None):
        self.naming = naming or NamingConvention()

    def extract(self, template: TemplateSource) -> List[DependencySpecifier]:
        if template.kind is TemplateKind.RAW:
            return []

        text = template.text
        if template.kind is TemplateKind.ERB:
            calls = self.erb_render_calls(text, template)
        elif template.kind is TemplateKind.RUBY:
            calls = self.ruby_render_calls(text, template)
        else:
            raise ValueError(f"Unsupported template kind: {template.kind!r}")

        rendered: List[str] = []
        for names in calls:
            rendered.extend(sorted(set(n for n in names if n)))
        return collect_specifiers(rendered, explicit_dependencies(text))

    @abstractmethod
    def erb_render_calls(self, text: str, template: TemplateSource) -> List[List[Optional[str]]]:
        pass

    @abstractmethod
    def ruby_render_calls(self, text: str, template: TemplateSource) -> List[List[Optional[str]]]:
        pass

    # --------------------------- имена зависимостей --------------------------- #

    def static_dependency(self, parts: Optional[Sequence[Optional[str]]], template: TemplateSource) -> Optional[str]:
        """
        Имя из строкового литерала.

        parts — куски литерала, где WILDCARD (None) обозначает интерполяцию.
        parts=None — литерал не удалось разобрать.
        """
        if parts is None:
            return None
        name = "".join("*" if p is WILDCARD else p for p in parts)
        if not name or name.endswith("/"):
            # пустое имя или одно пространство имён ("messages/") шаблоном не является
            return None
        if WILDCARD in parts and not name.replace("*", "").strip("/"):
            # ни одного литерального символа: сузить до пространства имён нельзя
            return None
        if "/" not in name:
            directory = directory_of(template.logical_name)
            return f"{directory}/{name}" if directory else name
        return name

    def dynamic_dependency(self, identifier: Optional[str]) -> Optional[str]:
        """Ссылка на объект/коллекцию: "@topics" -> "topics/topic"."""
        if not identifier:
            return None
        bare = identifier.lstrip(_SIGILS)
        if not bare:
            return None
        return self.naming.collection_path(bare)


def split_interpolation(value: str) -> Optional[List[Optional[str]]]:
    """
    Режет содержимое строкового литерала на куски по #{...}.

    Возвращает None, если скобки не сбалансированы или внутри интерполяции
    есть кавычки (вложенный литерал): такой вызов не поддерживается.
    """
    parts: List[Optional[str]] = []
    pos = 0
    while True:
        start = value.find("#{", pos)
        if start < 0:
            parts.append(value[pos:])
            return [p for p in parts if p != ""]
        parts.append(value[pos:start])
        depth = 1
        i = start + 2
        while depth and i < len(value):
            if value[i] == "{":
                depth += 1
            elif value[i] == "}":
                depth -= 1
            i += 1
        if depth:
            return None
        body = value[start + 2:i - 1]
        if "'" in body or '"' in body:
            return None
        parts.append(WILDCARD)
        pos = i


def explicit_dependencies(text: str) -> List[str]:
    result: List[str] = []
    for match in EXPLICIT_DEPENDENCY.finditer(text):
        name = match.group(1)
        if name not in result:
            result.append(name)
    return result


def collect_specifiers(rendered: Iterable[str], declared: Iterable[str]) -> List[DependencySpecifier]:
    """Дедупликация с сохранением порядка; объявленные идут после найденных."""
    seen = set()
    result: List[DependencySpecifier] = []
    for name in rendered:
        if name not in seen:
            seen.add(name)
            result.append(DependencySpecifier(name))
    for name in declared:
        if name not in seen:
            seen.add(name)
            result.append(DependencySpecifier(name, declared=True))
    return result


__all__ = [
    "TrackerStrategy",
    "DependencyExtractor",
    "EXPLICIT_DEPENDENCY",
    "WILDCARD",
    "split_interpolation",
    "explicit_dependencies",
    "collect_specifiers",
]
