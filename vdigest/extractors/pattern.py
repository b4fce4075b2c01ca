"""
Лёгкий экстрактор на регулярных выражениях.

Работает по сырому тексту кода: режет его по слову render и разбирает
начало каждого фрагмента как список аргументов вызова. Грамматику языка
не строит, поэтому отдельные экзотические формы вызова может пропустить.
"""

from __future__ import annotations

import re
from typing import List, Optional

from ..types import TemplateSource
from .base import DependencyExtractor, TrackerStrategy, split_interpolation

# Вставки кода ERB: <% ... %>, <%= ... %>, <%- ... -%>. <%# ... %> — комментарий, <%% — экранирование.
ERB_CODE = re.compile(r"<%(?!%)([=\-_#]?)(.*?)[-_]?%>", re.S)

RUBY_BLOCK_COMMENT = re.compile(r"^=begin\b.*?^=end\b", re.M | re.S)

RENDER = re.compile(r"\brender\b")

# render({ ... }): хеш опций, переданный одним аргументом
OPENING_HASH = re.compile(r"\s*\(?\s*\{?")

# Литерал, за которым идёт конкатенация, вызов метода или индекс, именем не считается
STRING = (
    r"""(?:"(?P<double>(?:[^"\\]|\\.)*)"|'(?P<single>(?:[^'\\]|\\.)*)')"""
    r"(?!\s*[+.\[])"
)

# @post.topic, $current, @@shared, Current.user, post&.author
VARIABLE_OR_METHOD_CHAIN = (
    r"(?:\$|@{1,2})?"
    r"(?:[A-Za-z_]\w*[!?]?(?:&\.|\.))*"
    r"(?P<dynamic>(?!(?:nil|true|false|self)\b)[a-z_]\w*)"
    r"(?![\w:!?])"
)

VALUE = rf"(?:{STRING}|{VARIABLE_OR_METHOD_CHAIN})"


def _key(name: str) -> str:
    # новый (partial:) и старый (:partial =>) синтаксис хеша
    return rf"(?:\b{name}:|:{name}\s*=>)\s*"


POSITIONAL_ARGUMENT = re.compile(rf"\A\s*\(?\s*{VALUE}", re.S)
PARTIAL_ARGUMENT = re.compile(rf"\A.*?{_key('partial')}{VALUE}", re.S)
TEMPLATE_ARGUMENT = re.compile(rf"\A.*?{_key('template')}{VALUE}", re.S)
COLLECTION_ARGUMENT = re.compile(rf"\A.*?{_key('collection')}{VALUE}", re.S)
LAYOUT_ARGUMENT = re.compile(rf"\A.*?{_key('layout')}{VALUE}", re.S)
SPACER_ARGUMENT = re.compile(rf"\A.*?{_key('spacer_template')}{VALUE}", re.S)


class PatternExtractor(DependencyExtractor):

    strategy = TrackerStrategy.PATTERN

    def erb_render_calls(self, text: str, template: TemplateSource) -> List[List[Optional[str]]]:
        calls: List[List[Optional[str]]] = []
        # вызов не выходит за пределы своей вставки кода
        for match in ERB_CODE.finditer(text):
            if match.group(1) == "#":
                continue
            calls.extend(self._scan_code(match.group(2), template))
        return calls

    def ruby_render_calls(self, text: str, template: TemplateSource) -> List[List[Optional[str]]]:
        return self._scan_code(text, template)

    def _scan_code(self, code: str, template: TemplateSource) -> List[List[Optional[str]]]:
        code = strip_comments(RUBY_BLOCK_COMMENT.sub("", code))
        calls: List[List[Optional[str]]] = []
        for arguments in RENDER.split(code)[1:]:
            arguments = top_level(arguments)
            main = (
                self._value(PARTIAL_ARGUMENT, arguments, template)
                or self._value(POSITIONAL_ARGUMENT, arguments, template)
                or self._value(TEMPLATE_ARGUMENT, arguments, template)
                or self._value(COLLECTION_ARGUMENT, arguments, template)
            )
            layout = self._value(LAYOUT_ARGUMENT, arguments, template)
            spacer = self._value(SPACER_ARGUMENT, arguments, template)
            names = [main, layout, spacer]
            if any(names):
                calls.append(names)
        return calls

    def _value(self, pattern: re.Pattern, arguments: str, template: TemplateSource) -> Optional[str]:
        match = pattern.match(arguments)
        if not match:
            return None
        if match.group("dynamic"):
            return self.dynamic_dependency(match.group("dynamic"))
        if match.group("double") is not None:
            return self.static_dependency(split_interpolation(match.group("double")), template)
        return self.static_dependency([match.group("single")], template)


def literal_end(code: str, start: int) -> int:
    """
    Позиция сразу за строковым литералом, открытым кавычкой code[start].

    В двойных кавычках учитывается интерполяция: кавычки внутри #{...}
    литерал не закрывают. Незакрытый литерал тянется до конца кода.
    """
    quote = code[start]
    depth = 0
    i = start + 1
    while i < len(code):
        ch = code[i]
        if ch == "\\":
            i += 2
            continue
        if quote == '"' and code.startswith("#{", i):
            depth += 1
            i += 2
            continue
        if depth:
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
        elif ch == quote:
            return i + 1
        i += 1
    return len(code)


def strip_comments(code: str) -> str:
    """Убирает комментарии `# ...` до конца строки; литералы не трогает."""
    out: List[str] = []
    i = 0
    while i < len(code):
        ch = code[i]
        if ch in "'\"":
            end = literal_end(code, i)
            out.append(code[i:end])
            i = end
        elif ch == "#" and not code.startswith("#{", i) and (i == 0 or code[i - 1] not in "$?\\"):
            eol = code.find("\n", i)
            i = len(code) if eol < 0 else eol
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def top_level(arguments: str) -> str:
    """
    Аргументы вызова, где содержимое вложенных {...} и [...] заменено пробелами.

    Ключи из locals: { layout: ... } не читаются как опции самого render.
    Фигурные скобки хеша-аргумента render({ partial: ... }) вложенными не считаются.
    """
    i = OPENING_HASH.match(arguments).end()
    out: List[str] = [arguments[:i]]
    depth = 0
    while i < len(arguments):
        ch = arguments[i]
        if ch in "'\"":
            end = literal_end(arguments, i)
            chunk = arguments[i:end]
            out.append(" " * len(chunk) if depth else chunk)
            i = end
            continue
        if ch in "{[":
            depth += 1
        elif ch in "}]" and depth:
            depth -= 1
        elif depth:
            ch = " "
        out.append(ch)
        i += 1
    return "".join(out)


__all__ = ["PatternExtractor", "strip_comments", "top_level"]
