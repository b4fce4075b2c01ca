"""
Соглашение об именовании шаблонов коллекций.

Ссылка `render @topics` или `render post.topic` превращается в
зависимость "<множественное>/<единственное>" ("topics/topic"): объект
рендерится партиалом из каталога своей коллекции.

Правила словоизменения табличные и расширяются из конфигурации.
Для неанглийских идентификаторов словоизменение отключается (inflect=False).
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Tuple

# (шаблон, замена): проверяются по порядку, первое совпадение выигрывает
_PLURAL_RULES: List[Tuple[str, str]] = [
    (r"(quiz)$", r"\1zes"),
    (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
    (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
    (r"([^aeiouy]|qu)y$", r"\1ies"),
    (r"(x|ch|ss|sh)$", r"\1es"),
    (r"(alias|status|bus)$", r"\1es"),
    (r"s$", "s"),
    (r"$", "s"),
]

_SINGULAR_RULES: List[Tuple[str, str]] = [
    (r"(quiz)zes$", r"\1"),
    (r"(matr)ices$", r"\1ix"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"([lr])ves$", r"\1f"),
    (r"([^f])ves$", r"\1fe"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"(x|ch|ss|sh)es$", r"\1"),
    (r"(alias|status|bus)(?:es)?$", r"\1"),
    (r"(ss)$", r"\1"),
    (r"s$", ""),
]

_IRREGULAR: Dict[str, str] = {
    "person": "people",
    "man": "men",
    "child": "children",
    "move": "moves",
}

_UNCOUNTABLE = {"equipment", "information", "rice", "money", "species", "series", "fish", "sheep", "news"}


class NamingConvention:
    """
    Правила превращения идентификатора в путь партиала коллекции.

    Args:
        irregular: дополнительные пары единственное -> множественное
        uncountable: неизменяемые слова
        inflect: False — имя используется без словоизменения
    """

    def __init__(
        self,
        irregular: Optional[Dict[str, str]] = None,
        uncountable: Optional[Iterable[str]] = None,
        inflect: bool = True,
    ):
        self.inflect = inflect
        self.irregular: Dict[str, str] = dict(_IRREGULAR)
        self.irregular.update({k.lower(): v.lower() for k, v in (irregular or {}).items()})
        self.uncountable = set(_UNCOUNTABLE) | {w.lower() for w in (uncountable or ())}
        self._plural_of_irregular = {v: k for k, v in self.irregular.items()}

    def pluralize(self, word: str) -> str:
        if not self.inflect or not word or word.lower() in self.uncountable:
            return word
        low = word.lower()
        if low in self._plural_of_irregular:
            return word
        if low in self.irregular:
            return _keep_head(word, self.irregular[low])
        return _apply(_PLURAL_RULES, word)

    def singularize(self, word: str) -> str:
        if not self.inflect or not word or word.lower() in self.uncountable:
            return word
        low = word.lower()
        if low in self.irregular:
            return word
        if low in self._plural_of_irregular:
            return _keep_head(word, self._plural_of_irregular[low])
        return _apply(_SINGULAR_RULES, word)

    def collection_path(self, identifier: str) -> str:
        """"topic" -> "topics/topic"; "messages" -> "messages/message"."""
        return f"{self.pluralize(identifier)}/{self.singularize(identifier)}"


def _apply(rules: List[Tuple[str, str]], word: str) -> str:
    for pattern, replacement in rules:
        if re.search(pattern, word, flags=re.IGNORECASE):
            return re.sub(pattern, replacement, word, count=1, flags=re.IGNORECASE)
    return word


def _keep_head(word: str, replacement: str) -> str:
    # регистр первой буквы сохраняем: Person -> People
    if word[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


__all__ = ["NamingConvention"]
