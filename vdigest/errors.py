"""
Исключения view-digest.

VDUserError и наследники означают проблему, которую пользователь может
исправить сам (конфигурация, аргументы CLI). CLI печатает их текст без
трассировки и завершается с кодом 2. Остальные исключения считаются
ошибками программы и выходят наружу как есть.
"""

from __future__ import annotations


class VDUserError(Exception):
    """Ожидаемая ошибка, понятная пользователю."""


class ConfigError(VDUserError):
    """Ошибка загрузки или валидации vdigest.yaml."""


class UnparsableSourceError(Exception):
    """
    Исходник шаблона не удалось разобрать в синтаксическое дерево.

    Наружу экстрактора не выходит: экстрактор превращает её в пустой
    список зависимостей.
    """

    def __init__(self, identifier: str, reason: str = ""):
        super().__init__(f"Cannot parse {identifier}{f': {reason}' if reason else ''}")
        self.identifier = identifier


__all__ = ["VDUserError", "ConfigError", "UnparsableSourceError"]
