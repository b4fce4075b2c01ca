from __future__ import annotations

from typing import List, Optional

from ..naming import NamingConvention
from ..types import DependencySpecifier, TemplateSource
from .base import DependencyExtractor, TrackerStrategy
from .pattern import PatternExtractor
from .syntax import SyntaxTreeExtractor


def create_extractor(strategy: TrackerStrategy | str, naming: Optional[NamingConvention] = None) -> DependencyExtractor:
    """Экстрактор выбранной стратегии."""
    strategy = TrackerStrategy(strategy)
    if strategy is TrackerStrategy.PATTERN:
        return PatternExtractor(naming)
    if strategy is TrackerStrategy.SYNTAX:
        return SyntaxTreeExtractor(naming)
    raise ValueError(f"Unknown tracker strategy: {strategy}")


def find_dependencies(
    template: TemplateSource,
    strategy: TrackerStrategy | str = TrackerStrategy.PATTERN,
    naming: Optional[NamingConvention] = None,
) -> List[DependencySpecifier]:
    return create_extractor(strategy, naming).extract(template)


__all__ = [
    "TrackerStrategy",
    "DependencyExtractor",
    "PatternExtractor",
    "SyntaxTreeExtractor",
    "create_extractor",
    "find_dependencies",
]
