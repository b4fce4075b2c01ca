"""
Схемы JSON-ответов CLI.
"""

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class _Report(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DigestReport(_Report):
    name: str
    digest: str
    details: str
    tracker: str
    extra_dependencies: List[str] = Field(default_factory=list, alias="extraDependencies")


class DependenciesReport(_Report):
    name: str
    dependencies: List[str] = Field(default_factory=list)


class NestedDependenciesReport(_Report):
    name: str
    # элементы: имя листа или {имя: [вложенные элементы]}
    tree: List[Any] = Field(default_factory=list)


__all__ = ["DigestReport", "DependenciesReport", "NestedDependenciesReport"]
