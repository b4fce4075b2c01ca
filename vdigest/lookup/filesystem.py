from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import pathspec

from ..paths import DEFAULT_FORMATS
from .base import TemplateLookup

logger = logging.getLogger(__name__)


class FileSystemLookup(TemplateLookup):
    """
    Шаблоны из каталогов view paths.

    Каталоги просматриваются по порядку: первый, где нашёлся подходящий
    шаблон, выигрывает. Файлы, попавшие под exclude (gitwildmatch), не видны.
    """

    def __init__(
        self,
        view_paths: Sequence[Path],
        *,
        exclude: Optional[Sequence[str]] = None,
        formats: Sequence[str] = DEFAULT_FORMATS,
    ):
        super().__init__(formats)
        self.view_paths: List[Path] = [Path(p) for p in view_paths]
        self._exclude: Optional[pathspec.PathSpec] = (
            pathspec.PathSpec.from_lines("gitwildmatch", exclude) if exclude else None
        )

    def origins(self) -> List[str]:
        return [str(p) for p in self.view_paths]

    def list_entries(self, origin: str, prefix: str, recursive: bool) -> Iterable[str]:
        root = Path(origin)
        base = root / prefix if prefix else root
        if not base.is_dir():
            return []
        files = base.rglob("*") if recursive else base.iterdir()
        result = []
        for p in files:
            if not p.is_file():
                continue
            rel = p.relative_to(root).as_posix()
            if self._exclude is not None and self._exclude.match_file(rel):
                continue
            result.append(rel)
        result.sort()
        logger.debug("Listed %d entries in %s (prefix=%r)", len(result), origin, prefix)
        return result

    def read(self, origin: str, rel_path: str) -> bytes:
        return (Path(origin) / rel_path).read_bytes()

    def describe(self, origin: str, rel_path: str) -> str:
        return str(Path(origin) / rel_path)


__all__ = ["FileSystemLookup"]
