from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence, Union

from ..paths import DEFAULT_FORMATS, directory_of
from .base import TemplateLookup

Content = Union[str, bytes]


class InMemoryLookup(TemplateLookup):
    """
    Хранилище шаблонов в словаре {относительный путь файла: содержимое}.

    Используется в тестах и для встраивания, когда шаблоны не лежат на диске.
    """

    ORIGIN = "memory"

    def __init__(self, files: Mapping[str, Content] | None = None, formats: Sequence[str] = DEFAULT_FORMATS):
        super().__init__(formats)
        self._files: Dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self.update(path, content)

    def update(self, path: str, content: Content) -> None:
        self._files[path.strip("/")] = content.encode("utf-8") if isinstance(content, str) else bytes(content)

    def remove(self, path: str) -> None:
        self._files.pop(path.strip("/"), None)

    def origins(self) -> List[str]:
        return [self.ORIGIN]

    def list_entries(self, origin: str, prefix: str, recursive: bool) -> Iterable[str]:
        for rel in sorted(self._files):
            if recursive:
                if not prefix or rel.startswith(prefix + "/"):
                    yield rel
            elif directory_of(rel) == prefix:
                yield rel

    def read(self, origin: str, rel_path: str) -> bytes:
        return self._files[rel_path]


__all__ = ["InMemoryLookup"]
