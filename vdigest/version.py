from __future__ import annotations

from importlib import metadata

# имя дистрибутива и, для editable-установок без метаданных, имя пакета
_DISTRIBUTIONS = ("view-digest", "vdigest")


def tool_version() -> str:
    """Версия установленного пакета; модуль не импортирует остальной vdigest."""
    for dist in _DISTRIBUTIONS:
        try:
            return metadata.version(dist)
        except metadata.PackageNotFoundError:
            continue
    return "0.0.0"


__all__ = ["tool_version"]
