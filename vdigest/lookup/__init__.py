from .base import TemplateLookup
from .filesystem import FileSystemLookup
from .memory import InMemoryLookup

__all__ = ["TemplateLookup", "FileSystemLookup", "InMemoryLookup"]
