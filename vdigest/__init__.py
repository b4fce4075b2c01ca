from .cache import CacheSnapshot, DigestCache
from .digestor import Digestor
from .errors import ConfigError, VDUserError
from .extractors import TrackerStrategy, find_dependencies
from .lookup import FileSystemLookup, InMemoryLookup, TemplateLookup
from .naming import NamingConvention
from .tree import Node, Tree
from .types import DependencySpecifier, DetailSignature, NodeState, TemplateKind, TemplateSource

__all__ = [
    "CacheSnapshot",
    "DigestCache",
    "Digestor",
    "ConfigError",
    "VDUserError",
    "TrackerStrategy",
    "find_dependencies",
    "FileSystemLookup",
    "InMemoryLookup",
    "TemplateLookup",
    "NamingConvention",
    "Node",
    "Tree",
    "DependencySpecifier",
    "DetailSignature",
    "NodeState",
    "TemplateKind",
    "TemplateSource",
]
