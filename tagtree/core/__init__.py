"""Core tag graph components."""

from .types import Node, NodeKind, FileRecord, FileState
from .constants import *
from .exceptions import *
from .events import EventKind, FileEvent
from .extractor import EdgeExtractor, read_text
from .filters import FileFilter, enumerate_files
from .index import GraphIndex, sort_nodes
from .maintainer import GraphMaintainer
from .notifier import ChangeNotifier
from .completion import completion_prefix, suggest
from .utils import edge_key, split_edge, get_basename, node_name_for

__all__ = [
    # Types
    "Node",
    "NodeKind",
    "FileRecord",
    "FileState",
    "EventKind",
    "FileEvent",
    # Constants
    "EDGE_SEPARATOR",
    "GRAMMAR_ARROW",
    "GRAMMAR_TAG",
    "GRAMMARS",
    "NAME_MODE_BASENAME",
    "NAME_MODE_PATH",
    "NAME_MODES",
    "WATCHED_EXTENSIONS",
    "SOURCE_DIR",
    "SKIP_DIRS",
    "GRAPH_CHANGED",
    # Exceptions
    "TagTreeError",
    "ReadFailure",
    "MalformedEdgeSyntax",
    "LookupInconsistency",
    "NodeNotFoundError",
    "InvalidConfigError",
    # Classes
    "EdgeExtractor",
    "FileFilter",
    "GraphIndex",
    "GraphMaintainer",
    "ChangeNotifier",
    # Functions
    "read_text",
    "enumerate_files",
    "sort_nodes",
    "completion_prefix",
    "suggest",
    "edge_key",
    "split_edge",
    "get_basename",
    "node_name_for",
]
