"""Custom exceptions for tag graph operations."""


class TagTreeError(Exception):
    """Base exception for tag graph operations."""
    pass


class ReadFailure(TagTreeError):
    """Raised when a file cannot be read during extraction."""
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read '{path}'" + (f": {reason}" if reason else ""))


class MalformedEdgeSyntax(TagTreeError):
    """Raised when a bracketed expression does not parse into an edge."""
    def __init__(self, expression: str):
        self.expression = expression
        super().__init__(f"Malformed edge expression: [{expression}]")


class LookupInconsistency(TagTreeError):
    """Raised when an edge or file references state absent from the index."""
    pass


class NodeNotFoundError(TagTreeError):
    """Raised when a node is not found."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Node '{name}' not found")


class InvalidConfigError(TagTreeError):
    """Raised when configuration values are out of range."""
    pass
