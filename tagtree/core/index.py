"""Bidirectional node/edge index with per-file edge attribution."""

import logging

from .exceptions import LookupInconsistency, NodeNotFoundError
from .types import Node, NodeKind
from .utils import edge_key

logger = logging.getLogger(__name__)


class GraphIndex:
    """
    Authoritative node and edge state.

    Structure:
    - nodes[name] = Node with inbound/outbound name lists
    - sources[edge] = names of files currently declaring the edge
    - manual_edges = edges added by drag-and-drop, never attributed

    An edge is linked into its endpoints' adjacency exactly when it has a
    non-empty attribution set or is a manual edge.
    """

    def __init__(self):
        self.nodes: dict[str, Node] = {}
        self.sources: dict[str, set[str]] = {}
        self.manual_edges: set[str] = set()

    # ========================================================================
    # Nodes
    # ========================================================================

    def upsert_node(self, name: str, kind: NodeKind = NodeKind.TAG, location: str | None = None) -> Node:
        """Return the node called ``name``, creating it if missing."""
        node = self.nodes.get(name)
        if node is None:
            node = Node(name=name, kind=kind, location=location if kind is NodeKind.FILE else None)
            self.nodes[name] = node
            return node

        if kind is NodeKind.FILE:
            if not node.is_file:
                logger.debug(f"Promoting node '{name}' to a file node")
                node.kind = NodeKind.FILE
            node.location = location
        return node

    def get_node(self, name: str) -> Node:
        """Get a node by name. Raises NodeNotFoundError if not found."""
        node = self.nodes.get(name)
        if node is None:
            raise NodeNotFoundError(name)
        return node

    def prune_node(self, name: str) -> bool:
        """Remove a tag node that has no edges left. Returns True if removed."""
        node = self.nodes.get(name)
        if node is None or node.is_file or node.inbound or node.outbound:
            return False
        del self.nodes[name]
        logger.debug(f"Pruned node '{name}'")
        return True

    def release_file_node(self, name: str) -> bool:
        """
        Drop the file role of a node whose file is no longer tracked.
        The node is removed if isolated, otherwise kept as a tag node.
        Returns True if the node was removed.
        """
        node = self.nodes.get(name)
        if node is None or not node.is_file:
            return False
        node.kind = NodeKind.TAG
        node.location = None
        return self.prune_node(name)

    def set_starred(self, name: str, starred: bool) -> Node:
        node = self.get_node(name)
        node.is_starred = starred
        return node

    # ========================================================================
    # Edges
    # ========================================================================

    def add_edge(self, from_name: str, to_name: str, source: str) -> bool:
        """
        Register ``source`` as a declarer of ``from->to``.
        Returns True if the edge was materialized by this call.
        """
        edge = edge_key(from_name, to_name)
        declarers = self.sources.get(edge)
        if declarers is not None:
            declarers.add(source)
            return False

        self.sources[edge] = {source}
        if edge in self.manual_edges:
            return False
        self._link(from_name, to_name)
        return True

    def remove_edge(self, from_name: str, to_name: str, source: str) -> bool:
        """
        Withdraw ``source`` as a declarer of ``from->to``.
        Returns True if the edge left the graph.
        """
        edge = edge_key(from_name, to_name)
        declarers = self.sources.get(edge)
        if declarers is None or source not in declarers:
            logger.debug(f"Edge {edge} is not declared by '{source}', ignoring")
            return False

        declarers.discard(source)
        if declarers:
            return False

        del self.sources[edge]
        if edge in self.manual_edges:
            return False
        self._unlink(from_name, to_name)
        return True

    def add_manual_links(self, names: list[str], target: str) -> list[str]:
        """
        Merge dropped node names into ``target``'s inbound set.
        Raises NodeNotFoundError if the target is unknown; unknown names are skipped.
        Returns the names newly linked.
        """
        self.get_node(target)
        linked = []
        for name in names:
            if name not in self.nodes:
                logger.debug(f"Dropped node '{name}' is not in the index, ignoring")
                continue
            edge = edge_key(name, target)
            if edge in self.manual_edges:
                continue
            self.manual_edges.add(edge)
            if edge not in self.sources:
                self._link(name, target)
                linked.append(name)
        return linked

    def sources_for(self, from_name: str, to_name: str) -> set[str]:
        """Files currently declaring ``from->to``."""
        return set(self.sources.get(edge_key(from_name, to_name), ()))

    def edges(self) -> set[str]:
        """All edges currently linked into the graph."""
        return set(self.sources) | self.manual_edges

    def _link(self, from_name: str, to_name: str):
        from_node = self.upsert_node(from_name)
        to_node = self.upsert_node(to_name)
        if to_name not in from_node.outbound:
            from_node.outbound.append(to_name)
        if from_name not in to_node.inbound:
            to_node.inbound.append(from_name)

    def _unlink(self, from_name: str, to_name: str):
        from_node = self.nodes.get(from_name)
        to_node = self.nodes.get(to_name)
        if from_node is None or to_node is None:
            logger.debug(f"Edge {edge_key(from_name, to_name)} references a missing node")
        if from_node is not None and to_name in from_node.outbound:
            from_node.outbound.remove(to_name)
        if to_node is not None and from_name in to_node.inbound:
            to_node.inbound.remove(from_name)
        self.prune_node(from_name)
        self.prune_node(to_name)

    # ========================================================================
    # Queries
    # ========================================================================

    def get_nodes(self) -> list[Node]:
        """Unsorted snapshot of every node."""
        return list(self.nodes.values())

    def get_tags(self) -> list[Node]:
        """Unsorted snapshot of every non-file node."""
        return [node for node in self.nodes.values() if not node.is_file]

    def get_children(self, name: str | None = None) -> list[Node]:
        """
        Tree children of a node, or the top level when ``name`` is None.

        Top level: tag nodes then file nodes, each sorted by name.
        Under a node: neighbours linked both ways, then inbound-only,
        then outbound-only, each group sorted the same way.
        """
        if name is None:
            return sort_nodes(self.nodes.values())

        node = self.get_node(name)
        inbound = set(node.inbound)
        outbound = set(node.outbound)
        both = inbound & outbound

        return (
            sort_nodes(self._resolve(both))
            + sort_nodes(self._resolve(inbound - both))
            + sort_nodes(self._resolve(outbound - both))
        )

    def check_consistency(self) -> list[LookupInconsistency]:
        """Report every place where adjacency and attribution disagree."""
        problems = []
        linked = set()
        for node in self.nodes.values():
            for to_name in node.outbound:
                linked.add(edge_key(node.name, to_name))
                target = self.nodes.get(to_name)
                if target is None or node.name not in target.inbound:
                    problems.append(LookupInconsistency(f"{node.name}->{to_name} missing inbound half"))
            for from_name in node.inbound:
                origin = self.nodes.get(from_name)
                if origin is None or node.name not in origin.outbound:
                    problems.append(LookupInconsistency(f"{from_name}->{node.name} missing outbound half"))

        for edge in self.edges() - linked:
            problems.append(LookupInconsistency(f"{edge} is attributed but not linked"))
        for edge in linked - self.edges():
            problems.append(LookupInconsistency(f"{edge} is linked but not attributed"))
        for edge, declarers in self.sources.items():
            if not declarers:
                problems.append(LookupInconsistency(f"{edge} has an empty attribution set"))
        return problems

    def _resolve(self, names) -> list[Node]:
        resolved = []
        for name in names:
            node = self.nodes.get(name)
            if node is None:
                logger.debug(f"Neighbour '{name}' is not in the index, skipping")
                continue
            resolved.append(node)
        return resolved


def sort_nodes(nodes) -> list[Node]:
    """Tag nodes sorted by name, followed by file nodes sorted by name."""
    nodes = list(nodes)
    tag_nodes = sorted((n for n in nodes if not n.is_file), key=lambda n: n.name)
    file_nodes = sorted((n for n in nodes if n.is_file), key=lambda n: n.name)
    return tag_nodes + file_nodes

