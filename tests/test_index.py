"""Tests for the node/edge index."""

import pytest

from tagtree.core import GraphIndex, NodeKind, NodeNotFoundError

from .conftest import names


def assert_consistent(index: GraphIndex):
    assert index.check_consistency() == []


class TestNodes:
    def test_upsert_is_idempotent(self, index):
        first = index.upsert_node("alpha")
        second = index.upsert_node("alpha")

        assert first is second
        assert first.kind is NodeKind.TAG
        assert first.inbound == [] and first.outbound == []

    def test_file_upsert_promotes_existing_tag(self, index):
        index.add_edge("other", "foo", "other")

        node = index.upsert_node("foo", NodeKind.FILE, location="/w/src/foo.ts")

        assert node.is_file
        assert node.location == "/w/src/foo.ts"
        assert node.inbound == ["other"]

    def test_tag_upsert_does_not_demote_file(self, index):
        index.upsert_node("foo", NodeKind.FILE, location="/w/src/foo.ts")

        node = index.upsert_node("foo")

        assert node.is_file

    def test_get_node_raises_for_unknown(self, index):
        with pytest.raises(NodeNotFoundError):
            index.get_node("missing")

    def test_prune_keeps_connected_and_file_nodes(self, index):
        index.add_edge("a", "b", "f")
        index.upsert_node("file", NodeKind.FILE, location="/w/src/file.md")
        index.upsert_node("lonely")

        assert index.prune_node("a") is False
        assert index.prune_node("file") is False
        assert index.prune_node("lonely") is True
        assert index.prune_node("lonely") is False

    def test_release_file_node_demotes_when_still_linked(self, index):
        index.upsert_node("x", NodeKind.FILE, location="/w/src/x.ts")
        index.add_edge("y", "x", "y")

        assert index.release_file_node("x") is False
        node = index.get_node("x")
        assert node.kind is NodeKind.TAG
        assert node.location is None

    def test_release_file_node_removes_isolated(self, index):
        index.upsert_node("x", NodeKind.FILE, location="/w/src/x.ts")

        assert index.release_file_node("x") is True
        assert "x" not in index.nodes

    def test_set_starred(self, index):
        index.upsert_node("alpha")

        assert index.set_starred("alpha", True).is_starred is True
        with pytest.raises(NodeNotFoundError):
            index.set_starred("missing", True)


class TestEdges:
    def test_first_declaration_creates_endpoints_and_links(self, index):
        assert index.add_edge("x", "y", "f") is True

        assert index.get_node("x").outbound == ["y"]
        assert index.get_node("y").inbound == ["x"]
        assert index.sources_for("x", "y") == {"f"}
        assert_consistent(index)

    def test_repeat_declaration_only_adds_attribution(self, index):
        index.add_edge("x", "y", "a")

        assert index.add_edge("x", "y", "b") is False
        assert index.add_edge("x", "y", "b") is False

        assert index.get_node("x").outbound == ["y"]
        assert index.get_node("y").inbound == ["x"]
        assert index.sources_for("x", "y") == {"a", "b"}

    def test_edge_survives_until_last_declarer_leaves(self, index):
        index.add_edge("x", "y", "a")
        index.add_edge("x", "y", "b")

        assert index.remove_edge("x", "y", "a") is False
        assert "x->y" in index.edges()

        assert index.remove_edge("x", "y", "b") is True
        assert "x->y" not in index.edges()
        assert "x" not in index.nodes
        assert "y" not in index.nodes
        assert_consistent(index)

    def test_removal_keeps_file_endpoint(self, index):
        index.upsert_node("foo", NodeKind.FILE, location="/w/src/foo.ts")
        index.add_edge("foo", "alpha", "foo")

        assert index.remove_edge("foo", "alpha", "foo") is True

        assert "foo" in index.nodes
        assert "alpha" not in index.nodes
        assert index.get_node("foo").outbound == []

    @pytest.mark.parametrize("source", ["f", "other"])
    def test_removing_undeclared_edge_is_a_no_op(self, index, source):
        if source == "f":
            changed = index.remove_edge("never", "declared", source)
        else:
            index.add_edge("x", "y", "f")
            changed = index.remove_edge("x", "y", source)

        assert changed is False
        assert_consistent(index)

    def test_self_loop(self, index):
        index.add_edge("x", "x", "x")
        node = index.get_node("x")
        assert node.inbound == ["x"] and node.outbound == ["x"]

        index.remove_edge("x", "x", "x")
        assert "x" not in index.nodes


class TestManualLinks:
    def test_drop_merges_into_target_inbound(self, index):
        index.upsert_node("a")
        index.upsert_node("b")
        index.upsert_node("target")

        linked = index.add_manual_links(["a", "b", "a"], "target")

        assert linked == ["a", "b"]
        assert index.get_node("target").inbound == ["a", "b"]
        assert index.sources_for("a", "target") == set()
        assert_consistent(index)

    def test_unknown_dropped_names_are_skipped(self, index):
        index.upsert_node("target")

        assert index.add_manual_links(["ghost"], "target") == []
        assert index.get_node("target").inbound == []

    def test_unknown_target_raises(self, index):
        with pytest.raises(NodeNotFoundError):
            index.add_manual_links(["a"], "missing")

    def test_manual_link_outlives_attributed_edge(self, index):
        index.add_edge("a", "target", "f")
        index.add_manual_links(["a"], "target")

        assert index.remove_edge("a", "target", "f") is False

        assert index.get_node("target").inbound == ["a"]
        assert_consistent(index)

    def test_attributed_edge_over_manual_link_does_not_duplicate(self, index):
        index.upsert_node("a")
        index.upsert_node("target")
        index.add_manual_links(["a"], "target")

        assert index.add_edge("a", "target", "f") is False
        assert index.get_node("target").inbound == ["a"]
        assert_consistent(index)


class TestQueries:
    @pytest.fixture
    def graph(self, index):
        index.upsert_node("zeta", NodeKind.FILE, location="/w/src/zeta.ts")
        index.upsert_node("alpha", NodeKind.FILE, location="/w/src/alpha.ts")
        index.add_edge("alpha", "red", "alpha")
        index.add_edge("alpha", "blue", "alpha")
        index.add_edge("zeta", "alpha", "zeta")
        index.add_edge("alpha", "zeta", "alpha")
        index.add_edge("green", "alpha", "green")
        return index

    def test_root_lists_tags_then_files_sorted(self, graph):
        assert names(graph.get_children()) == ["blue", "green", "red", "alpha", "zeta"]

    def test_children_grouped_both_inbound_outbound(self, graph):
        assert names(graph.get_children("alpha")) == ["zeta", "green", "blue", "red"]

    def test_children_of_unknown_node_raises(self, graph):
        with pytest.raises(NodeNotFoundError):
            graph.get_children("missing")

    def test_get_tags_excludes_files(self, graph):
        assert sorted(names(graph.get_tags())) == ["blue", "green", "red"]
        assert len(graph.get_nodes()) == 5

    def test_to_dict_uses_in_and_out(self, graph):
        data = graph.get_node("zeta").to_dict()

        assert data["kind"] == "file"
        assert data["location"] == "/w/src/zeta.ts"
        assert data["in"] == ["alpha"]
        assert data["out"] == ["alpha"]
        assert "location" not in graph.get_node("red").to_dict()
