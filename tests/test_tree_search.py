"""Tests for the container tree search engine."""

import sys

import pytest

from contextual_require.errors import SegmentNotFoundError
from contextual_require.instance import Instance
from contextual_require.instance_tree_host import InstanceTreeHost
from contextual_require.load_tree import build_tree
from contextual_require.tree_search import TreeSearch


@pytest.fixture
def host() -> InstanceTreeHost:
    """Provide a fresh in-memory host."""
    return InstanceTreeHost()


@pytest.fixture
def game() -> Instance:
    """Provide a small project tree with Server and Shared roots."""
    return build_tree(
        {
            "Server": {
                "Services": {
                    "Combat": {"$value": "combat", "Hitbox": "hitbox"},
                    "Inventory": {"Slots": "slots"},
                },
                "Config": "server-config",
            },
            "Shared": {
                "Types": "types",
                "Lib": {"Utilities": {"Text": {"StringUtils": "strings"}}},
                "Config": "shared-config",
            },
        }
    )


def node(root: Instance, path: str) -> Instance:
    """Look up a node that must exist."""
    found = root.find_by_path(path)
    assert found is not None, path
    return found


def chain(depth: int, leaf: str = "Target") -> Instance:
    """Build a straight chain of containers with a module at the bottom."""
    top = Instance("Top")
    current = top
    for i in range(depth):
        current = current.add_child(Instance(f"Level{i}"))
    current.add_child(Instance(leaf, is_module=True, source="deep"))
    return top


def test_bfs_first_match_in_child_order_wins(host: InstanceTreeHost) -> None:
    """Verify that two equally deep matches resolve to the first enumerated."""
    root = build_tree(
        {"GroupA": {"Target": "a"}, "GroupB": {"Target": "b"}}, root_name="Root"
    )
    search = TreeSearch(host)

    results = {search.bfs_find_path(root, ["Target"]) for _ in range(5)}

    assert results == {node(root, "GroupA/Target")}


def test_bfs_prefers_shallower_match(host: InstanceTreeHost) -> None:
    """Verify breadth-first order: a direct child beats a nested one."""
    root = build_tree({"Deep": {"Target": "deep"}, "Target": "shallow"})
    search = TreeSearch(host)

    assert search.bfs_find_path(root, ["Target"]) is root.children[1]


def test_bfs_skips_unnamed_grouping_folders(
    host: InstanceTreeHost, game: Instance
) -> None:
    """Verify that path segments may skip folders the path does not name."""
    search = TreeSearch(host)
    shared = node(game, "Shared")

    found = search.bfs_find_path(shared, ["Utilities", "StringUtils"])

    assert found is node(game, "Shared/Lib/Utilities/Text/StringUtils")


def test_bfs_final_container_keeps_searching(host: InstanceTreeHost) -> None:
    """Verify that a non-module match on the last segment is searched below."""
    root = build_tree({"Target": {"Target": "inner"}})
    search = TreeSearch(host)

    assert search.bfs_find_path(root, ["Target"]) is node(root, "Target/Target")


def test_bfs_empty_segments_and_missing(host: InstanceTreeHost, game: Instance) -> None:
    """Verify that nothing is found for an empty path or an unknown name."""
    search = TreeSearch(host)
    assert search.bfs_find_path(game, []) is None
    assert search.bfs_find_path(game, ["Nope"]) is None


def test_index_folders_are_never_searched(host: InstanceTreeHost) -> None:
    """Verify the built-in `_Index` exclusion."""
    root = build_tree({"_Index": {"Target": "vendored"}})
    search = TreeSearch(host)

    assert search.bfs_find_path(root, ["Target"]) is None
    assert search.search_down(root, "Target", set()) is None


def test_ignore_predicate_excludes_subtrees(host: InstanceTreeHost) -> None:
    """Verify that nodes accepted by the predicate are not traversed."""
    root = build_tree({"_Private": {"Target": "hidden"}, "Public": {"Other": 1}})
    search = TreeSearch(host, lambda n: n.name.startswith("_"))

    assert search.bfs_find_path(root, ["Target"]) is None


def test_depth_cap_returns_not_found(host: InstanceTreeHost) -> None:
    """Verify that the depth cap ends the search without raising."""
    top = chain(10)

    shallow = TreeSearch(host, max_search_depth=5)
    deep = TreeSearch(host, max_search_depth=50)

    assert shallow.bfs_find_path(top, ["Target"]) is None
    assert shallow.search_down(top, "Target", set()) is None
    assert deep.bfs_find_path(top, ["Target"]) is not None
    assert deep.search_down(top, "Target", set()) is not None


def test_depth_cap_bounds_very_deep_trees(host: InstanceTreeHost) -> None:
    """Verify that a tree far deeper than the cap is not walked to the bottom."""
    top = chain(400)
    search = TreeSearch(host)

    assert search.bfs_find_path(top, ["Target"]) is None
    assert search.search_down(top, "Target", set()) is None


def test_depth_cap_above_recursion_limit(host: InstanceTreeHost) -> None:
    """Verify that a generous cap on a very deep tree still returns normally."""
    depth = sys.getrecursionlimit() + 500
    top = chain(depth)
    search = TreeSearch(host, max_search_depth=depth * 2)

    assert search.search_down(top, "Missing", set()) is None
    assert search.bfs_find_path(top, ["Missing"]) is None
    found = search.search_down(top, "Target", set())
    assert found is not None
    assert found.source == "deep"


def test_search_down_visits_subtrees_in_child_order(host: InstanceTreeHost) -> None:
    """Verify that the first subtree is searched fully before its sibling."""
    root = build_tree(
        {"First": {"Inner": {"Target": "first"}}, "Second": {"Target": "second"}}
    )
    search = TreeSearch(host)

    assert search.search_down(root, "Target", set()) is node(
        root, "First/Inner/Target"
    )


def test_case_insensitive_matching(host: InstanceTreeHost, game: Instance) -> None:
    """Verify that name comparison follows the case sensitivity flag."""
    shared = node(game, "Shared")

    assert TreeSearch(host).bfs_find_path(shared, ["types"]) is None
    assert TreeSearch(host, case_sensitive=False).bfs_find_path(
        shared, ["types"]
    ) is node(game, "Shared/Types")


def test_search_down_checks_direct_children_first(host: InstanceTreeHost) -> None:
    """Verify that a sibling module beats a deeper one listed earlier."""
    root = build_tree({"Sub": {"Config": "deep"}, "Config": "direct"})
    search = TreeSearch(host)

    assert search.search_down(root, "Config", set()) is node(root, "Config")


def test_search_down_skips_memoised_nodes(
    host: InstanceTreeHost, game: Instance
) -> None:
    """Verify that nodes already searched in this step are not searched again."""
    search = TreeSearch(host)
    services = node(game, "Server/Services")

    assert search.search_down(services, "Slots", {services}) is None


def test_search_for_module_walks_up_to_nearest(
    host: InstanceTreeHost, game: Instance
) -> None:
    """Verify that the nearest match in the caller's root is found."""
    search = TreeSearch(host)
    combat = node(game, "Server/Services/Combat")
    roots = [node(game, "Server"), node(game, "Shared")]

    assert search.search_for_module(combat, ["Config"], roots) is node(
        game, "Server/Config"
    )
    assert search.search_for_module(combat, ["Hitbox"], roots) is node(
        game, "Server/Services/Combat/Hitbox"
    )
    assert search.search_for_module(combat, ["Slots"], roots) is node(
        game, "Server/Services/Inventory/Slots"
    )


def test_search_for_module_stops_at_boundary(
    host: InstanceTreeHost, game: Instance
) -> None:
    """Verify that the upward walk never leaves the caller's root."""
    search = TreeSearch(host)
    combat = node(game, "Server/Services/Combat")
    roots = [node(game, "Server"), node(game, "Shared")]

    assert search.search_for_module(combat, ["Types"], roots) is None


def test_search_for_module_requires_a_configured_ancestor(
    host: InstanceTreeHost, game: Instance
) -> None:
    """Verify that a caller outside every root finds nothing."""
    search = TreeSearch(host)
    stray = game.add_child(Instance("Stray"))
    stray.add_child(Instance("Config", is_module=True, source="stray"))

    assert search.search_for_module(stray, ["Config"], [node(game, "Server")]) is None


def test_search_for_module_with_several_segments(
    host: InstanceTreeHost, game: Instance
) -> None:
    """Verify that multi-segment bare paths are matched breadth first."""
    search = TreeSearch(host)
    hitbox = node(game, "Server/Services/Combat/Hitbox")

    roots = [node(game, "Server")]

    found = search.search_for_module(hitbox, ["Inventory", "Slots"], roots)

    assert found is node(game, "Server/Services/Inventory/Slots")


def test_search_roots_in_order_and_deduplicated(
    host: InstanceTreeHost, game: Instance
) -> None:
    """Verify that roots are tried in order, skipping ones already searched."""
    search = TreeSearch(host)
    server, shared = node(game, "Server"), node(game, "Shared")

    assert search.search_roots([server, shared], ["Config"]) is node(
        game, "Server/Config"
    )
    assert search.search_roots([server, shared], ["Config"], {server}) is node(
        game, "Shared/Config"
    )
    assert search.search_roots([server, server], ["Types"], {shared}) is None


def test_find_child_exact_then_case_insensitive(
    host: InstanceTreeHost, game: Instance
) -> None:
    """Verify strict lookup with a lower-cased fallback when allowed."""
    shared = node(game, "Shared")

    assert TreeSearch(host).find_child(shared, "types") is None
    assert TreeSearch(host, case_sensitive=False).find_child(shared, "types") is node(
        game, "Shared/Types"
    )


def test_traverse_absolute_reports_missing_segment(
    host: InstanceTreeHost, game: Instance
) -> None:
    """Verify that a missing segment names itself and where it was looked for."""
    search = TreeSearch(host)
    shared = node(game, "Shared")

    assert search.traverse_absolute(shared, ["Types"], "@Shared/Types") is node(
        game, "Shared/Types"
    )
    with pytest.raises(SegmentNotFoundError) as exc_info:
        search.traverse_absolute(shared, ["Lib", "Missing"], "@Shared/Lib/Missing")

    assert exc_info.value.segment == "Missing"
    assert exc_info.value.search_root == "game.Shared.Lib"
