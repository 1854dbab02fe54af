"""Tests for flattening the npm dependency tree."""

import json

from worm_scan.models import InstalledPackage
from worm_scan.parsers.npm_tree import flatten_packages


def pairs(packages):
    return [(p.name, p.version) for p in packages]


def test_child_name_falls_back_to_dependency_key():
    tree = {
        "dependencies": {
            "b": {"version": "1.0.0"},
            "a": {"name": "a", "version": "1.0.0"},
        }
    }
    assert flatten_packages(tree) == [
        InstalledPackage("a", "1.0.0"),
        InstalledPackage("b", "1.0.0"),
    ]


def test_root_is_included_when_named_and_versioned():
    tree = {"name": "app", "version": "0.1.0", "dependencies": {"x": {"version": "2.0.0"}}}
    assert pairs(flatten_packages(tree)) == [("app", "0.1.0"), ("x", "2.0.0")]


def test_own_name_beats_dependency_key():
    tree = {"dependencies": {"alias": {"name": "real-name", "version": "1.0.0"}}}
    assert pairs(flatten_packages(tree)) == [("real-name", "1.0.0")]


def test_shared_child_object_is_emitted_once():
    shared = {"version": "4.17.21"}
    tree = {
        "dependencies": {
            "a": {"version": "1.0.0", "dependencies": {"lodash": shared}},
            "b": {"version": "1.0.0", "dependencies": {"lodash": shared}},
            "lodash": {"version": "4.17.21"},
        }
    }
    assert pairs(flatten_packages(tree)) == [
        ("a", "1.0.0"),
        ("b", "1.0.0"),
        ("lodash", "4.17.21"),
    ]


def test_same_name_different_versions_sorted_semantically():
    tree = {
        "dependencies": {
            "a": {"version": "1.0.0", "dependencies": {"ms": {"version": "2.1.10"}}},
            "b": {"version": "1.0.0", "dependencies": {"ms": {"version": "2.1.9"}}},
            "ms": {"version": "2.0.0"},
        }
    }
    assert pairs(flatten_packages(tree))[-3:] == [
        ("ms", "2.0.0"),
        ("ms", "2.1.9"),
        ("ms", "2.1.10"),
    ]


def test_nodes_without_version_are_skipped_but_children_walked():
    tree = {
        "dependencies": {
            "missing-peer": {
                "missing": True,
                "dependencies": {"deep": {"version": "3.0.0"}},
            }
        }
    }
    assert pairs(flatten_packages(tree)) == [("deep", "3.0.0")]


def test_reference_cycle_terminates():
    a = {"name": "a", "version": "1.0.0"}
    b = {"name": "b", "version": "2.0.0", "dependencies": {"a": a}}
    a["dependencies"] = {"b": b}
    tree = {"dependencies": {"a": a}}
    assert pairs(flatten_packages(tree)) == [("a", "1.0.0"), ("b", "2.0.0")]


def test_self_reference_terminates():
    node = {"name": "loop", "version": "1.0.0"}
    node["dependencies"] = {"loop": node}
    assert pairs(flatten_packages(node)) == [("loop", "1.0.0")]


def test_deep_chains_do_not_hit_recursion_limit():
    tree: dict = {"version": "0.0.0"}
    node = tree
    for i in range(5000):
        child = {"version": f"1.0.{i}"}
        node["dependencies"] = {"chain": child}
        node = child
    assert len(flatten_packages(tree)) == 5000


def test_malformed_roots_yield_no_packages():
    assert flatten_packages(None) == []
    assert flatten_packages([]) == []
    assert flatten_packages("npm ERR!") == []


def test_malformed_nodes_are_ignored():
    tree = {
        "dependencies": {
            "a": "1.0.0",
            "b": None,
            "c": {"version": 3},
            "d": {"version": "1.0.0", "dependencies": ["not", "a", "map"]},
        }
    }
    assert pairs(flatten_packages(tree)) == [("d", "1.0.0")]


def test_output_is_independent_of_dependency_order():
    forward = {"dependencies": {"z": {"version": "1.0.0"}, "a": {"version": "v1.0.0"}, "m": {"version": "1.0.0"}}}
    backward = {"dependencies": dict(reversed(list(forward["dependencies"].items())))}
    assert flatten_packages(forward) == flatten_packages(backward)


def test_fixture_tree(fixtures_dir):
    tree = json.loads((fixtures_dir / "npm-tree-abc-1.0.0.json").read_text(encoding="utf-8"))
    assert pairs(flatten_packages(tree)) == [
        ("abc", "1.0.0"),
        ("fixture-app", "0.0.1"),
        ("wrapper", "3.1.0"),
    ]
