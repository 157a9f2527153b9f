"""Tests for dependency graph assembly."""

import pytest

from sbom_parsers.errors import GraphBuildError
from sbom_parsers.graph import DependencyMetadata, build_dependency_graph, walk
from sbom_parsers.meta import Package


def _meta(package: Package, *deps: str, dev: bool = False) -> DependencyMetadata:
    return DependencyMetadata(
        name=package.name, version=package.version, dependencies=list(deps), dev=dev
    )


@pytest.fixture
def flat():
    """Root app depending on a and b; a depends on c; d is never referenced."""
    app = Package(name="app", version="1.0.0", root=True)
    a = Package(name="a", version="1.0.0")
    b = Package(name="b", version="2.0.0")
    c = Package(name="c", version="3.0.0")
    d = Package(name="d", version="4.0.0")
    modules = [app, a, b, c, d]
    metainfo = {
        app.key: _meta(app, "a", "b"),
        a.key: _meta(a, "c"),
        b.key: _meta(b),
        c.key: _meta(c),
        d.key: _meta(d),
    }
    return modules, metainfo


class TestBuildDependencyGraph:
    """Tests for build_dependency_graph."""

    def test_links_children(self, flat):
        modules, metainfo = flat
        build_dependency_graph(modules, metainfo)
        app, a, b, c, _ = modules

        assert app.packages == {"a": a, "b": b}
        assert a.packages["c"] is c
        assert b.packages == {}

    def test_returns_same_flat_list(self, flat):
        modules, metainfo = flat
        result = build_dependency_graph(modules, metainfo)

        assert result is modules
        assert len(result) == 5

    def test_node_count_is_referenced_plus_root(self, flat):
        modules, metainfo = flat
        build_dependency_graph(modules, metainfo)

        reachable = list(walk(modules[0]))
        # a, b, c are referenced by an edge; d is not
        assert len(reachable) == 4
        assert modules[4] not in reachable

    def test_missing_dependency_is_dropped(self, flat):
        modules, metainfo = flat
        metainfo[modules[1].key].dependencies.append("not-installed")

        build_dependency_graph(modules, metainfo)

        assert "not-installed" not in modules[1].packages
        assert set(modules[1].packages) == {"c"}

    def test_missing_metadata_mapping(self, flat):
        modules, _ = flat
        with pytest.raises(GraphBuildError):
            build_dependency_graph(modules, None)

    def test_shared_dependency_is_referenced_not_copied(self):
        app = Package(name="app", root=True)
        a = Package(name="a", version="1")
        b = Package(name="b", version="1")
        shared = Package(name="shared", version="1")
        modules = [app, a, b, shared]
        metainfo = {
            app.key: _meta(app, "a", "b"),
            a.key: _meta(a, "shared"),
            b.key: _meta(b, "shared"),
        }

        build_dependency_graph(modules, metainfo)

        assert a.packages["shared"] is b.packages["shared"] is shared
        assert len(list(walk(app))) == 4

    def test_cyclic_declarations_terminate(self):
        app = Package(name="app", root=True)
        a = Package(name="a", version="1")
        b = Package(name="b", version="1")
        modules = [app, a, b]
        metainfo = {
            app.key: _meta(app, "a"),
            a.key: _meta(a, "b"),
            b.key: _meta(b, "a", "b"),
        }

        build_dependency_graph(modules, metainfo)

        assert a.packages["b"] is b
        # b -> a would close a cycle and b -> b is a self edge
        assert b.packages == {}

    def test_prefers_non_dev_version_for_non_dev_parent(self):
        app = Package(name="app", root=True)
        dev_copy = Package(name="lib", version="1.0.0")
        prod_copy = Package(name="lib", version="2.0.0")
        modules = [app, dev_copy, prod_copy]
        metainfo = {
            app.key: _meta(app, "lib"),
            dev_copy.key: _meta(dev_copy, dev=True),
            prod_copy.key: _meta(prod_copy),
        }

        build_dependency_graph(modules, metainfo)

        assert app.packages["lib"] is prod_copy

    def test_dev_parent_takes_first_match(self):
        tool = Package(name="tool", version="1.0.0")
        first = Package(name="lib", version="1.0.0")
        second = Package(name="lib", version="2.0.0")
        modules = [tool, first, second]
        metainfo = {
            tool.key: _meta(tool, "lib", dev=True),
            first.key: _meta(first, dev=True),
            second.key: _meta(second),
        }

        build_dependency_graph(modules, metainfo)

        assert tool.packages["lib"] is first

    def test_normalized_names(self):
        app = Package(name="app", root=True)
        typing_ext = Package(name="typing_extensions", version="4.0.0")
        modules = [app, typing_ext]
        metainfo = {app.key: _meta(app, "Typing-Extensions")}

        build_dependency_graph(
            modules, metainfo, normalize=lambda n: n.lower().replace("_", "-")
        )

        assert app.packages["typing_extensions"] is typing_ext

    def test_idempotent(self, flat):
        modules, metainfo = flat
        build_dependency_graph(modules, metainfo)
        snapshot = {m.key: set(m.packages) for m in modules}

        build_dependency_graph(modules, metainfo)

        assert {m.key: set(m.packages) for m in modules} == snapshot


class TestWalk:
    """Tests for tree traversal."""

    def test_root_first(self):
        leaf = Package(name="leaf")
        root = Package(name="root", root=True, packages={"leaf": leaf})

        assert [p.name for p in walk(root)] == ["root", "leaf"]
