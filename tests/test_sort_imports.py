"""Test sorting of :require and :import declarations in ns forms."""

from cljformat.nodes import ListNode, NumberNode, Tree
from cljformat.transform import (
    Transform,
    apply_transforms,
    import_require_key,
    sort_import_require,
    sort_ns,
)

from .conftest import NL, comment, kw, lst, sym, vec

SORT_ONLY = {Transform.SORT_IMPORT_REQUIRE: True}


def sorted_entries(*entries) -> list:
    return sorted(entries, key=import_require_key)


class TestOrdering:
    def test_libs_before_specs(self):
        result = sorted_entries(vec(sym("b.c")), vec(sym("a.b")), sym("c.d"))
        assert result == [sym("c.d"), vec(sym("a.b")), vec(sym("b.c"))]

    def test_libs_by_name(self):
        result = sorted_entries(sym("clojure.string"), sym("clojure.set"))
        assert result == [sym("clojure.set"), sym("clojure.string")]

    def test_empty_spec_first(self):
        result = sorted_entries(vec(sym("a")), vec())
        assert result == [vec(), vec(sym("a"))]

    def test_list_and_vector_specs_interleave(self):
        result = sorted_entries(vec(sym("java.util")), lst(sym("java.io"), sym("File")))
        assert result == [lst(sym("java.io"), sym("File")), vec(sym("java.util"))]

    def test_non_symbol_leader_after_symbol_leader(self):
        result = sorted_entries(vec(NumberNode("3")), vec(sym("z")))
        assert result == [vec(sym("z")), vec(NumberNode("3"))]

    def test_other_nodes_last(self):
        result = sorted_entries(NumberNode("1"), vec(sym("a")), sym("b"))
        assert result == [sym("b"), vec(sym("a")), NumberNode("1")]

    def test_stable_for_equal_keys(self):
        first = vec(sym("a"), kw(":as"), sym("x"))
        second = vec(sym("a"), kw(":refer"), vec(sym("y")))
        require = lst(kw(":require"), second, NL(), first)
        sort_import_require(require)
        assert require.nodes[1] is second
        assert require.nodes[3] is first


class TestSortImportRequire:
    def test_single_line(self):
        require = lst(kw(":require"), vec(sym("b.c")), vec(sym("a.b")), sym("c.d"))
        sort_import_require(require)
        assert require == lst(
            kw(":require"), sym("c.d"), NL(), vec(sym("a.b")), NL(), vec(sym("b.c"))
        )

    def test_one_per_line(self):
        require = lst(kw(":require"), NL(), vec(sym("b")), NL(), vec(sym("a")))
        sort_import_require(require)
        assert require == lst(kw(":require"), vec(sym("a")), NL(), vec(sym("b")))

    def test_comments_travel_with_entries(self):
        require = lst(
            kw(":require"),
            comment(";; above b"),
            NL(),
            vec(sym("b")),
            comment("; beside b"),
            NL(),
            vec(sym("a")),
        )
        sort_import_require(require)
        assert require == lst(
            kw(":require"),
            vec(sym("a")),
            NL(),
            comment(";; above b"),
            NL(),
            vec(sym("b")),
            comment("; beside b"),
            NL(),
        )

    def test_unattached_comments_at_bottom(self):
        require = lst(kw(":require"), vec(sym("a")), NL(), comment(";; end"), NL())
        sort_import_require(require)
        assert require == lst(kw(":require"), vec(sym("a")), NL(), comment(";; end"), NL())

    def test_empty_require(self):
        require = lst(kw(":require"))
        sort_import_require(require)
        assert require == lst(kw(":require"))


class TestSortNs:
    def test_require_and_import(self):
        ns = lst(
            sym("ns"),
            sym("app.core"),
            NL(),
            lst(kw(":require"), vec(sym("b")), vec(sym("a"))),
            NL(),
            lst(kw(":import"), lst(sym("java.util"), sym("Date")), lst(sym("java.io"), sym("File"))),
        )
        sort_ns(ns)
        assert ns.nodes[3] == lst(kw(":require"), vec(sym("a")), NL(), vec(sym("b")))
        assert ns.nodes[5] == lst(
            kw(":import"),
            lst(sym("java.io"), sym("File")),
            NL(),
            lst(sym("java.util"), sym("Date")),
        )

    def test_other_clauses_untouched(self):
        gen_class = lst(kw(":gen-class"), vec(sym("b")), vec(sym("a")))
        ns = lst(sym("ns"), sym("app.core"), gen_class)
        sort_ns(ns)
        assert ns.nodes[2] == lst(kw(":gen-class"), vec(sym("b")), vec(sym("a")))

    def test_only_ns_forms_sorted(self):
        form = lst(sym("foo"), lst(kw(":require"), vec(sym("b")), vec(sym("a"))))
        tree = Tree([form])
        apply_transforms(tree, SORT_ONLY)
        assert tree.roots[0].nodes[1] == lst(kw(":require"), vec(sym("b")), vec(sym("a")))

    def test_through_driver(self):
        tree = Tree([lst(sym("ns"), sym("x"), lst(kw(":require"), sym("b"), sym("a")))])
        apply_transforms(tree, SORT_ONLY)
        require = tree.roots[0].nodes[2]
        assert isinstance(require, ListNode)
        assert require.nodes == [kw(":require"), sym("a"), NL(), sym("b")]
