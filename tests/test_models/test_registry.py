"""Tests for the page registry and merge semantics."""

import pytest

from site_forge.exceptions import InvalidPageError
from site_forge.models.page import Page
from site_forge.models.registry import MergePolicy, PageRegistry, as_registry, merge_pages


def page(path, component="c.js", **context):
    return Page(path=path, component=component, context=context)


class TestPageRegistry:
    """Tests for PageRegistry."""

    def test_empty(self):
        registry = PageRegistry()

        assert len(registry) == 0
        assert registry.paths == []

    def test_insertion_order(self):
        registry = PageRegistry([page("b"), page("a"), page("c")])

        assert registry.paths == ["b", "a", "c"]

    def test_duplicate_paths_last_wins(self):
        """Test a later page replaces an earlier one but keeps its position."""
        registry = PageRegistry([page("a", "A"), page("b"), page("a", "B")])

        assert registry.paths == ["a", "b"]
        assert registry["a"].component == "B"

    def test_accepts_mappings(self):
        registry = PageRegistry([{"path": "x", "component": "X"}])

        assert registry["x"] == Page(path="x", component="X")

    def test_invalid_page_rejected(self):
        with pytest.raises(InvalidPageError):
            PageRegistry([{"path": "", "component": "X"}])

    def test_read_only(self):
        """Test the registry offers no item assignment."""
        registry = PageRegistry([page("a")])

        with pytest.raises(TypeError):
            registry["b"] = page("b")


class TestMergePages:
    """Tests for merge_pages."""

    def test_adds_new_paths(self):
        merged = merge_pages(PageRegistry([page("a")]), [page("b")])

        assert merged.paths == ["a", "b"]

    def test_existing_not_mutated(self):
        """Test the merge returns a new registry and leaves the input alone."""
        existing = PageRegistry([page("a", "A")])

        merged = merge_pages(existing, [page("a", "B"), page("b")])

        assert merged is not existing
        assert existing.paths == ["a"]
        assert existing["a"].component == "A"

    def test_last_wins_overrides(self):
        """Test an incoming page replaces an existing one by default."""
        merged = merge_pages(PageRegistry([page("x", "A")]), [page("x", "B")])

        assert merged["x"].component == "B"

    def test_keep_existing_preserves(self):
        """Test KEEP_EXISTING never overrides a registered path."""
        merged = merge_pages(
            PageRegistry([page("x", "A")]),
            [page("x", "B"), page("y", "C")],
            MergePolicy.KEEP_EXISTING,
        )

        assert merged["x"].component == "A"
        assert merged["y"].component == "C"

    def test_incoming_duplicates_later_wins_under_both_policies(self):
        """Test duplicates inside the batch resolve to the later page."""
        for policy in MergePolicy:
            merged = merge_pages(PageRegistry(), [page("x", "A"), page("x", "B")], policy)
            assert merged["x"].component == "B"

    def test_retains_untouched_entries(self):
        existing = PageRegistry([page("a"), page("b", "B")])

        merged = merge_pages(existing, [page("a", "A2")])

        assert merged["b"] is existing["b"]

    def test_override_logged(self, caplog):
        """Test overriding a registered page logs a warning."""
        with caplog.at_level("WARNING"):
            merge_pages(PageRegistry([page("x", "A")]), [page("x", "B")])

        assert "overridden" in caplog.text

    def test_method_form(self):
        registry = PageRegistry([page("a", "A")])

        assert registry.merge([page("a", "B")])["a"].component == "B"

    @pytest.mark.parametrize("policy", list(MergePolicy))
    def test_merge_associativity(self, policy):
        """Test A+B+C equals A+(B then C) on keys, and on values under last-wins."""
        a = PageRegistry([page("1", "a1"), page("2", "a2")])
        b = [page("2", "b2"), page("3", "b3")]
        c = [page("3", "c3"), page("4", "c4")]

        stepwise = merge_pages(merge_pages(a, b, policy), c, policy)
        combined = merge_pages(a, merge_pages(PageRegistry(), [*b, *c]).values(), policy)

        assert set(stepwise) == set(combined)
        if policy is MergePolicy.LAST_WINS:
            assert dict(stepwise) == dict(combined)


class TestAsRegistry:
    """Tests for as_registry."""

    def test_registry_returned_as_is(self):
        registry = PageRegistry([page("a")])
        assert as_registry(registry) is registry

    def test_from_mapping_values(self):
        registry = as_registry({"a": page("a"), "b": {"path": "b", "component": "b.js"}})
        assert registry.paths == ["a", "b"]

    def test_from_list(self):
        registry = as_registry([page("a"), page("b")])
        assert registry.paths == ["a", "b"]
