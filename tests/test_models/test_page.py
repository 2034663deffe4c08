"""Tests for the Page model."""

import pytest
from pydantic import ValidationError

from site_forge.exceptions import InvalidPageError
from site_forge.models.page import Page, coerce_page


class TestPage:
    """Tests for Page."""

    def test_defaults(self):
        """Test context defaults to an empty dict."""
        page = Page(path="about", component="pages/about.js")

        assert page.context == {}

    def test_context_passed_through(self):
        """Test arbitrary context values are kept as given."""
        context = {"slug": "post-1", "tags": ["a", "b"], "n": 3}
        page = Page(path="blog/post-1", component="post.js", context=context)

        assert page.context == context

    def test_empty_path_rejected(self):
        with pytest.raises(ValidationError):
            Page(path="", component="a.js")

    def test_blank_component_rejected(self):
        with pytest.raises(ValidationError):
            Page(path="a", component="   ")

    def test_frozen(self):
        """Test pages cannot be modified after creation."""
        page = Page(path="a", component="a.js")

        with pytest.raises(ValidationError):
            page.path = "b"


class TestCoercePage:
    """Tests for coerce_page."""

    def test_page_returned_as_is(self):
        page = Page(path="a", component="a.js")
        assert coerce_page(page) is page

    def test_mapping_converted(self):
        page = coerce_page({"path": "x", "component": "A", "context": {"id": 1}})

        assert page == Page(path="x", component="A", context={"id": 1})

    def test_missing_component(self):
        """Test a mapping without a component is rejected with its path."""
        with pytest.raises(InvalidPageError) as exc_info:
            coerce_page({"path": "x"})

        assert exc_info.value.path == "x"

    def test_not_a_mapping(self):
        with pytest.raises(InvalidPageError) as exc_info:
            coerce_page(["x", "A"])

        assert "list" in str(exc_info.value)
