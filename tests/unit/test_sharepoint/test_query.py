"""Tests for the OData query builder."""

import pytest

from splist.sharepoint.query import (
    QuerySpec,
    build_query,
    encode_odata_literal,
    quote_odata_literal,
)

BASE = "https://contoso.sharepoint.com/_api/web/lists/GetByTitle('Tasks')/items"


class TestBuildQuery:
    """Tests for build_query."""

    def test_none_spec_returns_url_unchanged(self):
        """A missing spec leaves the URL untouched."""
        assert build_query(BASE, None) == BASE

    def test_empty_spec_returns_url_unchanged(self):
        """A spec with no fields set leaves the URL untouched."""
        assert build_query(BASE, QuerySpec()) == BASE

    def test_single_clause_uses_question_mark(self):
        """First clause is joined with '?' when the URL has no query."""
        url = build_query(BASE, QuerySpec(top=5))
        assert url == f"{BASE}?$top=5"

    def test_all_clauses_in_fixed_order(self):
        """Clauses are emitted as filter, select, orderby, expand, top, skip."""
        spec = QuerySpec(
            skip=20,
            top=10,
            expand="Author",
            orderby="Modified desc",
            select="Id,Title",
            filter="Status eq 'Open'",
        )

        url = build_query(BASE, spec)

        assert url == (
            f"{BASE}?$filter=Status eq 'Open'&$select=Id,Title"
            "&$orderby=Modified desc&$expand=Author&$top=10&$skip=20"
        )

    def test_at_most_one_question_mark(self):
        """Only one '?' appears no matter how many clauses are present."""
        url = build_query(BASE, QuerySpec(filter="a", select="b", top=1, skip=2))

        assert url.count("?") == 1
        assert url.count("&") == 3

    def test_existing_query_uses_ampersand(self):
        """URLs that already carry a query get '&' for the first clause."""
        base = f"{BASE}?@v='x'"
        url = build_query(base, QuerySpec(select="Title", top=3))

        assert url == f"{base}&$select=Title&$top=3"
        assert url.count("?") == 1

    def test_sequence_values_are_comma_joined(self):
        """select/orderby/expand sequences are joined with commas."""
        url = build_query(
            BASE,
            QuerySpec(select=["JSON", "Id", "Title"], expand=("Author", "Editor")),
        )
        assert url == f"{BASE}?$select=JSON,Id,Title&$expand=Author,Editor"

    def test_zero_top_is_emitted(self):
        """Numeric zero is a present value, not an absent one."""
        assert build_query(BASE, QuerySpec(skip=0)) == f"{BASE}?$skip=0"

    def test_empty_strings_are_omitted(self):
        """Empty string clauses are treated as absent."""
        assert build_query(BASE, QuerySpec(filter="", select=[])) == BASE

    def test_values_are_not_escaped(self):
        """Values pass through verbatim; encoding is the caller's job."""
        url = build_query(BASE, QuerySpec(filter="Title eq 'a&b'"))
        assert url.endswith("$filter=Title eq 'a&b'")

    def test_is_pure(self):
        """Repeated calls with the same input give the same output."""
        spec = QuerySpec(filter="x", top=1)
        assert build_query(BASE, spec) == build_query(BASE, spec)

    def test_boolean_values_rejected(self):
        """Booleans are not valid numeric clause values."""
        with pytest.raises(TypeError):
            build_query(BASE, QuerySpec(top=True))


class TestQuerySpec:
    """Tests for QuerySpec helpers."""

    def test_clauses_skip_absent_fields(self):
        """clauses() lists only present fields in emission order."""
        spec = QuerySpec(top=1, filter="x")
        assert spec.clauses() == [("filter", "x"), ("top", "1")]

    def test_is_empty(self):
        assert QuerySpec().is_empty
        assert not QuerySpec(top=1).is_empty


class TestQuoteOdataLiteral:
    """Tests for OData string literal quoting."""

    def test_wraps_in_single_quotes(self):
        assert quote_odata_literal("alice") == "'alice'"

    def test_doubles_embedded_quotes(self):
        assert quote_odata_literal("o'brien") == "'o''brien'"


class TestEncodeOdataLiteral:
    """Tests for percent-encoded OData literals."""

    def test_plain_login_is_unchanged(self):
        assert encode_odata_literal("alice") == "'alice'"

    def test_claims_login_is_encoded(self):
        """URL delimiters in Online claims logins are escaped."""
        encoded = encode_odata_literal("i:0#.f|membership|alice@contoso.com")

        assert encoded == "'i%3A0%23.f%7Cmembership%7Calice%40contoso.com'"
        assert "#" not in encoded

    def test_quotes_survive_encoding(self):
        assert encode_odata_literal("o'brien smith") == "'o''brien%20smith'"

    def test_encoded_literal_stays_in_query(self):
        url = build_query(
            "https://x/_api/web/lists/GetByTitle('L')/items",
            QuerySpec(filter=f"Title eq {encode_odata_literal('i:0#.f|m|a@b')}"),
        )

        assert url.endswith("$filter=Title eq 'i%3A0%23.f%7Cm%7Ca%40b'")
