"""OData query-string builder for SharePoint list reads.

Maps a ``QuerySpec`` onto ``$filter``/``$select``/``$orderby``/``$expand``/
``$top``/``$skip`` clauses. Values are appended as given; callers
pre-encode anything that needs escaping.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import quote

# Emission order of query clauses
QUERY_FIELDS = ("filter", "select", "orderby", "expand", "top", "skip")


@dataclass(frozen=True)
class QuerySpec:
    """Optional OData clauses for a list read.

    ``select``, ``orderby`` and ``expand`` accept either a preformatted
    string or a sequence of field names, which is joined with commas.
    """

    filter: str | None = None
    select: str | Sequence[str] | None = None
    orderby: str | Sequence[str] | None = None
    expand: str | Sequence[str] | None = None
    top: int | None = None
    skip: int | None = None

    def clauses(self) -> list[tuple[str, str]]:
        """Return the present clauses as ``(field, value)`` pairs in emission order."""
        result: list[tuple[str, str]] = []
        for name in QUERY_FIELDS:
            value = _format_value(getattr(self, name))
            if value is not None:
                result.append((name, value))
        return result

    @property
    def is_empty(self) -> bool:
        """True when no clause would be emitted."""
        return not self.clauses()


def _format_value(value: str | Sequence[str] | int | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("Boolean values are not valid OData clause values")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value or None
    joined = ",".join(value)
    return joined or None


def build_query(base_url: str, spec: QuerySpec | None = None) -> str:
    """Append the clauses of ``spec`` to ``base_url``.

    The first clause is joined with ``?`` unless ``base_url`` already
    carries a query component, in which case ``&`` is used. Every
    following clause is joined with ``&``.

    Args:
        base_url: Resource URL, optionally with an existing query string
        spec: Clauses to append; ``None`` or an empty spec is a no-op

    Returns:
        The resulting URL
    """
    if spec is None:
        return base_url

    url = base_url
    separator = "&" if "?" in base_url else "?"
    for name, value in spec.clauses():
        url += f"{separator}${name}={value}"
        separator = "&"
    return url


def quote_odata_literal(value: str) -> str:
    """Quote a string literal for use inside a ``$filter`` expression."""
    return "'" + value.replace("'", "''") + "'"


def encode_odata_literal(value: str) -> str:
    """Quote a string literal and percent-encode it for a query string.

    ``build_query`` appends values verbatim, so literals holding URL
    delimiters must be encoded first. SharePoint Online claims logins
    such as ``i:0#.f|membership|alice@contoso.com`` contain ``#``, which
    would otherwise end the query string.
    """
    return quote(quote_odata_literal(value), safe="'")
