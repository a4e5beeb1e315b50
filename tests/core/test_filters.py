"""
Tests for vector index filter expressions and query scopes.

System role: Verification of tenant/subject/document scoping
"""

import pytest

from learnability.core.retrieval.filters import And, Eq, In, Or, QueryScope, all_of, one_of


class TestFilterNodes:
    """Test Eq / In / And / Or rendering and matching."""

    def test_eq_renders_quoted_literal(self) -> None:
        """Should render field == "value"."""
        assert Eq("tenant_id", "user-1").to_expr() == 'tenant_id == "user-1"'

    def test_eq_escapes_quotes(self) -> None:
        """Should escape quotes so values cannot break out of the literal."""
        expr = Eq("tenant_id", 'x" or tenant_id != "').to_expr()

        assert expr == 'tenant_id == "x\\" or tenant_id != \\""'

    def test_unknown_field_rejected(self) -> None:
        """Should refuse fields that are not filterable tags."""
        with pytest.raises(ValueError, match="not filterable"):
            Eq("text", "anything")

    def test_in_requires_values(self) -> None:
        """Should reject an empty In list."""
        with pytest.raises(ValueError):
            In("document_id", ())

    def test_in_renders_list(self) -> None:
        """Should render field in [...]."""
        assert In("document_id", ("a", "b")).to_expr() == 'document_id in ["a", "b"]'

    def test_and_or_render_parenthesised(self) -> None:
        """Should parenthesise each clause."""
        expr = And((Eq("tenant_id", "t"), Or((Eq("subject_id", "s"), Eq("document_id", "d"))))).to_expr()

        assert expr == '(tenant_id == "t") and ((subject_id == "s") or (document_id == "d"))'

    def test_matching(self) -> None:
        """Should evaluate the same logic against a metadata record."""
        record = {"tenant_id": "t", "subject_id": "s", "document_id": "d1"}

        assert Eq("tenant_id", "t").matches(record)
        assert not Eq("tenant_id", "other").matches(record)
        assert In("document_id", ("d1", "d2")).matches(record)
        assert all_of(Eq("tenant_id", "t"), Eq("subject_id", "s")).matches(record)
        assert not all_of(Eq("tenant_id", "t"), Eq("subject_id", "x")).matches(record)

    def test_all_of_collapses_single_clause(self) -> None:
        """Should return the clause itself when there is only one."""
        clause = Eq("tenant_id", "t")

        assert all_of(clause) is clause

    def test_one_of_deduplicates_in_order(self) -> None:
        """Should keep first-seen order without duplicates."""
        assert one_of("document_id", ["b", "a", "b"]).values == ("b", "a")


class TestQueryScope:
    """Test primary and fallback filter construction."""

    def test_tenant_only(self) -> None:
        """Should filter by tenant alone with no fallback."""
        scope = QueryScope(tenant_id="t")

        assert scope.primary_filter() == Eq("tenant_id", "t")
        assert scope.fallback_filter() is None

    def test_subject_without_documents(self) -> None:
        """Should filter by tenant and subject with no fallback."""
        scope = QueryScope(tenant_id="t", subject_id="s")

        assert scope.primary_filter() == And((Eq("tenant_id", "t"), Eq("subject_id", "s")))
        assert scope.fallback_filter() is None

    def test_documents_with_subject_fallback(self) -> None:
        """Should filter by document IDs first and fall back to the subject."""
        scope = QueryScope(tenant_id="t", subject_id="s", document_ids=("d1", "d2"))

        assert scope.primary_filter() == And((Eq("tenant_id", "t"), In("document_id", ("d1", "d2"))))
        assert scope.fallback_filter() == And((Eq("tenant_id", "t"), Eq("subject_id", "s")))

    def test_tenant_always_present(self) -> None:
        """Should never build a filter that can match another tenant's record."""
        foreign = {"tenant_id": "other", "subject_id": "s", "document_id": "d1"}
        scope = QueryScope(tenant_id="t", subject_id="s", document_ids=("d1",))

        assert not scope.primary_filter().matches(foreign)
        assert not scope.fallback_filter().matches(foreign)
