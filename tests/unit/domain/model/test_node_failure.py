"""Tests for domain/model/node_failure.py."""

import pytest

from jarcheck.domain.model.node_failure import FailureKind, NodeFailure


class TestNodeFailure:
    """Tests for NodeFailure value object."""

    def test_create_valid(self) -> None:
        failure = NodeFailure("com.acme.Missing", FailureKind.NOT_FOUND, "not found")
        assert failure.type_name == "com.acme.Missing"
        assert failure.kind is FailureKind.NOT_FOUND

    def test_is_frozen(self) -> None:
        failure = NodeFailure("com.acme.Missing", FailureKind.NOT_FOUND, "not found")
        with pytest.raises(AttributeError):
            failure.type_name = "other"  # type: ignore[misc]

    def test_empty_type_name_raises(self) -> None:
        with pytest.raises(ValueError, match="type_name"):
            NodeFailure("", FailureKind.NOT_FOUND, "not found")

    def test_empty_reason_raises(self) -> None:
        with pytest.raises(ValueError, match="reason"):
            NodeFailure("com.acme.Missing", FailureKind.NOT_FOUND, "")

    def test_str_format(self) -> None:
        failure = NodeFailure("com.acme.Bad", FailureKind.MALFORMED_CLASS, "bad magic")
        assert str(failure) == "com.acme.Bad (MALFORMED_CLASS): bad magic"

    def test_hashable(self) -> None:
        a = NodeFailure("com.acme.X", FailureKind.SCHEDULING, "cancelled")
        b = NodeFailure("com.acme.X", FailureKind.SCHEDULING, "cancelled")
        assert {a, b} == {a}
