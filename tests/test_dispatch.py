"""
Dispatcher tests: name lookup, closed operation set, transport failures,
result encoding.
Run with: python -m pytest tests/test_dispatch.py -v
"""

import json
import logging

import pytest

from fsbridge.bridge.dispatch import Dispatcher, create_dispatcher, encode_result
from fsbridge.bridge.errors import (
    MalformedBodyError, ResultEncodingError, TransportError, UnknownOperationError,
)
from fsbridge.bridge.operations import (
    OPERATION_NAMES, UNIMPLEMENTED_MESSAGE, UnimplementedOperation,
)


class _Recording:
    """Stand-in handler that records whether it ran."""

    def __init__(self, name):
        self.name = name
        self.calls = 0

    def handle(self, decoder):
        self.calls += 1
        return [None, "ran"]


class TestLookup:
    def test_default_table_is_complete(self):
        d = create_dispatcher()
        assert set(d.names()) == OPERATION_NAMES
        assert len(d.implemented()) == 14
        assert len(d.unimplemented()) == 9

    def test_unknown_name(self):
        with pytest.raises(UnknownOperationError) as exc:
            create_dispatcher().dispatch("frobnicate", b"{}")
        assert exc.value.message == "unhandled operation: frobnicate"
        assert isinstance(exc.value, TransportError)

    def test_empty_name(self):
        with pytest.raises(UnknownOperationError) as exc:
            create_dispatcher().dispatch("", b"{}")
        assert exc.value.message == "operation is required"

    def test_unknown_name_never_decodes_body(self):
        # a malformed body would raise MalformedBodyError if it were parsed
        with pytest.raises(UnknownOperationError):
            create_dispatcher().dispatch("nope", b"not json")

    def test_name_is_case_sensitive(self):
        with pytest.raises(UnknownOperationError):
            create_dispatcher().dispatch("STAT", b"{}")

    def test_runs_exactly_one_handler(self):
        stat_op, lstat_op = _Recording("stat"), _Recording("lstat")
        d = Dispatcher([stat_op, lstat_op])
        assert d.dispatch("stat", b"") == [None, "ran"]
        assert stat_op.calls == 1
        assert lstat_op.calls == 0

    def test_malformed_body_on_implemented_op(self):
        with pytest.raises(MalformedBodyError):
            create_dispatcher().dispatch("stat", b"{oops")

    def test_unimplemented_through_dispatcher(self):
        assert create_dispatcher().dispatch("rename", b"{oops") == [UNIMPLEMENTED_MESSAGE]


class TestRegistration:
    def test_rejects_foreign_name(self):
        with pytest.raises(ValueError):
            Dispatcher([_Recording("format_disk")])

    def test_rejects_duplicate(self):
        d = Dispatcher([UnimplementedOperation("utimes")])
        with pytest.raises(ValueError):
            d.register(UnimplementedOperation("utimes"))

    def test_get(self):
        d = create_dispatcher()
        assert d.get("open").name == "open"
        assert d.get("nope") is None


class TestEncodeResult:
    def test_success_tuple(self):
        assert json.loads(encode_result([None, 3])) == [None, 3]

    def test_unicode_names_kept(self):
        raw = encode_result([None, ["résumé.txt"]])
        assert "résumé.txt".encode("utf-8") in raw

    def test_undecodable_name_fails(self):
        with pytest.raises(ResultEncodingError) as exc:
            encode_result([None, ["\udcff"]])
        assert exc.value.message == "failed to write body"

    def test_nan_fails(self):
        with pytest.raises(ResultEncodingError):
            encode_result([None, float("nan")])


class TestDiagnostics:
    def test_rejected_name_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            with pytest.raises(UnknownOperationError):
                create_dispatcher().dispatch("nope", b"")
        assert "[DIAG_WARN] Operation rejected" in caplog.text

    def test_done_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG):
            create_dispatcher().dispatch("symlink", b"")
        assert "Operation symlink done" in caplog.text
