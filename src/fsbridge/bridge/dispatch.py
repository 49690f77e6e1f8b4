"""Dispatcher — operation name → handler.

The operation set is closed: only names in ``OPERATION_NAMES`` can be
registered, and ``create_dispatcher`` refuses to build a table that does
not cover every one of them.
"""

from __future__ import annotations

import json
from typing import Dict, Iterable, List, Optional

from fsbridge.bridge.decoder import Decoder, ResultTuple
from fsbridge.bridge.errors import ResultEncodingError, UnknownOperationError
from fsbridge.bridge.operations import (
    IMPLEMENTED_NAMES, OPERATION_NAMES, UNIMPLEMENTED_NAMES, Operation, default_operations,
)
from fsbridge.logging.diagnostic import log_operation_done, log_operation_rejected


class Dispatcher:
    def __init__(self, operations: Iterable[Operation] = ()):
        self._operations: Dict[str, Operation] = {}
        for op in operations:
            self.register(op)

    def register(self, op: Operation) -> None:
        if op.name not in OPERATION_NAMES:
            raise ValueError(f"Not a bridge operation: {op.name!r}")
        if op.name in self._operations:
            raise ValueError(f"Duplicated operation: {op.name}")
        self._operations[op.name] = op

    def get(self, name: str) -> Optional[Operation]:
        return self._operations.get(name)

    def names(self) -> List[str]:
        return sorted(self._operations)

    def implemented(self) -> List[str]:
        return [n for n in self.names() if n in IMPLEMENTED_NAMES]

    def unimplemented(self) -> List[str]:
        return [n for n in self.names() if n in UNIMPLEMENTED_NAMES]

    def dispatch(self, name: str, body: bytes) -> ResultTuple:
        """Run exactly one handler. Raises ``TransportError`` subclasses for
        failures that must not produce a result tuple."""
        op = self._operations.get(name) if name else None
        if op is None:
            log_operation_rejected(name, "empty" if not name else "unknown")
            raise UnknownOperationError(name)

        result = op.handle(Decoder(body))
        log_operation_done(name, result)
        return result


def encode_result(result: ResultTuple) -> bytes:
    try:
        return json.dumps(result, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        # UnicodeEncodeError (lone surrogates in undecodable file names) is a ValueError
        raise ResultEncodingError(str(e)) from e


def create_dispatcher() -> Dispatcher:
    dispatcher = Dispatcher(default_operations())
    missing = OPERATION_NAMES - set(dispatcher.names())
    if missing:
        raise RuntimeError(f"Operations without a handler: {', '.join(sorted(missing))}")
    return dispatcher
