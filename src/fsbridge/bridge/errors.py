class TransportError(Exception):
    """A request failure reported at the HTTP level instead of in a result tuple."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownOperationError(TransportError):
    def __init__(self, op: str):
        super().__init__(f"unhandled operation: {op}" if op else "operation is required")
        self.op = op


class MalformedBodyError(TransportError):
    def __init__(self, reason: str = ""):
        super().__init__("failed to decode body")
        self.reason = reason


class ResultEncodingError(TransportError):
    def __init__(self, reason: str = ""):
        super().__init__("failed to write body")
        self.reason = reason
