from fsbridge.bridge.decoder import Decoder, Decoded, ResultTuple
from fsbridge.bridge.dispatch import Dispatcher, create_dispatcher, encode_result
from fsbridge.bridge.errors import (
    TransportError, UnknownOperationError, MalformedBodyError, ResultEncodingError,
)
from fsbridge.bridge.operations import (
    OPERATION_NAMES, IMPLEMENTED_NAMES, UNIMPLEMENTED_NAMES, UNIMPLEMENTED_MESSAGE,
)
from fsbridge.bridge.stats import PortableStat, convert_stat

__all__ = [
    "Decoder", "Decoded", "ResultTuple",
    "Dispatcher", "create_dispatcher", "encode_result",
    "TransportError", "UnknownOperationError", "MalformedBodyError", "ResultEncodingError",
    "OPERATION_NAMES", "IMPLEMENTED_NAMES", "UNIMPLEMENTED_NAMES", "UNIMPLEMENTED_MESSAGE",
    "PortableStat", "convert_stat",
]
