"""Request argument shapes and the body decoder.

Each operation declares one argument model. Unknown members of the JSON
object are ignored; missing or wrongly typed required members are decode
errors reported in-band, before any native call runs. A body that is not
JSON at all is a transport failure (``MalformedBodyError``).
"""

from __future__ import annotations

import json
from typing import Annotated, Any, List, NamedTuple, Optional, Type, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from fsbridge.bridge.errors import MalformedBodyError

ResultTuple = List[Any]

UnsignedInt = Annotated[StrictInt, Field(ge=0)]


class BridgeArgs(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


# ─── Argument shapes ────────────────────────────────────────────────────────

class PathArgs(BridgeArgs):
    path: StrictStr


class FDArgs(BridgeArgs):
    fd: StrictInt


class OpenArgs(BridgeArgs):
    path: StrictStr
    flags: StrictInt
    perm: UnsignedInt = Field(validation_alias=AliasChoices("perm", "mode"))


class MkdirArgs(BridgeArgs):
    path: StrictStr
    perm: UnsignedInt = Field(validation_alias=AliasChoices("perm", "mode"))


class ReadArgs(BridgeArgs):
    fd: StrictInt
    length: UnsignedInt

    # accepted, not honored
    offset: Optional[StrictInt] = None
    position: Optional[StrictInt] = None


class WriteArgs(BridgeArgs):
    fd: StrictInt
    buffer: StrictStr

    # accepted, not honored
    offset: Optional[StrictInt] = None
    length: Optional[StrictInt] = None
    position: Optional[StrictInt] = None


class ChmodArgs(BridgeArgs):
    path: StrictStr
    mode: UnsignedInt


class ChownArgs(BridgeArgs):
    path: StrictStr
    uid: StrictInt
    gid: StrictInt


class LinkArgs(BridgeArgs):
    path: StrictStr
    link: StrictStr = Field(validation_alias=AliasChoices("link", "linkPath"))


# ─── Decoder ────────────────────────────────────────────────────────────────

A = TypeVar("A", bound=BridgeArgs)

_UNSET = object()


class Decoded(NamedTuple):
    args: Any
    failure: Optional[ResultTuple]

    @property
    def ok(self) -> bool:
        return self.failure is None


def format_validation_error(shape: Type[BridgeArgs], err: ValidationError) -> str:
    parts: list[str] = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ()))
        parts.append(f"{loc}: {e['msg']}" if loc else e["msg"])
    return f"decode {shape.__name__}: " + "; ".join(parts)


class Decoder:
    """Bound to one raw request body. The body is parsed at most once, and
    only when a handler asks for its arguments."""

    def __init__(self, body: bytes):
        self._body = body
        self._payload: Any = _UNSET

    def _load(self) -> Any:
        if self._payload is _UNSET:
            try:
                self._payload = json.loads(self._body)
            # RecursionError: nesting deeper than the parser can follow
            except (ValueError, RecursionError) as e:
                raise MalformedBodyError(str(e)) from e
        return self._payload

    @property
    def parsed(self) -> bool:
        return self._payload is not _UNSET

    def decode(self, shape: Type[A]) -> Decoded:
        payload = self._load()
        try:
            args = shape.model_validate(payload)
        except ValidationError as e:
            return Decoded(None, [format_validation_error(shape, e)])
        return Decoded(args, None)
