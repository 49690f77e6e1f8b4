"""Operation handlers — one per filesystem primitive.

Each implemented handler decodes its argument shape, forwards exactly one
native call and returns a result tuple. Native failures come back in-band
as ``[message]``; nothing is raised across the bridge boundary.

Descriptors returned by ``open`` are plain OS file descriptors. The bridge
keeps no table of them: a later, unrelated request may use, close or race
on any descriptor value, exactly as two native callers sharing a process
would.
"""

from __future__ import annotations

import base64
import os
from typing import Any, List, Protocol, Type

from fsbridge.bridge.decoder import (
    BridgeArgs, ChmodArgs, ChownArgs, Decoder, FDArgs, LinkArgs, MkdirArgs,
    OpenArgs, PathArgs, ReadArgs, ResultTuple, WriteArgs,
)
from fsbridge.bridge.stats import convert_stat

UNIMPLEMENTED_MESSAGE = "operation is unimplemented"

IMPLEMENTED_NAMES = frozenset({
    "open", "close", "read", "write", "mkdir", "rmdir", "readdir",
    "stat", "lstat", "fstat", "chmod", "chown", "link", "unlink",
})

UNIMPLEMENTED_NAMES = frozenset({
    "fchmod", "fchown", "ftruncate", "lchown", "readlink",
    "rename", "symlink", "truncate", "utimes",
})

OPERATION_NAMES = IMPLEMENTED_NAMES | UNIMPLEMENTED_NAMES


class Operation(Protocol):
    name: str

    def handle(self, decoder: Decoder) -> ResultTuple:
        ...


def describe_error(err: Exception) -> str:
    if isinstance(err, OSError) and err.strerror:
        return err.strerror
    return str(err) or type(err).__name__


class NativeOperation:
    name: str = ""
    args: Type[BridgeArgs] = BridgeArgs

    def handle(self, decoder: Decoder) -> ResultTuple:
        decoded = decoder.decode(self.args)
        if not decoded.ok:
            return decoded.failure
        try:
            return self.call(decoded.args)
        # ValueError: embedded NUL in a path; OverflowError: integer out of C range;
        # MemoryError: read buffer larger than the host can allocate
        except (OSError, ValueError, OverflowError, MemoryError) as e:
            return [describe_error(e)]

    def call(self, args: Any) -> ResultTuple:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


# ─── Descriptors ────────────────────────────────────────────────────────────

class OpenOperation(NativeOperation):
    name = "open"
    args = OpenArgs

    def call(self, args: OpenArgs) -> ResultTuple:
        fd = os.open(args.path, args.flags, args.perm)
        return [None, fd]


class CloseOperation(NativeOperation):
    name = "close"
    args = FDArgs

    def call(self, args: FDArgs) -> ResultTuple:
        os.close(args.fd)
        return [None]


class ReadOperation(NativeOperation):
    name = "read"
    args = ReadArgs

    def call(self, args: ReadArgs) -> ResultTuple:
        data = os.read(args.fd, args.length)
        # The caller receives the whole requested buffer, read bytes first.
        buffer = data.ljust(args.length, b"\0")
        return [None, len(data), base64.b64encode(buffer).decode("ascii")]


class WriteOperation(NativeOperation):
    name = "write"
    args = WriteArgs

    def call(self, args: WriteArgs) -> ResultTuple:
        n = os.write(args.fd, args.buffer.encode("utf-8"))
        return [None, n]


# ─── Directories ────────────────────────────────────────────────────────────

class MkdirOperation(NativeOperation):
    name = "mkdir"
    args = MkdirArgs

    def call(self, args: MkdirArgs) -> ResultTuple:
        os.mkdir(args.path, args.perm)
        return [None]


class RmdirOperation(NativeOperation):
    name = "rmdir"
    args = PathArgs

    def call(self, args: PathArgs) -> ResultTuple:
        os.rmdir(args.path)
        return [None]


class ReaddirOperation(NativeOperation):
    name = "readdir"
    args = PathArgs

    def call(self, args: PathArgs) -> ResultTuple:
        # undecodable bytes in a name become U+FFFD instead of failing the listing
        names = os.listdir(os.fsencode(args.path))
        return [None, sorted(n.decode("utf-8", errors="replace") for n in names)]


# ─── Metadata ───────────────────────────────────────────────────────────────

class StatOperation(NativeOperation):
    name = "stat"
    args = PathArgs

    def call(self, args: PathArgs) -> ResultTuple:
        return [None, convert_stat(os.stat(args.path)).to_wire()]


class LstatOperation(NativeOperation):
    name = "lstat"
    args = PathArgs

    def call(self, args: PathArgs) -> ResultTuple:
        return [None, convert_stat(os.lstat(args.path)).to_wire()]


class FstatOperation(NativeOperation):
    name = "fstat"
    args = FDArgs

    def call(self, args: FDArgs) -> ResultTuple:
        return [None, convert_stat(os.fstat(args.fd)).to_wire()]


class ChmodOperation(NativeOperation):
    name = "chmod"
    args = ChmodArgs

    def call(self, args: ChmodArgs) -> ResultTuple:
        os.chmod(args.path, args.mode)
        return [None]


class ChownOperation(NativeOperation):
    name = "chown"
    args = ChownArgs

    def call(self, args: ChownArgs) -> ResultTuple:
        os.chown(args.path, args.uid, args.gid)
        return [None]


# ─── Links ──────────────────────────────────────────────────────────────────

class LinkOperation(NativeOperation):
    name = "link"
    args = LinkArgs

    def call(self, args: LinkArgs) -> ResultTuple:
        os.link(args.path, args.link)
        return [None]


class UnlinkOperation(NativeOperation):
    name = "unlink"
    args = PathArgs

    def call(self, args: PathArgs) -> ResultTuple:
        os.unlink(args.path)
        return [None]


# ─── Reserved names ─────────────────────────────────────────────────────────

class UnimplementedOperation:
    """Recognised but gated: never reads the body, never touches the filesystem."""

    def __init__(self, name: str):
        self.name = name

    def handle(self, decoder: Decoder) -> ResultTuple:
        return [UNIMPLEMENTED_MESSAGE]

    def __repr__(self) -> str:
        return f"<UnimplementedOperation {self.name}>"


def default_operations() -> List[Operation]:
    ops: List[Operation] = [
        OpenOperation(), CloseOperation(), ReadOperation(), WriteOperation(),
        MkdirOperation(), RmdirOperation(), ReaddirOperation(),
        StatOperation(), LstatOperation(), FstatOperation(),
        ChmodOperation(), ChownOperation(),
        LinkOperation(), UnlinkOperation(),
    ]
    ops.extend(UnimplementedOperation(name) for name in sorted(UNIMPLEMENTED_NAMES))
    return ops
