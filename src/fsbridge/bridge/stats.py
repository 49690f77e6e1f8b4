"""Stat translation: native ``os.stat_result`` → portable stat record.

The sandboxed runtime expects the shape of a Node ``fs.Stats`` object with
fixed-width integer fields and millisecond timestamps. Only whole seconds
are carried across, so the millisecond part of every timestamp is zero.
"""

from __future__ import annotations

import math
import os
import stat as stat_mod
import sys
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict

_U32 = (1 << 32) - 1
_U64 = (1 << 64) - 1


def _unsigned(value: int, mask: int) -> int:
    return value & mask


def _signed64(value: int) -> int:
    value &= _U64
    return value - (1 << 64) if value >= (1 << 63) else value


@dataclass(frozen=True)
class PortableStat:
    dev: int
    ino: int
    mode: int
    nlink: int
    uid: int
    gid: int
    rdev: int
    size: int
    blksize: int
    blocks: int
    atime_ms: int
    mtime_ms: int
    ctime_ms: int
    dir: bool

    def to_wire(self) -> Dict[str, Any]:
        d = asdict(self)
        d["atimeMs"] = d.pop("atime_ms")
        d["mtimeMs"] = d.pop("mtime_ms")
        d["ctimeMs"] = d.pop("ctime_ms")
        return d


def _seconds_to_ms(seconds: float) -> int:
    return _signed64(math.floor(seconds) * 1000)


def _convert_posix(st: os.stat_result) -> PortableStat:
    return PortableStat(
        dev=_unsigned(st.st_dev, _U64),
        ino=_unsigned(st.st_ino, _U64),
        mode=_unsigned(st.st_mode, _U32),
        nlink=_unsigned(st.st_nlink, _U64),
        uid=_unsigned(st.st_uid, _U32),
        gid=_unsigned(st.st_gid, _U32),
        rdev=_unsigned(st.st_rdev, _U64),
        size=_signed64(st.st_size),
        blksize=_signed64(st.st_blksize),
        blocks=_signed64(st.st_blocks),
        atime_ms=_seconds_to_ms(st.st_atime),
        mtime_ms=_seconds_to_ms(st.st_mtime),
        ctime_ms=_seconds_to_ms(st.st_ctime),
        dir=stat_mod.S_IFMT(st.st_mode) == stat_mod.S_IFDIR,
    )


def _convert_windows(st: os.stat_result) -> PortableStat:
    # st_blksize, st_blocks and st_rdev do not exist on Windows.
    return PortableStat(
        dev=_unsigned(st.st_dev, _U64),
        ino=_unsigned(st.st_ino, _U64),
        mode=_unsigned(st.st_mode, _U32),
        nlink=_unsigned(st.st_nlink, _U64),
        uid=_unsigned(st.st_uid, _U32),
        gid=_unsigned(st.st_gid, _U32),
        rdev=0,
        size=_signed64(st.st_size),
        blksize=0,
        blocks=0,
        atime_ms=_seconds_to_ms(st.st_atime),
        mtime_ms=_seconds_to_ms(st.st_mtime),
        ctime_ms=_seconds_to_ms(st.st_ctime),
        dir=stat_mod.S_IFMT(st.st_mode) == stat_mod.S_IFDIR,
    )


def _select_converter(platform: str) -> Callable[[os.stat_result], PortableStat]:
    if platform.startswith("win"):
        return _convert_windows
    return _convert_posix


convert_stat = _select_converter(sys.platform)
