# cachedfs/services/info.py
from __future__ import annotations

import os
import stat
from typing import Any, Dict


class Info:
    """
    Read-only view over an os.stat_result (as returned by lstat).
    Times are POSIX timestamps in seconds.
    """

    def __init__(self, st: os.stat_result):
        if not isinstance(st, os.stat_result):
            raise TypeError("Expected st to be an os.stat_result")
        self._st = st

    @property
    def permissions(self) -> int:
        return self._st.st_mode & 0o777

    @property
    def link_count(self) -> int:
        return self._st.st_nlink

    @property
    def uid(self) -> int:
        return self._st.st_uid

    @property
    def gid(self) -> int:
        return self._st.st_gid

    @property
    def block_size(self) -> int:
        return getattr(self._st, "st_blksize", 0)

    @property
    def blocks(self) -> int:
        return getattr(self._st, "st_blocks", 0)

    @property
    def inode(self) -> int:
        return self._st.st_ino

    @property
    def size(self) -> int:
        return self._st.st_size

    @property
    def last_accessed(self) -> float:
        return self._st.st_atime

    @property
    def last_modified(self) -> float:
        return self._st.st_mtime

    @property
    def last_changed(self) -> float:
        return self._st.st_ctime

    @property
    def created_at(self) -> float:
        # birth time is not reported everywhere (e.g. most Linux builds)
        return getattr(self._st, "st_birthtime", self._st.st_ctime)

    @property
    def dev(self) -> int:
        return self._st.st_dev

    @property
    def rdev(self) -> int:
        return getattr(self._st, "st_rdev", 0)

    def is_file(self) -> bool:
        return stat.S_ISREG(self._st.st_mode)

    def is_directory(self) -> bool:
        return stat.S_ISDIR(self._st.st_mode)

    def is_block_device(self) -> bool:
        return stat.S_ISBLK(self._st.st_mode)

    def is_character_device(self) -> bool:
        return stat.S_ISCHR(self._st.st_mode)

    def is_symbolic_link(self) -> bool:
        return stat.S_ISLNK(self._st.st_mode)

    def is_fifo(self) -> bool:
        return stat.S_ISFIFO(self._st.st_mode)

    def is_socket(self) -> bool:
        return stat.S_ISSOCK(self._st.st_mode)

    def _allows(self, owner_bit: int, group_bit: int, other_bit: int) -> bool:
        uid = os.getuid() if hasattr(os, "getuid") else None
        gid = os.getgid() if hasattr(os, "getgid") else None
        return bool(
            (uid == self.uid and self.permissions & owner_bit)
            or (gid == self.gid and self.permissions & group_bit)
            or (self.permissions & other_bit)
        )

    def can_read(self) -> bool:
        return self._allows(0o400, 0o040, 0o004)

    def can_write(self) -> bool:
        return self._allows(0o200, 0o020, 0o002)

    def can_execute(self) -> bool:
        return self._allows(0o100, 0o010, 0o001)

    def kind(self) -> str:
        if self.is_symbolic_link():
            return "symlink"
        if self.is_directory():
            return "directory"
        if self.is_file():
            return "file"
        return "other"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind(),
            "size": self.size,
            "permissions": oct(self.permissions),
            "link_count": self.link_count,
            "uid": self.uid,
            "gid": self.gid,
            "inode": self.inode,
            "last_accessed": self.last_accessed,
            "last_modified": self.last_modified,
            "last_changed": self.last_changed,
            "created_at": self.created_at,
            "readable": self.can_read(),
            "writable": self.can_write(),
            "executable": self.can_execute(),
        }

    def __repr__(self) -> str:
        return f"Info(kind={self.kind()!r}, size={self.size}, permissions={oct(self.permissions)})"
