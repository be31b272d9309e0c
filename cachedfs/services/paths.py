# cachedfs/services/paths.py
import os
from typing import Union

_SEPS = os.sep + (os.altsep or "")


class ContainmentError(ValueError):
    """
    Raised when a path resolves outside the sandbox root.
    Deliberately not an OSError, so callers can tell "disallowed" from "not found".
    """

    def __init__(self, root: str, path: str, name: str = "path"):
        super().__init__(f"Expected {name} to be inside the sandbox root: {path}")
        self.root = root
        self.path = path
        self.name = name


def canonical_root(root: Union[str, "os.PathLike[str]"]) -> str:
    if not isinstance(root, (str, os.PathLike)):
        raise TypeError("Expected root to be a str or os.PathLike")
    return os.path.realpath(os.fspath(root))


def is_contained(root: str, candidate: str) -> bool:
    if candidate == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return candidate.startswith(prefix)


def _check(root: str, candidate: str, name: str) -> str:
    if not is_contained(root, candidate):
        raise ContainmentError(root, candidate, name)
    return candidate


def resolve(root: str, relative: str, name: str = "path") -> str:
    """
    Lexical resolution: join onto root, collapse '.' and '..', check prefix.
    Does not touch the filesystem, so symlinks are not seen.
    """
    if not isinstance(relative, str):
        raise TypeError(f"Expected {name} to be a str")
    # absolute-looking input is still relative to root
    candidate = os.path.normpath(os.path.join(root, relative.lstrip(_SEPS)))
    return _check(root, candidate, name)


def resolve_path(root: str, relative: str, name: str = "path") -> str:
    """
    Lexical check, then follow every symlink and check the canonical result.
    """
    lexical = resolve(root, relative, name)
    return _check(root, os.path.realpath(lexical), name)


def resolve_entry(root: str, relative: str, name: str = "path") -> str:
    """
    Like resolve_path, but the final component is kept as-is so a symlink
    can be addressed as an entry (lstat, unlink, rename) instead of its target.
    """
    lexical = resolve(root, relative, name)
    if lexical == root:
        return root
    parent, leaf = os.path.split(lexical)
    return _check(root, os.path.join(os.path.realpath(parent), leaf), name)
