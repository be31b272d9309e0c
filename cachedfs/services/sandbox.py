# cachedfs/services/sandbox.py
from __future__ import annotations

import logging
import os
from typing import Union

from cachedfs.services import paths
from cachedfs.services.cache import ContentCache, build_cache, cache_config

logger = logging.getLogger(__name__)


class SandboxRoot:
    """
    Construction/containment capability shared by the read and write accessors.

    Owns the canonical root, the content cache and the symlink policy:
    - canonicalize=True: content operations follow symlinks and re-check the
      canonical target; entry operations canonicalize the parent only.
    - canonicalize=False: lexical containment only; a symlink inside the root
      that points outside it is honoured.
    """

    def __init__(
        self,
        root: Union[str, "os.PathLike[str]"],
        cache: Union[ContentCache, int, None] = None,
        *,
        canonicalize: bool = True,
    ):
        self.root = paths.canonical_root(root)
        self.cache = build_cache(cache_config(cache))
        self.canonicalize = canonicalize
        os.makedirs(self.root, exist_ok=True)
        logger.debug("sandbox root ready at %s (canonicalize=%s)", self.root, canonicalize)

    def resolve_content(self, relative: str, name: str = "path") -> str:
        if self.canonicalize:
            return paths.resolve_path(self.root, relative, name)
        return paths.resolve(self.root, relative, name)

    def resolve_entry(self, relative: str, name: str = "path") -> str:
        if self.canonicalize:
            return paths.resolve_entry(self.root, relative, name)
        return paths.resolve(self.root, relative, name)
