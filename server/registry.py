# server/registry.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Type, Optional
from pydantic import BaseModel

from cachedfs.di import Container, build_container
from cachedfs.services.filesystem import FileSystemService

from server.tools import files
from server.tools.files import FsPathIn, FsReadIn, FsWriteIn, FsLinkIn, FsRenameIn


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[BaseModel], Any]


class ToolHandlers:
    """
    Named handlers for each tool (no lambdas).
    Keeps all cross-cutting logic and observability in one place.
    """
    def __init__(self, fs: FileSystemService):
        self.fs = fs

    def fs_read(self, args: FsReadIn) -> str:
        return files.fs_read(self.fs, args)

    def fs_write(self, args: FsWriteIn) -> str:
        return files.fs_write(self.fs, args)

    def fs_list(self, args: FsPathIn) -> list:
        return files.fs_list(self.fs, args)

    def fs_info(self, args: FsPathIn) -> dict:
        return files.fs_info(self.fs, args)

    def fs_mkdir(self, args: FsPathIn) -> str:
        return files.fs_mkdir(self.fs, args)

    def fs_symlink(self, args: FsLinkIn) -> str:
        return files.fs_symlink(self.fs, args)

    def fs_hardlink(self, args: FsLinkIn) -> str:
        return files.fs_hardlink(self.fs, args)

    def fs_rename(self, args: FsRenameIn) -> str:
        return files.fs_rename(self.fs, args)

    def fs_delete(self, args: FsPathIn) -> str:
        return files.fs_delete(self.fs, args)


_TOOLS = [
    ("fs_read", "Read a file under sandbox root (cached)", FsReadIn),
    ("fs_write", "Write (overwrite) a file under sandbox root", FsWriteIn),
    ("fs_list", "List a directory under sandbox root", FsPathIn),
    ("fs_info", "Stat an entry under sandbox root (symlinks not followed)", FsPathIn),
    ("fs_mkdir", "Create a directory (and parents) under sandbox root", FsPathIn),
    ("fs_symlink", "Create a symbolic link inside sandbox root", FsLinkIn),
    ("fs_hardlink", "Create a hard link inside sandbox root", FsLinkIn),
    ("fs_rename", "Rename/move an entry inside sandbox root", FsRenameIn),
    ("fs_delete", "Delete a file or link under sandbox root", FsPathIn),
]


def build_tool_registry(container: Optional[Container] = None) -> Dict[str, ToolSpec]:
    """
    Build a registry once at startup using DI.
    Transport layers (stdio/HTTP) read from this registry to expose tools.
    """
    container = container or build_container()
    handlers = ToolHandlers(container.fs_service)

    return {
        name: ToolSpec(
            name=name,
            description=description,
            input_model=model,
            handler=getattr(handlers, name),
        )
        for name, description, model in _TOOLS
    }


def list_tools_payload(registry: Dict[str, ToolSpec]) -> Dict[str, Any]:
    """
    Produce the `tools/list` payload body as per MCP Tools spec.
    """
    tools = []
    for spec in registry.values():
        tools.append({
            "name": spec.name,
            "description": spec.description,
            "inputSchema": spec.input_model.model_json_schema(),
        })
    return {"tools": tools}


def dispatch_tool_call(registry: Dict[str, ToolSpec], name: str, arguments: Dict[str, Any]) -> Any:
    """
    Validate args with the tool's Pydantic model, then invoke the named handler.
    """
    if name not in registry:
        raise KeyError(f"Tool not found: {name}")
    spec = registry[name]
    args_obj = spec.input_model(**arguments)
    return spec.handler(args_obj)
