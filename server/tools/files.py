# server/tools/files.py
from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field
from fastmcp import FastMCP

from cachedfs.logging import log_tool_call
from cachedfs.services.filesystem import FileSystemService

logger = logging.getLogger(__name__)

Encoding = Literal["utf-8", "base64"]


class FsPathIn(BaseModel):
    path: str = Field("", description="Relative path under sandbox root")


class FsReadIn(BaseModel):
    path: str = Field(..., description="Relative path under sandbox root")
    encoding: Encoding = Field("utf-8", description="Return text as UTF-8 or raw bytes as base64")


class FsWriteIn(BaseModel):
    path: str = Field(..., description="Relative path under sandbox root")
    content: str = Field(..., description="Content to write (UTF-8 text or base64)")
    encoding: Encoding = Field("utf-8", description="How 'content' is encoded")
    make_parents: bool = Field(True, description="Create missing parent directories")


class FsLinkIn(BaseModel):
    target: str = Field(..., description="Existing entry the link points at (relative)")
    link_path: str = Field(..., description="Where to create the link (relative)")


class FsRenameIn(BaseModel):
    old_path: str = Field(..., description="Current relative path")
    new_path: str = Field(..., description="New relative path")


# ---------- Handlers shared by the stdio and HTTP transports ----------

def fs_read(fs: FileSystemService, args: FsReadIn) -> str:
    log_tool_call(logger, "fs_read", args.model_dump())
    data = fs.read_file(args.path)
    if args.encoding == "base64":
        return base64.b64encode(data).decode("ascii")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"{args.path} is not valid UTF-8 text; read it with encoding='base64'") from e


def fs_write(fs: FileSystemService, args: FsWriteIn) -> str:
    log_tool_call(logger, "fs_write", args.model_dump())
    if args.encoding == "base64":
        data = base64.b64decode(args.content, validate=True)
    else:
        data = args.content.encode("utf-8")
    fs.write_file(args.path, data, make_parents=args.make_parents)
    return "OK"


def fs_list(fs: FileSystemService, args: FsPathIn) -> List[Dict[str, Any]]:
    log_tool_call(logger, "fs_list", args.model_dump())
    out = []
    for entry in fs.read_dir(args.path):
        if entry.is_symlink():
            kind = "symlink"
        elif entry.is_dir(follow_symlinks=False):
            kind = "directory"
        else:
            kind = "file"
        out.append({"name": entry.name, "kind": kind})
    return out


def fs_info(fs: FileSystemService, args: FsPathIn) -> Dict[str, Any]:
    log_tool_call(logger, "fs_info", args.model_dump())
    return fs.info(args.path).to_dict()


def fs_mkdir(fs: FileSystemService, args: FsPathIn) -> str:
    log_tool_call(logger, "fs_mkdir", args.model_dump())
    fs.create_dir(args.path)
    return "OK"


def fs_symlink(fs: FileSystemService, args: FsLinkIn) -> str:
    log_tool_call(logger, "fs_symlink", args.model_dump())
    fs.create_symlink(args.target, args.link_path)
    return "OK"


def fs_hardlink(fs: FileSystemService, args: FsLinkIn) -> str:
    log_tool_call(logger, "fs_hardlink", args.model_dump())
    fs.create_hardlink(args.target, args.link_path)
    return "OK"


def fs_rename(fs: FileSystemService, args: FsRenameIn) -> str:
    log_tool_call(logger, "fs_rename", args.model_dump())
    fs.rename(args.old_path, args.new_path)
    return "OK"


def fs_delete(fs: FileSystemService, args: FsPathIn) -> str:
    log_tool_call(logger, "fs_delete", args.model_dump())
    fs.delete(args.path)
    return "OK"


def register_file_tools(mcp: FastMCP, fs_service: FileSystemService):
    """
    Very thin tool adapters:
    - validate/deserialize inputs (Pydantic)
    - call the service (containment + cache consistency)
    - return the result
    """

    @mcp.tool(name="fs_read", description="Read a file under sandbox root (cached)")
    def read_tool(input: FsReadIn) -> str:
        return fs_read(fs_service, input)

    @mcp.tool(name="fs_write", description="Write (overwrite) a file under sandbox root")
    def write_tool(input: FsWriteIn) -> str:
        return fs_write(fs_service, input)

    @mcp.tool(name="fs_list", description="List a directory under sandbox root")
    def list_tool(input: FsPathIn) -> List[Dict[str, Any]]:
        return fs_list(fs_service, input)

    @mcp.tool(name="fs_info", description="Stat an entry under sandbox root (symlinks not followed)")
    def info_tool(input: FsPathIn) -> Dict[str, Any]:
        return fs_info(fs_service, input)

    @mcp.tool(name="fs_mkdir", description="Create a directory (and parents) under sandbox root")
    def mkdir_tool(input: FsPathIn) -> str:
        return fs_mkdir(fs_service, input)

    @mcp.tool(name="fs_symlink", description="Create a symbolic link inside sandbox root")
    def symlink_tool(input: FsLinkIn) -> str:
        return fs_symlink(fs_service, input)

    @mcp.tool(name="fs_hardlink", description="Create a hard link inside sandbox root")
    def hardlink_tool(input: FsLinkIn) -> str:
        return fs_hardlink(fs_service, input)

    @mcp.tool(name="fs_rename", description="Rename/move an entry inside sandbox root")
    def rename_tool(input: FsRenameIn) -> str:
        return fs_rename(fs_service, input)

    @mcp.tool(name="fs_delete", description="Delete a file or link under sandbox root")
    def delete_tool(input: FsPathIn) -> str:
        return fs_delete(fs_service, input)
