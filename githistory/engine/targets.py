"""File targets accepted by the file history entry point.

A closed set of shapes. resolve_target_path() maps each to a plain file
path; anything else yields None and the caller falls back to the active
editor.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

logger = logging.getLogger(__name__)


@dataclass
class CommittedFile:
    """A file touched by a commit. Renames and deletes only have old_path."""
    path: str | None = None
    old_path: str | None = None


@dataclass
class FileCommitDetails:
    committed_file: CommittedFile


@dataclass
class FileNode:
    """Tree node wrapping a committed file, as shown in a commit file tree."""
    data: FileCommitDetails


@dataclass
class FileAddress:
    path: str


@dataclass
class ResourceReference:
    """Any host object exposing a resource address."""
    resource_path: str


FileTarget = Union[FileCommitDetails, FileNode, FileAddress, ResourceReference]


def _committed_file_path(committed_file: CommittedFile) -> str | None:
    if committed_file.path:
        return committed_file.path
    return committed_file.old_path or None


def resolve_target_path(target: object) -> str | None:
    """Return the file path a target points at, or None."""
    if target is None:
        return None
    if isinstance(target, FileCommitDetails):
        return _committed_file_path(target.committed_file)
    if isinstance(target, FileNode):
        return _committed_file_path(target.data.committed_file)
    if isinstance(target, FileAddress):
        return target.path
    if isinstance(target, ResourceReference):
        return target.resource_path
    logger.debug("Ignoring unrecognized file target %s", type(target).__name__)
    return None
