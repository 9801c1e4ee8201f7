"""Parsers for git's machine-readable output.

Each parser accepts the stdout of one specific command and knows that
command's grammar. Anything outside the grammar raises ExternalToolError
rather than being guessed at.
"""

import re
from typing import Dict, List, Optional

from git_worktree_keeper.constants import ABBREVIATED_HASH_LENGTH
from git_worktree_keeper.exceptions import ExternalToolError
from git_worktree_keeper.models.branch import BranchInfo
from git_worktree_keeper.models.worktree import StatusSummary, WorktreeRecord

# `git for-each-ref --format='%(HEAD) %(refname:short)' refs/heads/`
BRANCH_LIST_FORMAT = "%(HEAD) %(refname:short)"
_BRANCH_LINE = re.compile(r"^(?P<head>[* ]) (?P<name>\S.*)$")

# `git status --porcelain=v1`: XY <path> or XY <orig> -> <path>
_STATUS_LINE = re.compile(r"^(?P<x>[ MTADRCU?!])(?P<y>[ MTADRCU?!]) (?P<path>.+)$")
_CONFLICT_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}

_FULL_HASH = re.compile(r"^(?:[0-9a-f]{40}|[0-9a-f]{64})$")

_BRANCH_REF_PREFIX = "refs/heads/"
_WORKTREE_FLAGS = {"bare", "detached", "locked", "prunable"}


def _parse_error(command: str, line: str, reason: str) -> ExternalToolError:
    return ExternalToolError(
        "parse", message=f"unrecognized output from 'git {command}' ({reason}): {line!r}"
    )


def parse_branch_list(output: str) -> List[BranchInfo]:
    """Parse local branches listed with BRANCH_LIST_FORMAT."""
    branches = []
    for line in output.splitlines():
        if not line.strip():
            continue
        match = _BRANCH_LINE.match(line)
        if not match:
            raise _parse_error("for-each-ref", line, "expected '<*| > <branch>'")
        branches.append(BranchInfo(name=match.group("name"), is_current=match.group("head") == "*"))
    return branches


def parse_status_porcelain(output: str) -> StatusSummary:
    """Parse `git status --porcelain=v1` into change counts.

    X is the index (staged) state and Y the working tree state. Untracked
    entries (??) count as changed, ignored entries (!!) never do.
    """
    staged = modified = untracked = conflicted = 0
    paths = set()

    for line in output.splitlines():
        if not line:
            continue
        match = _STATUS_LINE.match(line)
        if not match:
            raise _parse_error("status --porcelain", line, "expected 'XY <path>'")

        code = match.group("x") + match.group("y")
        path = match.group("path")

        if code == "!!":
            continue
        if code == "??":
            untracked += 1
        elif code in _CONFLICT_CODES:
            conflicted += 1
        else:
            if match.group("x") != " ":
                staged += 1
            if match.group("y") != " ":
                modified += 1

        # Renames and copies list "orig -> new"; the destination is the changed path
        if match.group("x") in "RC" and " -> " in path:
            path = path.split(" -> ", 1)[1]
        paths.add(path)

    return StatusSummary(
        staged=staged,
        modified=modified,
        untracked=untracked,
        conflicted=conflicted,
        changed_files_count=len(paths),
    )


def parse_worktree_list(output: str) -> List[WorktreeRecord]:
    """Parse `git worktree list --porcelain`.

    Format:
        worktree /path/to/worktree
        HEAD <sha>
        branch refs/heads/<name>      (or: detached / bare)
        locked [reason]               (optional)
        prunable [reason]             (optional)
        <blank line between entries>
    """
    records = []
    current: Optional[Dict] = None

    for line in output.splitlines():
        if not line.strip():
            if current is not None:
                records.append(_build_worktree_record(current))
                current = None
            continue

        key, _, value = line.partition(" ")

        if key == "worktree":
            if current is not None:
                records.append(_build_worktree_record(current))
            if not value:
                raise _parse_error("worktree list", line, "missing worktree path")
            current = {"path": value}
            continue

        if current is None:
            raise _parse_error("worktree list", line, "attribute before 'worktree' line")

        if key == "HEAD":
            current["head"] = value
        elif key == "branch":
            if not value.startswith(_BRANCH_REF_PREFIX):
                raise _parse_error("worktree list", line, "expected refs/heads/<name>")
            current["branch_name"] = value[len(_BRANCH_REF_PREFIX):]
        elif key in _WORKTREE_FLAGS:
            current[f"is_{key}"] = True
        else:
            raise _parse_error("worktree list", line, f"unknown attribute '{key}'")

    if current is not None:
        records.append(_build_worktree_record(current))

    return records


def _build_worktree_record(fields: Dict) -> WorktreeRecord:
    return WorktreeRecord(
        path=fields["path"],
        head=fields.get("head", ""),
        branch_name=fields.get("branch_name"),
        is_bare=fields.get("is_bare", False),
        is_detached=fields.get("is_detached", False),
        is_locked=fields.get("is_locked", False),
        is_prunable=fields.get("is_prunable", False),
    )


def parse_commit_hash(output: str) -> str:
    """Parse the full object name printed by `git rev-parse HEAD`."""
    value = output.strip()
    if not _FULL_HASH.match(value):
        raise _parse_error("rev-parse", value, "expected a full commit hash")
    return value


def abbreviate_hash(full_hash: str) -> str:
    """First ABBREVIATED_HASH_LENGTH characters of a full commit hash."""
    return parse_commit_hash(full_hash)[:ABBREVIATED_HASH_LENGTH]


def parse_current_branch(output: str) -> Optional[str]:
    """Parse `git symbolic-ref --quiet --short HEAD`; empty output means detached."""
    lines = [line for line in output.splitlines() if line.strip()]
    if not lines:
        return None
    if len(lines) > 1:
        raise _parse_error("symbolic-ref", output, "expected a single ref name")
    return lines[0].strip()
