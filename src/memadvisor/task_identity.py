"""Map task instances (retries, shards) to a canonical group name."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable

# "align (3)" -> "align"; the scheduler numbers retries and shards this way.
_INSTANCE_SUFFIX_RE = re.compile(r"\s*\(\d+\)$")


@runtime_checkable
class TaskLike(Protocol):
    """Anything the scheduler hands us that has an instance name."""

    name: str | None


@dataclass(frozen=True, slots=True)
class Task:
    """A unit of work to be scheduled.

    ``group`` is the logical step shared by every retry and shard. When it
    is missing the group is derived from ``name``.
    """

    name: str | None
    group: str | None = None
    memory_request: Decimal | None = None
    memory_limit: Decimal | None = None


def canonical_group(name: object) -> str | None:
    """Return the group key for *name*, or None if it is blank or not a string.

    Only surrounding whitespace is trimmed, so distinct steps keep distinct
    keys. Ingest and query both go through here.
    """
    if not isinstance(name, str):
        return None
    return name.strip() or None


def resolve_group(task: TaskLike | None) -> str | None:
    """Return the canonical group name for *task*, or None if unresolvable.

    Prefers an explicit ``group`` attribute; otherwise strips a trailing
    ``" (N)"`` instance suffix from ``name``.
    """
    if task is None:
        return None

    group = canonical_group(getattr(task, "group", None))
    if group is not None:
        return group

    name = canonical_group(getattr(task, "name", None))
    if name is None:
        return None
    return canonical_group(_INSTANCE_SUFFIX_RE.sub("", name))
