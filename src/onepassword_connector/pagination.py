"""Resumable pagination cursor.

A cursor is a stack of pending sub-enumeration tasks. It crosses the call
boundary as an opaque token so a caller can persist it and resume later,
possibly from another process.

Token format: ``v1.<base64url(JSON)>`` where the JSON document is
``{"states": [{"kind": ..., "resource_id": ...}, ...]}`` listed bottom to
top. An empty stack is the empty string, which means "no more pages".
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Iterable

from .exceptions import CursorError

logger = logging.getLogger(__name__)

TOKEN_VERSION = "v1"


@dataclass(frozen=True)
class PageState:
    """One pending task: what to enumerate (``kind``) and for which resource."""

    kind: str
    resource_id: str

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "resource_id": self.resource_id}


class PaginationBag:
    """Stack of pending :class:`PageState` tasks.

    The last pushed state is processed first.

    Example::

        bag = PaginationBag.unmarshal(page_token)
        if bag.current() is None:
            bag.push(PageState("list-groups", vault_id))
            bag.push(PageState("list-users", vault_id))
        state = bag.pop()
        ...
        next_token = bag.marshal()
    """

    __slots__ = ("_states",)

    def __init__(self, states: Iterable[PageState] = ()) -> None:
        self._states: list[PageState] = list(states)

    @property
    def states(self) -> tuple[PageState, ...]:
        """Pending states, bottom of the stack first."""
        return tuple(self._states)

    def push(self, state: PageState) -> None:
        self._states.append(state)

    def pop(self) -> PageState | None:
        if not self._states:
            return None
        return self._states.pop()

    def current(self) -> PageState | None:
        """Top of the stack without removing it."""
        if not self._states:
            return None
        return self._states[-1]

    def __len__(self) -> int:
        return len(self._states)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PaginationBag):
            return NotImplemented
        return self._states == other._states

    def __repr__(self) -> str:
        return f"PaginationBag(states={self._states!r})"

    def marshal(self) -> str:
        """Serialize to an opaque token. An empty stack gives ``""``."""
        if not self._states:
            return ""
        payload = json.dumps(
            {"states": [state.to_dict() for state in self._states]},
            sort_keys=True,
            separators=(",", ":"),
        ).encode()
        return f"{TOKEN_VERSION}.{base64.urlsafe_b64encode(payload).decode()}"

    @classmethod
    def unmarshal(cls, token: str | None) -> PaginationBag:
        """Restore a bag from a token produced by :meth:`marshal`.

        ``None`` and ``""`` give an empty bag.

        Raises:
            CursorError: If the token has an unknown version or cannot be decoded.
        """
        if not token:
            return cls()

        version, sep, body = token.partition(".")
        if not sep or version != TOKEN_VERSION:
            raise CursorError(f"unsupported pagination token version: {version!r}")

        try:
            raw = json.loads(base64.urlsafe_b64decode(body.encode()))
        except (binascii.Error, ValueError) as e:
            raise CursorError(f"undecodable pagination token: {e}") from e

        states = raw.get("states") if isinstance(raw, dict) else None
        if not isinstance(states, list):
            raise CursorError("pagination token has no state list")
        if not states:
            # marshal() encodes an empty stack as "", never as an empty list
            raise CursorError("pagination token has an empty state list")

        parsed: list[PageState] = []
        for entry in states:
            if (
                not isinstance(entry, dict)
                or not isinstance(entry.get("kind"), str)
                or not isinstance(entry.get("resource_id"), str)
            ):
                raise CursorError("malformed pagination state", state=entry)
            parsed.append(PageState(kind=entry["kind"], resource_id=entry["resource_id"]))

        logger.debug("restored pagination cursor with %d pending state(s)", len(parsed))
        return cls(parsed)


__all__ = ["PageState", "PaginationBag", "TOKEN_VERSION"]
