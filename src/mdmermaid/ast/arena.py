#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/ast/arena.py
"""Stable container handles and batched sibling edits.

A transform pass must replace ranges of siblings (a code block plus the
summary wrapper around it) without disturbing the index of any other
sibling it has yet to visit. Rather than mutating child lists while
iterating them, the pass records every edit in a :class:`RewritePlan`
addressed by container handle and *original* index, then applies the whole
plan once at the end.

Applying a plan:

1. groups splices by parent container,
2. rejects out-of-range or overlapping ranges,
3. checks that the nodes to be removed are exactly the nodes recorded when
   the splice was planned (identity, not equality),
4. applies the splices of each parent from right to left, so an earlier
   splice never shifts a later one.

Any violation raises :class:`StructuralInvariantError` before a single list
is changed.

"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterator, NewType, Sequence

from mdmermaid.ast.nodes import Node, get_child_sequence, get_node_children
from mdmermaid.exceptions import StructuralInvariantError

logger = logging.getLogger(__name__)

ParentHandle = NewType("ParentHandle", int)


class NodeArena:
    """Registry of every container node in a tree.

    Containers are numbered in pre-order, so iterating the arena visits
    parents before their descendants and siblings in document order. Nodes
    are keyed by identity; two equal but distinct nodes get distinct
    handles.

    Parameters
    ----------
    root : Node
        Tree root (usually a Document)

    """

    def __init__(self, root: Node) -> None:
        self._containers: list[Node] = []
        self._handles: dict[int, ParentHandle] = {}
        self._register(root)

    def _register(self, root: Node) -> None:
        stack = [root]
        while stack:
            node = stack.pop()
            if get_child_sequence(node) is not None and id(node) not in self._handles:
                self._handles[id(node)] = ParentHandle(len(self._containers))
                self._containers.append(node)
            stack.extend(reversed(get_node_children(node)))

    def __len__(self) -> int:
        return len(self._containers)

    def __contains__(self, node: object) -> bool:
        return id(node) in self._handles

    def handle_of(self, node: Node) -> ParentHandle:
        """Return the handle of a registered container.

        Raises
        ------
        StructuralInvariantError
            If the node is not a container of this tree

        """
        try:
            return self._handles[id(node)]
        except KeyError:
            raise StructuralInvariantError(f"{type(node).__name__} is not a registered container") from None

    def container(self, handle: ParentHandle) -> Node:
        """Return the container node for ``handle``."""
        if not 0 <= handle < len(self._containers):
            raise StructuralInvariantError(f"Unknown parent handle {handle}")
        return self._containers[handle]

    def children(self, handle: ParentHandle) -> list[Node]:
        """Return the live child list of the container for ``handle``."""
        sequence = get_child_sequence(self.container(handle))
        if sequence is None:
            raise StructuralInvariantError(f"Container {handle} has no child sequence")
        return sequence

    def sequences(self) -> Iterator[tuple[ParentHandle, list[Node]]]:
        """Yield ``(handle, live child list)`` for every container in pre-order."""
        for index in range(len(self._containers)):
            handle = ParentHandle(index)
            yield handle, self.children(handle)


@dataclass(frozen=True)
class Splice:
    """Replace ``children[start:stop]`` of ``parent`` with ``insert``.

    ``expected`` holds the nodes occupying that range when the splice was
    planned; the plan refuses to apply if they have moved.

    """

    parent: ParentHandle
    start: int
    stop: int
    insert: tuple[Node, ...]
    expected: tuple[Node, ...]

    @property
    def delta(self) -> int:
        """Change in the parent's child count caused by this splice."""
        return len(self.insert) - (self.stop - self.start)


class RewritePlan:
    """Ordered collection of splices over one arena, applied in one step.

    Parameters
    ----------
    arena : NodeArena
        Arena the splices are addressed against

    """

    def __init__(self, arena: NodeArena) -> None:
        self._arena = arena
        self._splices: list[Splice] = []
        self._applied = False

    def __len__(self) -> int:
        return len(self._splices)

    def __iter__(self) -> Iterator[Splice]:
        return iter(self._splices)

    def splice(self, parent: ParentHandle, start: int, stop: int, insert: Sequence[Node]) -> Splice:
        """Plan replacing ``children[start:stop]`` with ``insert``.

        The nodes currently occupying the range are recorded for the
        identity check made by :meth:`apply`.

        Raises
        ------
        StructuralInvariantError
            If the plan was already applied or the range is invalid

        """
        if self._applied:
            raise StructuralInvariantError("Cannot add to a rewrite plan that was already applied")
        children = self._arena.children(parent)
        if not 0 <= start <= stop <= len(children):
            raise StructuralInvariantError(
                f"Splice range [{start}, {stop}) is outside container {parent} of length {len(children)}"
            )
        planned = Splice(
            parent=parent,
            start=start,
            stop=stop,
            insert=tuple(insert),
            expected=tuple(children[start:stop]),
        )
        self._splices.append(planned)
        return planned

    def replace(self, parent: ParentHandle, index: int, replacement: Node) -> Splice:
        """Plan replacing the single child at ``index``."""
        return self.splice(parent, index, index + 1, [replacement])

    def _grouped(self) -> dict[ParentHandle, list[Splice]]:
        groups: dict[ParentHandle, list[Splice]] = defaultdict(list)
        for planned in self._splices:
            groups[planned.parent].append(planned)
        for planned_list in groups.values():
            planned_list.sort(key=lambda s: (s.start, s.stop))
        return groups

    def _validate(self, groups: dict[ParentHandle, list[Splice]]) -> None:
        for parent, planned_list in groups.items():
            children = self._arena.children(parent)
            previous: Splice | None = None
            for planned in planned_list:
                if planned.stop > len(children):
                    raise StructuralInvariantError(
                        f"Splice [{planned.start}, {planned.stop}) exceeds container {parent} "
                        f"of length {len(children)}"
                    )
                if previous is not None and (planned.start < previous.stop or planned.start == previous.start):
                    raise StructuralInvariantError(
                        f"Overlapping splices in container {parent}: "
                        f"[{previous.start}, {previous.stop}) and [{planned.start}, {planned.stop})"
                    )
                current = children[planned.start : planned.stop]
                if len(current) != len(planned.expected) or any(
                    actual is not expected for actual, expected in zip(current, planned.expected)
                ):
                    raise StructuralInvariantError(
                        f"Nodes in container {parent} at [{planned.start}, {planned.stop}) "
                        "are not the nodes the splice was planned against"
                    )
                previous = planned

    def apply(self) -> dict[ParentHandle, int]:
        """Validate and apply every planned splice.

        Returns
        -------
        dict
            Net change in child count per touched parent

        Raises
        ------
        StructuralInvariantError
            If the plan was already applied, or any splice is out of range,
            overlaps another, or no longer matches the tree. Nothing is
            modified in that case.

        """
        if self._applied:
            raise StructuralInvariantError("Rewrite plan was already applied")
        groups = self._grouped()
        self._validate(groups)

        deltas: dict[ParentHandle, int] = {}
        for parent, planned_list in groups.items():
            children = self._arena.children(parent)
            expected_length = len(children) + sum(s.delta for s in planned_list)
            for planned in reversed(planned_list):
                children[planned.start : planned.stop] = list(planned.insert)
            if len(children) != expected_length:
                raise StructuralInvariantError(
                    f"Container {parent} has {len(children)} children after rewrite, expected {expected_length}"
                )
            deltas[parent] = sum(s.delta for s in planned_list)

        self._applied = True
        logger.debug("Applied %d splice(s) across %d container(s)", len(self._splices), len(groups))
        return deltas
