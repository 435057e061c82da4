"""
Decision tree nodes.

A DecisionNode owns its children and is identified, relative to an ancestor,
by the sequence of integer actions leading to it:

    root (payload)
    ├── 1
    │   ├── 2        path [1, 2]
    │   └── 3        path [1, 3]
    └── -4           path [-4]

Sibling actions are unique; the same action may appear under different
parents. Every node in one tree carries a payload of the same schema (see
decisiontree.core.payload). Children are searched by linear scan since the
branching factor of a search tree is small.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Generic, Hashable, Iterator, List, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel, Field, PrivateAttr, StrictInt

from decisiontree.core.errors import DuplicateSiblingAction
from decisiontree.core.payload import check_payload, payload_field, produce_payload, schema_of

logger = logging.getLogger(__name__)

P = TypeVar("P")

Path = Tuple[int, ...]


def as_path(actions: Sequence[int]) -> Path:
    """Normalize a sequence of actions to a tuple, rejecting non-integers."""
    path = tuple(actions)
    for action in path:
        if isinstance(action, bool) or not isinstance(action, int):
            raise TypeError(f"Actions must be integers, got {action!r} in {list(path)!r}")
    return path


class DecisionNode(BaseModel, Generic[P]):
    """
    A node in a decision tree.

    Payload fields can be read directly from the node, so for a payload
    ``{"visits": 3}`` both ``node.payload["visits"]`` and ``node.visits``
    return 3. Node attributes take precedence over payload fields.
    """

    action: StrictInt
    children: List[DecisionNode] = Field(default_factory=list)
    payload: P
    # 0 means no reward slot has been reserved
    reward_index: int = Field(default=0, ge=0)

    _schema: Any = PrivateAttr(default=None)

    model_config = {"arbitrary_types_allowed": True}

    def model_post_init(self, __context: Any) -> None:
        self._schema = schema_of(self.payload)
        for child in self.children:
            check_payload(self._schema, child.payload)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            return super().__getattr__(name)
        payload = self.__dict__.get("payload")
        try:
            return payload_field(payload, name)
        except AttributeError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __repr__(self) -> str:
        return (
            f"DecisionNode(action={self.action}, reward_index={self.reward_index}, "
            f"num_children={len(self.children)})"
        )

    @property
    def payload_schema(self) -> Hashable:
        """Schema every payload in this subtree must match."""
        return self._schema

    @property
    def is_leaf(self) -> bool:
        return len(self.children) == 0

    @property
    def has_reward(self) -> bool:
        return self.reward_index != 0

    # =========================================================================
    # Lookup
    # =========================================================================

    def child(self, action: int) -> Optional[DecisionNode]:
        """Return the direct child reached by ``action``, or None."""
        for node in self.children:
            if node.action == action:
                return node
        return None

    def actions(self) -> List[int]:
        """Actions of the direct children, in insertion order."""
        return [node.action for node in self.children]

    def resolve(self, path: Sequence[int]) -> Optional[DecisionNode]:
        """Find the descendant reached by ``path``; the empty path is this node."""
        current: DecisionNode = self
        for action in as_path(path):
            found = current.child(action)
            if found is None:
                return None
            current = found
        return current

    def contains(self, path: Sequence[int]) -> bool:
        """Check whether the whole ``path`` can be walked from this node."""
        return self.resolve(path) is not None

    def __contains__(self, path: Sequence[int]) -> bool:
        return self.contains(path)

    # =========================================================================
    # Insertion
    # =========================================================================

    def add_child(self, child: DecisionNode, strict: bool = False) -> bool:
        """
        Attach ``child`` unless a sibling with the same action exists.

        Duplicates are ignored (returning False) so repeated insertion is
        idempotent; with ``strict=True`` they raise DuplicateSiblingAction.
        """
        check_payload(self._schema, child.payload)
        if self.child(child.action) is not None:
            if strict:
                raise DuplicateSiblingAction(child.action)
            return False
        self.children.append(child)
        return True

    def add_action(self, action: int, payload: P, reward_index: int = 0, strict: bool = False) -> bool:
        """Build a leaf child from ``action`` and ``payload`` and attach it."""
        return self.add_child(DecisionNode(action=action, payload=payload, reward_index=reward_index), strict)

    def get_or_create(self, action: int, payload_factory: Callable[[], P]) -> P:
        """
        Return the payload of the child reached by ``action``.

        If there is no such child, one is created from ``payload_factory()``
        with no reward slot. The factory is only invoked when a child is
        created, and its result is checked before the tree is touched.
        """
        existing = self.child(action)
        if existing is not None:
            return existing.payload
        payload = produce_payload(payload_factory, self._schema)
        created = DecisionNode(action=action, payload=payload)
        self.children.append(created)
        logger.debug("Created child action=%s", action)
        return payload

    def get_or_create_path(self, path: Sequence[int], payload_factory: Callable[[], P]) -> P:
        """
        Walk ``path``, creating every missing node, and return the terminal payload.

        ``payload_factory`` is invoked exactly once per call, before anything
        is created; every node created by this call gets that payload (the
        terminal node the object itself, the others deep copies). Creation
        always continues through to the end of the path.
        """
        payload = produce_payload(payload_factory, self._schema)
        return self.extend_path(path, payload).payload

    def extend_path(self, path: Sequence[int], payload: P, reward_index: int = 0) -> DecisionNode:
        """
        Walk ``path`` creating missing nodes with ``payload`` and return the terminal node.

        ``reward_index`` is stamped on the terminal node only when this call
        creates it; intermediate nodes are created without a reward slot.
        The terminal node gets ``payload`` itself and every new intermediate
        node a deep copy, so created nodes never share mutable state.
        """
        steps = as_path(path)
        check_payload(self._schema, payload)
        current: DecisionNode = self
        for depth, action in enumerate(steps):
            found = current.child(action)
            if found is None:
                terminal = depth == len(steps) - 1
                node_payload = payload if terminal else copy.deepcopy(payload)
                found = DecisionNode(action=action, payload=node_payload, reward_index=reward_index if terminal else 0)
                current.children.append(found)
                logger.debug("Created node %s at depth %d", list(steps[: depth + 1]), depth + 1)
            current = found
        return current

    # =========================================================================
    # Traversal
    # =========================================================================

    def iter_nodes(self) -> Iterator[DecisionNode]:
        """Yield every node of the subtree in pre-order, starting with this one."""
        stack: List[DecisionNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_paths(self) -> Iterator[Tuple[Path, DecisionNode]]:
        """Yield ``(path, node)`` pairs in pre-order, paths relative to this node."""
        stack: List[Tuple[Path, DecisionNode]] = [((), self)]
        while stack:
            path, node = stack.pop()
            yield path, node
            for child in reversed(node.children):
                stack.append((path + (child.action,), child))

    def height(self) -> int:
        """Number of edges on the longest downward path."""
        best = 0
        stack: List[Tuple[int, DecisionNode]] = [(0, self)]
        while stack:
            depth, node = stack.pop()
            best = max(best, depth)
            stack.extend((depth + 1, child) for child in node.children)
        return best

    def breadth(self) -> int:
        """Number of leaves in the subtree."""
        return sum(1 for node in self.iter_nodes() if node.is_leaf)

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_nodes())


DecisionNode.model_rebuild()


__all__ = ["DecisionNode", "Path", "as_path"]
