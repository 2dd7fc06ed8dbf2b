"""
Depth-first traversal of a program subtree.

Children are read one collection at a time, in each level's sibling order,
so a walk never holds more than one level's siblings per ancestor in memory.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, List, Optional

from application.ports import Document, DocumentStore
from domain import paths
from domain.models import EntityKind

logger = logging.getLogger(__name__)


class TraversalOrder(str, Enum):
    PRE = "pre"  # parent before its children (copying)
    POST = "post"  # children before their parent (deleting)


@dataclass
class TreeNode:
    """A document reached during a walk, with the node it was reached from."""

    kind: EntityKind
    document: Document
    parent: Optional["TreeNode"] = field(default=None, repr=False)
    depth: int = 0

    @property
    def id(self) -> str:
        return self.document.id

    @property
    def path(self) -> str:
        return self.document.path


class TreeTraverser:
    """
    Walks the descendants of a Week, Workout or Exercise.

    Usage:
        >>> traverser = TreeTraverser(store)
        >>> async for node in traverser.walk(week_doc, EntityKind.WEEK):
        ...     print(node.depth, node.kind, node.id)
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def children(self, parent_path: str, child_kind: EntityKind) -> List[Document]:
        """Direct children of ``parent_path`` in sibling order."""
        return await self._store.query(
            paths.child_collection(parent_path, child_kind),
            order_by=child_kind.order_field,
        )

    async def walk(
        self,
        root: Document,
        root_kind: EntityKind,
        order: TraversalOrder = TraversalOrder.PRE,
        max_depth: Optional[int] = None,
    ) -> AsyncIterator[TreeNode]:
        """
        Yield every descendant of ``root`` depth-first, down to the Set level.

        The root itself is not yielded; depth-1 nodes have a TreeNode for the
        root as their parent.

        Args:
            root: Root document of the subtree
            root_kind: Kind of the root document
            order: PRE yields a node before its children, POST after them
            max_depth: Stop descending below this depth (None = no limit)

        Raises:
            Whatever the store raises while reading a level.
        """
        root_node = TreeNode(kind=root_kind, document=root, depth=0)
        async for node in self._descend(root_node, order, max_depth):
            yield node

    async def _descend(
        self,
        parent: TreeNode,
        order: TraversalOrder,
        max_depth: Optional[int],
    ) -> AsyncIterator[TreeNode]:
        child_kind = parent.kind.child
        if child_kind is None:
            return
        depth = parent.depth + 1
        if max_depth is not None and depth > max_depth:
            return

        documents = await self.children(parent.path, child_kind)
        logger.debug("Read %d %s(s) under %s", len(documents), child_kind.value, parent.path)

        for document in documents:
            node = TreeNode(kind=child_kind, document=document, parent=parent, depth=depth)
            if order is TraversalOrder.PRE:
                yield node
            async for descendant in self._descend(node, order, max_depth):
                yield descendant
            if order is TraversalOrder.POST:
                yield node
