"""
AVL Tree - height-balanced binary search tree over unique, ordered elements.

Insert and remove descend recursively and hand the (possibly rotated) subtree
root back to the caller, which relinks it. Every node on the unwind path has
its height recomputed and is rebalanced, so the tree never needs parent
pointers. Heights count edges: a leaf has height 0, a missing child -1.
"""

import logging
from collections import deque
from typing import Any, Deque, Generic, Iterable, Iterator, List, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)


class Comparable(Protocol):
    def __lt__(self, other: Any) -> bool: ...

    def __gt__(self, other: Any) -> bool: ...


T = TypeVar('T', bound=Comparable)


class AVLTree(Generic[T]):
    class Node:
        def __init__(self, value: T) -> None:
            self.value: T = value
            self.left: Optional['AVLTree.Node'] = None
            self.right: Optional['AVLTree.Node'] = None
            self.height: int = 0

    def __init__(self, seed: Optional[T] = None) -> None:
        """
        Create an empty tree, or a one-element tree when a seed is given.

        Args:
            seed: Element to place at the root. None is never a valid
                element, so it means "start empty".
        """
        self._root: Optional[AVLTree.Node] = None
        self._size: int = 0
        if seed is not None:
            self._root = AVLTree.Node(seed)
            self._size = 1

    @classmethod
    def from_iterable(cls, values: Iterable[T]) -> 'AVLTree[T]':
        tree: AVLTree[T] = cls()
        for value in values:
            tree.insert(value)
        return tree

    # Balancing

    @staticmethod
    def _height(node: Optional[Node]) -> int:
        if node is None:
            return -1
        return node.height

    def _update_height(self, node: Node) -> None:
        node.height = 1 + max(self._height(node.left), self._height(node.right))

    def _rotate_right(self, node: Node) -> Node:
        pivot = node.left
        assert pivot is not None
        logger.debug("rotate right at %r", node.value)

        node.left = pivot.right
        pivot.right = node

        # node now sits below pivot, so its height must be settled first
        self._update_height(node)
        self._update_height(pivot)

        return pivot

    def _rotate_left(self, node: Node) -> Node:
        pivot = node.right
        assert pivot is not None
        logger.debug("rotate left at %r", node.value)

        node.right = pivot.left
        pivot.left = node

        self._update_height(node)
        self._update_height(pivot)

        return pivot

    def _rotate_left_right(self, node: Node) -> Node:
        assert node.left is not None
        node.left = self._rotate_left(node.left)
        return self._rotate_right(node)

    def _rotate_right_left(self, node: Node) -> Node:
        assert node.right is not None
        node.right = self._rotate_right(node.right)
        return self._rotate_left(node)

    def _balance(self, node: Node) -> Node:
        """
        Restore the AVL invariant at node, assuming both subtrees already hold it.

        Returns the root of the rebalanced subtree, which the caller must relink.
        """
        self._update_height(node)
        balance = self._height(node.left) - self._height(node.right)

        if balance > 1:
            left = node.left
            assert left is not None
            if self._height(left.right) > self._height(left.left):
                return self._rotate_left_right(node)
            return self._rotate_right(node)

        if balance < -1:
            right = node.right
            assert right is not None
            if self._height(right.left) > self._height(right.right):
                return self._rotate_right_left(node)
            return self._rotate_left(node)

        return node

    # Mutation

    def _insert(self, node: Optional[Node], value: T) -> Node:
        if node is None:
            self._size += 1
            return AVLTree.Node(value)

        if value < node.value:
            node.left = self._insert(node.left, value)
        elif value > node.value:
            node.right = self._insert(node.right, value)

        return self._balance(node)

    def insert(self, value: T) -> bool:
        """
        Add value unless an equal element is already stored.

        Returns:
            True if the tree grew, False if value was already present.
        """
        before = self._size
        self._root = self._insert(self._root, value)
        return self._size != before

    @staticmethod
    def _successor(node: Node) -> Node:
        successor = node.right
        assert successor is not None
        while successor.left is not None:
            successor = successor.left
        return successor

    def _remove(self, node: Optional[Node], value: T) -> Optional[Node]:
        if node is None:
            return None

        if value < node.value:
            node.left = self._remove(node.left, value)
        elif value > node.value:
            node.right = self._remove(node.right, value)
        elif node.left is not None and node.right is not None:
            # Take over the successor's element, then delete the successor
            # from the right subtree. The node itself stays in place.
            node.value = self._successor(node).value
            node.right = self._remove(node.right, node.value)
        elif node.left is not None:
            self._size -= 1
            node = node.left
        elif node.right is not None:
            self._size -= 1
            node = node.right
        else:
            self._size -= 1
            return None

        return self._balance(node)

    def remove(self, value: T) -> bool:
        """
        Delete the element equal to value, if any.

        Returns:
            True if an element was removed, False if value was absent.
        """
        before = self._size
        self._root = self._remove(self._root, value)
        return self._size != before

    def clear(self) -> None:
        logger.debug("clearing %d elements", self._size)
        self._root = None
        self._size = 0

    # Lookup

    def contains(self, value: T) -> bool:
        node = self._root
        while node is not None:
            if value < node.value:
                node = node.left
            elif value > node.value:
                node = node.right
            else:
                return True
        return False

    def min(self) -> Optional[T]:
        if self._root is None:
            return None
        node = self._root
        while node.left is not None:
            node = node.left
        return node.value

    def max(self) -> Optional[T]:
        if self._root is None:
            return None
        node = self._root
        while node.right is not None:
            node = node.right
        return node.value

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def height(self) -> int:
        """Height of the root in edges; -1 for an empty tree."""
        return self._height(self._root)

    # Traversals

    def in_order(self) -> List[T]:
        result: List[T] = []
        stack: List[AVLTree.Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            result.append(node.value)
            node = node.right
        return result

    def pre_order(self) -> List[T]:
        result: List[T] = []
        if self._root is None:
            return result
        stack: List[AVLTree.Node] = [self._root]
        while stack:
            node = stack.pop()
            result.append(node.value)
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)
        return result

    def post_order(self) -> List[T]:
        # Node-right-left pre-order, reversed
        result: List[T] = []
        if self._root is None:
            return result
        stack: List[AVLTree.Node] = [self._root]
        while stack:
            node = stack.pop()
            result.append(node.value)
            if node.left is not None:
                stack.append(node.left)
            if node.right is not None:
                stack.append(node.right)
        result.reverse()
        return result

    def level_order(self) -> List[List[T]]:
        """
        Group elements by depth using a breadth-first walk.

        Returns:
            One list per level, root level first, each ordered left to right.
            An empty tree yields an empty list.
        """
        levels: List[List[T]] = []
        if self._root is None:
            return levels
        queue: Deque[AVLTree.Node] = deque([self._root])
        while queue:
            level: List[T] = []
            for _ in range(len(queue)):
                node = queue.popleft()
                level.append(node.value)
                if node.left is not None:
                    queue.append(node.left)
                if node.right is not None:
                    queue.append(node.right)
            levels.append(level)
        return levels

    # Copying and validation

    def _clone(self, node: Optional[Node]) -> Optional[Node]:
        if node is None:
            return None
        twin = AVLTree.Node(node.value)
        twin.height = node.height
        twin.left = self._clone(node.left)
        twin.right = self._clone(node.right)
        return twin

    def copy(self) -> 'AVLTree[T]':
        """Independent tree with the same elements arranged in the same shape."""
        clone: AVLTree[T] = AVLTree()
        clone._root = self._clone(self._root)
        clone._size = self._size
        return clone

    def _is_balanced(self, node: Optional[Node]) -> bool:
        if node is None:
            return True
        if abs(self._height(node.left) - self._height(node.right)) > 1:
            return False
        return self._is_balanced(node.left) and self._is_balanced(node.right)

    def is_balanced(self) -> bool:
        return self._is_balanced(self._root)

    def _check(self, node: Optional[Node], low: Optional[T], high: Optional[T]) -> Optional[int]:
        # Node count of a valid subtree, None as soon as anything is off
        if node is None:
            return 0
        if low is not None and not low < node.value:
            return None
        if high is not None and not node.value < high:
            return None
        left = self._check(node.left, low, node.value)
        right = self._check(node.right, node.value, high)
        if left is None or right is None:
            return None
        if node.height != 1 + max(self._height(node.left), self._height(node.right)):
            return None
        if abs(self._height(node.left) - self._height(node.right)) > 1:
            return None
        return left + right + 1

    def is_valid(self) -> bool:
        """
        Check every structural invariant: BST order, stored heights, AVL
        balance, and the cached element count.
        """
        return self._check(self._root, None, None) == self._size

    def __len__(self) -> int:
        return self._size

    def __contains__(self, value: T) -> bool:
        return self.contains(value)

    def __iter__(self) -> Iterator[T]:
        return iter(self.in_order())

    def __repr__(self) -> str:
        return f"AVLTree({self.in_order()})"

    def __str__(self) -> str:
        return f"AVLTree(size={self._size}, height={self.height()})"
