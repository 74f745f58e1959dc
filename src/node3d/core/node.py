"""TransformNode class for hierarchical 3D transforms."""

from __future__ import annotations

import itertools
import logging
import threading
import weakref
from collections import deque
from typing import Any, Callable, Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .rotation import (
    as_vec3,
    quat_from_axis_angle,
    quat_from_matrix,
    quat_multiply,
    quat_normalize,
    rotate_vector,
)
from .transform import Transform

logger = logging.getLogger(__name__)

# Process-wide id source. Ids start at 1 and are never reused.
_id_counter = itertools.count(1)
_id_lock = threading.Lock()

_X_AXIS = (1.0, 0.0, 0.0)
_Y_AXIS = (0.0, 1.0, 0.0)
_Z_AXIS = (0.0, 0.0, 1.0)


def _next_id() -> int:
    with _id_lock:
        return next(_id_counter)


class TransformNode:
    """A node carrying a local position, orientation and scale.

    Nodes compose into a tree: each node owns its children (keyed by id) and
    holds a non-owning reference to its parent. Local state is relative to the
    parent; the ``get_global_*`` methods walk the ancestor chain.

    Every accessor returns a copy and every mutator copies its input, so
    arrays handed out or passed in never alias node state. Mutators return
    the node itself for chaining.

    Visitors passed to the traversal methods may change local transforms but
    must not add or remove children while the walk is in progress.

    Example:
        arm = TransformNode()
        elbow = TransformNode().set_position([0.0, 1.0, 0.0])
        arm.add(elbow)
        arm.rotate_z(np.pi / 2)
        elbow.get_global_transform()
    """

    def __init__(
        self,
        position: ArrayLike | None = None,
        orientation: ArrayLike | None = None,
        scale: ArrayLike | None = None,
    ) -> None:
        self._id = _next_id()

        local = Transform()
        if position is not None:
            local.translation = as_vec3(position, "position")
        if orientation is not None:
            local.rotation = quat_normalize(orientation)
        if scale is not None:
            local.scale = as_vec3(scale, "scale")
        self._local = local
        self._matrix = np.eye(4, dtype=np.float64)

        self._parent: weakref.ref[TransformNode] | None = None
        self.children: dict[int, TransformNode] = {}

    # Identity

    @property
    def id(self) -> int:
        return self._id

    def get_id(self) -> int:
        return self._id

    def clone(self) -> TransformNode:
        """Create a new node with a fresh id and a copy of the local transform.

        Parent and children are not copied.
        """
        node = TransformNode()
        node._local = self._local.copy()
        return node

    def copy_from(self, other: TransformNode) -> TransformNode:
        """Overwrite the local transform with ``other``'s.

        Id, parent and children are left untouched.
        """
        self._local = other._local.copy()
        self._calc_transform()
        return self

    # Hierarchy

    def add(self, child: TransformNode) -> TransformNode:
        """Add a child node, keyed by its id.

        A child that already belongs to another parent is detached from it
        first. Re-adding an existing child is a no-op.

        Args:
            child: The node to add

        Returns:
            This node (for chaining)

        Raises:
            ValueError: If the child is this node or one of its ancestors
        """
        node = self
        while node is not None:
            if node is child:
                raise ValueError(
                    f"Cannot add node {child.id} to node {self.id}: it would create a cycle"
                )
            node = node.get_parent()

        previous = child.get_parent()
        if previous is not None and previous is not self:
            logger.debug("Reparenting node %d from %d to %d", child.id, previous.id, self.id)
            previous.remove(child)

        child.set_parent(self)
        self.children[child.id] = child
        logger.debug("Added node %d to node %d", child.id, self.id)
        return self

    def remove(self, child: TransformNode) -> TransformNode:
        """Remove a child node. Removing a node that is not a child is a no-op.

        The removed node's parent reference is cleared.

        Returns:
            This node (for chaining)
        """
        if self.children.pop(child.id, None) is not None:
            if child.get_parent() is self:
                child.set_parent(None)
            logger.debug("Removed node %d from node %d", child.id, self.id)
        return self

    def set_parent(self, parent: TransformNode | None) -> None:
        """Set the parent back-reference without touching any children mapping."""
        self._parent = weakref.ref(parent) if parent is not None else None

    def get_parent(self) -> TransformNode | None:
        """Return the parent node, or None if this node is an orphan."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def parent(self) -> TransformNode | None:
        return self.get_parent()

    def get_child(self, node_id: int) -> TransformNode | None:
        """Return the direct child with the given id, or None if absent."""
        return self.children.get(node_id)

    def get_children(self) -> list[TransformNode]:
        """Return a list of the direct children."""
        return list(self.children.values())

    def get_sorted_children(self, key: Callable[[TransformNode], Any]) -> list[TransformNode]:
        """Return the direct children as a list ordered by ``key``."""
        return sorted(self.children.values(), key=key)

    def sort_children(self, key: Callable[[TransformNode], Any]) -> TransformNode:
        """Reorder the children by ``key``.

        Lookup by id is unaffected; traversals visit children in the new order.

        Returns:
            This node (for chaining)
        """
        self.children = dict(sorted(self.children.items(), key=lambda item: key(item[1])))
        return self

    def find(self, node_id: int) -> TransformNode | None:
        """Find a node by id in this subtree (including this node)."""
        for node in self.iter_depth_first():
            if node.id == node_id:
                return node
        return None

    def _ancestry(self) -> list[TransformNode]:
        """Return the chain from the root down to this node."""
        chain = []
        node = self
        while node is not None:
            chain.append(node)
            node = node.get_parent()
        chain.reverse()
        return chain

    @property
    def depth(self) -> int:
        """Get the depth of this node in the hierarchy (root = 0)."""
        return len(self._ancestry()) - 1

    @property
    def root(self) -> TransformNode:
        """Get the root node of this hierarchy."""
        return self._ancestry()[0]

    def __len__(self) -> int:
        return len(self.children)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.children

    # Traversal

    def iter_depth_first(self) -> Iterator[TransformNode]:
        """Iterate over this node and all descendants in depth-first pre-order.

        Yields:
            TransformNode instances
        """
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children.values())))

    def iter_breadth_first(self) -> Iterator[TransformNode]:
        """Iterate over this node and all descendants level by level."""
        queue = deque([self])
        while queue:
            node = queue.popleft()
            yield node
            queue.extend(node.children.values())

    def traverse_depth_first(self, visit: Callable[[TransformNode], None]) -> TransformNode:
        """Call ``visit`` on this node and every descendant, depth-first."""
        for node in self.iter_depth_first():
            visit(node)
        return self

    def traverse_breadth_first(self, visit: Callable[[TransformNode], None]) -> TransformNode:
        """Call ``visit`` on this node and every descendant, breadth-first."""
        for node in self.iter_breadth_first():
            visit(node)
        return self

    # Local transform

    def _calc_transform(self) -> None:
        self._matrix = self._local.to_matrix()

    def get_transform(self) -> NDArray[np.float64]:
        """Recompute and return the local 4x4 transform matrix."""
        self._calc_transform()
        return self._matrix.copy()

    def get_local(self) -> Transform:
        return self._local.copy()

    def set_local(self, transform: Transform) -> TransformNode:
        self._local = transform.copy()
        return self

    def set_local_matrix(self, matrix: ArrayLike) -> TransformNode:
        """Replace the local transform with the decomposition of a 4x4 TRS matrix."""
        self._local = Transform.from_matrix(matrix)
        self._calc_transform()
        return self

    def get_position(self) -> NDArray[np.float64]:
        return self._local.translation.copy()

    def get_orientation(self) -> NDArray[np.float64]:
        return self._local.rotation.copy()

    def get_scale(self) -> NDArray[np.float64]:
        return self._local.scale.copy()

    def get_dist_from(self, point: ArrayLike) -> float:
        """Euclidean distance between the local position and ``point``."""
        return float(np.linalg.norm(self._local.translation - as_vec3(point, "point")))

    def _local_axis(self, basis: tuple[float, float, float]) -> NDArray[np.float64]:
        axis = rotate_vector(self._local.rotation, basis)
        return axis / np.linalg.norm(axis)

    def get_x_axis(self) -> NDArray[np.float64]:
        """Local X axis expressed in parent space."""
        return self._local_axis(_X_AXIS)

    def get_y_axis(self) -> NDArray[np.float64]:
        """Local Y axis expressed in parent space."""
        return self._local_axis(_Y_AXIS)

    def get_z_axis(self) -> NDArray[np.float64]:
        """Local Z axis expressed in parent space."""
        return self._local_axis(_Z_AXIS)

    # Global transform

    def get_global_transform(self) -> NDArray[np.float64]:
        """Compute the world transformation matrix.

        Combines transforms from the root down. Points are mapped by this
        node's local transform first, then by each ancestor's, so the result
        is ``parent_global @ local``. This deliberately is not the row-major
        ``local * parent_global`` product: with column vectors that order
        would apply the parent chain before the local transform.

        Returns:
            4x4 transformation matrix in world space
        """
        transform = np.eye(4, dtype=np.float64)
        for node in self._ancestry():
            transform = transform @ node.get_transform()
        return transform

    def get_global_translation(self) -> NDArray[np.float64]:
        """World position taken from the global transform.

        Unlike get_global_position(), this accounts for ancestor rotation and
        scale acting on the local offset.
        """
        return self.get_global_transform()[:3, 3].copy()

    def get_global_position(self) -> NDArray[np.float64]:
        """Sum of this node's local position and every ancestor's.

        This is plain vector addition: ancestor rotation and scale are ignored.
        Use get_global_translation() for the true world position.
        """
        position = np.zeros(3, dtype=np.float64)
        for node in self._ancestry():
            position += node._local.translation
        return position

    def get_global_orientation(self) -> NDArray[np.float64]:
        """Local orientation multiplied by the parent's global orientation, normalized."""
        chain = self._ancestry()
        orientation = chain[0].get_orientation()
        for node in chain[1:]:
            orientation = quat_normalize(quat_multiply(node._local.rotation, orientation))
        return orientation

    def get_global_scale(self) -> NDArray[np.float64]:
        """Component-wise product of this node's scale and every ancestor's."""
        scale = np.ones(3, dtype=np.float64)
        for node in self._ancestry():
            scale *= node._local.scale
        return scale

    # Mutators

    def set_transform(
        self,
        position: ArrayLike,
        orientation: ArrayLike,
        scale: ArrayLike,
    ) -> TransformNode:
        self._local = Transform(translation=position, rotation=orientation, scale=scale)
        return self

    def set_position(self, position: ArrayLike) -> TransformNode:
        self._local.translation = as_vec3(position, "position")
        return self

    def translate(self, offset: ArrayLike) -> TransformNode:
        self._local.translation = self._local.translation + as_vec3(offset, "offset")
        return self

    def translate_x(self, distance: float) -> TransformNode:
        """Translate along the local X axis."""
        return self.translate(self.get_x_axis() * distance)

    def translate_y(self, distance: float) -> TransformNode:
        """Translate along the local Y axis."""
        return self.translate(self.get_y_axis() * distance)

    def translate_z(self, distance: float) -> TransformNode:
        """Translate along the local Z axis."""
        return self.translate(self.get_z_axis() * distance)

    def set_orientation(self, orientation: ArrayLike) -> TransformNode:
        self._local.rotation = quat_normalize(orientation)
        return self

    def rotate_quat(self, rotation: ArrayLike) -> TransformNode:
        """Right-multiply the orientation by ``rotation``."""
        self._local.rotation = quat_normalize(quat_multiply(self._local.rotation, rotation))
        return self

    def rotate_x(self, radians: float) -> TransformNode:
        return self.rotate_quat(quat_from_axis_angle(_X_AXIS, radians))

    def rotate_y(self, radians: float) -> TransformNode:
        return self.rotate_quat(quat_from_axis_angle(_Y_AXIS, radians))

    def rotate_z(self, radians: float) -> TransformNode:
        return self.rotate_quat(quat_from_axis_angle(_Z_AXIS, radians))

    def rotate_mat(self, matrix: ArrayLike) -> TransformNode:
        """Compose the rotation block of a 3x3 or 4x4 matrix onto the orientation."""
        return self.rotate_quat(quat_from_matrix(matrix))

    def set_scale(self, scale: ArrayLike) -> TransformNode:
        self._local.scale = as_vec3(scale, "scale")
        return self

    def scale_by(self, factors: ArrayLike) -> TransformNode:
        """Multiply the scale component-wise."""
        self._local.scale = self._local.scale * as_vec3(factors, "scale factors")
        return self

    def scale_mult(self, factor: float) -> TransformNode:
        """Multiply the scale uniformly."""
        self._local.scale = self._local.scale * float(factor)
        return self

    def __repr__(self) -> str:
        children_str = f", children={len(self.children)}" if self.children else ""
        return f"TransformNode(id={self._id}{children_str})"
