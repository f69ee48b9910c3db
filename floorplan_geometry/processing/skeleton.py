"""
Straight skeleton of simple polygons.

The skeleton is computed with a wavefront simulation: every edge of the
polygon moves inward at unit speed, polygon vertices slide along the
bisectors of their two edges, and the wavefront changes shape at two
kinds of events:

- Edge event: a wavefront edge shrinks to zero length; its two vertices
  merge into one.
- Split event: a reflex vertex runs into a non-adjacent wavefront edge;
  the wavefront ring splits in two. When the reflex vertex lands on a
  wavefront vertex (vertex event), the split leaves folded spikes that
  are collapsed before the next event.
- Collapse: a ring whose area has shrunk to zero is finished along its
  own segments; this covers arms of equal width closing at once.

Each event records skeleton nodes and arcs (vertex trajectories). Arcs
are tagged with the two polygon edges whose faces they separate, which
makes extracting the face of each edge a walk along arcs carrying its
tag.

Input rings must be simple; holes are not supported (room and building
footprints are single contours).
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple
import logging

from shapely.geometry import Polygon as ShapelyPolygon

from ..config import SKELETON_NODE_EPSILON, SKELETON_AREA_TOLERANCE
from ..models.geometry import Point2D, BBox, signed_ring_area
from ..utils.polygon_utils import (
    normalize_winding,
    is_degenerate,
    remove_collinear_points,
)

logger = logging.getLogger(__name__)


class SkeletonError(Exception):
    """Raised when the straight skeleton cannot be computed."""
    pass


@dataclass
class SkeletonFace:
    """
    Region of the polygon swept by one edge.

    Attributes:
        edge_index: Index of the polygon edge (from vertex i to i + 1)
        polygon: CCW ring starting with the edge's two endpoints
    """
    edge_index: int
    polygon: List[Point2D]

    @property
    def edge_start(self) -> Point2D:
        return self.polygon[0]

    @property
    def edge_end(self) -> Point2D:
        return self.polygon[1]


@dataclass
class StraightSkeleton:
    """
    Result of compute_straight_skeleton().

    Attributes:
        contour: Normalized polygon the skeleton was computed for
        faces: One face per contour edge, in edge order
        nodes: Skeleton node positions (contour vertices first)
        node_heights: Wavefront time (inset distance) of each node
        arcs: Node index pairs of the skeleton arcs
    """
    contour: List[Point2D]
    faces: List[SkeletonFace] = field(default_factory=list)
    nodes: List[Point2D] = field(default_factory=list)
    node_heights: List[float] = field(default_factory=list)
    arcs: List[Tuple[int, int]] = field(default_factory=list)

    def max_height(self) -> float:
        """Largest inset distance reached by the wavefront."""
        return max(self.node_heights) if self.node_heights else 0.0


@dataclass
class _Edge:
    start: Point2D
    end: Point2D
    direction: Point2D
    normal: Point2D  # unit normal pointing into the polygon


@dataclass
class _Vertex:
    position: Point2D
    velocity: Point2D
    left: int  # edge arriving at the vertex
    right: int  # edge leaving the vertex
    node: int  # skeleton node the vertex started from


def compute_straight_skeleton(
    contour: List[Point2D],
    node_epsilon: float = SKELETON_NODE_EPSILON
) -> StraightSkeleton:
    """
    Compute the straight skeleton of a simple polygon.

    Args:
        contour: Polygon ring in any winding
        node_epsilon: Distance under which skeleton nodes are merged

    Returns:
        StraightSkeleton with one face per edge of the normalized contour

    Raises:
        SkeletonError: On degenerate or self-intersecting input, or when
            the faces do not tile the polygon
    """
    ring = remove_collinear_points(normalize_winding(contour))
    if is_degenerate(ring):
        raise SkeletonError(f"Degenerate contour ({len(ring)} points)")

    if not ShapelyPolygon([(p.x, p.y) for p in ring]).is_valid:
        raise SkeletonError("Contour is self-intersecting")

    builder = _SkeletonBuilder(ring, node_epsilon)
    builder.run()
    skeleton = builder.result()

    polygon_area = signed_ring_area(ring)
    faces_area = sum(signed_ring_area(face.polygon) for face in skeleton.faces)
    if abs(faces_area - polygon_area) > SKELETON_AREA_TOLERANCE * polygon_area:
        raise SkeletonError(
            f"Skeleton faces cover {faces_area:.4f} of {polygon_area:.4f} polygon area"
        )

    return skeleton


class _SkeletonBuilder:
    """Wavefront simulation state for one polygon."""

    def __init__(self, ring: List[Point2D], node_epsilon: float):
        self.ring = ring
        scale = max(BBox.from_points(ring).size, 1.0)
        self.eps = 1e-9 * scale
        self.flat_tolerance = 1e-7 * scale
        self.node_epsilon = node_epsilon
        self.max_events = 10 * len(ring) * len(ring) + 100

        n = len(ring)
        self.edges: List[_Edge] = []
        for i in range(n):
            start = ring[i]
            end = ring[(i + 1) % n]
            direction = (end - start).normalized()
            self.edges.append(_Edge(start, end, direction, direction.left_normal()))

        self.nodes: List[Point2D] = []
        self.node_heights: List[float] = []
        self.arcs: Dict[Tuple[int, int, FrozenSet[int]], None] = {}

        for p in ring:
            self.nodes.append(p)
            self.node_heights.append(0.0)

    def run(self) -> None:
        n = len(self.ring)
        initial = [
            self._make_vertex(self.ring[i], (i - 1) % n, i, i)
            for i in range(n)
        ]

        stack: List[Tuple[List[_Vertex], float]] = [(initial, 0.0)]
        events = 0

        while stack:
            wavefront, time = stack.pop()

            while True:
                if len(wavefront) <= 2 or self._is_flat(wavefront):
                    self._finish(wavefront, time)
                    break

                if self._collapse_spike(wavefront, time):
                    continue

                events += 1
                if events > self.max_events:
                    raise SkeletonError(f"No convergence after {self.max_events} events")

                event = self._next_event(wavefront, time)
                if event is None:
                    raise SkeletonError(
                        f"Wavefront of {len(wavefront)} vertices stalled at t={time:.4f}"
                    )

                tau, kind, i, j = event
                for v in wavefront:
                    v.position = v.position + v.velocity * tau
                time += tau

                if kind == 'edge':
                    self._edge_event(wavefront, i, time)
                else:
                    stack.extend(self._split_event(wavefront, i, j, time))
                    break

    def result(self) -> StraightSkeleton:
        arcs = [(a, b) for a, b, _ in self.arcs]
        return StraightSkeleton(
            contour=self.ring,
            faces=[self._face(i) for i in range(len(self.ring))],
            nodes=list(self.nodes),
            node_heights=list(self.node_heights),
            arcs=arcs,
        )

    # -------------------------------------------------------------------------
    # Wavefront events
    # -------------------------------------------------------------------------

    def _next_event(
        self,
        wavefront: List[_Vertex],
        time: float
    ) -> Optional[Tuple[float, str, int, int]]:
        """Earliest event as (tau, kind, i, j); edge events win ties."""
        best: Optional[Tuple[float, str, int, int]] = None
        n = len(wavefront)

        def consider(tau: float, kind: str, i: int, j: int) -> None:
            nonlocal best
            if best is None or tau < best[0] - self.eps:
                best = (tau, kind, i, j)
            elif abs(tau - best[0]) <= self.eps and kind == 'edge' and best[1] == 'split':
                best = (tau, kind, i, j)

        for i in range(n):
            a = wavefront[i]
            b = wavefront[(i + 1) % n]
            direction = self.edges[a.right].direction
            length = (b.position - a.position).dot(direction)
            rate = (b.velocity - a.velocity).dot(direction)

            if length <= self.eps:
                if rate <= self.eps:
                    consider(0.0, 'edge', i, -1)
            elif rate < -1e-12:
                consider(-length / rate, 'edge', i, -1)

        for i in range(n):
            r = wavefront[i]
            if not self._is_reflex(r):
                continue

            for j in range(n):
                k = (j + 1) % n
                if j == i or k == i:
                    continue
                c = wavefront[j]
                d = wavefront[k]
                e = c.right
                if e == r.left or e == r.right:
                    continue

                edge = self.edges[e]
                gap = (r.position - edge.start).dot(edge.normal) - time
                closing = 1.0 - r.velocity.dot(edge.normal)
                if closing <= 1e-12 or gap < -self.eps:
                    continue

                tau = max(gap, 0.0) / closing
                hit = r.position + r.velocity * tau
                c_at = c.position + c.velocity * tau
                d_at = d.position + d.velocity * tau
                span = (d_at - c_at).dot(edge.direction)
                if span <= self.eps:
                    continue

                s = (hit - c_at).dot(edge.direction) / span
                tolerance = self.eps / span
                if -tolerance <= s <= 1.0 + tolerance:
                    consider(tau, 'split', i, j)

        return best

    def _edge_event(self, wavefront: List[_Vertex], i: int, time: float) -> None:
        n = len(wavefront)
        a = wavefront[i]
        b = wavefront[(i + 1) % n]

        meet = Point2D(
            (a.position.x + b.position.x) / 2.0,
            (a.position.y + b.position.y) / 2.0
        )
        node = self._node(meet, time)
        self._arc(a.node, node, a.left, a.right)
        self._arc(b.node, node, b.left, b.right)

        merged = self._make_vertex(meet, a.left, b.right, node)
        wavefront[i] = merged
        del wavefront[(i + 1) % n]

    def _split_event(
        self,
        wavefront: List[_Vertex],
        i: int,
        j: int,
        time: float
    ) -> List[Tuple[List[_Vertex], float]]:
        n = len(wavefront)
        r = wavefront[i]
        e = wavefront[j].right

        node = self._node(r.position, time)
        self._arc(r.node, node, r.left, r.right)

        first = [self._make_vertex(r.position, r.left, e, node)]
        first.extend(_cyclic_slice(wavefront, (j + 1) % n, (i - 1) % n))

        second = [self._make_vertex(r.position, e, r.right, node)]
        second.extend(_cyclic_slice(wavefront, (i + 1) % n, j))

        return [(first, time), (second, time)]

    def _collapse_spike(self, wavefront: List[_Vertex], time: float) -> bool:
        """
        Remove one fold of zero width from the wavefront.

        A fold is a vertex b whose neighbors a and c lie back along the
        same line: edges b.left and b.right have met over the shorter of
        the two segments. The arc from b to the nearer neighbor separates
        their faces. Returns True when a fold was removed.
        """
        n = len(wavefront)
        if n <= 3:
            return False

        for i in range(n):
            ia = (i - 1) % n
            ic = (i + 1) % n
            a = wavefront[ia]
            b = wavefront[i]
            c = wavefront[ic]

            into = b.position - a.position
            out = c.position - b.position
            length_in = into.length()
            length_out = out.length()
            if length_in <= self.eps or length_out <= self.eps:
                continue
            if into.dot(out) >= 0 or abs(into.cross(out)) > self.eps * max(length_in, length_out):
                continue

            tip = self._node(b.position, time)
            self._arc(b.node, tip, b.left, b.right)

            if abs(length_in - length_out) <= self.eps:
                node = self._node(a.position, time)
                self._arc(tip, node, b.left, b.right)
                self._arc(a.node, node, a.left, a.right)
                self._arc(c.node, node, c.left, c.right)
                merged = self._make_vertex(a.position, a.left, c.right, node)
                kept = [
                    merged if k == ia else wavefront[k]
                    for k in range(n) if k not in (i, ic)
                ]
            elif length_out < length_in:
                node = self._node(c.position, time)
                self._arc(tip, node, b.left, b.right)
                self._arc(c.node, node, c.left, c.right)
                folded = self._make_vertex(c.position, b.left, c.right, node)
                kept = [
                    folded if k == ic else wavefront[k]
                    for k in range(n) if k != i
                ]
            else:
                node = self._node(a.position, time)
                self._arc(tip, node, b.left, b.right)
                self._arc(a.node, node, a.left, a.right)
                folded = self._make_vertex(a.position, a.left, b.right, node)
                kept = [
                    folded if k == ia else wavefront[k]
                    for k in range(n) if k != i
                ]

            wavefront[:] = kept
            return True

        return False

    def _finish(self, wavefront: List[_Vertex], time: float) -> None:
        """
        Close a collapsed wavefront.

        Rings of three or more vertices are flat here; each of their
        segments bounds the face of the edge it lies on.
        """
        end_nodes = []
        for v in wavefront:
            node = self._node(v.position, time)
            self._arc(v.node, node, v.left, v.right)
            end_nodes.append(node)

        if len(wavefront) == 2:
            first = wavefront[0]
            self._arc(end_nodes[0], end_nodes[1], first.left, first.right)
        elif len(wavefront) > 2:
            for k, v in enumerate(wavefront):
                self._arc(end_nodes[k], end_nodes[(k + 1) % len(wavefront)], v.right, v.right)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _make_vertex(self, position: Point2D, left: int, right: int, node: int) -> _Vertex:
        n_left = self.edges[left].normal
        n_right = self.edges[right].normal
        denominator = 1.0 + n_left.dot(n_right)
        if denominator > 1e-9:
            velocity = (n_left + n_right) * (1.0 / denominator)
        else:
            # Antiparallel edges: the wavefront is already folded flat here
            velocity = Point2D(0.0, 0.0)
        return _Vertex(position, velocity, left, right, node)

    def _is_flat(self, wavefront: List[_Vertex]) -> bool:
        ring = [v.position for v in wavefront]
        perimeter = sum(
            ring[k].distance_to(ring[(k + 1) % len(ring)]) for k in range(len(ring))
        )
        return abs(signed_ring_area(ring)) <= self.flat_tolerance * perimeter

    def _is_reflex(self, vertex: _Vertex) -> bool:
        d_left = self.edges[vertex.left].direction
        d_right = self.edges[vertex.right].direction
        return d_left.cross(d_right) < -1e-12

    def _node(self, position: Point2D, time: float) -> int:
        for index, existing in enumerate(self.nodes):
            if existing.distance_to(position) <= self.node_epsilon:
                return index
        self.nodes.append(position)
        self.node_heights.append(time)
        return len(self.nodes) - 1

    def _arc(self, a: int, b: int, tag_a: int, tag_b: int) -> None:
        if a == b:
            return
        key = (min(a, b), max(a, b), frozenset((tag_a, tag_b)))
        self.arcs[key] = None

    def _face(self, edge_index: int) -> SkeletonFace:
        """Walk arcs tagged with edge_index from the edge end back to its start."""
        n = len(self.ring)
        start_node = edge_index
        end_node = (edge_index + 1) % n

        adjacency: Dict[int, List[Tuple[int, int]]] = {}
        for arc_id, (a, b, tags) in enumerate(self.arcs):
            if edge_index not in tags:
                continue
            adjacency.setdefault(a, []).append((b, arc_id))
            adjacency.setdefault(b, []).append((a, arc_id))

        polygon = [self.nodes[start_node], self.nodes[end_node]]
        used = set()
        current = end_node

        for _ in range(len(self.arcs) + 1):
            options = [
                (other, arc_id)
                for other, arc_id in adjacency.get(current, [])
                if arc_id not in used
            ]
            if not options:
                break

            closing = [option for option in options if option[0] == start_node]
            other, arc_id = closing[0] if closing else options[0]
            used.add(arc_id)

            if other == start_node:
                return SkeletonFace(edge_index, polygon)

            polygon.append(self.nodes[other])
            current = other

        raise SkeletonError(f"Face of edge {edge_index} is not closed")


def _cyclic_slice(items: List[_Vertex], start: int, stop: int) -> List[_Vertex]:
    """Items from index start to stop inclusive, wrapping around."""
    result = []
    k = start
    while True:
        result.append(items[k])
        if k == stop:
            break
        k = (k + 1) % len(items)
    return result
