from __future__ import annotations

import json
from collections import Counter
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from .models import BoundingBox, Edge, Face, Orientation, Vertex, edge_key


class HexLattice:
    """Vertex/edge graph of a hex grid, plus the cells that produced it.

    Edges are keyed by their canonical edge key; dict order is discovery
    order.  The maps are read-only views, so one lattice can be shared
    between designs; a change of dimensions or orientation builds a new
    one.
    """

    VERSION = "1.0"

    def __init__(
        self,
        vertices: Iterable[Vertex],
        edges: Iterable[Edge],
        faces: Iterable[Face] = (),
        metadata: Optional[dict] = None,
    ) -> None:
        self.vertices: Mapping[str, Vertex] = MappingProxyType({v.id: v for v in vertices})
        self.edges: Mapping[str, Edge] = MappingProxyType({e.id: e for e in edges})
        self.faces: Mapping[str, Face] = MappingProxyType({f.id: f for f in faces})
        self.metadata: Mapping = MappingProxyType(dict(metadata or {}))
        self._edge_keys = frozenset(self.edges)

    @property
    def orientation(self) -> Orientation:
        return Orientation.parse(self.metadata.get("orientation", Orientation.POINTY))

    # ── Edge-set helpers ────────────────────────────────────────────

    def edge_keys(self) -> frozenset[str]:
        return self._edge_keys

    def has_edge(self, key: str) -> bool:
        return key in self._edge_keys

    def filter_edge_keys(self, keys: Iterable[str]) -> List[str]:
        """Keep the keys that exist in this lattice, first-seen order, no repeats.

        Unknown keys (from an earlier, differently sized grid) are dropped.
        """
        return [key for key in dict.fromkeys(keys) if key in self._edge_keys]

    def vertex_degrees(self, keys: Optional[Iterable[str]] = None) -> Dict[str, int]:
        """Incident edge count per vertex over *keys* (all edges by default).

        Vertices with no counted edge are omitted.
        """
        if keys is None:
            selected: Iterable[Edge] = self.edges.values()
        else:
            wanted = set(keys)
            selected = (e for e in self.edges.values() if e.id in wanted)
        degrees: Counter[str] = Counter()
        for edge in selected:
            a, b = edge.vertex_ids
            degrees[a] += 1
            degrees[b] += 1
        return dict(degrees)

    def boundary_edges(self) -> List[Edge]:
        """Return edges belonging to a single cell."""
        return [e for e in self.edges.values() if len(e.face_ids) < 2]

    def bounds(self, vertex_ids: Optional[Iterable[str]] = None) -> Optional[BoundingBox]:
        """Axis-aligned box around *vertex_ids* (every vertex by default)."""
        ids = self.vertices.keys() if vertex_ids is None else vertex_ids
        points = [self.vertices[vid] for vid in ids if vid in self.vertices]
        if not points:
            return None
        xs = [v.x for v in points]
        ys = [v.y for v in points]
        return BoundingBox(min(xs), min(ys), max(xs), max(ys))

    def validate(self, strict: bool = False) -> list[str]:
        """Check the lattice is a closed hex tiling; returns error strings.

        Every cell must trace a ring of six corners whose consecutive pairs
        are its edges, and every edge must name existing endpoints and be
        shared by one or two cells that list it back.  *strict* adds the
        corner-count and degree limits of a hex grid.
        """
        errors: list[str] = []

        for key, edge in self.edges.items():
            missing = [vid for vid in edge.vertex_ids if vid not in self.vertices]
            if missing:
                errors.append(f"Edge {key} has unknown endpoints {missing}")
            if self.faces and not 1 <= len(edge.face_ids) <= 2:
                errors.append(f"Edge {key} borders {len(edge.face_ids)} cells")
            for face_id in edge.face_ids:
                face = self.faces.get(face_id)
                if face is None or key not in face.edge_ids:
                    errors.append(f"Edge {key} lists cell {face_id}, which does not list it back")

        for face in self.faces.values():
            ring = face.vertex_ids
            for i, key in enumerate(face.edge_ids):
                expected = edge_key(ring[i], ring[(i + 1) % len(ring)]) if i < len(ring) else None
                if key != expected:
                    errors.append(f"Cell {face.id} side {i} is {key}, corners give {expected}")
                elif key not in self.edges:
                    errors.append(f"Cell {face.id} side {key} is not a lattice edge")
            if strict:
                errors.extend(face.validate_polygon())

        if strict:
            errors.extend(
                f"Vertex {vid} has degree {degree}"
                for vid, degree in self.vertex_degrees().items()
                if degree > 3
            )

        return errors

    # ── Serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict:
        metadata = dict(self.metadata)
        if isinstance(metadata.get("orientation"), Orientation):
            metadata["orientation"] = metadata["orientation"].value
        return {
            "version": self.VERSION,
            "metadata": metadata,
            "vertices": [
                {"id": v.id, "position": {"x": v.x, "y": v.y}}
                for v in self.vertices.values()
            ],
            "edges": [
                {"id": e.id, "vertices": list(e.vertex_ids), "faces": list(e.face_ids)}
                for e in self.edges.values()
            ],
            "faces": [
                {
                    "id": f.id,
                    "col": f.col,
                    "row": f.row,
                    "vertices": list(f.vertex_ids),
                    "edges": list(f.edge_ids),
                }
                for f in self.faces.values()
            ],
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "HexLattice":
        vertices = [
            Vertex(v["id"], v["position"]["x"], v["position"]["y"])
            for v in payload.get("vertices", [])
        ]
        edges = [
            Edge(e["id"], tuple(e["vertices"]), tuple(e.get("faces", [])))
            for e in payload.get("edges", [])
        ]
        faces = [
            Face(
                id=f["id"],
                col=f.get("col", 0),
                row=f.get("row", 0),
                vertex_ids=tuple(f.get("vertices", [])),
                edge_ids=tuple(f.get("edges", [])),
            )
            for f in payload.get("faces", [])
        ]
        return cls(vertices, edges, faces, payload.get("metadata", {}))

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_json(cls, json_data: str) -> "HexLattice":
        return cls.from_dict(json.loads(json_data))

    def __repr__(self) -> str:
        return (
            f"HexLattice({len(self.vertices)} vertices, {len(self.edges)} edges, "
            f"{len(self.faces)} cells, {self.orientation.value})"
        )
