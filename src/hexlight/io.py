from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Union

import jsonschema

from .design import Design
from .lattice import HexLattice
from .models import MirrorMode

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class DesignError(ValueError):
    """A persisted design or design library could not be read."""


DESIGN_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "hexlight design",
    "type": "object",
    "properties": {
        "widthInches": {"type": "number", "exclusiveMinimum": 0},
        "lengthInches": {"type": "number", "exclusiveMinimum": 0},
        "pointSpacing": {"type": "number", "exclusiveMinimum": 0},
        "pointyTop": {"type": "boolean"},
        "mirrorMode": {"enum": [mode.value for mode in MirrorMode]},
        "enabledEdges": {"type": "array", "items": {"type": "string"}},
        "maxSegments": {"type": "integer", "minimum": 0},
        "maxJoints2": {"type": "integer", "minimum": 0},
        "maxJoints3": {"type": "integer", "minimum": 0},
        "savedAt": {"type": "string"},
    },
}

LIBRARY_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "hexlight design library",
    "type": "object",
    "additionalProperties": DESIGN_SCHEMA,
}


def validate_design_payload(payload: Any) -> None:
    """Raise :class:`DesignError` unless *payload* matches :data:`DESIGN_SCHEMA`."""
    try:
        jsonschema.validate(instance=payload, schema=DESIGN_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise DesignError(f"Invalid design: {exc.message}") from exc


def design_from_payload(payload: Any) -> Design:
    validate_design_payload(payload)
    return Design.from_dict(payload)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DesignError(f"{path} is not valid JSON: {exc}") from exc


def load_design(path: PathLike) -> Design:
    path = Path(path)
    design = design_from_payload(_read_json(path))
    logger.debug("loaded design from %s (%d edges)", path, len(design.enabled_edges))
    return design


def save_design(design: Design, path: PathLike) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(design.to_dict(), indent=2), encoding="utf-8")
    logger.debug("saved design to %s", path)
    return path


# ═══════════════════════════════════════════════════════════════════
# Named design library
# ═══════════════════════════════════════════════════════════════════


def load_designs(path: PathLike) -> Dict[str, Design]:
    """Return every named design in a library file (empty if it does not exist)."""
    return {name: Design.from_dict(payload) for name, payload in _load_library(path).items()}


def _load_library(path: PathLike) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        return {}
    payload = _read_json(path)
    try:
        jsonschema.validate(instance=payload, schema=LIBRARY_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise DesignError(f"Invalid design library {path}: {exc.message}") from exc
    return payload


def _write_library(path: Path, library: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(library, indent=2, sort_keys=True), encoding="utf-8")


def save_named_design(path: PathLike, name: str, design: Design) -> Path:
    """Store *design* under *name*, replacing any design with that name."""
    path = Path(path)
    library = _load_library(path)
    entry = design.to_dict()
    entry["savedAt"] = datetime.now(timezone.utc).isoformat()
    library[name] = entry
    _write_library(path, library)
    logger.debug("saved design %r to %s", name, path)
    return path


def load_named_design(path: PathLike, name: str) -> Design:
    library = _load_library(path)
    if name not in library:
        raise DesignError(f"No design named {name!r} in {path}")
    return Design.from_dict(library[name])


def delete_design(path: PathLike, name: str) -> bool:
    """Remove *name* from the library; return ``False`` if it was not there."""
    path = Path(path)
    library = _load_library(path)
    if name not in library:
        return False
    del library[name]
    _write_library(path, library)
    return True


# ═══════════════════════════════════════════════════════════════════
# Lattice export
# ═══════════════════════════════════════════════════════════════════


def load_lattice(path: PathLike) -> HexLattice:
    return HexLattice.from_json(Path(path).read_text(encoding="utf-8"))


def save_lattice(lattice: HexLattice, path: PathLike) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(lattice.to_json(), encoding="utf-8")
