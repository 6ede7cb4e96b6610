"""FastAPI router for keytree.

Exposes REST endpoints for key generation, raw ID normalization, tree
building, root detection, edit planning and collection analysis.
Designed to be mounted at /api/ by the parent application.

Every endpoint is a pure computation over the request body; nothing is
stored between requests. Handlers are synchronous and FastAPI runs them
in its thread pool.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from keytree import __version__
from keytree.config import DEFAULT_CONFIG, KeyConfig
from keytree.core.item import Item, KeyPath
from keytree.hierarchy.analyzer import HierarchyAnalyzer
from keytree.hierarchy.builder import HierarchyBuilder
from keytree.hierarchy.editing import EditAction, EditPlanner, NodeNotFoundError
from keytree.keys.sequencer import KeySequencer, KeySpaceExhaustedError

router = APIRouter()


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class ItemModel(BaseModel):
    """A keyed item as sent by a client."""

    key: str = Field(..., min_length=1)
    id: str | None = None
    title: str = ""
    source: str | None = None
    payload: Any = None

    def to_item(self) -> Item:
        return Item(
            id=self.id or Item.generate_id(),
            key_path=KeyPath.parse(self.key),
            title=self.title,
            source=self.source,
            payload=self.payload,
        )


class GenerateRequest(BaseModel):
    """Request body for generating a segment between two neighbours."""

    prev: str | None = None
    next: str | None = None
    strict_floor: bool = False


class NormalizeRequest(BaseModel):
    """Request body for normalizing a raw ID."""

    raw: str = Field(..., min_length=1)


class BuildRequest(BaseModel):
    """Request body for building the subtree under one key."""

    root: str = Field(..., min_length=1)
    items: list[ItemModel] = Field(default_factory=list)


class ItemsRequest(BaseModel):
    """Request body carrying a flat item collection."""

    items: list[ItemModel] = Field(default_factory=list)


class PlanRequest(BaseModel):
    """Request body for planning an insertion relative to a node."""

    items: list[ItemModel] = Field(default_factory=list)
    target: str = Field(..., min_length=1)
    action: str = Field(..., pattern="^(before|after|child)$")


def _to_items(models: list[ItemModel]) -> list[Item]:
    return [model.to_item() for model in models]


def _find_root(key: str, items: list[Item]) -> Item:
    """Return the first item with *key*, or raise 404."""
    key_path = KeyPath.parse(key)
    for item in items:
        if item.key_path == key_path:
            return item
    raise HTTPException(status_code=404, detail=f"No item with key {key_path.joined}")


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health")
def health_check() -> dict[str, Any]:
    """Return service health status."""
    return {
        "status": "ok",
        "service": "keytree",
        "version": __version__,
        "config": DEFAULT_CONFIG.to_dict(),
    }


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


@router.post("/keys/generate")
def generate_segment(request: GenerateRequest) -> dict[str, Any]:
    """Generate a segment between two neighbour segments.

    Returns:
        Dict with the new segment.
    """
    sequencer = KeySequencer(KeyConfig(strict_floor=request.strict_floor))
    try:
        segment = sequencer.generate(request.prev, request.next)
    except KeySpaceExhaustedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return {"segment": segment, "prev": request.prev, "next": request.next}


@router.post("/keys/normalize")
def normalize_key(request: NormalizeRequest) -> dict[str, Any]:
    """Normalize a raw ID into padded segments and its joined form."""
    key_path = KeyPath.parse(request.raw)
    if not key_path.segments:
        raise HTTPException(status_code=422, detail="Raw ID contains no segments")
    return {"segments": list(key_path.segments), "joined": key_path.joined}


# ---------------------------------------------------------------------------
# Trees
# ---------------------------------------------------------------------------


@router.post("/tree/build")
def build_subtree(request: BuildRequest) -> dict[str, Any]:
    """Build the subtree rooted at the first item holding ``root``.

    Returns:
        Tree dict with statistics and nested nodes.
    """
    items = _to_items(request.items)
    root = _find_root(request.root, items)
    tree = HierarchyBuilder.build_tree(root, items)
    return tree.to_dict()


@router.post("/tree/roots")
def list_roots(request: ItemsRequest) -> dict[str, Any]:
    """List items whose parent key has no item."""
    roots = HierarchyBuilder.find_roots(_to_items(request.items))
    return {"roots": [root.to_dict() for root in roots]}


@router.post("/tree/plan")
def plan_edit(request: PlanRequest) -> dict[str, Any]:
    """Plan the key for an item inserted before/after/under ``target``.

    The whole collection is built under a virtual root so that every
    sibling of the target is known, top-level ones included.
    """
    items = _to_items(request.items)
    target = KeyPath.parse(request.target)
    if not target.segments:
        raise HTTPException(status_code=422, detail="Target contains no segments")

    tree = HierarchyBuilder.build_all(items)
    try:
        key_path = EditPlanner().plan(tree, target, EditAction(request.action))
    except NodeNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except KeySpaceExhaustedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return {
        "key": key_path.joined,
        "segments": list(key_path.segments),
        "action": request.action,
        "target": target.joined,
    }


@router.post("/tree/analyze")
def analyze_items(request: ItemsRequest) -> dict[str, Any]:
    """Report malformed segments, duplicates and gaps in a collection."""
    analysis = HierarchyAnalyzer().analyze(_to_items(request.items))
    return analysis.to_dict()
