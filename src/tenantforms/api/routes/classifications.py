"""Classification tree endpoint: flat records in, nested tree out."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from tenantforms.classification.normalize import normalize_records
from tenantforms.classification.tree import build_tree, filter_tree
from tenantforms.models.classification import ClassificationNode

router = APIRouter(tags=["classifications"])


def _node_json(node: ClassificationNode) -> dict[str, Any]:
    return {
        "code": node.code,
        "name": node.name,
        "level": node.level,
        "children": [_node_json(child) for child in node.children],
    }


class TreeRequest(BaseModel):
    records: list[dict[str, Any]] = Field(default_factory=list)
    search: str = ""


@router.post("/tree")
async def classification_tree(body: TreeRequest, request: Request) -> dict[str, Any]:
    config = request.app.state.settings.classification.to_tree_config()
    roots = filter_tree(build_tree(normalize_records(body.records), config), body.search)
    return {"roots": [_node_json(root) for root in roots]}
