"""Classification code tree models (HSN-style item classes)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class TreeConfig(BaseModel):
    """Fixed-width code layout: each level consumes ``segment_width`` characters."""

    model_config = {"frozen": True}

    code_width: int = Field(default=8, ge=1)
    segment_width: int = Field(default=2, ge=1)
    max_level: int = Field(default=4, ge=1)

    def prefix_width(self, level: int) -> int:
        """Significant prefix length of a code at ``level``."""
        return min(self.segment_width * level, self.code_width)

    def parent_code(self, code: str, level: int) -> str | None:
        """Code of the level-1-up ancestor, zero-padded to full width."""
        if level <= 1:
            return None
        prefix = code[: self.prefix_width(level - 1)]
        return prefix.ljust(self.code_width, "0")


class ClassificationRecord(BaseModel):
    """A flat source record after field-name normalization."""

    code: str
    display_name: str = ""
    level: int = 1
    active: bool = True
    source: dict[str, Any] = Field(default_factory=dict)


class ClassificationNode(BaseModel):
    code: str
    name: str
    level: int
    children: list[ClassificationNode] = Field(default_factory=list)
    source: dict[str, Any] = Field(default_factory=dict)


class Selection(BaseModel):
    """Emitted to the caller when a leaf is picked."""

    model_config = {"frozen": True}

    name: str
    code: str
