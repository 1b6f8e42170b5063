"""Pydantic models for document-level diagram rendering."""

from __future__ import annotations

from pydantic import BaseModel

from markdoc.blocks.models import CodeBlock


class DiagramOutcome(BaseModel):
    """Result of rendering one diagram block of a document."""

    block: CodeBlock
    line: int
    svg: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.svg is not None and self.error is None

    @property
    def language(self) -> str:
        return self.block.language
