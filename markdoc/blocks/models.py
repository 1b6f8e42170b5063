"""Pydantic models for fenced code blocks."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class CodeBlock(BaseModel):
    """A fenced code block located in a markdown source string."""

    model_config = ConfigDict(frozen=True)

    language: str
    code: str
    start_index: int
    end_index: int
    raw_match: str

    @model_validator(mode="after")
    def _check_span(self) -> CodeBlock:
        if self.start_index < 0 or self.start_index >= self.end_index:
            raise ValueError(
                f"start_index must be >= 0 and < end_index, "
                f"got [{self.start_index}, {self.end_index})"
            )
        if len(self.raw_match) != self.end_index - self.start_index:
            raise ValueError("raw_match length does not match the block span")
        return self

    def line_number(self, source: str) -> int:
        """1-based line of the opening fence within *source*."""
        return source.count("\n", 0, self.start_index) + 1
