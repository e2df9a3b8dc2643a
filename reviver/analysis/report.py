from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ScaffoldFile(BaseModel):
    """One source file the scaffold will contain."""

    name: str
    language: str
    extension: str

    model_config = ConfigDict(frozen=True)

    @property
    def filename(self) -> str:
        return f"{self.name}{self.extension}"


class ScaffoldReport(BaseModel):
    """Derived summary of a snippet collection.

    Holds plain values only; it never refers back to the store it was built from.
    """

    files: List[ScaffoldFile] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_markdown(self, *, project_name: str = "root_project") -> str:
        """Render the report as a Markdown document for export."""
        lines = ["# Project Blueprint", "", "## Architecture", "", f"- {project_name}/"]
        for scaffold_file in self.files:
            lines.append(f"  - {scaffold_file.filename}")
        lines.extend(["", "## Dependencies", ""])
        if self.dependencies:
            lines.extend(f"- `{dependency}`" for dependency in self.dependencies)
        else:
            lines.append("No external libraries detected.")
        if self.errors:
            lines.extend(["", "## Warnings", ""])
            lines.extend(f"- {message}" for message in self.errors)
        lines.extend(["", "## Steps", ""])
        lines.extend(f"{index}. {step}" for index, step in enumerate(self.steps, start=1))
        return "\n".join(lines) + "\n"


__all__ = ["ScaffoldFile", "ScaffoldReport"]
