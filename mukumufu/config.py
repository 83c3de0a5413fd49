#!/usr/bin/env python3

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

CONFIG_FILE_NAME = "mukumufu_config.json"

DEFAULT_HEADER_EXTENSIONS = [".h", ".hh", ".hpp", ".hxx", ".inc"]
DEFAULT_SOURCE_EXTENSIONS = [".c", ".cc", ".cpp", ".cxx", ".m"]


def normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


class ProjectConfig(BaseModel):
    """Configuration for scanning a C/C++ project."""

    project_root: Path

    # Directory structure
    source_dir: str = "src"  # relative to project root
    exclude_globs: list[str] = Field(default_factory=list)

    # File classification
    header_extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_HEADER_EXTENSIONS))
    source_extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS))

    # Traversal and output
    root_name: str = "main"
    output_file: str = "Makefile.inc.txt"

    @field_validator("header_extensions", "source_extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        return [normalize_extension(ext) for ext in value if ext.strip()]

    @model_validator(mode="after")
    def _check_disjoint_kinds(self) -> "ProjectConfig":
        overlap = set(self.header_extensions) & set(self.source_extensions)
        if overlap:
            raise ValueError(
                f"extensions cannot be both header and source: {sorted(overlap)}"
            )
        return self

    def source_path(self) -> Path:
        """Get the full path to the scanned source directory."""
        return self.project_root / self.source_dir

    def output_path(self) -> Path:
        """Get the full path to the generated Makefile fragment."""
        return self.project_root / self.output_file

    @classmethod
    def load_from_file(cls, config_path: Path) -> "ProjectConfig":
        """Load configuration from a JSON file."""
        args = json.loads(config_path.read_text())
        args["project_root"] = config_path.parent
        return cls.model_validate(args)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file."""
        # project_root is derived from the file location
        data = self.model_dump(exclude={"project_root"})
        config_path.write_text(json.dumps(data, indent=2))

    @classmethod
    def find_project_config(cls, start_path: Path) -> Optional["ProjectConfig"]:
        """Find project configuration by searching up the directory tree."""
        current = start_path.resolve()
        while current != current.parent:
            config_file = current / CONFIG_FILE_NAME
            if config_file.exists():
                return cls.load_from_file(config_file)
            current = current.parent
        return None
