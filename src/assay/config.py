from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from assay.status_line import DEFAULT_CAPACITY


class SuiteRef(BaseModel):
    model_config = ConfigDict(extra="forbid")
    title: str
    target: str

    @field_validator("target")
    @classmethod
    def target_must_name_a_function(cls, v: str) -> str:
        module, sep, attr = v.partition(":")
        if not sep or not module or not attr:
            raise ValueError(f"target {v!r} must look like 'package.module:function'")
        return v


class RunConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    verbose: bool = False
    quiet: bool = False
    color: bool = True
    status_line_capacity: int = Field(DEFAULT_CAPACITY, ge=1)
    # logger whose records are routed through the reporter; "" is the root logger
    capture_logger: str = ""
    # directories searched for suite modules, relative to the config file
    paths: list[str] = ["."]
    suites: list[SuiteRef] = []

    @field_validator("suites")
    @classmethod
    def suite_titles_must_be_unique(cls, v: list[SuiteRef]) -> list[SuiteRef]:
        seen: set[str] = set()
        for ref in v:
            if ref.title in seen:
                raise ValueError(f"Suite title '{ref.title}' is listed more than once")
            seen.add(ref.title)
        return v


def load_config(path: Path) -> RunConfig:
    """Load and validate a run config from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    config = RunConfig(**raw)

    # Resolve relative search paths relative to config file location
    config.paths = [
        p if Path(p).is_absolute() else str((config_dir / p).resolve())
        for p in config.paths
    ]

    return config
