from __future__ import annotations
"""Processor settings loaded from YAML.

Example ``slotflow.yml``::

    allow_unassigned_inputs: false
    log_level: debug
    metrics: events

Usage::

    from slotflow.config import load_settings
    from slotflow.core.processor import GraphProcessor

    processor = GraphProcessor.from_settings(load_settings("slotflow.yml"))
"""
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from slotflow.utils.logging import level_names

__all__ = ["ProcessorSettings", "load_settings"]


class ProcessorSettings(BaseModel):  # noqa: D101
    model_config = ConfigDict(extra="forbid", frozen=True)

    allow_unassigned_inputs: bool = False
    log_level: str = "info"
    metrics: Literal["none", "events"] = "none"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.lower()
        if value not in level_names():
            raise ValueError(f"Unknown log level '{value}'; expected one of {', '.join(level_names())}.")
        return value


def load_settings(path: str | Path) -> ProcessorSettings:  # noqa: D401
    """Load and validate the YAML file at *path*. An empty file gives the defaults."""
    data = yaml.safe_load(Path(path).read_text()) or {}
    return ProcessorSettings.model_validate(data)
