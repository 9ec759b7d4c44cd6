"""Run configuration for an explode invocation."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from kexplode.schemas.kubeconfig import RECOMMENDED_CONFIG_DIR


class OutputMode(StrEnum):
    """Where projected kubeconfigs are written."""

    FILES = "files"
    STDOUT = "stdout"


class ExplodeOptions(BaseModel):
    """CLI flags container, built once at startup and never mutated."""

    model_config = ConfigDict(frozen=True)

    contexts: tuple[str, ...] = Field(
        default=(), description="Explicitly requested context names"
    )
    all_contexts: bool = Field(default=False, description="Select every context")
    output_mode: OutputMode = Field(
        default=OutputMode.FILES, description="Write to files or stream to stdout"
    )
    force: bool = Field(
        default=False, description="Overwrite existing files (ignored for stdout)"
    )
    kubeconfig: Path | None = Field(
        default=None, description="Explicit source kubeconfig path"
    )
    output_dir: Path = Field(
        default=RECOMMENDED_CONFIG_DIR, description="Directory for per-context files"
    )
