"""Output sinks for projected kubeconfigs.

A run writes either every projection to one shared stream, or each
projection to its own file named after the context.
"""

from __future__ import annotations

import logging
import os
from enum import StrEnum
from pathlib import Path
from typing import TextIO

from pydantic import BaseModel, Field

from kexplode.errors import DestinationError
from kexplode.loader import dump_kubeconfig, write_kubeconfig
from kexplode.projector import explode_context
from kexplode.schemas.explode import ExplodeOptions, OutputMode
from kexplode.schemas.kubeconfig import KubeConfig

logger = logging.getLogger(__name__)

# YAML document separator placed between streamed documents
_DOCUMENT_SEPARATOR = "---\n"


class WriteOutcome(StrEnum):
    """What happened to one exported context."""

    STREAMED = "streamed"
    WRITTEN = "written"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"


class ExportResult(BaseModel):
    """Record of one exported context."""

    context: str = Field(description="Context name")
    outcome: WriteOutcome = Field(description="How the projection was emitted")
    path: Path | None = Field(default=None, description="Destination file, if any")


def destination_path(output_dir: Path, context_name: str) -> Path:
    """Map a context name to a file directly under output_dir.

    Slashes become underscores so a name never creates nested directories.
    """
    return output_dir / context_name.replace("/", "_")


class StreamSink:
    """Serializes every projection onto a single text stream.

    Rather than plainly concatenating documents, each one after the first
    is preceded by a ``---`` marker so the stream stays valid multi-document
    YAML.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._count = 0

    def emit(self, context_name: str, config: KubeConfig) -> ExportResult:
        content = dump_kubeconfig(config)
        try:
            if self._count:
                self._stream.write(_DOCUMENT_SEPARATOR)
            self._stream.write(content)
            self._stream.flush()
        except OSError as e:
            raise DestinationError("<stdout>", "write", e.strerror or str(e)) from e
        self._count += 1
        return ExportResult(context=context_name, outcome=WriteOutcome.STREAMED)


class FileSink:
    """Writes each projection to ``output_dir/<sanitized context name>``."""

    def __init__(self, output_dir: Path, force: bool = False) -> None:
        self._output_dir = output_dir
        self._force = force

    def emit(self, context_name: str, config: KubeConfig) -> ExportResult:
        path = destination_path(self._output_dir, context_name)

        exists = _destination_exists(path)
        if exists and not self._force:
            logger.warning("file %r already exists, use --force to overwrite", str(path))
            return ExportResult(
                context=context_name, outcome=WriteOutcome.SKIPPED, path=path
            )

        try:
            write_kubeconfig(config, path)
        except OSError as e:
            raise DestinationError(path, "write", e.strerror or str(e)) from e

        outcome = WriteOutcome.OVERWRITTEN if exists else WriteOutcome.WRITTEN
        logger.info("%s %s", outcome.value.capitalize(), path)
        return ExportResult(context=context_name, outcome=outcome, path=path)


def _destination_exists(path: Path) -> bool:
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise DestinationError(path, "stat", e.strerror or str(e)) from e
    return True


def make_sink(options: ExplodeOptions, stream: TextIO) -> StreamSink | FileSink:
    """Pick the sink for a run. ``force`` has no effect on streams."""
    if options.output_mode == OutputMode.STDOUT:
        return StreamSink(stream)
    return FileSink(options.output_dir.expanduser(), force=options.force)


def export_contexts(
    config: KubeConfig,
    context_names: list[str],
    sink: StreamSink | FileSink,
) -> list[ExportResult]:
    """Project and emit each context in order.

    Stops at the first error; contexts already emitted stay emitted.

    Raises:
        ReferenceNotFoundError: If a context references a missing entry.
        DestinationError: If an output cannot be inspected or written.
    """
    results: list[ExportResult] = []
    for name in context_names:
        projected = explode_context(config, name)
        results.append(sink.emit(name, projected))
    return results
