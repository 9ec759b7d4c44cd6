"""kexplode output handling — stream and file sinks."""

from kexplode.output.writer import (
    ExportResult,
    FileSink,
    StreamSink,
    WriteOutcome,
    destination_path,
    export_contexts,
    make_sink,
)

__all__ = [
    "ExportResult",
    "FileSink",
    "StreamSink",
    "WriteOutcome",
    "destination_path",
    "export_contexts",
    "make_sink",
]
