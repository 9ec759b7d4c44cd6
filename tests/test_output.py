"""Tests for kexplode.output.writer — stream and file sinks."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest
import yaml

from kexplode.errors import DestinationError, ReferenceNotFoundError
from kexplode.output.writer import (
    FileSink,
    StreamSink,
    WriteOutcome,
    destination_path,
    export_contexts,
    make_sink,
)
from kexplode.schemas.explode import ExplodeOptions, OutputMode
from kexplode.schemas.kubeconfig import Context, KubeConfig


def _load(path: Path) -> KubeConfig:
    return KubeConfig.from_dict(yaml.safe_load(path.read_text(encoding="utf-8")))


class TestDestinationPath:
    def test_plain_name(self, tmp_path):
        assert destination_path(tmp_path, "dev") == tmp_path / "dev"

    def test_slashes_replaced(self, tmp_path):
        path = destination_path(tmp_path, "team/cluster-1")
        assert path == tmp_path / "team_cluster-1"
        assert path.parent == tmp_path


class TestFileSink:
    def test_writes_new_file(self, kubeconfig, output_dir):
        results = export_contexts(kubeconfig, ["prod"], FileSink(output_dir))
        assert results[0].outcome == WriteOutcome.WRITTEN
        written = _load(output_dir / "prod")
        assert written.current_context == "prod"
        assert list(written.contexts) == ["prod"]

    def test_sanitized_name_not_nested(self, kubeconfig, output_dir):
        export_contexts(kubeconfig, ["team/cluster-1"], FileSink(output_dir))
        assert (output_dir / "team_cluster-1").is_file()
        assert not (output_dir / "team").exists()

    def test_skip_existing(self, kubeconfig, output_dir, caplog):
        output_dir.mkdir()
        existing = output_dir / "dev"
        existing.write_text("original: content\n")
        with caplog.at_level(logging.WARNING, logger="kexplode"):
            results = export_contexts(kubeconfig, ["dev", "prod"], FileSink(output_dir))
        assert [r.outcome for r in results] == [WriteOutcome.SKIPPED, WriteOutcome.WRITTEN]
        assert existing.read_text() == "original: content\n"
        assert "already exists, use --force to overwrite" in caplog.text
        assert (output_dir / "prod").is_file()

    def test_force_overwrites(self, kubeconfig, output_dir):
        output_dir.mkdir()
        existing = output_dir / "dev"
        existing.write_text("original: content\n")
        results = export_contexts(kubeconfig, ["dev"], FileSink(output_dir, force=True))
        assert results[0].outcome == WriteOutcome.OVERWRITTEN
        assert _load(existing).current_context == "dev"

    def test_all_contexts_closed(self, kubeconfig, output_dir):
        names = sorted(kubeconfig.contexts)
        export_contexts(kubeconfig, names, FileSink(output_dir))
        files = sorted(p.name for p in output_dir.iterdir())
        assert files == ["dev", "prod", "team_cluster-1"]
        for path in output_dir.iterdir():
            doc = _load(path)
            (ctx,) = doc.contexts.values()
            assert ctx.cluster in doc.clusters
            assert ctx.auth_info in doc.auth_infos

    def test_write_failure_raises(self, kubeconfig, output_dir):
        output_dir.mkdir()
        # A directory in the way of the destination file
        (output_dir / "dev").mkdir()
        with pytest.raises(DestinationError, match="unable to write file"):
            export_contexts(kubeconfig, ["dev"], FileSink(output_dir, force=True))

    def test_stat_failure_raises(self, kubeconfig, tmp_path):
        # A regular file where the output directory should be
        output_dir = tmp_path / "not-a-dir"
        output_dir.write_text("")
        with pytest.raises(DestinationError, match="unable to stat file"):
            export_contexts(kubeconfig, ["dev"], FileSink(output_dir))

    def test_broken_reference_stops_run(self, kubeconfig, output_dir):
        kubeconfig.contexts["broken"] = Context(cluster="ghost", user="dev-user")
        with pytest.raises(ReferenceNotFoundError):
            export_contexts(kubeconfig, ["dev", "broken", "prod"], FileSink(output_dir))
        assert (output_dir / "dev").is_file()
        assert not (output_dir / "prod").exists()


class TestStreamSink:
    def test_documents_separated(self, kubeconfig):
        stream = io.StringIO()
        results = export_contexts(kubeconfig, ["prod", "dev"], StreamSink(stream))
        assert all(r.outcome == WriteOutcome.STREAMED for r in results)
        docs = list(yaml.safe_load_all(stream.getvalue()))
        assert [d["current-context"] for d in docs] == ["prod", "dev"]

    def test_single_document_has_no_separator(self, kubeconfig):
        stream = io.StringIO()
        export_contexts(kubeconfig, ["prod"], StreamSink(stream))
        assert not stream.getvalue().startswith("---")


class TestMakeSink:
    def test_stdout_mode(self):
        options = ExplodeOptions(output_mode=OutputMode.STDOUT, force=True)
        assert isinstance(make_sink(options, io.StringIO()), StreamSink)

    def test_files_mode(self, output_dir):
        options = ExplodeOptions(output_dir=output_dir)
        assert isinstance(make_sink(options, io.StringIO()), FileSink)
