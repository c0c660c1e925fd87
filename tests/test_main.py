"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from conftest import REEL_URL, build_runner
from reelscribe.errors import TranscriptionError
from reelscribe.main import main


def _patch_factory(settings, stages):
    runner = build_runner(settings, stages)
    return patch("reelscribe.main.PipelineFactory", **{"return_value.create.return_value": runner})


class TestMain:
    def test_prints_transcript(self, settings, stages, capsys) -> None:
        with _patch_factory(settings, stages):
            assert main([REEL_URL]) == 0
        assert capsys.readouterr().out.strip() == "[00:00] Hi\n\n[00:03] there"

    def test_writes_output_file(self, settings, stages, tmp_path: Path) -> None:
        output = tmp_path / "reel.txt"
        with _patch_factory(settings, stages):
            assert main([REEL_URL, "--output", str(output)]) == 0
        assert output.read_text(encoding="utf-8") == "[00:00] Hi\n\n[00:03] there\n"

    def test_invalid_url(self, settings, stages, capsys) -> None:
        with _patch_factory(settings, stages):
            assert main(["https://example.com/x"]) == 2
        assert "Invalid Instagram URL" in capsys.readouterr().err

    def test_failure_prints_envelope(self, settings, stages, capsys) -> None:
        stages["transcriber"].error = TranscriptionError("upstream 500")
        with _patch_factory(settings, stages):
            assert main([REEL_URL]) == 1
        envelope = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert envelope == {"error": "Failed to transcribe", "details": "upstream 500", "stage": "transcribing"}

    def test_tmp_dir_override(self, settings, stages, tmp_path: Path) -> None:
        scratch = tmp_path / "custom"
        with patch("reelscribe.main.PipelineFactory") as factory:
            factory.return_value.create.return_value = build_runner(settings, stages)
            main([REEL_URL, "--tmp-dir", str(scratch)])
        assert factory.call_args.args[0].scratch_dir == scratch
