# -*- coding: utf-8 -*-
"""Tests for the command line actions."""

import json

import pytest

from lvtracker_lib.commands.enrich import enrich
from lvtracker_lib.commands.labels import labels
from lvtracker_lib.commands.progress import progress
from lvtracker_lib.constants import COMPUTED_ANGLE_PROPERTY
from lvtracker_lib.constants import DAILY_LOG_NAME


class TestEnrichCommand:
    """Tests for the enrich command."""

    def test_stdout(self, site_dir, capsys):
        """Test writing the enriched collection to stdout."""
        assert enrich(["-d", str(site_dir)]) == 0

        collection = json.loads(capsys.readouterr().out)
        points = [
            f for f in collection["features"] if f["geometry"]["type"] == "Point"
        ]
        assert [p["properties"]["normalizedId"] for p in points] == ["INV1", "INV2"]
        assert [p["properties"]["status"] for p in points] == ["pending", "pending"]

    def test_output_file(self, site_dir, capsys):
        """Test writing a styled, minified file."""
        output = site_dir / "out.geojson"
        args = ["-d", str(site_dir), "-o", str(output), "--styled", "--minify"]
        assert enrich(args) == 0

        assert capsys.readouterr().out == ""
        collection = json.loads(output.read_text(encoding="utf-8"))
        assert collection["features"][0]["properties"]["stroke"] == "#475569"

    def test_no_data(self, tmp_path):
        """Test the exit code when nothing can be loaded."""
        assert enrich(["-d", str(tmp_path)]) == 1


class TestLabelsCommand:
    """Tests for the labels command."""

    def test_panel_layers(self, site_dir, capsys):
        """Test snapping onto the default panel layers."""
        assert labels(["-d", str(site_dir), "--layers"]) == 0

        collection = json.loads(capsys.readouterr().out)
        snapped = [
            f
            for f in collection["features"]
            if COMPUTED_ANGLE_PROPERTY in f["properties"]
        ]
        assert snapped

    def test_empty_layers(self, tmp_path):
        """Test the exit code when both layers are empty."""
        empty = json.dumps({"type": "FeatureCollection", "features": []})
        (tmp_path / "text.geojson").write_text(empty)
        (tmp_path / "file.geojson").write_text(empty)
        assert labels(["-d", str(tmp_path)]) == 1

    def test_no_data(self, tmp_path):
        assert labels(["-d", str(tmp_path)]) == 1


class TestProgressCommand:
    """Tests for the progress command."""

    def test_progress(self, site_dir, capsys):
        """Test progress after marking an inverter done."""
        assert progress(["-d", str(site_dir), "--done", "INV 01"]) == 0

        stats = json.loads(capsys.readouterr().out)
        assert stats["completion_percentage"] == 72
        assert stats["installed_panels"] == 30
        assert not (site_dir / DAILY_LOG_NAME).exists()

    def test_daily_log(self, site_dir, capsys):
        """Test appending a daily log record."""
        args = ["-d", str(site_dir), "--done", "INV 02"]
        args += ["--log", "Enel", "--workers", "3"]
        assert progress(args) == 0
        assert progress(args) == 0
        capsys.readouterr()

        records = json.loads((site_dir / DAILY_LOG_NAME).read_text(encoding="utf-8"))
        assert len(records) == 2
        assert records[0]["subcontractor"] == "Enel"
        assert records[0]["workers"] == 3
        assert records[0]["installed_panels"] == 7

    @pytest.mark.parametrize("workers", ["-1", "many"])
    def test_invalid_workers(self, site_dir, capsys, workers):
        """Test that bad worker counts are rejected by the argument parser."""
        with pytest.raises(SystemExit) as exc_info:
            progress(["-d", str(site_dir), "--log", "Enel", "--workers", workers])

        assert exc_info.value.code == 2
        assert "--workers" in capsys.readouterr().err
        assert not (site_dir / DAILY_LOG_NAME).exists()

    def test_corrupt_daily_log(self, site_dir, capsys):
        """Test the exit code when the daily log cannot be read."""
        (site_dir / DAILY_LOG_NAME).write_text("oops")
        assert progress(["-d", str(site_dir), "--log", "Enel"]) == 1
