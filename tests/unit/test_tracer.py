"""
Tests for the tracer module.

These tests verify the debug tracing infrastructure used to capture
intermediate data from a layout pass.
"""

import os
import tempfile

from mindflow.layout import compute_layout
from mindflow.tracer import LayoutStage, LayoutTrace


class TestLayoutStage:
    """Tests for LayoutStage dataclass."""

    def test_creation(self):
        stage = LayoutStage(name="measure", data={"root_extent": 82.0})
        assert stage.name == "measure"
        assert stage.data == {"root_extent": 82.0}

    def test_str_truncates_long_values(self):
        stage = LayoutStage(name="place", data={"positions": "x" * 300})
        result = str(stage)
        assert result.splitlines()[0] == "[place]"
        assert "..." in result
        assert len(result.splitlines()[1]) < 130


class TestLayoutTrace:
    """Tests for LayoutTrace."""

    def test_add_stage_copies_data(self):
        trace = LayoutTrace()
        data = {"a": 1}
        trace.add_stage("measure", data)
        data["a"] = 2
        assert trace.get_stage("measure").data == {"a": 1}

    def test_get_missing_stage(self):
        assert LayoutTrace().get_stage("nope") is None

    def test_summary(self, deep_tree):
        trace = LayoutTrace()
        compute_layout(deep_tree, "TB", trace=trace)
        summary = trace.summary()
        assert summary == "layout TB: measure -> place -> bounds (13 nodes placed)"

    def test_dump_contains_stages(self, two_child_tree):
        trace = LayoutTrace()
        compute_layout(two_child_tree, trace=trace)
        dump = trace.dump()
        assert dump.startswith("layout LR: ")
        assert "[bounds]" in dump
        assert "  bounds = " in dump

    def test_dump_to_file(self, two_child_tree):
        trace = LayoutTrace()
        compute_layout(two_child_tree, trace=trace)

        with tempfile.NamedTemporaryFile(suffix=".txt", delete=False) as f:
            output_path = f.name

        try:
            trace.dump_to_file(output_path)
            with open(output_path, encoding="utf-8") as f:
                assert f.read().startswith("layout LR: measure")
        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)

    def test_summary_without_steps(self):
        assert LayoutTrace().summary() == "layout ?: no steps (0 nodes placed)"
