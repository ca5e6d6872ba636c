#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleCall v0.1.0

End-to-end tests for the variant calling pipeline.

Author: BubbleCall Development Team
License: MIT
"""

import io

import pytest

from bubblecall.config.schema import apply_overrides, load_config
from bubblecall.core.ultrabubbles import FileBubbleProvider, StaticBubbleProvider
from bubblecall.errors import ConfigurationError, LoadError, MalformedUltrabubbleFile
from bubblecall.utils.pipeline import VariantCallingPipeline


def _body(vcf_text):
    return [line for line in vcf_text.splitlines() if not line.startswith("#")]


@pytest.fixture
def config():
    return apply_overrides(load_config(), {'hardware.threads': 1})


class TestPipeline:
    """Test full GFA -> VCF runs."""

    def test_two_bubble_graph(self, config, two_bubble_gfa):
        """Test records, genotypes and sample columns for a small graph."""
        pipeline = VariantCallingPipeline(config, StaticBubbleProvider([(4, 7), (1, 4)]))
        out = io.StringIO()

        summary = pipeline.run(two_bubble_gfa, out)

        lines = out.getvalue().splitlines()
        assert lines[-3].split("\t")[9:] == ["ref", "hap1", "hap2"]
        assert "##contig=<ID=ref,length=15>" in lines
        assert _body(out.getvalue()) == [
            "ref\t1\t>1>4\tC\tG\t.\tPASS\tNS=3;AN=3;AC=1;TYPE=snv\tGT\t0\t1\t0",
            "ref\t6\t>4>7\tAA\tAAG\t.\tPASS\tNS=3;AN=3;AC=1;TYPE=ins\tGT\t0\t0\t1",
        ]
        assert summary.to_dict() == {
            'paths': 3,
            'ultrabubbles': 2,
            'assigned': 2,
            'unassigned': 0,
            'records': 2,
            'skipped': 0,
        }

    def test_output_file(self, config, two_bubble_gfa, two_bubble_file, temp_output_dir):
        vcf = temp_output_dir / "out.vcf"
        pipeline = VariantCallingPipeline(config, FileBubbleProvider(two_bubble_file))

        pipeline.run(two_bubble_gfa, vcf)

        assert len(_body(vcf.read_text())) == 2

    def test_repeat_runs_identical(self, two_bubble_gfa, two_bubble_file):
        """Test that serial and parallel runs write the same bytes."""
        outputs = []
        for threads in (1, 2):
            cfg = apply_overrides(load_config(), {
                'hardware.threads': threads,
                'ultrabubbles.file': str(two_bubble_file),
            })
            out = io.StringIO()
            VariantCallingPipeline(cfg).run(two_bubble_gfa, out)
            outputs.append(out.getvalue())

        assert outputs[0] == outputs[1]

    def test_reference_paths(self, config, two_bubble_gfa):
        cfg = apply_overrides(config, {'variants.reference_paths': ["hap2"]})
        out = io.StringIO()

        VariantCallingPipeline(cfg, StaticBubbleProvider([(1, 4), (4, 7)])).run(two_bubble_gfa, out)

        body = _body(out.getvalue())
        assert body[0].split("\t")[:5] == ["hap2", "1", ">1>4", "C", "G"]
        assert body[1].split("\t")[:5] == ["hap2", "6", ">4>7", "AAG", "AA"]

    def test_reference_paths_file(self, config, two_bubble_gfa, temp_output_dir):
        refs = temp_output_dir / "refs.txt"
        refs.write_text("hap1\n")
        cfg = apply_overrides(config, {'variants.reference_paths_file': str(refs)})

        pipeline = VariantCallingPipeline(cfg, StaticBubbleProvider([(1, 4)]))

        assert pipeline.resolve_reference_paths() == frozenset({"hap1"})

    def test_missing_segment_reported(self, config, two_bubble_gfa):
        """Test that one bad bubble is skipped while the rest are written."""
        pipeline = VariantCallingPipeline(config, StaticBubbleProvider([(1, 4), (4, 7), (5, 99)]))
        out = io.StringIO()

        summary = pipeline.run(two_bubble_gfa, out)

        assert summary.records == 2
        assert [bubble for bubble, _ in summary.skipped] == [(5, 99)]
        assert summary.unassigned == 1


class TestPipelineErrors:
    """Test fatal conditions raised before extraction."""

    def test_single_path_graph(self, config, temp_output_dir):
        gfa = temp_output_dir / "one.gfa"
        gfa.write_text("S\t1\tA\nS\t2\tC\nP\tonly\t1+,2+\t*\n")

        with pytest.raises(ConfigurationError, match="at least two paths"):
            VariantCallingPipeline(config, StaticBubbleProvider([(1, 2)])).run(gfa, io.StringIO())

    def test_malformed_bubble_file(self, config, two_bubble_gfa, temp_output_dir):
        """Test that a bad ultrabubble file aborts before any output is written."""
        bad = temp_output_dir / "bad.bubbles"
        bad.write_text("1\t4\nnot a bubble\n")
        vcf = temp_output_dir / "out.vcf"

        with pytest.raises(MalformedUltrabubbleFile):
            VariantCallingPipeline(config, FileBubbleProvider(bad)).run(two_bubble_gfa, vcf)

        assert not vcf.exists()

    def test_unknown_reference_paths(self, config, two_bubble_gfa):
        cfg = apply_overrides(config, {'variants.reference_paths': ["chrX", "chrY"]})

        with pytest.raises(ConfigurationError, match="reference paths"):
            VariantCallingPipeline(cfg, StaticBubbleProvider([(1, 4)])).run(two_bubble_gfa, io.StringIO())

    def test_conflicting_bubbles(self, config, two_bubble_gfa):
        with pytest.raises(ConfigurationError, match="share an entry"):
            VariantCallingPipeline(
                config, StaticBubbleProvider([(1, 4), (1, 7)])
            ).run(two_bubble_gfa, io.StringIO())

    def test_missing_gfa(self, config, temp_output_dir):
        with pytest.raises(LoadError):
            VariantCallingPipeline(config, StaticBubbleProvider([])).run(
                temp_output_dir / "absent.gfa", io.StringIO()
            )

    def test_no_bubble_source(self, config):
        """Test that a pipeline without any ultrabubble source cannot be built."""
        with pytest.raises(ConfigurationError):
            VariantCallingPipeline(config)

# BubbleCall v0.1.0
# Any usage is subject to this software's license.
