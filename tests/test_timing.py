"""Tests for minimum-duration, gap and fallback timing rules."""

import pytest

from subtitle_studio.core.ir import SubtitleBlock
from subtitle_studio.core.settings import FALLBACK_DURATION_S, FRAME_RATE
from subtitle_studio.core.timing import apply_timing


def _block(index, start, end, text="x"):
    return SubtitleBlock(index=index, text=text, start_s=start, end_s=end)


class TestMinDuration:

    def test_short_block_extended(self):
        blocks = [_block(1, 0.0, 0.9), _block(2, 2.0, 2.5)]
        result = apply_timing(blocks, min_duration=1.2, gap_frames=2)
        assert result[0].end_s == pytest.approx(1.2)

    def test_last_block_extended_without_clamp(self):
        result = apply_timing([_block(1, 2.0, 2.5)], min_duration=1.2, gap_frames=2)
        assert result[0].end_s == pytest.approx(3.2)

    def test_long_block_untouched(self):
        result = apply_timing([_block(1, 0.0, 3.0)], min_duration=1.2, gap_frames=0)
        assert result[0].end_s == 3.0


class TestGapClamp:

    def test_extension_clamped_to_gap(self):
        blocks = [_block(1, 0.0, 0.5), _block(2, 1.0, 2.0)]
        result = apply_timing(blocks, min_duration=1.2, gap_frames=3)
        assert result[0].end_s == pytest.approx(1.0 - 3 / FRAME_RATE)

    def test_original_overlap_clamped(self):
        blocks = [_block(1, 0.0, 1.5), _block(2, 1.0, 2.5)]
        result = apply_timing(blocks, min_duration=0.1, gap_frames=0)
        assert result[0].end_s == pytest.approx(1.0)

    def test_gap_holds_between_all_blocks(self):
        blocks = [_block(i + 1, i * 0.8, i * 0.8 + 0.3) for i in range(5)]
        result = apply_timing(blocks, min_duration=1.0, gap_frames=2)
        for cur, nxt in zip(result, result[1:]):
            assert nxt.start_s - cur.end_s >= 2 / FRAME_RATE - 1e-9


class TestFallback:

    def test_fallback_when_gap_leaves_no_room(self):
        blocks = [_block(1, 1.0, 1.02), _block(2, 1.03, 2.0)]
        result = apply_timing(blocks, min_duration=1.2, gap_frames=2)
        assert result[0].end_s == pytest.approx(1.0 + FALLBACK_DURATION_S)

    def test_fallback_for_same_start(self):
        blocks = [_block(1, 1.0, 1.0), _block(2, 1.0, 2.0)]
        result = apply_timing(blocks, min_duration=1.2, gap_frames=0)
        assert result[0].end_s == pytest.approx(1.0 + FALLBACK_DURATION_S)

    def test_fallback_when_clamp_leaves_a_sliver(self):
        blocks = [_block(1, 1.0, 1.05), _block(2, 1.0669, 1.2)]
        result = apply_timing(blocks, min_duration=1.0, gap_frames=2)
        assert result[0].end_s == pytest.approx(1.0 + FALLBACK_DURATION_S)

    def test_short_clamped_block_above_floor_kept(self):
        blocks = [_block(1, 1.0, 1.05), _block(2, 1.2, 2.0)]
        result = apply_timing(blocks, min_duration=1.0, gap_frames=2)
        assert result[0].end_s == pytest.approx(1.2 - 2 / FRAME_RATE)

    def test_unclamped_block_shorter_than_floor_kept(self):
        result = apply_timing([_block(1, 1.0, 1.01)], min_duration=0.02, gap_frames=0)
        assert result[0].end_s == pytest.approx(1.02)


class TestInvariants:

    def test_starts_never_move(self):
        blocks = [_block(1, 0.0, 0.2), _block(2, 0.25, 0.3), _block(3, 4.0, 4.1)]
        result = apply_timing(blocks, min_duration=2.0, gap_frames=2)
        assert [b.start_s for b in result] == [0.0, 0.25, 4.0]

    def test_every_block_has_positive_duration(self):
        blocks = [_block(1, 0.0, 0.0), _block(2, 0.0, 0.0), _block(3, 0.0, 0.0)]
        result = apply_timing(blocks, min_duration=1.0, gap_frames=2)
        assert all(b.end_s > b.start_s for b in result)

    def test_input_not_mutated(self):
        blocks = [_block(1, 0.0, 0.5)]
        apply_timing(blocks, min_duration=2.0, gap_frames=0)
        assert blocks[0].end_s == 0.5

    def test_text_and_index_preserved(self):
        blocks = [_block(1, 0.0, 0.5, "hello"), _block(2, 1.0, 1.5, "world")]
        result = apply_timing(blocks, min_duration=0.1, gap_frames=0)
        assert [(b.index, b.text) for b in result] == [(1, "hello"), (2, "world")]
