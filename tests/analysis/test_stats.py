from __future__ import annotations

import pytest

from bytemap.analysis import (
    ByteStatistic,
    PacketLengthError,
    analyze,
    distinct_values,
    exclude,
    little_endian_max,
)


class TestAnalyze:
    """Per-offset min/max/variance over a burst."""

    def test_min_max_variance_per_offset(self):
        stats = analyze([bytes([1, 10, 5]), bytes([3, 10, 9]), bytes([2, 10, 7])])
        assert stats == [
            ByteStatistic(offset=0, min=1, max=3, variance=2),
            ByteStatistic(offset=1, min=10, max=10, variance=0),
            ByteStatistic(offset=2, min=5, max=9, variance=4),
        ]

    def test_single_packet_has_no_variance(self):
        stats = analyze([bytes([7, 200, 3])])
        assert [s.variance for s in stats] == [0, 0, 0]

    def test_empty_burst(self):
        assert analyze([]) == []

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(PacketLengthError):
            analyze([bytes(4), bytes(5)])

    def test_length_error_is_value_error(self):
        assert issubclass(PacketLengthError, ValueError)

    def test_accepts_bytearray(self):
        stats = analyze([bytearray([0, 1]), bytearray([255, 1])])
        assert stats[0].variance == 255

    def test_deterministic(self):
        packets = [bytes([i, (i * 37) % 256, 9]) for i in range(50)]
        assert analyze(packets) == analyze(packets)


class TestHelpers:
    """Exclusion and value helpers."""

    def test_exclude_drops_offsets(self):
        stats = analyze([bytes([0, 0, 0, 0]), bytes([1, 2, 3, 4])])
        assert [s.offset for s in exclude(stats, {1, 3})] == [0, 2]

    def test_distinct_values(self):
        packets = [bytes([160, 1]), bytes([161, 2]), bytes([160, 3])]
        assert distinct_values(packets, 0) == {160, 161}
        assert distinct_values([], 0) == set()

    def test_little_endian_max(self):
        packets = [bytes([0x10, 0x27]), bytes([0x80, 0x3E]), bytes([0xFF, 0x00])]
        assert little_endian_max(packets, (0, 1)) == 16000

    def test_little_endian_max_is_per_packet(self):
        # High byte max and low byte max come from different packets
        packets = [bytes([0xFF, 0x01]), bytes([0x00, 0x02])]
        assert little_endian_max(packets, (0, 1)) == 0x0200

    def test_little_endian_max_skips_short_packets(self):
        packets = [bytes([0x05]), bytes([0x01, 0x01])]
        assert little_endian_max(packets, (0, 1)) == 0x0101

    def test_little_endian_max_nothing_to_read(self):
        assert little_endian_max([bytes([1])], (0, 1)) is None
        assert little_endian_max([bytes([1, 2])], ()) is None
