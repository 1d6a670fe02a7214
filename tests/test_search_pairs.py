"""Tests for the parallel, series and ratio pair searches."""

from __future__ import annotations

import logging
import math
import re

import pytest

from restool.errors import InvalidInputError
from restool.search import (
    MAX_SEARCH_VALUE,
    MIN_SEARCH_VALUE,
    SWEEP_LIMIT,
    Candidate,
    Topology,
    find_parallel_pair,
    find_ratio_pair,
    find_series_pair,
    target_in_series,
)
from restool.series import E24, E96


def _parallel(a: float, b: float) -> float:
    return a * b / (a + b)


class TestParallelPair:
    def test_target_in_series_skips_single_part(self) -> None:
        """150 is an E24 value, so the sweep starts one step above it at 160."""
        result = find_parallel_pair(150, E24, threshold=0.0)
        assert result.topology is Topology.PARALLEL
        assert result.target_in_series
        assert result.error == pytest.approx(0.0, abs=1e-12)
        a, b = result.best.evaluated()
        assert (a, b) == (pytest.approx(160.0), pytest.approx(2_400.0))

    def test_threshold_zero_reports_only_exact_pairs(self) -> None:
        result = find_parallel_pair(150, E24, threshold=0.0)
        assert all(match.error == 0.0 for match in result.matches)

    def test_inexact_target(self) -> None:
        result = find_parallel_pair(12_340, E24, threshold=0.01)
        assert not result.target_in_series
        assert result.error < 1e-3
        a, b = result.best.evaluated()
        assert a <= b
        assert abs(_parallel(a, b) / 12_340 - 1) == pytest.approx(result.error)

    def test_best_is_minimum_of_reported_matches(self) -> None:
        result = find_parallel_pair(12_340, E96, threshold=0.101)
        assert result.matches
        assert result.error == min(match.error for match in result.matches)
        assert all(match.error <= 0.101 for match in result.matches)

    def test_sweep_stops_at_crossover(self) -> None:
        result = find_parallel_pair(1_000, E24, threshold=0.101)
        for match in result.matches:
            a, b = match.evaluated()
            assert a <= b
            assert a > 1_000

    def test_on_match_streams_every_match(self) -> None:
        seen: list[Candidate] = []
        result = find_parallel_pair(4_321, E24, threshold=0.05, on_match=seen.append)
        assert tuple(seen) == result.matches
        assert result.iterations >= len(seen)

    def test_series_name_in_result(self) -> None:
        assert find_parallel_pair(4_321, "e96").series_name == "E96"

    def test_logs_exact_target(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="restool.search.pairs"):
            find_parallel_pair(150, E24)
        assert "present in E24" in caplog.text


class TestSeriesPair:
    def test_target_in_series_skips_single_part(self) -> None:
        """150 is an E24 value, so the sweep starts one step below it at 130."""
        result = find_series_pair(150, E24)
        assert result.topology is Topology.SERIES
        assert result.target_in_series
        assert result.error == pytest.approx(0.0, abs=1e-12)
        assert result.best.evaluated() == (pytest.approx(130.0), pytest.approx(20.0))

    def test_inexact_target(self) -> None:
        result = find_series_pair(12_340, E24, threshold=0.01)
        assert not result.target_in_series
        assert result.best.evaluated() == (pytest.approx(12_000.0), pytest.approx(330.0))
        assert result.error == pytest.approx(10 / 12_340)

    def test_sweep_stops_at_crossover(self) -> None:
        result = find_series_pair(12_340, E24, threshold=0.101)
        assert result.matches
        for match in result.matches:
            a, b = match.evaluated()
            assert a >= b

    def test_best_is_minimum_of_reported_matches(self) -> None:
        result = find_series_pair(777, E96, threshold=0.101)
        assert result.error == min(match.error for match in result.matches)


class TestRatioPair:
    def test_exact_ratio(self) -> None:
        result = find_ratio_pair(2.0, E24)
        assert result.topology is Topology.RATIO
        assert result.error == pytest.approx(0.0, abs=1e-12)
        a, b = result.best.evaluated()
        assert a / b == pytest.approx(2.0)

    def test_denominator_sweeps_one_decade(self) -> None:
        """1k up to and including 10k: 24 values of one decade plus 10k itself."""
        result = find_ratio_pair(2.0, E24)
        assert result.iterations == E24.n + 1

    def test_denominator_bounded(self) -> None:
        result = find_ratio_pair(3.14159, E24, threshold=0.101)
        assert result.matches
        for match in result.matches:
            _a, b = match.evaluated()
            assert 1_000 <= b <= SWEEP_LIMIT

    def test_irrational_ratio(self) -> None:
        result = find_ratio_pair(3.14159, E96)
        a, b = result.best.evaluated()
        assert a / b == pytest.approx(3.14159, rel=result.error + 1e-12)
        assert result.error < 0.005

    def test_fractional_ratio(self) -> None:
        result = find_ratio_pair(0.5, E24)
        a, b = result.best.evaluated()
        assert a / b == pytest.approx(0.5)


class TestPairValidation:
    @pytest.mark.parametrize("search", [find_parallel_pair, find_series_pair, find_ratio_pair])
    @pytest.mark.parametrize("target", [0, -10, float("nan"), float("inf")])
    def test_non_positive_target(self, search, target: float) -> None:
        with pytest.raises(InvalidInputError, match="positive"):
            search(target, E24)

    @pytest.mark.parametrize("search", [find_parallel_pair, find_series_pair, find_ratio_pair])
    @pytest.mark.parametrize("threshold", [-0.01, 0.102, 1.0])
    def test_threshold_out_of_range(self, search, threshold: float) -> None:
        with pytest.raises(InvalidInputError, match="threshold"):
            search(100, E24, threshold=threshold)

    def test_unknown_series(self) -> None:
        with pytest.raises(InvalidInputError, match="Unknown series"):
            find_parallel_pair(100, "E5")

    def test_threshold_upper_bound_inclusive(self) -> None:
        result = find_parallel_pair(100, E24, threshold=0.101)
        assert result.threshold == 0.101


class TestTargetInSeries:
    def test_series_value(self) -> None:
        assert target_in_series(150, E24)
        assert target_in_series(4.7e3, "E12")

    def test_not_a_series_value(self) -> None:
        assert not target_in_series(12_340, E24)
        assert not target_in_series(130, "E12")

    @pytest.mark.parametrize("target", [150, 4_700, 12_340, 0.33])
    def test_agrees_with_parallel_search(self, target: float) -> None:
        assert target_in_series(target, E24) == find_parallel_pair(target, E24).target_in_series

    def test_rejects_invalid_target(self) -> None:
        with pytest.raises(InvalidInputError, match="positive"):
            target_in_series(-1, E24)


class TestSearchRange:
    """Targets at the ends of the float range fail with errors naming the input."""

    @pytest.mark.parametrize("search", [find_parallel_pair, find_series_pair, find_ratio_pair])
    @pytest.mark.parametrize("target", [5e-324, 1e-310, 1e-101, 1e101, 1e300, 1.7e308])
    def test_out_of_range_target(self, search, target: float) -> None:
        with pytest.raises(InvalidInputError, match=re.escape(repr(target))):
            search(target, E24)

    @pytest.mark.parametrize("search", [find_parallel_pair, find_series_pair, find_ratio_pair])
    @pytest.mark.parametrize("target", [MIN_SEARCH_VALUE, 4.321e-97, 4.321e97, MAX_SEARCH_VALUE])
    def test_range_limits_searched(self, search, target: float) -> None:
        result = search(target, E24, threshold=0.101)
        assert all(math.isfinite(value) for value in result.best.evaluated())
        assert result.error < 0.05
