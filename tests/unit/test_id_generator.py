"""Tests for sm_common.id_generator and sm_common.datetime_utils."""

from datetime import UTC, datetime

import pytest

from src.sm_common import id_generator
from src.sm_common.datetime_utils import to_iso
from src.sm_common.id_generator import OrderIdGenerator, generate_id


class TestOrderIdGenerator:
    def test_returns_numeric_str(self) -> None:
        result = OrderIdGenerator(node=1).next_id()
        assert isinstance(result, str)
        assert result.isdigit()

    def test_unique_ids(self) -> None:
        gen = OrderIdGenerator(node=1)
        ids = {gen.next_id() for _ in range(5000)}
        assert len(ids) == 5000

    def test_monotonically_increasing(self) -> None:
        gen = OrderIdGenerator(node=1)
        prev = int(gen.next_id())
        for _ in range(100):
            current = int(gen.next_id())
            assert current > prev
            prev = current

    def test_clock_step_back_keeps_order(self, monkeypatch: pytest.MonkeyPatch) -> None:
        gen = OrderIdGenerator(node=3)
        ticks = iter([2_000_000_000_000, 1_999_999_999_000])
        monkeypatch.setattr(id_generator, "_now_ms", lambda: next(ticks))

        first = int(gen.next_id())
        second = int(gen.next_id())

        assert second == first + 1

    def test_counter_wrap_after_clock_step_back_does_not_wait(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        gen = OrderIdGenerator(node=3)
        calls = {"n": 0}

        def frozen_behind() -> int:
            calls["n"] += 1
            if calls["n"] == 1:
                return 2_000_000_005_000
            if calls["n"] > 10_000:
                raise AssertionError("generator is polling the clock")
            return 2_000_000_000_000

        monkeypatch.setattr(id_generator, "_now_ms", frozen_behind)

        ids = [int(gen.next_id()) for _ in range(4100)]

        assert ids == sorted(ids)
        assert len(set(ids)) == 4100
        assert (ids[-1] >> 22) - (ids[0] >> 22) == 1

    def test_node_is_encoded(self) -> None:
        value = int(OrderIdGenerator(node=5).next_id())
        assert (value >> 12) & 0x3FF == 5

    @pytest.mark.parametrize("node", [-1, 1024])
    def test_rejects_out_of_range_node(self, node: int) -> None:
        with pytest.raises(ValueError):
            OrderIdGenerator(node=node)

    def test_module_level_generate_id(self) -> None:
        assert generate_id() != generate_id()


class TestToIso:
    def test_formats_aware_datetime(self) -> None:
        value = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert to_iso(value) == "2026-01-02T03:04:05+00:00"

    def test_none_is_empty(self) -> None:
        assert to_iso(None) == ""
