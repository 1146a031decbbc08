"""Tests for partition selection of data parts."""

import pytest

from backup_catalog.catalog.models import Part, TableMetadata
from backup_catalog.catalog.partitions import (
    filter_parts_by_partitions,
    is_part_in_partition,
    parse_partitions,
    partition_id_of,
)


def _table() -> TableMetadata:
    return TableMetadata(
        database="default",
        table="t1",
        parts={
            "default": [
                Part(name="20220101_1_1_0"),
                Part(name="20220102_2_2_0"),
                Part(name="20220103_3_3_0"),
            ],
            "s3": [Part(name="20220101_4_4_0")],
        },
    )


class TestPartitionId:
    def test_prefix_before_underscore(self) -> None:
        assert partition_id_of("20220102_2_2_0") == "20220102"
        assert partition_id_of("all_1_1_0") == "all"
        assert partition_id_of("noseparator") == "noseparator"

    def test_membership(self) -> None:
        assert is_part_in_partition("20220102_2_2_0", {"20220102"}) is True
        assert is_part_in_partition("202201020_2_2_0", {"20220102"}) is False


class TestFilterParts:
    @pytest.mark.parametrize("selection", [None, set()])
    def test_empty_selection_is_noop(self, selection) -> None:
        table = _table()
        before = table.model_copy(deep=True)
        filter_parts_by_partitions(table, selection)
        assert table == before

    def test_keeps_matching_parts_on_every_disk(self) -> None:
        table = _table()
        filter_parts_by_partitions(table, {"20220102", "20220101"})
        assert [p.name for p in table.parts["default"]] == ["20220101_1_1_0", "20220102_2_2_0"]
        assert [p.name for p in table.parts["s3"]] == ["20220101_4_4_0"]

    def test_disk_without_matches_is_kept_empty(self) -> None:
        table = _table()
        filter_parts_by_partitions(table, {"20220103"})
        assert table.parts["s3"] == []
        assert len(table.parts["default"]) == 1

    def test_never_increases_part_count(self) -> None:
        table = _table()
        counts = {disk: len(parts) for disk, parts in table.parts.items()}
        filter_parts_by_partitions(table, {"20220101", "nope"})
        for disk, parts in table.parts.items():
            assert len(parts) <= counts[disk]


class TestParsePartitions:
    def test_comma_list(self) -> None:
        assert parse_partitions("20220102, 20220103,") == {"20220102", "20220103"}

    def test_repeated_values(self) -> None:
        assert parse_partitions(["a,b", "c"]) == {"a", "b", "c"}

    @pytest.mark.parametrize("value", [None, "", []])
    def test_empty(self, value) -> None:
        assert parse_partitions(value) == set()
