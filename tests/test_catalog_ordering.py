"""Tests for create/drop ordering by statement shape."""

import pytest

from backup_catalog.catalog.models import TableMetadata
from backup_catalog.catalog.ordering import (
    PRIORITIES,
    TableKind,
    classify_query,
    engine_priority,
    sort_tables,
)

BASE = "CREATE TABLE db.t (id UInt64) ENGINE = MergeTree ORDER BY id"
INNER = "CREATE TABLE db.`.inner.mv` (id UInt64) ENGINE = MergeTree ORDER BY id"
INNER_ID = "CREATE TABLE db.`.inner_id.5f1c` (id UInt64) ENGINE = MergeTree ORDER BY id"
VIEW = "CREATE VIEW db.v AS SELECT * FROM db.t"
MV = "CREATE MATERIALIZED VIEW db.mv TO db.dst AS SELECT * FROM db.t"
DICT = "CREATE DICTIONARY db.d (id UInt64) PRIMARY KEY id SOURCE(CLICKHOUSE(TABLE 't'))"
DIST = "CREATE TABLE db.dist (id UInt64) ENGINE = Distributed('c', 'db', 't')"
KAFKA = "CREATE TABLE db.q (s String) ENGINE = Kafka SETTINGS kafka_broker_list = 'k:9092'"


def _t(table: str, query: str) -> TableMetadata:
    return TableMetadata(database="db", table=table, query=query)


class TestClassifyQuery:
    @pytest.mark.parametrize(
        "query,kind",
        [
            (BASE, TableKind.PLAIN),
            ("", TableKind.PLAIN),
            (INNER, TableKind.INNER_TABLE),
            (INNER_ID, TableKind.INNER_TABLE),
            (VIEW, TableKind.VIEW),
            (MV, TableKind.VIEW),
            ("CREATE LIVE VIEW db.lv AS SELECT 1", TableKind.VIEW),
            ("CREATE WINDOW VIEW db.wv AS SELECT 1", TableKind.VIEW),
            ("ATTACH WINDOW VIEW db.wv AS SELECT 1", TableKind.VIEW),
            ("ATTACH MATERIALIZED VIEW db.mv AS SELECT 1", TableKind.VIEW),
            (DICT, TableKind.DICTIONARY),
            (DIST, TableKind.STREAMING),
            (KAFKA, TableKind.STREAMING),
            ("CREATE TABLE db.r (s String) ENGINE = RabbitMQ", TableKind.STREAMING),
        ],
    )
    def test_classification(self, query: str, kind: TableKind) -> None:
        assert classify_query(query) is kind

    def test_streaming_marker_wins_over_view_prefix(self) -> None:
        query = "CREATE MATERIALIZED VIEW db.mv ENGINE = Distributed('c', 'db', 't') AS SELECT 1"
        assert classify_query(query) is TableKind.STREAMING

    def test_attach_table_with_inner_marker_is_plain(self) -> None:
        assert classify_query("ATTACH TABLE db.`.inner.mv` (id UInt64)") is TableKind.PLAIN


class TestEnginePriority:
    def test_lookup_table_flips_only_views_and_inner_tables(self) -> None:
        flipped = {k for k, (c, d) in PRIORITIES.items() if c != d}
        assert flipped == {TableKind.VIEW, TableKind.INNER_TABLE}

    @pytest.mark.parametrize(
        "query,create,drop",
        [(BASE, 0, 0), (INNER, 1, 2), (MV, 2, 1), (DICT, 3, 3), (DIST, 4, 4)],
    )
    def test_priorities(self, query: str, create: int, drop: int) -> None:
        assert engine_priority(query, drop=False) == create
        assert engine_priority(query, drop=True) == drop


class TestSortTables:
    def test_create_order(self) -> None:
        tables = [_t("v", MV), _t(".inner.t", INNER), _t("t", BASE)]
        sort_tables(tables, drop=False)
        assert [t.table for t in tables] == ["t", ".inner.t", "v"]

    def test_drop_order(self) -> None:
        tables = [_t("v", MV), _t(".inner.t", INNER), _t("t", BASE)]
        sort_tables(tables, drop=True)
        assert [t.table for t in tables] == ["v", ".inner.t", "t"]

    @pytest.mark.parametrize("drop", [False, True])
    def test_streaming_tables_always_last(self, drop: bool) -> None:
        tables = [_t("dist", DIST), _t("d", DICT), _t("v", VIEW), _t("t", BASE)]
        sort_tables(tables, drop=drop)
        assert tables[-1].table == "dist"
        assert tables[-2].table == "d"

    def test_sort_is_stable(self) -> None:
        tables = [_t("c", BASE), _t("v2", VIEW), _t("a", BASE), _t("v1", VIEW), _t("b", BASE)]
        sort_tables(tables, drop=False)
        assert [t.table for t in tables] == ["c", "a", "b", "v2", "v1"]
