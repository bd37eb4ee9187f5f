from __future__ import annotations

import pytest

from db.errors import InvalidQueryError
from db.query_builder import (
    Statement,
    build_delete,
    build_insert,
    build_select,
    build_truncate,
    build_update,
    quote_identifier,
    quote_value,
)


def test_select_defaults():
    assert build_select("t", "*", "", {}, -1, 10) == "select * from `t`"


def test_select_sorted_and_paged():
    sql = build_select("t", "*", "", {"name": "asc"}, 0, 5)
    assert sql == "select * from `t` order by name asc limit 0,5"


def test_select_filter_fields_and_multiple_sort_columns():
    sql = build_select(" product ", " id, name ", "price > ?", {"price": "DESC", "name": "asc"})
    assert sql == "select id, name from `product` where price > ? order by price desc, name asc"


@pytest.mark.parametrize("limit", [-5, 0, 1, 10, 1000])
def test_negative_offset_never_pages(limit):
    assert "limit" not in build_select("t", offset=-1, limit=limit)


def test_limit_is_coerced_to_at_least_one():
    assert build_select("t", offset=20, limit=0).endswith(" limit 20,1")


def test_blank_fields_fall_back_to_star():
    assert build_select("t", "   ") == "select * from `t`"


@pytest.mark.parametrize("table", ["", "   ", None])
def test_blank_table_is_no_query(table):
    assert build_select(table) is None
    assert build_insert(table, {"a": 1}) is None
    assert build_update(table, {"a": 1}, "id = ?", [1]) is None
    assert build_delete(table, "id = ?", [1]) is None
    assert build_truncate(table) is None


def test_join_tables_are_quoted_individually():
    assert build_select("a, b", "a.id") == "select a.id from `a`, `b`"


@pytest.mark.parametrize(
    "sort_by",
    [{"name": "sideways"}, {"name; drop table t": "asc"}, {"1=1 --": "desc"}],
)
def test_bad_sort_specification_is_rejected(sort_by):
    with pytest.raises(InvalidQueryError):
        build_select("t", sort_by=sort_by)


def test_insert_binds_every_value():
    stmt = build_insert("client", {"firstName": "Ann", "city": "Nairobi"})
    assert stmt == Statement(
        "insert into `client` (`firstName`, `city`) values (?, ?)", ("Ann", "Nairobi")
    )


def test_insert_without_data_is_no_query():
    assert build_insert("client", {}) is None
    assert build_insert("client", None) is None


def test_update_appends_where_values_after_set_values():
    stmt = build_update("client", {"city": "Mombasa", "country": "KE"}, " id = ? ", [7])
    assert stmt.sql == "update `client` set `city` = ?, `country` = ? where id = ?"
    assert stmt.params == ("Mombasa", "KE", 7)


def test_update_requires_data_and_where():
    assert build_update("client", {}, "id = ?", [1]) is None
    assert build_update("client", {"a": 1}, "  ", [1]) is None


def test_delete_requires_where():
    assert build_delete("client", "") is None
    stmt = build_delete("client", "id = :id", {"id": 3})
    assert stmt.sql == "delete from `client` where id = :id"
    assert stmt.params == {"id": 3}


def test_truncate():
    assert build_truncate("log").sql == "truncate `log`"


def test_identifier_quoting_escapes_backticks():
    assert quote_identifier("we`ird") == "`we``ird`"
    assert quote_identifier("shop.client") == "`shop`.`client`"


def test_value_quoting():
    assert quote_value(None) == "NULL"
    assert quote_value(5) == "'5'"
    assert quote_value("O'Brien") == "'O\\'Brien'"
    assert quote_value("a\nb") == "'a\\nb'"
    assert quote_value(True) == "'1'"


def test_update_with_mapping_where_bind_uses_values():
    stmt = build_update("product", {"price": 10}, "id = ?", {"id": 5})
    assert stmt.params == (10, 5)
