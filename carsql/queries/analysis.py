"""
Named analytical queries over the car_prices catalog.

Each function is fixed SQL run through the store; the engine does the
grouping, joining and NULL-skipping.
"""
from __future__ import annotations

from typing import Optional

from carsql.config import BASE_TABLE, COLUMNS, INDEXES, SPECS_TABLE, SUMMARY_VIEW
from carsql.data.schemas import Ack, ResultSet
from carsql.data.store import CarStore
from carsql.errors import SchemaError


# ---------------------------------------------------------------------------
# Artifact definitions
# ---------------------------------------------------------------------------

CAR_SPECS_SQL = f"""
CREATE TABLE IF NOT EXISTS {SPECS_TABLE} AS
SELECT DISTINCT make, body, transmission
FROM {BASE_TABLE}
"""

MAKE_YEAR_AGGREGATION_SQL = f"""
SELECT make, year, COUNT(*) AS car_count, ROUND(AVG(sellingprice), 2) AS avg_price
FROM {BASE_TABLE}
GROUP BY make, year
"""

MAKE_YEAR_VIEW_SQL = f"CREATE VIEW IF NOT EXISTS {SUMMARY_VIEW} AS{MAKE_YEAR_AGGREGATION_SQL}"


def index_sql(name: str, column: str) -> str:
    return f"CREATE INDEX IF NOT EXISTS {name} ON {BASE_TABLE} ({column})"


def create_car_specs(store: CarStore) -> Ack:
    return store.run(CAR_SPECS_SQL)


def create_make_year_view(store: CarStore) -> Ack:
    return store.run(MAKE_YEAR_VIEW_SQL)


def create_indexes(store: CarStore) -> list[Ack]:
    return [store.run(index_sql(name, col)) for name, col in INDEXES.items()]


# ---------------------------------------------------------------------------
# Aggregates and subqueries
# ---------------------------------------------------------------------------

def _check_columns(columns) -> None:
    unknown = [c for c in columns if c not in COLUMNS]
    if unknown:
        raise SchemaError(f"no such column: {unknown[0]}")


def global_average_price(store: CarStore) -> Optional[float]:
    result = store.query(f"SELECT AVG(sellingprice) AS avg_price FROM {BASE_TABLE}")
    value = result.rows[0][0]
    return None if value is None else float(value)


def average_price_by(store: CarStore, *columns: str, limit: int | None = None) -> ResultSet:
    """Mean non-NULL selling price per group, 2 decimals, highest first."""
    if not columns:
        columns = ("make",)
    _check_columns(columns)
    cols = ", ".join(columns)
    sql = (
        f"SELECT {cols}, COUNT(sellingprice) AS sales, ROUND(AVG(sellingprice), 2) AS avg_price "
        f"FROM {BASE_TABLE} GROUP BY {cols} ORDER BY avg_price DESC"
    )
    if limit:
        sql += f" LIMIT {int(limit)}"
    return store.query(sql)


def above_average_sales(store: CarStore, limit: int | None = None) -> ResultSet:
    """Sales priced strictly above the table-wide mean.

    The mean is an uncorrelated scalar subquery, which SQLite evaluates once.
    """
    sql = (
        f"SELECT year, make, model, trim, state, sellingprice FROM {BASE_TABLE} "
        f"WHERE sellingprice > (SELECT AVG(sellingprice) FROM {BASE_TABLE}) "
        f"ORDER BY sellingprice DESC"
    )
    if limit:
        sql += f" LIMIT {int(limit)}"
    return store.query(sql)


def max_price_per_make(store: CarStore) -> ResultSet:
    """Every sale whose price equals its make's maximum. Ties all come back."""
    sql = f"""
    SELECT c.make, c.model, c.year, c.sellingprice
    FROM {BASE_TABLE} AS c
    JOIN (
        SELECT make, MAX(sellingprice) AS max_price
        FROM {BASE_TABLE}
        GROUP BY make
    ) AS m ON c.make = m.make AND c.sellingprice = m.max_price
    ORDER BY c.sellingprice DESC, c.make
    """
    return store.query(sql)


def make_year_summary(store: CarStore, make: str | None = None) -> ResultSet:
    """Read the make/year view; always computed from the current base table."""
    if make:
        return store.query(
            f"SELECT * FROM {SUMMARY_VIEW} WHERE make = :make ORDER BY year",
            {"make": make},
        )
    return store.query(f"SELECT * FROM {SUMMARY_VIEW} ORDER BY make, year")


def filter_sales(
    store: CarStore,
    make: str | None = None,
    year: int | None = None,
    state: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    limit: int | None = None,
) -> ResultSet:
    """Sales matching the given filters, most expensive first."""
    where, params = [], {}
    if make is not None:
        where.append("make = :make")
        params["make"] = make
    if year is not None:
        where.append("year = :year")
        params["year"] = year
    if state is not None:
        where.append("state = :state")
        params["state"] = state
    if min_price is not None:
        where.append("sellingprice >= :min_price")
        params["min_price"] = min_price
    if max_price is not None:
        where.append("sellingprice <= :max_price")
        params["max_price"] = max_price

    sql = f"SELECT year, make, model, trim, body, state, odometer, sellingprice FROM {BASE_TABLE}"
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY sellingprice DESC"
    if limit:
        sql += f" LIMIT {int(limit)}"
    return store.query(sql, params or None)


# ---------------------------------------------------------------------------
# Joins against car_specs
# ---------------------------------------------------------------------------

def inner_join_specs(store: CarStore) -> ResultSet:
    """Sales with a matching (make, body) spec row."""
    return store.query(f"""
    SELECT c.make, c.model, c.body, s.transmission AS spec_transmission, c.sellingprice
    FROM {BASE_TABLE} AS c
    INNER JOIN {SPECS_TABLE} AS s ON c.make = s.make AND c.body = s.body
    """)


def left_join_specs(store: CarStore) -> ResultSet:
    """Every sale; spec columns NULL when unmatched."""
    return store.query(f"""
    SELECT c.make, c.model, c.body, s.transmission AS spec_transmission, c.sellingprice
    FROM {BASE_TABLE} AS c
    LEFT JOIN {SPECS_TABLE} AS s ON c.make = s.make AND c.body = s.body
    """)


def right_join_specs(store: CarStore) -> ResultSet:
    """Every spec row; sale columns NULL when unmatched (left join, operands swapped)."""
    return store.query(f"""
    SELECT s.make, s.body, s.transmission, c.model, c.sellingprice
    FROM {SPECS_TABLE} AS s
    LEFT JOIN {BASE_TABLE} AS c ON c.make = s.make AND c.body = s.body
    """)
