"""
QUERY GATEWAY - Run one fixed read statement and hand back schema-less rows

Purpose:
    1. Open a connection to the store named by a URI (one per call, nothing pooled)
    2. Have the store plan the statement, then execute it as-is (no parameters,
       no query building)
    3. Pull rows one by one and classify every cell into a TypedValue
    4. Project each row into a dict and collect them in store order

Data Flow:
    store -> cursor rows -> build_row() -> project() -> List[dict] -> caller

All or nothing: any failure aborts the call with a GatewayError subclass and
no partial result is returned.
"""

import asyncio
from typing import Any, Iterable, List, Sequence

from sqlalchemy.engine import Connection, CursorResult
from sqlalchemy.exc import SQLAlchemyError

from bridge.core.database import create_store_engine
from bridge.core.errors import (
    QueryExecutionError,
    RowDecodeError,
    StoreConnectionError,
)
from bridge.core.store.projector import ProjectedRow, project
from bridge.core.store.values import ColumnDescriptor, build_row, is_single_precision


# Raw SQL straight to the driver: no bind parameter parsing, no parameter collection.
# One row per driver fetch so a failure is pinned to the row being pulled.
_EXECUTION_OPTIONS = {
    "stream_results": True,
    "max_row_buffer": 1,
    "no_parameters": True,
}

# Dialects that accept "EXPLAIN <select>" and the statements that are planned first
_PLANNING_DIALECTS = frozenset({"sqlite", "mysql", "mariadb", "postgresql"})
_PLANNED_KEYWORDS = frozenset({"SELECT", "WITH"})

# Failures a driver can raise while opening a connection
_CONNECT_ERRORS = (SQLAlchemyError, OSError, ImportError, asyncio.TimeoutError)

# Failures a driver can raise while fetching or decoding a row
_FETCH_ERRORS = (SQLAlchemyError, ValueError, TypeError)


# ============================================================================
# STEP 1: DESCRIBE COLUMNS
# ============================================================================


def describe_columns(
    description: Sequence[Sequence[Any]], dialect_name: str
) -> List[ColumnDescriptor]:
    """
    Turn a DBAPI cursor description into column descriptors.

    Names are taken exactly as the store reports them, so duplicate names
    ("SELECT 1 AS x, 2 AS x") stay as two separate columns.
    """
    return [
        ColumnDescriptor(
            name=str(entry[0]),
            single_precision=is_single_precision(dialect_name, entry[1]),
        )
        for entry in description
    ]


# ============================================================================
# STEP 2: ITERATE + PROJECT
# ============================================================================


def drain_rows(
    rows: Iterable[Sequence[Any]], columns: Sequence[ColumnDescriptor]
) -> List[ProjectedRow]:
    """
    Pull every row from a (non restartable) row iterator and project it.

    Args:
        rows: Lazy row source, each item is the positional values of one row
        columns: Column descriptors in store order

    Returns:
        Projected rows, same order and count as the source yielded

    Raises:
        RowDecodeError: the driver failed on some row; nothing collected so far is kept
    """
    projected_rows: List[ProjectedRow] = []
    iterator = iter(rows)
    row_number = 0

    while True:
        row_number += 1
        try:
            values = next(iterator)
        except StopIteration:
            break
        except _FETCH_ERRORS as exc:
            raise RowDecodeError(
                f"Error fetching row {row_number}: {exc}", row_number
            ) from exc

        try:
            row = build_row(columns, tuple(values))
        except _FETCH_ERRORS as exc:
            raise RowDecodeError(
                f"Error decoding row {row_number}: {exc}", row_number
            ) from exc

        projected_rows.append(project(row))

    return projected_rows


# ============================================================================
# STEP 3: PLAN + EXECUTE
# ============================================================================


def check_statement(connection: Connection, statement: str) -> bool:
    """
    Ask the store to plan a read statement without running it.

    Parse errors, unknown tables and missing privileges show up here, so any
    failure after a successful plan belongs to the rows, not the statement.

    Returns:
        True when the statement was planned, False when the dialect or the
        statement kind has no plan step (its failures stay QueryExecutionError)

    Raises:
        QueryExecutionError: the store refused to plan the statement
    """
    words = statement.split(None, 1)
    if connection.dialect.name not in _PLANNING_DIALECTS or not words:
        return False
    if words[0].upper() not in _PLANNED_KEYWORDS:
        return False

    try:
        connection.exec_driver_sql(
            "EXPLAIN " + statement, execution_options={"no_parameters": True}
        ).close()
    except SQLAlchemyError as exc:
        raise QueryExecutionError(f"Failed to execute query: {exc}") from exc
    return True


def _execute_and_collect(connection: Connection, statement: str) -> List[ProjectedRow]:
    # Runs inside AsyncConnection.run_sync, driver calls are awaited under the hood
    planned = check_statement(connection, statement)

    try:
        result: CursorResult = connection.exec_driver_sql(
            statement, execution_options=_EXECUTION_OPTIONS
        )
    except SQLAlchemyError as exc:
        if planned:
            # Drivers step to the first row (sorted plans: every row) while executing
            raise RowDecodeError(f"Error fetching row 1: {exc}", 1) from exc
        raise QueryExecutionError(f"Failed to execute query: {exc}") from exc

    # Statements without a result set (UPDATE, DDL...) produce no rows
    if not result.returns_rows:
        result.close()
        return []

    columns = describe_columns(
        result.cursor.description or [], connection.dialect.name
    )
    # On failure the cursor is released by the connection close in run_query
    rows = drain_rows(result, columns)
    result.close()
    return rows


# ============================================================================
# MAIN FUNCTION
# ============================================================================


async def run_query(connection_uri: str, statement: str) -> List[ProjectedRow]:
    """
    Connect -> execute -> iterate -> project -> assemble.

    Usage in FastAPI:
        @router.get("/rows")
        async def rows(settings: settings_dep):
            return await run_query(settings.DATABASE_URL, settings.QUERY_STATEMENT)

    Raises:
        StoreConnectionError: bad URI, missing driver, store unreachable, auth failure
        QueryExecutionError: statement rejected by the store
        RowDecodeError: a row failed after the statement was accepted (the whole
            call fails)
    """
    try:
        engine = create_store_engine(connection_uri)
    except _CONNECT_ERRORS as exc:
        raise StoreConnectionError(f"Database connection error: {exc}") from exc

    try:
        try:
            connection = await engine.connect()
        except _CONNECT_ERRORS as exc:
            raise StoreConnectionError(f"Failed to get connection: {exc}") from exc

        try:
            return await connection.run_sync(_execute_and_collect, statement)
        finally:
            await connection.close()
    finally:
        # Released on every exit path, success or failure
        await engine.dispose()
