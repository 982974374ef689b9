import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from sqla_auto_generator.colored_logging import log_progress
from sqla_auto_generator.constants import CatalogFilters
from sqla_auto_generator.exceptions import CatalogError


# --- Data Structures for Introspection Results ---
@dataclass(frozen=True)
class EnumTypeRow:
    """One label of a database enum type."""
    type_name: str
    value: str


@dataclass(frozen=True)
class CatalogColumn:
    """Holds the raw catalog information about a single column."""
    name: str
    type_name: str # Normalized: schema qualification stripped
    size: Optional[int]
    nullable: bool


@dataclass(frozen=True)
class ForeignKeyTarget:
    """The table a foreign key column points to."""
    table: str
    schema: Optional[str] = None


@dataclass
class TableSnapshot:
    """Everything read from the catalog about one table."""
    schema: str
    name: str
    columns: List[CatalogColumn] = field(default_factory=list)
    foreign_keys: Dict[str, ForeignKeyTarget] = field(default_factory=dict) # {column_name: target}


@dataclass
class CatalogSnapshot:
    """Raw catalog rows for a whole generation run."""
    enum_rows: List[EnumTypeRow] = field(default_factory=list)
    tables: List[TableSnapshot] = field(default_factory=list)


logger = logging.getLogger(__name__)


# --- Catalog Queries ---
ENUM_TYPES_SQL = text(
    """
    SELECT t.typname, e.enumlabel
    FROM pg_type AS t
       JOIN pg_enum AS e ON t.oid = e.enumtypid
    ORDER BY e.enumsortorder, t.typname
    """
)

TABLES_SQL = text(
    """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = :schema AND table_type = 'BASE TABLE'
    ORDER BY table_name
    """
)

# Domains report their own name rather than the base type. Types living
# outside pg_catalog and the table's own schema are reported schema-qualified,
# the same way JDBC metadata reports them. Binary precisions of integer and
# floating point types are reported as decimal digits, as JDBC COLUMN_SIZE does.
COLUMNS_SQL = text(
    """
    SELECT c.column_name,
           CASE WHEN COALESCE(c.domain_schema, c.udt_schema) IN ('pg_catalog', c.table_schema)
                THEN COALESCE(c.domain_name, c.udt_name)
                ELSE '"' || COALESCE(c.domain_schema, c.udt_schema) || '"."'
                     || COALESCE(c.domain_name, c.udt_name) || '"'
           END AS type_name,
           CASE c.udt_name
                WHEN 'int2' THEN 5
                WHEN 'int4' THEN 10
                WHEN 'int8' THEN 19
                WHEN 'float4' THEN 8
                WHEN 'float8' THEN 17
                ELSE COALESCE(c.character_maximum_length, c.numeric_precision)
           END AS column_size,
           c.is_nullable
    FROM information_schema.columns AS c
    WHERE c.table_schema = :schema AND c.table_name = :table
    ORDER BY c.ordinal_position
    """
)

FOREIGN_KEYS_SQL = text(
    """
    SELECT a.attname AS column_name, rt.relname AS referenced_table, rn.nspname AS referenced_schema
    FROM pg_constraint AS c
       JOIN pg_class AS t ON t.oid = c.conrelid
       JOIN pg_namespace AS n ON n.oid = t.relnamespace
       JOIN pg_class AS rt ON rt.oid = c.confrelid
       JOIN pg_namespace AS rn ON rn.oid = rt.relnamespace
       CROSS JOIN LATERAL unnest(c.conkey) AS k(attnum)
       JOIN pg_attribute AS a ON a.attrelid = c.conrelid AND a.attnum = k.attnum
    WHERE c.contype = 'f' AND n.nspname = :schema AND t.relname = :table
    ORDER BY c.conname, k.attnum
    """
)


# --- Helper Functions ---
def normalize_type_name(type_name: str) -> str:
    """Strips quotes and schema qualification: '"billing"."currency"' -> 'currency'."""
    if "." in type_name:
        return type_name.replace('"', "").split(".")[-1]
    return type_name


def is_migration_table(table_name: str) -> bool:
    return table_name.startswith(CatalogFilters.EXCLUDED_TABLE_PREFIX)


class PostgresCatalogReader:
    """
    Reads raw catalog rows from a live PostgreSQL connection.

    The reader never interprets what it reads; classification happens in the
    mapper. Query failures surface as CatalogError and are not retried.
    """

    def __init__(self, connection: Connection):
        self.connection = connection

    def _fetch(self, statement, schema: str = None, table: str = None):
        params = {"schema": schema, "table": table}
        params = {key: value for key, value in params.items() if value is not None}
        try:
            return self.connection.execute(statement, params).all()
        except SQLAlchemyError as e:
            raise CatalogError(f"Catalog query failed: {e}", schema=schema, table=table) from e

    def list_enum_types(self) -> List[EnumTypeRow]:
        """Lists enum names and labels in a single query, in server sort order."""
        rows = self._fetch(ENUM_TYPES_SQL)
        return [EnumTypeRow(type_name=row[0], value=row[1]) for row in rows]

    def list_tables(self, schema: str) -> List[str]:
        rows = self._fetch(TABLES_SQL, schema=schema)
        table_names = []
        for row in rows:
            if is_migration_table(row[0]):
                logger.debug(f"Skipping migration table '{schema}.{row[0]}'.")
                continue
            table_names.append(row[0])
        return table_names

    def list_columns(self, schema: str, table: str) -> List[CatalogColumn]:
        rows = self._fetch(COLUMNS_SQL, schema=schema, table=table)
        return [
            CatalogColumn(
                name=row[0],
                type_name=normalize_type_name(row[1]),
                size=row[2],
                nullable=(row[3] == "YES"),
            )
            for row in rows
        ]

    def list_foreign_keys(self, schema: str, table: str) -> Dict[str, ForeignKeyTarget]:
        rows = self._fetch(FOREIGN_KEYS_SQL, schema=schema, table=table)
        return {row[0]: ForeignKeyTarget(table=row[1], schema=row[2]) for row in rows}


# --- Main Introspection Function ---
def introspect_schema(reader: PostgresCatalogReader, schemas: Sequence[str]) -> CatalogSnapshot:
    """Reads enum types and every table of the given schemas."""
    snapshot = CatalogSnapshot()

    log_progress(logger, "Loading enum types...")
    snapshot.enum_rows = reader.list_enum_types()
    logger.info(f"Found {len(snapshot.enum_rows)} enum labels.")

    for schema in schemas:
        log_progress(logger, f"Introspecting schema '{schema}'...")
        table_names = reader.list_tables(schema)
        logger.info(f"Found {len(table_names)} tables in schema '{schema}'.")

        for table_name in table_names:
            logger.info(f"Processing table: {schema}.{table_name}")
            snapshot.tables.append(
                TableSnapshot(
                    schema=schema,
                    name=table_name,
                    columns=reader.list_columns(schema, table_name),
                    foreign_keys=reader.list_foreign_keys(schema, table_name),
                )
            )

    return snapshot
