"""
Intermediate representation builder for SQLAlchemy Auto Generator.

This module turns the raw rows read from the catalog into the immutable
domain model consumed by the code generators:

- enum labels are grouped into EnumDef values (label order preserved)
- every column is classified as a foreign key, an enum column or a scalar

Classification precedence is fixed: a column listed in its table's foreign
key map is a ForeignKeyColumn even when its type name matches an enum; only
then is the enum name set consulted; everything else is a ScalarColumn.
Classification never fails. Unknown scalar types are reported later by the
type mapper, and referenced tables are not checked to exist in the scanned
schemas.

Example:
    >>> model = build_intermediate_representation(snapshot.enum_rows, snapshot.tables)
    >>> [table.name for table in model.tables]
    ['accounts', 'users']
"""

import logging
from typing import Dict, Iterable, List, Mapping, Set

from sqla_auto_generator.colored_logging import log_highlight
from sqla_auto_generator.domain.models import (
    ColumnDef,
    EnumColumn,
    EnumDef,
    ForeignKeyColumn,
    ScalarColumn,
    SchemaModel,
    TableDef,
)
from sqla_auto_generator.introspection_postgres import (
    CatalogColumn,
    EnumTypeRow,
    ForeignKeyTarget,
    TableSnapshot,
)


logger = logging.getLogger(__name__)


def build_enum_defs(enum_rows: Iterable[EnumTypeRow]) -> List[EnumDef]:
    """Groups enum labels by type name, keeping first-seen group order and label order."""
    grouped: Dict[str, List[str]] = {}
    for row in enum_rows:
        grouped.setdefault(row.type_name, []).append(row.value)
    return [EnumDef(name=name, values=tuple(values)) for name, values in grouped.items()]


def classify_column(
    column: CatalogColumn,
    foreign_keys: Mapping[str, ForeignKeyTarget],
    enum_names: Set[str],
) -> ColumnDef:
    """Classifies one catalog column; foreign keys win over enum name matches."""
    target = foreign_keys.get(column.name)
    if target is not None:
        return ForeignKeyColumn(
            name=column.name,
            referenced_table=target.table,
            referenced_schema=target.schema,
        )

    if column.type_name in enum_names:
        return EnumColumn(
            name=column.name,
            enum_name=column.type_name,
            nullable=column.nullable,
        )

    return ScalarColumn(
        name=column.name,
        db_type=column.type_name,
        nullable=column.nullable,
        size=column.size,
    )


def build_table_def(snapshot: TableSnapshot, enum_names: Set[str]) -> TableDef:
    table = TableDef(
        schema=snapshot.schema,
        name=snapshot.name,
        columns=tuple(
            classify_column(column, snapshot.foreign_keys, enum_names)
            for column in snapshot.columns
        ),
    )

    if not table.has_primary_key:
        logger.warning(
            f"Table {table.qualified_name} has no 'id' column; its model still assumes an integer 'id' identity."
        )

    excluded = table.excluded_columns
    if excluded:
        # TODO: generate translation (_t) and currency (_c) columns once their bindings exist
        log_highlight(
            logger,
            f"Table {table.qualified_name}: excluded {len(excluded)} translation/currency columns: "
            f"{[column.name for column in excluded]}",
        )
    return table


def build_intermediate_representation(
    enum_rows: Iterable[EnumTypeRow],
    tables: Iterable[TableSnapshot],
) -> SchemaModel:
    """
    Builds the schema model for a generation run.

    Args:
        enum_rows: Enum labels as listed by the catalog reader
        tables: Raw table snapshots, in catalog order

    Returns:
        SchemaModel with enums in first-seen order and tables in catalog order
    """
    enums = build_enum_defs(enum_rows)
    enum_names = {enum_def.name for enum_def in enums}
    logger.debug(f"Known enum types: {sorted(enum_names)}")

    table_defs = [build_table_def(snapshot, enum_names) for snapshot in tables]
    return SchemaModel(enums=tuple(enums), tables=tuple(table_defs))
