"""
Core domain models for SQLAlchemy Auto Generator.

These models form the intermediate representation between the database
catalog and the generated code. They are immutable: the pipeline only ever
builds new values, so a model can be shared freely between the builder and
the renderers.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from ..constants import FieldNames


@dataclass(frozen=True)
class EnumDef:
    """A database enum type with its labels in server sort order."""

    name: str
    values: Tuple[str, ...]

    def __post_init__(self):
        if not self.values:
            raise ValueError(f"Enum type '{self.name}' has no values")


@dataclass(frozen=True)
class ScalarColumn:
    """A column holding a primitive value."""

    name: str
    db_type: str
    nullable: bool
    size: Optional[int] = None


@dataclass(frozen=True)
class EnumColumn:
    """A column whose type is one of the discovered enum types, referenced by name."""

    name: str
    enum_name: str
    nullable: bool


@dataclass(frozen=True)
class ForeignKeyColumn:
    """A column identifying a row of another table, referenced by table name."""

    name: str
    referenced_table: str
    referenced_schema: Optional[str] = None


ColumnDef = Union[ScalarColumn, EnumColumn, ForeignKeyColumn]


def is_excluded_column(column: ColumnDef) -> bool:
    """Translation and currency columns are modelled but never rendered."""
    return column.name.endswith(FieldNames.EXCLUDED_SUFFIXES)


@dataclass(frozen=True)
class TableDef:
    """
    A database table and its classified columns in catalog order.

    The ``id`` column is the identity key: it stays in ``columns`` but is
    never part of ``properties``.
    """

    schema: str
    name: str
    columns: Tuple[ColumnDef, ...] = field(default_factory=tuple)

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}"

    @property
    def has_primary_key(self) -> bool:
        return any(column.name == FieldNames.PRIMARY_KEY for column in self.columns)

    @property
    def properties(self) -> Tuple[ColumnDef, ...]:
        """Columns rendered as model properties and table descriptor bindings."""
        return tuple(
            column for column in self.columns
            if column.name != FieldNames.PRIMARY_KEY and not is_excluded_column(column)
        )

    @property
    def excluded_columns(self) -> Tuple[ColumnDef, ...]:
        return tuple(column for column in self.columns if is_excluded_column(column))


@dataclass(frozen=True)
class SchemaModel:
    """The complete intermediate representation of one generation run."""

    enums: Tuple[EnumDef, ...] = field(default_factory=tuple)
    tables: Tuple[TableDef, ...] = field(default_factory=tuple)

    @property
    def enum_names(self) -> Tuple[str, ...]:
        return tuple(enum_def.name for enum_def in self.enums)


# --- Type descriptors ---

@dataclass(frozen=True)
class ScalarType:
    """A language-level type, optionally imported from ``module``."""

    name: str
    module: Optional[str] = None


@dataclass(frozen=True)
class TypeReference:
    """A reference to a generated type (enum or model) by name."""

    name: str
    module: str


@dataclass(frozen=True)
class NullableType:
    inner: Union[ScalarType, TypeReference]


TypeDescriptor = Union[ScalarType, TypeReference, NullableType]
