"""
Domain module for SQLAlchemy Auto Generator.

This module contains the intermediate representation, the type mapper and the
naming engine. None of it touches the database or the filesystem.
"""

from .models import (
    EnumDef,
    TableDef,
    ScalarColumn,
    EnumColumn,
    ForeignKeyColumn,
    ColumnDef,
    SchemaModel,
    ScalarType,
    TypeReference,
    NullableType,
    TypeDescriptor,
    is_excluded_column,
)

from .field_mapping import (
    ColumnTypeSpec,
    SUPPORTED_DB_TYPES,
    map_db_type,
    column_type_for,
    enum_type_descriptor,
    reference_type_descriptor,
)

from .naming import (
    snake_to_camel,
    capitalize,
    table_name_to_model_type_name,
    enum_name_to_type_name,
    foreign_key_column_to_property_name,
    column_to_property_name,
    enum_value_to_constant_name,
    enum_constant_names,
    type_module_path,
)

__all__ = [
    # Core models
    'EnumDef',
    'TableDef',
    'ScalarColumn',
    'EnumColumn',
    'ForeignKeyColumn',
    'ColumnDef',
    'SchemaModel',
    'ScalarType',
    'TypeReference',
    'NullableType',
    'TypeDescriptor',
    'is_excluded_column',

    # Type mapping
    'ColumnTypeSpec',
    'SUPPORTED_DB_TYPES',
    'map_db_type',
    'column_type_for',
    'enum_type_descriptor',
    'reference_type_descriptor',

    # Naming
    'snake_to_camel',
    'capitalize',
    'table_name_to_model_type_name',
    'enum_name_to_type_name',
    'foreign_key_column_to_property_name',
    'column_to_property_name',
    'enum_value_to_constant_name',
    'enum_constant_names',
    'type_module_path',
]
