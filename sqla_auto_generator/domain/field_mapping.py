"""
Field mapping domain logic for SQLAlchemy Auto Generator.

This module maps database type names to the Python types exposed by the
generated models and to the SQLAlchemy column types declared in their table
descriptors. The set of supported types is closed: anything outside it stops
the run with an UnsupportedTypeError so the mapping can be extended
deliberately instead of degrading silently.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..constants import GeneratedCode
from ..exceptions import UnsupportedTypeError
from .models import NullableType, ScalarType, TypeDescriptor, TypeReference
from .naming import enum_name_to_type_name, table_name_to_model_type_name, type_module_path


SA = GeneratedCode.SQLALCHEMY_ALIAS
RUNTIME = GeneratedCode.RUNTIME_ALIAS


@dataclass(frozen=True)
class ColumnTypeSpec:
    """
    How a column type is spelled in a generated table descriptor.

    ``namespace`` is the alias the generated module imports (``sa`` or
    ``runtime``). Sized types receive the catalog column size as their only
    positional argument; ``default`` names a callable in the runtime module
    used as the column's client-side default.
    """

    namespace: str
    name: str
    keywords: Tuple[Tuple[str, Any], ...] = ()
    sized: bool = False
    default: Optional[str] = None


# Python types exposed by the generated model properties
SCALAR_TYPE_MAP: Dict[str, ScalarType] = {
    "uuid": ScalarType("UUID", module="uuid"),
    "varchar": ScalarType("str"),
    "text": ScalarType("str"),
    "timezone": ScalarType("ZoneInfo", module="zoneinfo"),
    "timestamptz": ScalarType("datetime", module="datetime"),
    "interval": ScalarType("timedelta", module="datetime"),
    "monetary_amount": ScalarType("MonetaryAmount", module=GeneratedCode.RUNTIME_MODULE),
    "int4": ScalarType("int"),
    "int8": ScalarType("int"),
    "bool": ScalarType("bool"),
}

# SQLAlchemy column types declared by the generated table descriptors
COLUMN_TYPE_MAP: Dict[str, ColumnTypeSpec] = {
    "uuid": ColumnTypeSpec(SA, "Uuid"),
    "varchar": ColumnTypeSpec(SA, "String", sized=True),
    "text": ColumnTypeSpec(SA, "Text"),
    "timezone": ColumnTypeSpec(RUNTIME, "TimeZoneType"),
    "timestamptz": ColumnTypeSpec(SA, "DateTime", keywords=(("timezone", True),), default="utc_now"),
    "interval": ColumnTypeSpec(SA, "Interval"),
    "monetary_amount": ColumnTypeSpec(RUNTIME, "MonetaryAmountType"),
    "int4": ColumnTypeSpec(SA, "Integer"),
    "int8": ColumnTypeSpec(SA, "BigInteger"),
    "bool": ColumnTypeSpec(SA, "Boolean"),
}

SUPPORTED_DB_TYPES: Tuple[str, ...] = tuple(SCALAR_TYPE_MAP)


def _with_nullability(base: TypeDescriptor, nullable: bool) -> TypeDescriptor:
    return NullableType(base) if nullable else base


def map_db_type(db_type: str, nullable: bool) -> TypeDescriptor:
    """
    Map a database type name to the Python type of the generated property.

    Args:
        db_type: Normalized database type name (e.g. 'int4', 'timestamptz')
        nullable: Whether the column accepts NULL

    Returns:
        The scalar type, wrapped in NullableType when ``nullable`` is set

    Raises:
        UnsupportedTypeError: If the type is not in the supported set
    """
    base = SCALAR_TYPE_MAP.get(db_type)
    if base is None:
        raise UnsupportedTypeError(db_type)
    return _with_nullability(base, nullable)


def column_type_for(db_type: str) -> ColumnTypeSpec:
    """Return the SQLAlchemy column type spec for a database type name."""
    spec = COLUMN_TYPE_MAP.get(db_type)
    if spec is None:
        raise UnsupportedTypeError(db_type)
    return spec


def enum_type_descriptor(enum_name: str, nullable: bool, package_name: str) -> TypeDescriptor:
    """Type of a property bound to a generated enum class."""
    type_name = enum_name_to_type_name(enum_name)
    return _with_nullability(TypeReference(type_name, type_module_path(package_name, type_name)), nullable)


def reference_type_descriptor(referenced_table: str, package_name: str) -> TypeDescriptor:
    """Type of a property exposing the model referenced by a foreign key."""
    type_name = table_name_to_model_type_name(referenced_table)
    return TypeReference(type_name, type_module_path(package_name, type_name))
