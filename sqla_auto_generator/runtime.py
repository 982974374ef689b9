"""
Support code imported by the generated modules.

Generated enums derive from DbEnum, generated models from Entity, and their
nested ``Table`` descriptors from IntIdTable. The column types below carry the
value round trips that plain SQLAlchemy types do not cover: PostgreSQL enums
bound through the generated enum's raw value, the ``monetary_amount``
composite and time zone names.

Nothing here opens connections or executes statements; the generated access
layer only builds SQLAlchemy statements for the caller to run.
"""

import enum
import importlib
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, ClassVar, Dict, Mapping, NamedTuple, Optional, Type
from zoneinfo import ZoneInfo

import sqlalchemy as sa
from sqlalchemy import types
from sqlalchemy.dialects import postgresql

from sqla_auto_generator.constants import FieldNames


class DbEnum(str, enum.Enum):
    """
    Base of generated enums: each member's ``value`` is its database label.

    Generated subclasses define the ``of(v)`` classmethod that maps a label
    back to its member.
    """


# --- Column types ---

class PgEnum(types.TypeDecorator):
    """Binds a generated DbEnum to its PostgreSQL enum type through the raw label."""

    impl = postgresql.ENUM
    cache_ok = True

    def __init__(self, enum_class: Type[DbEnum], enum_type_name: str):
        super().__init__(*[member.value for member in enum_class], name=enum_type_name, create_type=False)
        self.enum_class = enum_class
        self.enum_type_name = enum_type_name

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return value.value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return self.enum_class.of(value)


class MonetaryAmount(NamedTuple):
    amount: Decimal
    currency: str


class MonetaryAmountType(types.TypeDecorator):
    """The ``monetary_amount`` composite, exchanged in its text form ``(amount,currency)``."""

    impl = types.String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return f"({value.amount},{value.currency})"

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        amount, currency = value.strip("()").split(",", 1)
        return MonetaryAmount(Decimal(amount), currency.strip('"'))


class TimeZoneType(types.TypeDecorator):
    """Time zone names stored as text, exposed as ZoneInfo."""

    impl = types.Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return value.key

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return ZoneInfo(value)


def utc_now() -> datetime:
    """Client-side default of timestamp columns."""
    return datetime.now(timezone.utc)


# --- Table descriptors ---

_METADATA: Dict[str, sa.MetaData] = {}


def metadata_for(package_name: str) -> sa.MetaData:
    """MetaData shared by all tables generated into one package, so references resolve by name."""
    if package_name not in _METADATA:
        _METADATA[package_name] = sa.MetaData()
    return _METADATA[package_name]


def reference(name: str, target: str) -> sa.Column:
    """Integer column referencing ``id`` of ``target`` ('schema.table'), resolved lazily by name."""
    return sa.Column(name, sa.Integer, sa.ForeignKey(f"{target}.{FieldNames.PRIMARY_KEY}"), nullable=False)


class IntIdTable:
    """
    Base of the generated ``Table`` descriptors.

    Subclasses declare their columns as class attributes and pass the table
    name, schema and metadata as class keywords::

        class Table(IntIdTable, name="accounts", schema="public", metadata=metadata_for("example.models")):
            name = sa.Column("name", sa.String(255), nullable=False)

    The resulting SQLAlchemy table is exposed as ``__table__``; its integer
    primary key column is added automatically and exposed as ``id``.
    Column attribute names never contain an underscore followed by a
    lowercase letter, so they cannot shadow the ``__table__`` attribute.
    """

    __table__: ClassVar[sa.Table]
    id: ClassVar[sa.Column]

    def __init_subclass__(
        cls,
        *,
        name: str,
        schema: Optional[str] = None,
        metadata: Optional[sa.MetaData] = None,
        **kwargs,
    ):
        super().__init_subclass__(**kwargs)
        columns = [value for value in vars(cls).values() if isinstance(value, sa.Column)]
        cls.__table__ = sa.Table(
            name,
            metadata if metadata is not None else metadata_for(cls.__module__),
            sa.Column(FieldNames.PRIMARY_KEY, sa.Integer, primary_key=True),
            *columns,
            schema=schema,
        )
        cls.id = cls.__table__.c[FieldNames.PRIMARY_KEY]


# --- Models ---

class Entity:
    """
    Base of generated models: a row identity plus the column values known for it.

    Its own members all contain an underscore followed by a lowercase letter
    (``from_row``, ``changed_values``), a form generated property names never take.
    """

    Table: ClassVar[Type[IntIdTable]]

    def __init__(self, id: int):
        self.id = id
        self._values: Dict[str, Any] = {}
        self._changes: Dict[str, Any] = {}

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Entity":
        """Builds a model from a result row mapping (e.g. ``result.mappings().one()``)."""
        entity = cls(row[FieldNames.PRIMARY_KEY])
        for column in cls.Table.__table__.columns:
            if column.key != FieldNames.PRIMARY_KEY and column.key in row:
                entity._values[column.key] = row[column.key]
        return entity

    def changed_values(self) -> Dict[sa.Column, Any]:
        """Values assigned since construction, keyed by column, ready for ``BaseDao.update``."""
        return {self.Table.__table__.c[key]: value for key, value in self._changes.items()}

    def __eq__(self, other):
        return type(self) is type(other) and self.id == other.id

    def __hash__(self):
        return hash((type(self), self.id))

    def __repr__(self):
        return f"{type(self).__name__}(id={self.id!r})"


class ColumnProperty:
    """Model property reading and writing the value of one table descriptor column."""

    def __init__(self, column: sa.Column):
        self.column = column
        self.name = column.key

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        try:
            return instance._values[self.column.key]
        except KeyError:
            raise AttributeError(f"'{type(instance).__name__}.{self.name}' has not been loaded") from None

    def __set__(self, instance, value):
        instance._values[self.column.key] = value
        instance._changes[self.column.key] = value


class Reference(ColumnProperty):
    """
    Model property exposing the model referenced by a foreign key column.

    The referenced model class is imported on first access, so generated
    modules may reference each other in cycles.
    """

    def __init__(self, column: sa.Column, module: str, class_name: str):
        super().__init__(column)
        self.module = module
        self.class_name = class_name
        self._target: Optional[Type[Entity]] = None

    @property
    def target(self) -> Type[Entity]:
        if self._target is None:
            self._target = getattr(importlib.import_module(self.module), self.class_name)
        return self._target

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        referenced_id = super().__get__(instance, owner)
        if referenced_id is None:
            return None
        return self.target(referenced_id)

    def __set__(self, instance, value):
        super().__set__(instance, None if value is None else value.id)
