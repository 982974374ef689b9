# File: tests/conftest.py
# Contains pytest fixtures shared by the unit tests.

import importlib
import uuid
from pathlib import Path
from typing import Callable

import pytest

from sqla_auto_generator.domain.models import (
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


# --- Catalog rows ---
@pytest.fixture
def order_status_rows():
    """Scenario A: one enum type with two labels."""
    return [
        EnumTypeRow(type_name="order_status", value="pending"),
        EnumTypeRow(type_name="order_status", value="shipped"),
    ]


@pytest.fixture
def accounts_snapshot():
    """Scenario B: accounts(id int4, name varchar, owner_id int4 -> users)."""
    return TableSnapshot(
        schema="public",
        name="accounts",
        columns=[
            CatalogColumn(name="id", type_name="int4", size=10, nullable=False),
            CatalogColumn(name="name", type_name="varchar", size=255, nullable=False),
            CatalogColumn(name="owner_id", type_name="int4", size=10, nullable=False),
        ],
        foreign_keys={"owner_id": ForeignKeyTarget(table="users", schema="public")},
    )


@pytest.fixture
def invoices_snapshot():
    """Scenario C: a currency column that is read but never generated."""
    return TableSnapshot(
        schema="public",
        name="invoices",
        columns=[
            CatalogColumn(name="id", type_name="int4", size=10, nullable=False),
            CatalogColumn(name="amount_c", type_name="monetary_amount", size=None, nullable=False),
            CatalogColumn(name="status", type_name="order_status", size=None, nullable=True),
            CatalogColumn(name="issued_at", type_name="timestamptz", size=35, nullable=False),
        ],
        foreign_keys={},
    )


# --- Intermediate representation ---
@pytest.fixture
def sample_schema_model() -> SchemaModel:
    """A small but complete model: one enum, three tables, every column variant."""
    order_status = EnumDef(name="order_status", values=("pending", "shipped"))
    users = TableDef(
        schema="public",
        name="users",
        columns=(
            ScalarColumn(name="id", db_type="int4", nullable=False, size=10),
            ScalarColumn(name="email", db_type="varchar", nullable=False, size=320),
            ScalarColumn(name="external_id", db_type="uuid", nullable=True),
            ScalarColumn(name="time_zone", db_type="timezone", nullable=True),
            ScalarColumn(name="created_at", db_type="timestamptz", nullable=False, size=35),
            ScalarColumn(name="is_active", db_type="bool", nullable=False, size=1),
        ),
    )
    accounts = TableDef(
        schema="public",
        name="accounts",
        columns=(
            ScalarColumn(name="id", db_type="int4", nullable=False, size=10),
            ScalarColumn(name="name", db_type="varchar", nullable=False, size=255),
            ScalarColumn(name="legal_name_t", db_type="text", nullable=True),
            ForeignKeyColumn(name="owner_id", referenced_table="users", referenced_schema="public"),
        ),
    )
    orders = TableDef(
        schema="public",
        name="orders",
        columns=(
            ScalarColumn(name="id", db_type="int4", nullable=False, size=10),
            ForeignKeyColumn(name="account_id", referenced_table="accounts", referenced_schema="public"),
            EnumColumn(name="status", enum_name="order_status", nullable=False),
            ScalarColumn(name="total", db_type="monetary_amount", nullable=True),
            ScalarColumn(name="price_c", db_type="monetary_amount", nullable=True),
            ScalarColumn(name="delivery_window", db_type="interval", nullable=True),
            ScalarColumn(name="line_count", db_type="int8", nullable=False, size=19),
            ScalarColumn(name="note", db_type="text", nullable=True),
        ),
    )
    return SchemaModel(enums=(order_status,), tables=(users, accounts, orders))


# --- Generated packages ---
@pytest.fixture
def unique_package_name() -> str:
    """A package name no other test generates into, so imported modules never clash."""
    return f"generated_{uuid.uuid4().hex[:12]}.models"


@pytest.fixture
def import_generated(tmp_path: Path, monkeypatch) -> Callable[[str], object]:
    """
    Returns a function importing a generated module from ``tmp_path``.

    Generate into ``tmp_path`` first, then call the function with the dotted
    module path.
    """
    monkeypatch.syspath_prepend(str(tmp_path))

    def _import(module_path: str):
        importlib.invalidate_caches()
        return importlib.import_module(module_path)

    return _import
