"""
Tests for the model module AST code generator.

The AST-level tests check the shape of the generated code; the remaining
tests generate a whole package, import it and exercise the generated classes
with SQLAlchemy.
"""

import ast
from unittest import TestCase

import pytest
from sqlalchemy.dialects import postgresql

from sqla_auto_generator import runtime
from sqla_auto_generator.ast_codegen import generate_package
from sqla_auto_generator.ast_codegen.models import (
    collect_imports,
    create_column_binding,
    create_model_class,
    create_property,
    create_type_annotation,
    generate_model_code,
)
from sqla_auto_generator.domain.models import (
    EnumColumn,
    ForeignKeyColumn,
    NullableType,
    ScalarColumn,
    ScalarType,
    SchemaModel,
    TableDef,
    TypeReference,
)
from sqla_auto_generator.exceptions import UnsupportedTypeError


ACCOUNTS = TableDef(
    schema="public",
    name="accounts",
    columns=(
        ScalarColumn(name="id", db_type="int4", nullable=False, size=10),
        ScalarColumn(name="name", db_type="varchar", nullable=False, size=255),
        ForeignKeyColumn(name="owner_id", referenced_table="users", referenced_schema="public"),
    ),
)


def _unparse(node) -> str:
    return ast.unparse(node)


class TestTypeAnnotations(TestCase):
    """Test cases for create_type_annotation"""

    def test_builtin_scalar(self):
        assert _unparse(create_type_annotation(ScalarType("str"))) == "str"

    def test_imported_scalar(self):
        assert _unparse(create_type_annotation(ScalarType("UUID", module="uuid"))) == "UUID"

    def test_runtime_scalar(self):
        descriptor = ScalarType("MonetaryAmount", module="sqla_auto_generator.runtime")
        assert _unparse(create_type_annotation(descriptor)) == "runtime.MonetaryAmount"

    def test_nullable(self):
        descriptor = NullableType(ScalarType("datetime", module="datetime"))
        assert _unparse(create_type_annotation(descriptor)) == "Optional[datetime]"

    def test_forward_reference(self):
        descriptor = TypeReference("UserModel", "example.models.UserModel")
        assert _unparse(create_type_annotation(descriptor, forward_reference=True)) == "'UserModel'"


class TestColumnBindings(TestCase):
    """Test cases for create_column_binding"""

    def test_sized_scalar(self):
        node = create_column_binding(ScalarColumn(name="name", db_type="varchar", nullable=False, size=255))
        assert _unparse(node) == "name = sa.Column('name', sa.String(255), nullable=False)"

    def test_unsized_varchar(self):
        node = create_column_binding(ScalarColumn(name="code", db_type="varchar", nullable=True))
        assert _unparse(node) == "code = sa.Column('code', sa.String, nullable=True)"

    def test_timestamp_default(self):
        node = create_column_binding(ScalarColumn(name="created_at", db_type="timestamptz", nullable=False))
        assert _unparse(node) == (
            "createdAt = sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, default=runtime.utc_now)"
        )

    def test_enum(self):
        node = create_column_binding(EnumColumn(name="status", enum_name="order_status", nullable=True))
        assert _unparse(node) == (
            "status = sa.Column('status', runtime.PgEnum(OrderStatus, 'order_status'), nullable=True)"
        )

    def test_foreign_key(self):
        node = create_column_binding(
            ForeignKeyColumn(name="owner_id", referenced_table="users", referenced_schema="public")
        )
        assert _unparse(node) == "ownerId = runtime.reference('owner_id', 'public.users')"

    def test_foreign_key_without_schema(self):
        node = create_column_binding(ForeignKeyColumn(name="owner_id", referenced_table="users"))
        assert _unparse(node) == "ownerId = runtime.reference('owner_id', 'users')"


class TestModelClass(TestCase):
    """Test cases for create_model_class and create_property"""

    def test_scenario_b_properties(self):
        nodes = [create_property(column, "example.models") for column in ACCOUNTS.properties]
        assert [_unparse(node) for node in nodes] == [
            "name: str = runtime.ColumnProperty(Table.name)",
            "owner: 'UserModel' = runtime.Reference(Table.ownerId, 'example.models.UserModel', 'UserModel')",
        ]

    def test_class_layout(self):
        class_def = create_model_class(ACCOUNTS, "example.models")
        nested = [node.name for node in class_def.body if isinstance(node, ast.ClassDef)]
        methods = [node.name for node in class_def.body if isinstance(node, ast.FunctionDef)]

        assert class_def.name == "AccountModel"
        assert _unparse(class_def.bases[0]) == "runtime.Entity"
        assert nested == ["Table", "BaseDao"]
        assert methods == ["__init__"]

    def test_table_descriptor_keywords(self):
        class_def = create_model_class(ACCOUNTS, "example.models")
        table_class = next(node for node in class_def.body if isinstance(node, ast.ClassDef))

        assert {keyword.arg: _unparse(keyword.value) for keyword in table_class.keywords} == {
            "name": "'accounts'",
            "schema": "'public'",
            "metadata": "runtime.metadata_for('example.models')",
        }

    def test_id_column_not_rendered(self):
        code = generate_model_code(ACCOUNTS, "example.models")
        assert "sa.Column('id'" not in code
        assert "id: int = " not in code

    def test_unsupported_type_reports_table_and_column(self):
        table = TableDef(
            schema="public",
            name="payments",
            columns=(
                ScalarColumn(name="id", db_type="int4", nullable=False),
                ScalarColumn(name="price", db_type="money", nullable=False),
            ),
        )
        with pytest.raises(UnsupportedTypeError) as exc_info:
            generate_model_code(table, "example.models")

        error = exc_info.value
        assert error.db_type == "money"
        assert error.context["table"] == "public.payments"
        assert error.context["column"] == "price"


class TestImports(TestCase):
    """Test cases for collect_imports"""

    def test_reference_imported_for_type_checking_only(self):
        imports = [_unparse(node) for node in collect_imports(ACCOUNTS, "example.models")]

        assert imports[0] == "from typing import TYPE_CHECKING, Any, Callable, Dict"
        assert "import sqlalchemy as sa" in imports
        assert "from sqla_auto_generator import runtime" in imports
        assert imports[-1] == "if TYPE_CHECKING:\n    from example.models.UserModel import UserModel"

    def test_self_reference_not_imported(self):
        categories = TableDef(
            schema="public",
            name="categories",
            columns=(
                ScalarColumn(name="id", db_type="int4", nullable=False),
                ForeignKeyColumn(name="parent_id", referenced_table="categories", referenced_schema="public"),
            ),
        )
        code = generate_model_code(categories, "example.models")

        assert "TYPE_CHECKING" not in code
        assert "parent: 'CategorieModel'" in code

    def test_stdlib_and_enum_imports(self):
        table = TableDef(
            schema="public",
            name="events",
            columns=(
                ScalarColumn(name="id", db_type="int4", nullable=False),
                ScalarColumn(name="starts_at", db_type="timestamptz", nullable=False),
                ScalarColumn(name="duration", db_type="interval", nullable=True),
                ScalarColumn(name="zone", db_type="timezone", nullable=False),
                EnumColumn(name="status", enum_name="order_status", nullable=False),
            ),
        )
        imports = [_unparse(node) for node in collect_imports(table, "example.models")]

        assert imports == [
            "from typing import Any, Callable, Dict, Optional",
            "from datetime import datetime, timedelta",
            "from zoneinfo import ZoneInfo",
            "import sqlalchemy as sa",
            "from sqla_auto_generator import runtime",
            "from example.models.OrderStatus import OrderStatus",
        ]


# --- Generated package behaviour ---

@pytest.fixture
def generated(tmp_path, sample_schema_model, unique_package_name, import_generated):
    """Generates the sample model and returns a loader for its classes."""
    generate_package(sample_schema_model, tmp_path, unique_package_name)

    def _load(type_name):
        return getattr(import_generated(f"{unique_package_name}.{type_name}"), type_name)

    _load.package_name = unique_package_name
    return _load


def _sql(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


def test_scenario_b_annotations(generated):
    account_model = generated("AccountModel")

    assert issubclass(account_model, runtime.Entity)
    assert account_model.__annotations__ == {"name": str, "owner": "UserModel"}


def test_excluded_columns_not_generated(generated):
    account_model = generated("AccountModel")
    order_model = generated("OrderModel")

    assert "legal_name_t" not in account_model.Table.__table__.c
    assert not hasattr(account_model, "legalNameT")
    assert "price_c" not in order_model.Table.__table__.c
    assert not hasattr(order_model, "priceC")


def test_table_descriptor(generated):
    table = generated("AccountModel").Table.__table__

    assert table.fullname == "public.accounts"
    assert [column.name for column in table.columns] == ["id", "name", "owner_id"]
    assert table.c.id.primary_key
    assert table.c.name.type.length == 255
    assert [fk.target_fullname for fk in table.c.owner_id.foreign_keys] == ["public.users.id"]


def test_timestamp_column_defaults_to_now(generated):
    created_at = generated("UserModel").Table.__table__.c.created_at

    assert created_at.type.timezone
    assert created_at.default.is_callable
    assert created_at.default.arg(None).tzinfo is not None


def test_enum_column_binds_generated_enum(generated):
    order_model = generated("OrderModel")
    order_status = generated("OrderStatus")
    column_type = order_model.Table.__table__.c.status.type

    assert isinstance(column_type, runtime.PgEnum)
    assert column_type.enum_class is order_status
    assert column_type.impl.name == "order_status"
    assert list(column_type.impl.enums) == ["pending", "shipped"]


def test_insert_statement(generated):
    account_model = generated("AccountModel")

    def fill(values):
        values[account_model.Table.name] = "acme"
        values[account_model.Table.ownerId] = 7

    statement = account_model.BaseDao.insert(fill)

    assert _sql(statement) == "INSERT INTO public.accounts (name, owner_id) VALUES (%(name)s, %(owner_id)s)"
    assert statement.compile().params == {"name": "acme", "owner_id": 7}


def test_update_statement_scoped_to_id(generated):
    account_model = generated("AccountModel")

    statement = account_model.BaseDao.update(3, lambda values: values.update({account_model.Table.name: "renamed"}))
    compiled = statement.compile(dialect=postgresql.dialect())

    assert str(compiled) == "UPDATE public.accounts SET name=%(name)s WHERE public.accounts.id = %(id_1)s"
    assert compiled.params == {"name": "renamed", "id_1": 3}


def test_properties_track_changes(generated):
    account_model = generated("AccountModel")

    account = account_model.from_row({"id": 3, "name": "acme", "owner_id": 7})
    assert account.id == 3
    assert account.name == "acme"
    assert account.changed_values() == {}

    account.name = "renamed"
    assert account.changed_values() == {account_model.Table.__table__.c.name: "renamed"}


def test_reference_resolves_referenced_model(generated):
    account_model = generated("AccountModel")
    user_model = generated("UserModel")

    account = account_model(3)
    account.owner = user_model(7)

    assert account.owner == user_model(7)
    assert type(account.owner) is user_model
    assert account.changed_values() == {account_model.Table.__table__.c.owner_id: 7}


def test_references_between_generated_modules(generated):
    """OrderModel -> AccountModel -> UserModel resolve lazily by module path"""
    order_model = generated("OrderModel")

    order = order_model.from_row({"id": 1, "account_id": 3, "status": None, "line_count": 2})
    account = order.account

    assert type(account).__name__ == "AccountModel"
    assert account.id == 3
    assert order.lineCount == 2


def test_unloaded_property_raises_attribute_error(generated):
    user = generated("UserModel")(1)

    with pytest.raises(AttributeError, match="has not been loaded"):
        user.email


def test_columns_named_like_runtime_members(tmp_path, unique_package_name, import_generated):
    logs = TableDef(
        schema="public",
        name="logs",
        columns=(
            ScalarColumn(name="id", db_type="int4", nullable=False),
            ScalarColumn(name="table", db_type="text", nullable=False),
            ScalarColumn(name="changes", db_type="text", nullable=True),
        ),
    )
    generate_package(SchemaModel(tables=(logs,)), tmp_path, unique_package_name)
    log_model = import_generated(f"{unique_package_name}.LogModel").LogModel

    assert log_model.Table.table is log_model.Table.__table__.c.table
    statement = log_model.BaseDao.insert(
        lambda values: values.update({log_model.Table.table: "orders", log_model.Table.changes: "+1"})
    )
    assert statement.compile().params == {"table": "orders", "changes": "+1"}
    assert '"table"' in _sql(statement)

    log = log_model.from_row({"id": 1, "table": "orders", "changes": None})
    log.changes = "+2"

    assert log.table == "orders"
    assert log.changed_values() == {log_model.Table.__table__.c.changes: "+2"}
    update = log_model.BaseDao.update(1, lambda values: values.update(log.changed_values()))
    assert update.compile().params == {"changes": "+2", "id_1": 1}
