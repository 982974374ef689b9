import ast
import logging
from typing import Dict, List, Set, assert_never

from sqla_auto_generator.ast_codegen.base import (
    add_location, create_ann_assign, create_arg, create_assign, create_boolean_constant, create_call,
    create_class_def, create_compare_eq, create_docstring, create_dotted_name, create_expr,
    create_function_def, create_import, create_integer_constant, create_keyword, create_module,
    create_name, create_none_constant, create_return, create_string_constant, create_subscript,
)
from sqla_auto_generator.constants import FieldNames, GeneratedCode
from sqla_auto_generator.domain.field_mapping import (
    ColumnTypeSpec, column_type_for, enum_type_descriptor, map_db_type, reference_type_descriptor,
)
from sqla_auto_generator.domain.models import (
    ColumnDef, EnumColumn, ForeignKeyColumn, NullableType, ScalarColumn, ScalarType, TableDef,
    TypeDescriptor, TypeReference,
)
from sqla_auto_generator.domain.naming import (
    column_to_property_name, enum_name_to_type_name, foreign_key_column_to_property_name,
    table_name_to_model_type_name, type_module_path,
)
from sqla_auto_generator.exceptions import UnsupportedTypeError


logger = logging.getLogger(__name__)

SA = GeneratedCode.SQLALCHEMY_ALIAS
RUNTIME = GeneratedCode.RUNTIME_ALIAS
TABLE = GeneratedCode.TABLE_CLASS


# --- Type annotations ---

def create_type_annotation(descriptor: TypeDescriptor, forward_reference: bool = False) -> ast.expr:
    """Creates the annotation expression for a property type descriptor."""
    if isinstance(descriptor, NullableType):
        return create_subscript(create_name("Optional"), [create_type_annotation(descriptor.inner, forward_reference)])
    if isinstance(descriptor, TypeReference):
        if forward_reference:
            return create_string_constant(descriptor.name)
        return create_name(descriptor.name)
    if isinstance(descriptor, ScalarType):
        if descriptor.module == GeneratedCode.RUNTIME_MODULE:
            return create_dotted_name(f"{RUNTIME}.{descriptor.name}")
        return create_name(descriptor.name)
    assert_never(descriptor)


def _unwrap(descriptor: TypeDescriptor):
    return descriptor.inner if isinstance(descriptor, NullableType) else descriptor


# --- Table descriptor ---

def create_column_type(spec: ColumnTypeSpec, size=None) -> ast.expr:
    """Creates ``sa.String(255)``, ``sa.DateTime(timezone=True)`` or a bare type reference."""
    type_path = f"{spec.namespace}.{spec.name}"
    args = [create_integer_constant(size)] if spec.sized and size is not None else []
    keywords = [create_keyword(name, add_location(ast.Constant(value=value))) for name, value in spec.keywords]
    if not args and not keywords:
        return create_dotted_name(type_path)
    return create_call(type_path, args=args, keywords=keywords)


def create_column_binding(column: ColumnDef) -> ast.Assign:
    """Creates the table descriptor attribute binding one column to its SQLAlchemy type."""
    attribute = column_to_property_name(column.name)

    if isinstance(column, ScalarColumn):
        spec = column_type_for(column.db_type)
        keywords = [create_keyword("nullable", create_boolean_constant(column.nullable))]
        if spec.default:
            keywords.append(create_keyword("default", create_dotted_name(f"{RUNTIME}.{spec.default}")))
        value = create_call(
            f"{SA}.Column",
            args=[create_string_constant(column.name), create_column_type(spec, column.size)],
            keywords=keywords,
        )
    elif isinstance(column, EnumColumn):
        enum_type = create_call(
            f"{RUNTIME}.PgEnum",
            args=[create_name(enum_name_to_type_name(column.enum_name)), create_string_constant(column.enum_name)],
        )
        value = create_call(
            f"{SA}.Column",
            args=[create_string_constant(column.name), enum_type],
            keywords=[create_keyword("nullable", create_boolean_constant(column.nullable))],
        )
    elif isinstance(column, ForeignKeyColumn):
        target = column.referenced_table
        if column.referenced_schema:
            target = f"{column.referenced_schema}.{target}"
        value = create_call(
            f"{RUNTIME}.reference",
            args=[create_string_constant(column.name), create_string_constant(target)],
        )
    else:
        assert_never(column)

    return create_assign(target=attribute, value=value)


def create_table_class(table: TableDef, package_name: str) -> ast.ClassDef:
    """Creates the nested ``Table`` descriptor declaring the table's columns."""
    keywords = [
        create_keyword("name", create_string_constant(table.name)),
        create_keyword("schema", create_string_constant(table.schema)),
        create_keyword(
            "metadata",
            create_call(f"{RUNTIME}.metadata_for", args=[create_string_constant(package_name)]),
        ),
    ]
    body = [create_column_binding(column) for column in table.properties]
    return create_class_def(name=TABLE, bases=[f"{RUNTIME}.IntIdTable"], body=body, keywords=keywords)


# --- Data access ---

def _values_annotation() -> ast.expr:
    return create_subscript(create_name("Dict"), [create_dotted_name(f"{SA}.Column"), create_name("Any")])


def _block_annotation() -> ast.expr:
    """``Callable[[Dict[sa.Column, Any]], None]``"""
    parameters = add_location(ast.List(elts=[_values_annotation()], ctx=ast.Load()))
    return create_subscript(create_name("Callable"), [parameters, create_none_constant()])


def _method_call(obj: ast.expr, method: str, args: List[ast.expr]) -> ast.Call:
    return create_call(add_location(ast.Attribute(value=obj, attr=method, ctx=ast.Load())), args=args)


def create_dao_method(model_type_name: str, statement: str) -> ast.FunctionDef:
    """
    Creates ``insert`` or ``update``: collect the values assigned by ``block``
    and return the corresponding statement on the model's table.
    """
    table_path = f"{model_type_name}.{TABLE}.__table__"
    args = [create_arg("cls")]
    if statement == "update":
        args.append(create_arg(FieldNames.PRIMARY_KEY, create_name("int")))
    args.append(create_arg("block", _block_annotation()))

    result = create_call(f"{SA}.{statement}", args=[create_dotted_name(table_path)])
    if statement == "update":
        result = _method_call(result, "where", [
            create_compare_eq(
                create_dotted_name(f"{model_type_name}.{TABLE}.{FieldNames.PRIMARY_KEY}"),
                create_name(FieldNames.PRIMARY_KEY),
            ),
        ])
    result = _method_call(result, "values", [create_name("values")])

    body = [
        create_ann_assign("values", _values_annotation(), add_location(ast.Dict(keys=[], values=[]))),
        create_expr(create_call("block", args=[create_name("values")])),
        create_return(result),
    ]
    return create_function_def(
        name=statement,
        args=args,
        body=body,
        returns=create_dotted_name(f"{SA}.{statement.capitalize()}"),
        decorator_list=[create_name("classmethod")],
    )


def create_dao_class(model_type_name: str) -> ast.ClassDef:
    body = [
        create_docstring("Builds insert and update statements for the table."),
        create_dao_method(model_type_name, "insert"),
        create_dao_method(model_type_name, "update"),
    ]
    return create_class_def(name=GeneratedCode.DAO_CLASS, bases=[], body=body)


# --- Model properties ---

def create_property(column: ColumnDef, package_name: str) -> ast.AnnAssign:
    """Creates the typed model property for one column."""
    table_attribute = create_dotted_name(f"{TABLE}.{column_to_property_name(column.name)}")

    if isinstance(column, ScalarColumn):
        annotation = create_type_annotation(map_db_type(column.db_type, column.nullable))
        return create_ann_assign(
            column_to_property_name(column.name),
            annotation,
            create_call(f"{RUNTIME}.ColumnProperty", args=[table_attribute]),
        )
    if isinstance(column, EnumColumn):
        annotation = create_type_annotation(enum_type_descriptor(column.enum_name, column.nullable, package_name))
        return create_ann_assign(
            column_to_property_name(column.name),
            annotation,
            create_call(f"{RUNTIME}.ColumnProperty", args=[table_attribute]),
        )
    if isinstance(column, ForeignKeyColumn):
        descriptor = reference_type_descriptor(column.referenced_table, package_name)
        return create_ann_assign(
            foreign_key_column_to_property_name(column.name),
            create_type_annotation(descriptor, forward_reference=True),
            create_call(
                f"{RUNTIME}.Reference",
                args=[
                    table_attribute,
                    create_string_constant(descriptor.module),
                    create_string_constant(descriptor.name),
                ],
            ),
        )
    assert_never(column)


def create_init_method() -> ast.FunctionDef:
    super_init = _method_call(create_call("super"), "__init__", [create_name(FieldNames.PRIMARY_KEY)])
    return create_function_def(
        name="__init__",
        args=[create_arg("self"), create_arg(FieldNames.PRIMARY_KEY, create_name("int"))],
        body=[create_expr(super_init)],
        returns=create_none_constant(),
    )


def create_model_class(table: TableDef, package_name: str) -> ast.ClassDef:
    """Creates the AST ClassDef node for a table's model."""
    model_type_name = table_name_to_model_type_name(table.name)

    properties: List[ast.stmt] = []
    for column in table.properties:
        try:
            properties.append(create_property(column, package_name))
        except UnsupportedTypeError as e:
            raise UnsupportedTypeError(e.db_type, table=table.qualified_name, column=column.name) from e

    model_body: List[ast.stmt] = [
        create_docstring(f"Row of the '{table.qualified_name}' table, identified by its integer id."),
        create_table_class(table, package_name),
        create_dao_class(model_type_name),
    ]
    model_body.extend(properties)
    model_body.append(create_init_method())

    return create_class_def(name=model_type_name, bases=[f"{RUNTIME}.Entity"], body=model_body)


# --- Imports ---

def collect_imports(table: TableDef, package_name: str) -> List[ast.stmt]:
    """Creates the import statements a model module needs, in a stable order."""
    model_type_name = table_name_to_model_type_name(table.name)
    typing_names: Set[str] = {"Any", "Callable", "Dict"}
    stdlib_imports: Dict[str, Set[str]] = {}
    enum_types: Set[str] = set()
    model_types: Dict[str, str] = {}

    for column in table.properties:
        if isinstance(column, ScalarColumn):
            descriptor = map_db_type(column.db_type, column.nullable)
            scalar = _unwrap(descriptor)
            if scalar.module and scalar.module != GeneratedCode.RUNTIME_MODULE:
                stdlib_imports.setdefault(scalar.module, set()).add(scalar.name)
        elif isinstance(column, EnumColumn):
            descriptor = enum_type_descriptor(column.enum_name, column.nullable, package_name)
            enum_types.add(_unwrap(descriptor).name)
        elif isinstance(column, ForeignKeyColumn):
            descriptor = reference_type_descriptor(column.referenced_table, package_name)
            if descriptor.name != model_type_name:
                model_types[descriptor.name] = descriptor.module
        else:
            assert_never(column)
        if isinstance(descriptor, NullableType):
            typing_names.add("Optional")

    if model_types:
        typing_names.add("TYPE_CHECKING")

    imports: List[ast.stmt] = [create_import("typing", sorted(typing_names))]
    imports.extend(create_import(module, sorted(names)) for module, names in sorted(stdlib_imports.items()))
    imports.append(create_import(GeneratedCode.SQLALCHEMY_MODULE, alias=SA))
    imports.append(create_import(GeneratedCode.RUNTIME_MODULE.rsplit(".", 1)[0], [RUNTIME]))
    imports.extend(
        create_import(type_module_path(package_name, type_name), [type_name]) for type_name in sorted(enum_types)
    )
    if model_types:
        imports.append(add_location(ast.If(
            test=create_name("TYPE_CHECKING"),
            body=[create_import(module, [type_name]) for type_name, module in sorted(model_types.items())],
            orelse=[],
        )))
    return imports


def generate_model_ast(table: TableDef, package_name: str) -> ast.Module:
    """Generates the complete AST Module for one table's model file."""
    model_class = create_model_class(table, package_name)
    return create_module(collect_imports(table, package_name) + [model_class])


def generate_model_code(table: TableDef, package_name: str) -> str:
    """Generates the Python code string for one table's model file."""
    logger.debug(f"Generating model {table_name_to_model_type_name(table.name)} for table {table.qualified_name}")
    return ast.unparse(generate_model_ast(table, package_name))
