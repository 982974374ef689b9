import ast
import logging
from typing import List

from sqla_auto_generator.ast_codegen.base import (
    add_location, create_arg, create_assign, create_call, create_class_def, create_compare_eq,
    create_docstring, create_dotted_name, create_function_def, create_import, create_module,
    create_name, create_return, create_string_constant,
)
from sqla_auto_generator.constants import GeneratedCode
from sqla_auto_generator.domain.models import EnumDef
from sqla_auto_generator.domain.naming import enum_constant_names, enum_name_to_type_name


logger = logging.getLogger(__name__)

RUNTIME = GeneratedCode.RUNTIME_ALIAS


def create_invalid_value_error(enum_def: EnumDef) -> ast.Raise:
    """Creates ``raise ValueError(f"Invalid '<enum>' value '{v}'")``."""
    message = add_location(ast.JoinedStr(values=[
        create_string_constant(f"Invalid '{enum_def.name}' value '"),
        add_location(ast.FormattedValue(value=create_name("v"), conversion=-1, format_spec=None)),
        create_string_constant("'"),
    ]))
    return add_location(ast.Raise(exc=create_call("ValueError", args=[message]), cause=None))


def create_of_method(enum_def: EnumDef, type_name: str) -> ast.FunctionDef:
    """Creates the classmethod mapping each raw database value to its member."""
    body: List[ast.stmt] = []
    for value, constant in enum_constant_names(enum_def.values).items():
        body.append(add_location(ast.If(
            test=create_compare_eq(create_name("v"), create_string_constant(value)),
            body=[create_return(create_dotted_name(f"cls.{constant}"))],
            orelse=[],
        )))
    body.append(create_invalid_value_error(enum_def))

    return create_function_def(
        name=GeneratedCode.ENUM_FACTORY,
        args=[create_arg("cls"), create_arg("v", create_name("str"))],
        body=body,
        returns=create_string_constant(type_name),
        decorator_list=[create_name("classmethod")],
    )


def create_enum_class(enum_def: EnumDef) -> ast.ClassDef:
    """Creates the AST ClassDef node for a database enum type."""
    type_name = enum_name_to_type_name(enum_def.name)

    enum_body: List[ast.stmt] = [
        create_docstring(f"Values of the '{enum_def.name}' database enum type."),
    ]
    enum_body.extend(
        create_assign(target=constant, value=create_string_constant(value))
        for value, constant in enum_constant_names(enum_def.values).items()
    )
    enum_body.append(create_of_method(enum_def, type_name))

    return create_class_def(name=type_name, bases=[f"{RUNTIME}.DbEnum"], body=enum_body)


def generate_enum_ast(enum_def: EnumDef) -> ast.Module:
    """Generates the complete AST Module for one enum file."""
    imports = [
        create_import(GeneratedCode.RUNTIME_MODULE.rsplit(".", 1)[0], [RUNTIME]),
    ]
    return create_module(imports + [create_enum_class(enum_def)])


def generate_enum_code(enum_def: EnumDef) -> str:
    """Generates the Python code string for one enum file."""
    logger.debug(f"Generating enum {enum_name_to_type_name(enum_def.name)} ({len(enum_def.values)} values)")
    return ast.unparse(generate_enum_ast(enum_def))
