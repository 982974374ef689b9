"""
Naming convention utilities for SQLAlchemy Auto Generator.

This module converts raw database identifiers into the names used by the
generated code. Every transform is pure and deterministic so that two runs
against the same catalog produce the same files.

Known limitations:
    * Model names are singularized by stripping one trailing literal "s", so
      irregular plurals ("people") and singular words ending in "s" ("status")
      are misnamed.
    * Name collisions are not detected: two tables that normalize to the same
      model name overwrite each other's file.
"""

import re
from typing import Dict, Iterable, Set

from ..constants import FieldNames


_SNAKE_SEGMENT = re.compile(r"_([a-z])")
_NON_IDENTIFIER = re.compile(r"\W")


def snake_to_camel(name: str) -> str:
    """
    Replace every underscore followed by a lowercase letter with that letter uppercased.

    All other characters, including trailing or doubled underscores, are left
    untouched.

    Example:
        >>> snake_to_camel("owner_account_id")
        'ownerAccountId'
        >>> snake_to_camel("legacy__code_")
        'legacy_Code_'
    """
    return _SNAKE_SEGMENT.sub(lambda match: match.group(1).upper(), name)


def capitalize(name: str) -> str:
    """Camel-case ``name`` and uppercase its first character only."""
    camel = snake_to_camel(name)
    return camel[:1].upper() + camel[1:]


def table_name_to_model_type_name(table_name: str) -> str:
    """
    Convert a table name to the name of its model class.

    Example:
        >>> table_name_to_model_type_name("accounts")
        'AccountModel'
        >>> table_name_to_model_type_name("order_items")
        'OrderItemModel'
    """
    return capitalize(table_name).removesuffix("s") + FieldNames.MODEL_SUFFIX


def enum_name_to_type_name(enum_name: str) -> str:
    """Convert a database enum type name to the name of its enum class."""
    return capitalize(enum_name)


def foreign_key_column_to_property_name(column_name: str) -> str:
    """
    Name the model property that exposes the row referenced by a foreign key.

    Example:
        >>> foreign_key_column_to_property_name("account_id")
        'account'
    """
    return snake_to_camel(column_name.removesuffix(FieldNames.FOREIGN_KEY_SUFFIX))


def column_to_property_name(column_name: str) -> str:
    """Name of the property (and table descriptor attribute) for a column."""
    return snake_to_camel(column_name)


def enum_value_to_constant_name(value: str) -> str:
    """
    Name of the enum constant for a database label: the label uppercased.

    Characters that cannot appear in an identifier become underscores, and a
    name that would not start with a letter is prefixed with ``V``. The label
    itself stays the constant's value.

    Example:
        >>> enum_value_to_constant_name("in progress")
        'IN_PROGRESS'
        >>> enum_value_to_constant_name("1st")
        'V1ST'
    """
    name = _NON_IDENTIFIER.sub("_", value.upper())
    if not name[:1].isalpha():
        name = "V" + name
    return name


def enum_constant_names(values: Iterable[str]) -> Dict[str, str]:
    """
    Map each distinct label to its constant name, in label order.

    Labels that map to an already used name get a numeric suffix
    (``in-progress`` and ``in progress`` -> ``IN_PROGRESS``, ``IN_PROGRESS_2``).
    """
    names: Dict[str, str] = {}
    used: Set[str] = set()
    for value in values:
        if value in names:
            continue
        base = enum_value_to_constant_name(value)
        name, counter = base, 2
        while name in used:
            name = f"{base}_{counter}"
            counter += 1
        names[value] = name
        used.add(name)
    return names


def type_module_path(package_name: str, type_name: str) -> str:
    """Dotted path of the module holding a generated type."""
    return f"{package_name}.{type_name}"
