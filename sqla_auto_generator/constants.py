"""
Centralized constants for SQLAlchemy Auto Generator.

This module contains the configuration defaults, naming conventions and
catalog filters shared by the introspection, mapping and rendering layers.
"""

from typing import List, Tuple


# =============================================================================
# CORE CONFIGURATION
# =============================================================================

class DefaultConfig:
    """Default configuration values."""

    # Generated code defaults
    PACKAGE_NAME = "example.models"
    OUTPUT_DIR = "src"
    SCHEMAS: List[str] = ["public"]

    # Connection defaults (used when discrete fields are configured)
    DATABASE_HOST = "localhost"
    DATABASE_PORT = 5432
    DATABASE_URL_ENV = "DATABASE_URL"
    DRIVER_NAME = "postgresql+psycopg2"

    # Formatting
    LINE_LENGTH = 120


# =============================================================================
# CATALOG FILTERS
# =============================================================================

class CatalogFilters:
    """Rules applied while reading the database catalog."""

    # Migration-tool bookkeeping tables (flyway_schema_history, ...)
    EXCLUDED_TABLE_PREFIX = "flyway"


# =============================================================================
# NAMING CONVENTIONS
# =============================================================================

class FieldNames:
    """Column names and suffixes with special meaning."""

    PRIMARY_KEY = "id"
    FOREIGN_KEY_SUFFIX = "_id"
    MODEL_SUFFIX = "Model"

    # Translation (_t) and currency (_c) columns are recognized but not generated yet
    TRANSLATION_SUFFIX = "_t"
    CURRENCY_SUFFIX = "_c"
    EXCLUDED_SUFFIXES: Tuple[str, ...] = (TRANSLATION_SUFFIX, CURRENCY_SUFFIX)


# =============================================================================
# GENERATED CODE
# =============================================================================

class GeneratedCode:
    """Names used inside the generated modules."""

    RUNTIME_MODULE = "sqla_auto_generator.runtime"
    RUNTIME_ALIAS = "runtime"
    SQLALCHEMY_MODULE = "sqlalchemy"
    SQLALCHEMY_ALIAS = "sa"

    TABLE_CLASS = "Table"
    DAO_CLASS = "BaseDao"
    ENUM_FACTORY = "of"
    FILE_EXTENSION = ".py"

    FILE_TEMPLATE = "generated_module.py.j2"

    BANNER_LINES: Tuple[str, ...] = (
        "**************************************************************************************",
        "**************************************************************************************",
        "  DO NOT MODIFY: Auto-generated model implementation based on the database structure",
        "**************************************************************************************",
        "**************************************************************************************",
    )
