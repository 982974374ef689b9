"""
SQLAlchemy mapping generation main module

This module runs one generation pass: read the catalog of the configured
schemas, build the intermediate representation and write one module per enum
type and per table into the target package.
"""

import logging
from pathlib import Path
from typing import List, Mapping, Optional

from sqlalchemy import Connection
from sqlalchemy.exc import SQLAlchemyError

from sqla_auto_generator.ast_codegen import generate_package
from sqla_auto_generator.colored_logging import log_section, log_success
from sqla_auto_generator.config_validation import ToolConfigSchema
from sqla_auto_generator.connection import create_catalog_engine
from sqla_auto_generator.domain.models import SchemaModel
from sqla_auto_generator.exceptions import CatalogError
from sqla_auto_generator.introspection_postgres import PostgresCatalogReader, introspect_schema
from sqla_auto_generator.mapper import build_intermediate_representation


logger = logging.getLogger(__name__)


def generate_mapping_code(model: SchemaModel, config: ToolConfigSchema) -> List[Path]:
    """
    Write the modules of an already built SchemaModel.

    Args:
        model: The intermediate representation of the catalog
        config: Validated configuration providing package_name and output_dir

    Returns:
        Paths of the written files, enums first, then tables in catalog order
    """
    log_section(logger, "Generating modules")
    return generate_package(model, config.output_dir, config.package_name)


def build_schema_model(connection: Connection, schemas: List[str]) -> SchemaModel:
    """Read the catalog of ``schemas`` over an open connection and build the SchemaModel."""
    log_section(logger, "Reading database catalog")
    reader = PostgresCatalogReader(connection)
    snapshot = introspect_schema(reader, schemas)
    return build_intermediate_representation(snapshot.enum_rows, snapshot.tables)


def run_generation(connection: Connection, config: ToolConfigSchema) -> List[Path]:
    """Run the whole pipeline over an open connection."""
    model = build_schema_model(connection, config.schemas)
    logger.info(f"Found {len(model.enums)} enum types and {len(model.tables)} tables")
    return generate_mapping_code(model, config)


def generate_code_from_database(
    config: ToolConfigSchema, environ: Optional[Mapping[str, str]] = None
) -> List[Path]:
    """
    Main entry point: connect with the configured settings and generate the package.

    The connection settings are resolved before anything else, so a missing
    field fails with ConfigurationError without touching the database. The
    single connection is held for the whole run and the engine is disposed
    afterwards.
    """
    engine = create_catalog_engine(config.database, environ)
    try:
        try:
            connection = engine.connect()
        except SQLAlchemyError as e:
            raise CatalogError(f"Could not connect to the database: {e}") from e
        with connection:
            written = run_generation(connection, config)
    finally:
        engine.dispose()

    log_success(logger, f"Generated {len(written)} files in {Path(config.output_dir).resolve()}")
    return written
