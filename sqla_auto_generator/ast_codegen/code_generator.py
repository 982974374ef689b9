"""
SQLAlchemy AST Code Generator

This module writes the generated enum and model modules of a SchemaModel to
disk: one file per type, under the directory of the target package.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Type, Union

from jinja2 import Environment

from sqla_auto_generator.ast_codegen.enums import generate_enum_code
from sqla_auto_generator.ast_codegen.models import generate_model_code
from sqla_auto_generator.codegen import generate_file_from_template, setup_jinja_env
from sqla_auto_generator.colored_logging import log_progress
from sqla_auto_generator.constants import GeneratedCode
from sqla_auto_generator.domain.models import EnumDef, SchemaModel, TableDef
from sqla_auto_generator.domain.naming import enum_name_to_type_name, table_name_to_model_type_name

logger = logging.getLogger(__name__)

# ---- Design Patterns ----

# Strategy Pattern for the two kinds of generated modules
class CodeGeneratorStrategy(ABC):
    """Abstract Strategy for code generation"""

    @abstractmethod
    def type_name(self, definition: Union[EnumDef, TableDef]) -> str:
        """Name of the generated type, which is also its module name."""

    @abstractmethod
    def generate_code(self, definition: Union[EnumDef, TableDef], package_name: str) -> str:
        """Generate the module source for one definition."""


class EnumModuleGenerator(CodeGeneratorStrategy):
    """Generates one enum module"""
    def type_name(self, definition: EnumDef) -> str:
        return enum_name_to_type_name(definition.name)

    def generate_code(self, definition: EnumDef, package_name: str) -> str:
        return generate_enum_code(definition)


class ModelModuleGenerator(CodeGeneratorStrategy):
    """Generates one model module"""
    def type_name(self, definition: TableDef) -> str:
        return table_name_to_model_type_name(definition.name)

    def generate_code(self, definition: TableDef, package_name: str) -> str:
        return generate_model_code(definition, package_name)


# Factory Pattern for creating generators
class CodeGeneratorFactory:
    """Factory for creating code generator strategies"""

    _registry: Dict[str, Type[CodeGeneratorStrategy]] = {
        'enum': EnumModuleGenerator,
        'model': ModelModuleGenerator,
    }

    @classmethod
    def create(cls, name: str) -> CodeGeneratorStrategy:
        """Create a generator strategy instance by name"""
        generator_class = cls._registry.get(name)
        if not generator_class:
            raise ValueError(f"Unknown generator type: {name}")
        return generator_class()


# Facade Pattern for simplified interface
class CodeGenerator:
    """Facade for the code generation system"""

    def __init__(self, output_dir: Union[str, Path], package_name: str, env: Optional[Environment] = None):
        self.output_dir = Path(output_dir)
        self.package_name = package_name
        self.package_path = self.output_dir.joinpath(*package_name.split("."))
        self.env = env or setup_jinja_env()

    def module_path(self, type_name: str) -> Path:
        return self.package_path / f"{type_name}{GeneratedCode.FILE_EXTENSION}"

    def generate_file(self, generator_name: str, definition: Union[EnumDef, TableDef]) -> Path:
        """Generate the module for one definition, replacing any previous file"""
        generator = CodeGeneratorFactory.create(generator_name)
        output_path = self.module_path(generator.type_name(definition))

        code = generator.generate_code(definition, self.package_name)
        context = {
            "banner_lines": GeneratedCode.BANNER_LINES,
            "code": code,
        }
        return generate_file_from_template(self.env, GeneratedCode.FILE_TEMPLATE, context, output_path)

    def generate_all(self, model: SchemaModel) -> List[Path]:
        """Generate every enum module, then every model module in catalog order"""
        written: List[Path] = []
        for enum_def in model.enums:
            log_progress(logger, f"Generating enum for type {enum_def.name}")
            written.append(self.generate_file('enum', enum_def))
        for table in model.tables:
            log_progress(logger, f"Generating mapping for table {table.qualified_name}")
            written.append(self.generate_file('model', table))
        return written


# Helper function to simplify the code generation process
def generate_package(
    model: SchemaModel,
    output_dir: Union[str, Path],
    package_name: str,
    env: Optional[Environment] = None,
) -> List[Path]:
    """Generate all modules of a SchemaModel into ``<output_dir>/<package path>``"""
    generator = CodeGenerator(output_dir, package_name, env)
    written = generator.generate_all(model)
    logger.info(f"Generated {len(written)} modules in {generator.package_path}")
    return written
