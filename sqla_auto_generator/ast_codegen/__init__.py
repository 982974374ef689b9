"""
SQLAlchemy AST Code Generator Module

This module builds the generated enum and model modules as Python AST and
writes them into the target package.
"""

from .enums import generate_enum_code
from .models import generate_model_code
from .code_generator import CodeGenerator, generate_package


__all__ = [
    'generate_enum_code',
    'generate_model_code',
    'CodeGenerator',
    'generate_package'
]
