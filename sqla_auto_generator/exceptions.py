"""
Custom exception hierarchy for SQLAlchemy Auto Generator.

Every error raised by the generator is terminal for the whole run. The
exceptions carry context (which table, column, type or setting failed) and
recovery suggestions so the CLI can print an actionable message.
"""

from typing import Dict, Any, Optional, List


class MappingGeneratorError(Exception):
    """
    Base exception for all SQLAlchemy Auto Generator errors.

    Provides rich context and error recovery guidance.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        error_code: Optional[str] = None
    ):
        """
        Initialize the exception with context and recovery suggestions.

        Args:
            message: Human-readable error message
            context: Additional context about where/why the error occurred
            suggestions: List of potential solutions or next steps
            error_code: Unique error code for programmatic handling
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        self.error_code = error_code

    def __str__(self) -> str:
        """Return formatted error message with context."""
        lines = [super().__str__()]

        if self.error_code:
            lines.append(f"Error Code: {self.error_code}")

        if self.context:
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestions:
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  • {suggestion}")

        return "\n".join(lines)


class ConfigurationError(MappingGeneratorError):
    """Raised when configuration is invalid or a required connection field is missing."""

    def __init__(self, message: str, config_file: str = None, field: str = None, **kwargs):
        context = kwargs.get('context', {})
        if config_file:
            context['config_file'] = config_file
        if field:
            context['field'] = field

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the configuration file syntax",
                "Provide database.url, the DATABASE_URL environment variable or the discrete database fields",
                "Verify package_name is a dotted Python module path",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="CONFIG_ERROR"
        )


class CatalogError(MappingGeneratorError):
    """Raised when a connection or catalog query fails."""

    def __init__(self, message: str, schema: str = None, table: str = None, **kwargs):
        context = kwargs.get('context', {})
        if schema:
            context['schema'] = schema
        if table:
            context['table'] = table

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the database server is running and reachable",
                "Verify the connection credentials",
                "Check the database user can read pg_catalog and information_schema",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="CATALOG_ERROR"
        )


class UnsupportedTypeError(MappingGeneratorError):
    """Raised when a database type has no mapping to a Python type."""

    def __init__(self, db_type: str, table: str = None, column: str = None, **kwargs):
        self.db_type = db_type
        context = kwargs.get('context', {})
        context['db_type'] = db_type
        if table:
            context['table'] = table
        if column:
            context['column'] = column

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Add the type to the scalar type map in domain/field_mapping.py",
                "Composite types such as 'money' are not supported",
            ]

        super().__init__(
            f"Generator doesn't know how to map column to type '{db_type}'",
            context=context,
            suggestions=suggestions,
            error_code="UNSUPPORTED_TYPE"
        )


class CodeGenerationError(MappingGeneratorError):
    """Raised when formatting or writing a generated module fails."""

    def __init__(self, message: str, type_name: str = None, path: str = None, **kwargs):
        context = kwargs.get('context', {})
        if type_name:
            context['type_name'] = type_name
        if path:
            context['path'] = path

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the output directory is writable",
                "Check for database identifiers that are not valid Python names",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="CODE_GENERATION_ERROR"
        )

