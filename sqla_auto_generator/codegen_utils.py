import logging
from pathlib import Path

from black import (
    Mode,
    format_str as black_format_str,
    NothingChanged as BlackNothingChanged,
)

from sqla_auto_generator.constants import DefaultConfig
from sqla_auto_generator.exceptions import CodeGenerationError


logger = logging.getLogger(__name__)

BLACK_FORMATTER_MODE = Mode(line_length=DefaultConfig.LINE_LENGTH)


def format_python_code_using_black(filepath: Path, code_string: str) -> str:
    """Formats the given Python code using Black."""
    try:
        formatted_code = black_format_str(code_string, mode=BLACK_FORMATTER_MODE)
        logger.debug(f"Formatted code using Black: {filepath}")
        return formatted_code
    except BlackNothingChanged:
        logger.debug(f"Black formatter did not change the code: {filepath}")
        return code_string
    except Exception as e:
        # Black only fails on invalid syntax, e.g. an enum label that is not a valid identifier
        raise CodeGenerationError(
            f"Could not format generated code using Black: {e}", path=str(filepath)
        ) from e
