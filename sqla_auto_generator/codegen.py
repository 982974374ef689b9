import logging
from pathlib import Path
from typing import Any, Dict

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    select_autoescape,
)

from sqla_auto_generator.codegen_utils import format_python_code_using_black
from sqla_auto_generator.exceptions import CodeGenerationError


logger = logging.getLogger(__name__)

# Define the path to the templates directory relative to this file
TEMPLATE_DIR = Path(__file__).parent / "templates"


def setup_jinja_env() -> Environment:
    """Sets up and returns the Jinja2 environment."""
    return Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        # Generated Python must never be HTML-escaped
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,  # Remove first newline after a block tag
        lstrip_blocks=True,  # Strip leading whitespace from lines with block tags
        undefined=StrictUndefined,
    )


def render_template(env: Environment, template_name: str, context: Dict[str, Any], output_path: Path) -> str:
    """Renders a Jinja template and formats the result when it is Python source."""
    template = env.get_template(template_name)
    rendered_content = template.render(context)
    if output_path.suffix == ".py":
        return format_python_code_using_black(output_path, rendered_content)
    return rendered_content


def generate_file_from_template(
    env: Environment, template_name: str, context: Dict[str, Any], output_path: Path
) -> Path:
    """Renders a Jinja template and saves the output to the specified path, replacing any previous file."""
    final_content = render_template(env, template_name, context, output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(final_content, encoding="utf-8")
    except OSError as e:
        raise CodeGenerationError(f"Could not write generated file: {e}", path=str(output_path)) from e
    logger.debug(f"Generated file: {output_path}")
    return output_path
