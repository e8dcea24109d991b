"""Compile operator form data into Flex Message JSON."""

from .compiler import Compiler, compile_template
from .defaults import resolve_defaults
from .models import CompileResult, Doc, Template, ValidationError
from .nested_path import get_value, set_value
from .resolver import resolve_template, upgrade_template
from .validation import validate_field, validate_message_structure, validate_schema_data

__version__ = "0.2.0"

__all__ = [
    "CompileResult",
    "Compiler",
    "Doc",
    "Template",
    "ValidationError",
    "compile_template",
    "get_value",
    "resolve_defaults",
    "resolve_template",
    "set_value",
    "upgrade_template",
    "validate_field",
    "validate_message_structure",
    "validate_schema_data",
]
