"""Contract project scaffolding."""

from .scaffold import ProjectScaffolder
from .templates import (
    DEFAULT_TEMPLATE,
    Template,
    get_template,
    list_templates,
    process_template,
)

__all__ = [
    "ProjectScaffolder",
    "DEFAULT_TEMPLATE",
    "Template",
    "get_template",
    "list_templates",
    "process_template",
]
