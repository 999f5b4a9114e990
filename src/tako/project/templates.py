"""Project templates for tako.

Templates live in the tako.templates package data, one directory per
template with Cargo.toml.template, lib.rs.template and README.md.template.

Placeholders:
    {{project_name}}        PascalCase  (my-token -> MyToken)
    {{project_name_snake}}  snake_case  (my-token -> my_token)
    {{project_name_kebab}}  kebab-case  (my_token -> my-token)
"""

import re
from dataclasses import dataclass
from importlib import resources
from typing import Dict, List

from tako.errors import InvalidTemplateError

DEFAULT_TEMPLATE = "default"

TEMPLATE_DESCRIPTIONS: Dict[str, str] = {
    "default": "Basic counter contract",
    "erc20": "ERC-20 fungible token",
    "erc721": "ERC-721 non-fungible token (NFT)",
    "empty": "Minimal boilerplate",
}


@dataclass
class Template:
    """Raw (unprocessed) contents of a project template."""

    name: str
    description: str
    cargo_toml: str
    lib_rs: str
    readme: str


def list_templates() -> List[str]:
    return list(TEMPLATE_DESCRIPTIONS)


def _read(name: str, filename: str) -> str:
    return (
        resources.files("tako.templates")
        .joinpath(name, filename)
        .read_text(encoding="utf-8")
    )


def get_template(name: str) -> Template:
    """Load a template by name.

    Raises:
        InvalidTemplateError: If no template has that name
    """
    if name not in TEMPLATE_DESCRIPTIONS:
        raise InvalidTemplateError(name)

    return Template(
        name=name,
        description=TEMPLATE_DESCRIPTIONS[name],
        cargo_toml=_read(name, "Cargo.toml.template"),
        lib_rs=_read(name, "lib.rs.template"),
        readme=_read(name, "README.md.template"),
    )


def to_pascal_case(name: str) -> str:
    return "".join(word[:1].upper() + word[1:] for word in re.split(r"[-_]", name))


def to_snake_case(name: str) -> str:
    return name.replace("-", "_").lower()


def to_kebab_case(name: str) -> str:
    return name.replace("_", "-").lower()


def process_template(content: str, project_name: str) -> str:
    """Replace the project name placeholders in template text."""
    return (
        content.replace("{{project_name}}", to_pascal_case(project_name))
        .replace("{{project_name_snake}}", to_snake_case(project_name))
        .replace("{{project_name_kebab}}", to_kebab_case(project_name))
    )
