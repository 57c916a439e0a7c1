"""Shared rendering helpers for producers: templates, YAML and JSON documents."""

from __future__ import annotations

import json
from importlib import resources
from typing import Any, TypeVar

import yaml
from jinja2 import Environment, PackageLoader, StrictUndefined
from pydantic import BaseModel

M = TypeVar("M", bound=BaseModel)

_env = Environment(
    loader=PackageLoader("clusterforge.assets", "templates"),
    keep_trailing_newline=True,
    undefined=StrictUndefined,
    autoescape=False,
)


def render_template(name: str, **context: Any) -> str:
    """Render a packaged jinja2 template."""
    return _env.get_template(name).render(**context)


def read_template(name: str) -> bytes:
    """Return a packaged template file verbatim (no rendering)."""
    node = resources.files("clusterforge.assets.templates")
    for part in name.split("/"):
        node = node.joinpath(part)
    return node.read_bytes()


class _BlockStyleDumper(yaml.SafeDumper):
    """SafeDumper that writes multi-line strings as literal blocks."""


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    style = "|" if "\n" in value else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", value, style=style)


_BlockStyleDumper.add_representer(str, _represent_str)


def dump_yaml(data: Any) -> bytes:
    """Serialize to YAML with sorted keys, block style."""
    return yaml.dump(
        data,
        Dumper=_BlockStyleDumper,
        sort_keys=True,
        default_flow_style=False,
        allow_unicode=True,
    ).encode("utf-8")


def load_yaml(data: bytes, filename: str) -> Any:
    try:
        return yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse {filename}: {exc}") from exc


def parse_yaml_model(model: type[M], data: bytes, filename: str) -> M:
    """Parse YAML bytes into *model*, reporting the file name on failure."""
    document = load_yaml(data, filename)
    if not isinstance(document, dict):
        raise ValueError(f"failed to unmarshal {filename}: expected a mapping")
    try:
        return model.model_validate(document)
    except ValueError as exc:
        raise ValueError(f"failed to unmarshal {filename}: {exc}") from exc


def parse_json_model(model: type[M], data: bytes, filename: str) -> M:
    try:
        document = json.loads(data)
    except json.JSONDecodeError as exc:
        raise ValueError(f"failed to parse {filename}: {exc}") from exc
    try:
        return model.model_validate(document)
    except ValueError as exc:
        raise ValueError(f"failed to unmarshal {filename}: {exc}") from exc
