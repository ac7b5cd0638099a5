"""Structural validation of tool arguments against a tool's input schema.

Covers the JSON-schema subset MCP servers publish in ``inputSchema``:
``type`` (a name or a list of names), ``properties``, ``required``,
``enum``, ``items`` and ``additionalProperties: false``.  Unknown keywords
are ignored.
"""

from __future__ import annotations

from typing import Any

from agentbuilder.protocols.errors import ValidationError


def _matches_type(value: Any, type_name: str) -> bool:
    # bool is a subclass of int; JSON keeps them apart
    if type_name == "object":
        return isinstance(value, dict)
    if type_name == "array":
        return isinstance(value, list)
    if type_name == "string":
        return isinstance(value, str)
    if type_name == "boolean":
        return isinstance(value, bool)
    if type_name == "integer":
        if isinstance(value, bool):
            return False
        return isinstance(value, int) or (isinstance(value, float) and value.is_integer())
    if type_name == "number":
        return isinstance(value, int | float) and not isinstance(value, bool)
    if type_name == "null":
        return value is None
    return True


def collect_problems(schema: dict[str, Any], value: Any, path: str = "") -> list[str]:
    """Return every way *value* violates *schema*; empty when it conforms."""
    where = path or "/"
    problems: list[str] = []

    declared = schema.get("type")
    if declared is not None:
        names = declared if isinstance(declared, list) else [declared]
        if not any(_matches_type(value, name) for name in names):
            expected = " or ".join(str(n) for n in names)
            problems.append(f"{where}: expected {expected}, got {_json_type(value)}")
            return problems

    if "enum" in schema and value not in schema["enum"]:
        problems.append(f"{where}: {value!r} is not one of {schema['enum']!r}")

    if isinstance(value, dict):
        properties: dict[str, Any] = schema.get("properties", {})
        for key in schema.get("required", []):
            if key not in value:
                problems.append(f"{path}/{key}: required property missing")
        for key, item in value.items():
            sub = properties.get(key)
            if sub is not None:
                problems.extend(collect_problems(sub, item, f"{path}/{key}"))
            elif schema.get("additionalProperties") is False:
                problems.append(f"{path}/{key}: unexpected property")

    if isinstance(value, list) and isinstance(schema.get("items"), dict):
        for index, item in enumerate(value):
            problems.extend(collect_problems(schema["items"], item, f"{path}/{index}"))

    return problems


def validate_arguments(tool_name: str, schema: dict[str, Any], arguments: dict[str, Any]) -> None:
    """Raise :class:`ValidationError` if *arguments* do not fit *schema*.

    An empty schema accepts anything.
    """
    if not schema:
        return
    problems = collect_problems(schema, arguments)
    if problems:
        raise ValidationError(tool_name, problems)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
