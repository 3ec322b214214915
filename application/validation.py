"""Declarative validation - runs pydantic schemas and reports field errors"""
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Type

from pydantic import BaseModel, ValidationError

ErrorMap = Dict[str, List[str]]

# Location prefixes added by FastAPI for request parts
_REQUEST_PARTS = {"body", "query", "path", "header", "cookie"}


def _field_name(loc: Tuple[Any, ...]) -> str:
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _REQUEST_PARTS:
        parts = parts[1:]
    return ".".join(parts)


def format_errors(errors: Iterable[Mapping[str, Any]]) -> ErrorMap:
    """Group pydantic/FastAPI error dicts by field name"""
    result: ErrorMap = {}
    for error in errors:
        field = _field_name(tuple(error.get("loc", ())))
        message = str(error.get("msg", "Invalid value"))
        result.setdefault(field, []).append(message)
    return result


def try_validate(schema: Type[BaseModel], data: Any) -> Tuple[bool, ErrorMap]:
    """
    Validate a dict or an attribute-bearing object (e.g. an ORM row or a
    domain entity) against schema. Returns (ok, errors).
    """
    try:
        if isinstance(data, Mapping):
            schema.model_validate(data)
        else:
            schema.model_validate(data, from_attributes=True)
    except ValidationError as e:
        return False, format_errors(e.errors())
    return True, {}
