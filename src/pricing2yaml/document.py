"""
Total accessors over the untyped document produced by the YAML loader.

The loader yields nested ``dict``/``list`` values with scalar leaves. Every
read performed by the schema mapper goes through the helpers below, so a
missing or mis-shaped field always surfaces as a :class:`SchemaError` that
names the offending field path.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from .errors import SchemaError

Scalar = Union[None, bool, int, float, str, date, datetime]
Document = Union[Scalar, List["Document"], Dict[str, "Document"]]

_MISSING = object()

_KIND_NAMES = {
    dict: "a mapping",
    list: "a sequence",
    str: "a string",
    bool: "a boolean",
    int: "an integer",
    float: "a number",
    date: "a date",
    datetime: "a datetime",
    type(None): "null",
}


def join_path(parent: str, child: Union[str, int]) -> str:
    """Append a key or an index to a field path."""
    if isinstance(child, int):
        return f"{parent}[{child}]"
    return f"{parent}.{child}" if parent else child


def describe(value: Any) -> str:
    if isinstance(value, bool):
        return "a boolean"
    for kind, name in _KIND_NAMES.items():
        if type(value) is kind:
            return name
    return type(value).__name__


def is_kind(value: Any, kinds: Tuple[Type, ...]) -> bool:
    # bool is an int subclass; only accept it when explicitly asked for
    if isinstance(value, bool) and bool not in kinds:
        return False
    return isinstance(value, kinds)


def expect(value: Any, kinds: Tuple[Type, ...], path: str) -> Any:
    if not is_kind(value, kinds):
        expected = " or ".join(_KIND_NAMES.get(kind, kind.__name__) for kind in kinds)
        raise SchemaError(path, f"expected {expected}, got {describe(value)}")
    return value


def get_required(mapping: Dict[str, Any], key: str, kinds: Tuple[Type, ...], path: str) -> Any:
    """Return ``mapping[key]`` checked against ``kinds``; fail if absent."""
    field_path = join_path(path, key)
    value = mapping.get(key, _MISSING)
    if value is _MISSING or value is None and type(None) not in kinds:
        raise SchemaError(field_path, "required field is missing")
    return expect(value, kinds, field_path)


def get_optional(mapping: Dict[str, Any], key: str, kinds: Tuple[Type, ...], path: str,
                 default: Any = None) -> Any:
    """Return ``mapping[key]`` checked against ``kinds``, or ``default`` if absent or null."""
    value = mapping.get(key)
    if value is None:
        return default
    return expect(value, kinds, join_path(path, key))


def get_non_empty_string(mapping: Dict[str, Any], key: str, path: str) -> str:
    value = get_required(mapping, key, (str,), path)
    if not value.strip():
        raise SchemaError(join_path(path, key), "must be a non-empty string")
    return value


def get_string_list(mapping: Dict[str, Any], key: str, path: str) -> Optional[List[str]]:
    """Return an optional sequence of strings, or ``None`` when absent."""
    values = get_optional(mapping, key, (list,), path)
    if values is None:
        return None
    field_path = join_path(path, key)
    return [expect(item, (str,), join_path(field_path, index)) for index, item in enumerate(values)]


def iter_named_mappings(section: Dict[str, Any], path: str):
    """Yield ``(name, body, body_path)`` for each entry of a name-keyed section."""
    for name, body in section.items():
        entry_path = join_path(path, str(name))
        if not isinstance(name, str):
            raise SchemaError(entry_path, f"names must be strings, got {describe(name)}")
        if body is None:
            body = {}
        yield name, expect(body, (dict,), entry_path), entry_path
