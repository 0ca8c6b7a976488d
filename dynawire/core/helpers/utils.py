import logging
import re
from collections.abc import Mapping
from typing import Any

_WORD_SPLIT = re.compile(r"_+")


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s] : %(message)s',
    )


def camelize(name: Any) -> str:
    """
    Convert a snake_case option name to the service's CamelCase field name:
    "condition_expression" -> "ConditionExpression". Names that already
    start with an upper-case letter are left alone.
    """
    text = str(name)
    if text[:1].isupper():
        return text
    return "".join(part[:1].upper() + part[1:] for part in _WORD_SPLIT.split(text) if part)


def camelize_keys(data: Any, deep: bool = False) -> Any:
    """
    Camelize the keys of a mapping (or of a list of key/value pairs).
    With `deep`, nested mappings and lists of mappings are converted too.
    """
    if isinstance(data, Mapping):
        pairs = data.items()
    elif isinstance(data, list) and data and all(isinstance(p, tuple) and len(p) == 2 for p in data):
        pairs = data
    elif deep and isinstance(data, list):
        return [camelize_keys(v, deep=True) for v in data]
    else:
        return data

    return {
        camelize(k): camelize_keys(v, deep=True) if deep else v
        for k, v in pairs
    }


def upcase(value: Any) -> Any:
    """Render an enum-like option value in the service's upper-case form."""
    if isinstance(value, str):
        return value.upper()
    return value
