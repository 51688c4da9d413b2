"""Serialization module: JSON records and file persistence for supplements."""

from supplement_engine.serialization.json_codec import (
    conflict_from_dict,
    conflict_to_dict,
    supplement_from_dict,
    supplement_to_dict,
    to_json_string,
    value_from_dict,
    value_to_dict,
)
from supplement_engine.serialization.store import JsonSupplementStore, SupplementRepository

__all__ = [
    "JsonSupplementStore",
    "SupplementRepository",
    "conflict_from_dict",
    "conflict_to_dict",
    "supplement_from_dict",
    "supplement_to_dict",
    "to_json_string",
    "value_from_dict",
    "value_to_dict",
]
