# Copyright (c) Syntropy Systems
"""Shared Pydantic model helpers for scientist."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, JsonValue
from pydantic_core import to_jsonable_python
from typing_extensions import TypeAlias

JSONValue: TypeAlias = JsonValue


class ScientistBaseModel(BaseModel):
    """Base model with shared config for scientist records."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="ignore",
        populate_by_name=True,
    )


def to_json_value(value: object) -> JSONValue:
    """Convert an arbitrary behavior value into JSON-safe data.

    Objects pydantic cannot serialize fall back to their repr.
    """
    return to_jsonable_python(value, fallback=repr)
