"""Tests for the schema introspector."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from poeditor_mcp.mcp.catalog import Operation
from poeditor_mcp.mcp.schema import describe, describe_shape, describe_type
from poeditor_mcp.mcp.tools import build_catalog


class Colour(Enum):
    RED = "red"
    BLUE = "blue"


class Inner(BaseModel):
    label: str
    weight: float | None = None


class Outer(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(description="The name")
    count: int = 0
    enabled: bool | None = None
    tags: list[str] = Field(default_factory=list)
    mapping: dict[str, str] | None = None
    inner: Inner | None = None
    inners: list[Inner] = Field(default_factory=list)
    colour: Colour | None = None
    mode: Literal["a", "b"] = "a"
    flexible: str | list[str] | None = None
    annotated: Annotated[int, Field(ge=0)] = 0
    anything: Any = None


class TestDescribeType:
    def test_scalars(self) -> None:
        assert describe_type(str) == {"type": "string"}
        assert describe_type(int) == {"type": "number"}
        assert describe_type(float) == {"type": "number"}
        assert describe_type(bool) == {"type": "boolean"}

    def test_optional_unwrapped(self) -> None:
        assert describe_type(int | None) == {"type": "number"}

    def test_union_takes_first_alternative(self) -> None:
        assert describe_type(str | list[str]) == {"type": "string"}
        assert describe_type(list[str] | str) == {"type": "array", "items": {"type": "string"}}

    def test_collections(self) -> None:
        assert describe_type(list[int]) == {"type": "array", "items": {"type": "number"}}
        assert describe_type(dict[str, str]) == {
            "type": "object",
            "additionalProperties": {"type": "string"},
        }

    def test_enum_and_literal(self) -> None:
        assert describe_type(Colour) == {"type": "string", "enum": ["red", "blue"]}
        assert describe_type(Literal[1, 2]) == {"type": "number", "enum": [1, 2]}

    def test_unknown_falls_back_to_string(self) -> None:
        assert describe_type(Any) == {"type": "string"}
        assert describe_type(object) == {"type": "string"}


class TestDescribeShape:
    def test_required_and_descriptions(self) -> None:
        shape = describe_shape(Outer)
        assert shape["type"] == "object"
        assert shape["required"] == ["name"]
        assert shape["additionalProperties"] is False
        assert shape["properties"]["name"] == {"type": "string", "description": "The name"}

    def test_every_field_listed(self) -> None:
        assert set(describe_shape(Outer)["properties"]) == set(Outer.model_fields)

    def test_nested_models(self) -> None:
        props = describe_shape(Outer)["properties"]
        assert props["inner"] == {
            "type": "object",
            "properties": {"label": {"type": "string"}, "weight": {"type": "number"}},
            "required": ["label"],
        }
        assert props["inners"]["items"]["required"] == ["label"]

    def test_mixed_kinds(self) -> None:
        props = describe_shape(Outer)["properties"]
        assert props["colour"]["enum"] == ["red", "blue"]
        assert props["mode"] == {"type": "string", "enum": ["a", "b"]}
        assert props["flexible"] == {"type": "string"}
        assert props["annotated"] == {"type": "number"}
        assert props["anything"] == {"type": "string"}
        assert props["enabled"] == {"type": "boolean"}


class TestCatalogDescriptors:
    def test_descriptor_matches_input_model(self) -> None:
        for operation in build_catalog():
            descriptor = describe(operation)
            assert descriptor["name"] == operation.name
            assert descriptor["description"] == operation.description
            schema = descriptor["inputSchema"]
            assert set(schema["properties"]) == set(operation.input_model.model_fields)
            required = {
                name for name, info in operation.input_model.model_fields.items()
                if info.is_required()
            }
            assert set(schema["required"]) == required

    def test_update_terms_descriptor(self) -> None:
        op = build_catalog().find("update_terms_of_a_project")
        assert isinstance(op, Operation)
        schema = describe(op)["inputSchema"]
        assert schema["required"] == ["project_id", "terms"]
        assert schema["additionalProperties"] is False
        term = schema["properties"]["terms"]["items"]
        assert term["required"] == ["term", "context"]
        assert term["properties"]["translations"]["type"] == "object"
        assert term["properties"]["tags"] == {
            "type": "string",
            "description": "New tags (replaces existing)",
        }

    def test_list_terms_status_enum(self) -> None:
        op = build_catalog().find("list_terms_of_a_project")
        assert op is not None
        status = describe(op)["inputSchema"]["properties"]["translation_status"]
        assert status["enum"] == [
            "translated",
            "untranslated",
            "fuzzy",
            "not_fuzzy",
            "proofread",
            "not_proofread",
        ]

    def test_empty_input(self) -> None:
        op = build_catalog().find("check_configuration")
        assert op is not None
        assert describe(op)["inputSchema"] == {"type": "object", "properties": {}, "required": []}
