"""Form schema models describing a template's editable surface."""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class SchemaModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class RequiredIf(SchemaModel):
    when: str
    is_: Union[bool, int, float, str, None] = Field(alias="is")


class FieldConstraints(SchemaModel):
    max_length: Optional[int] = None
    min_length: Optional[int] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    https_only: bool = False
    pattern: Optional[str] = None
    required_if: Optional[RequiredIf] = None

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid pattern {v!r}: {e}") from e
        return v


class FieldOption(SchemaModel):
    label: str
    value: str


class FieldBase(SchemaModel):
    key: str
    label: str = ""
    required: bool = False
    default: Any = None
    help: Optional[str] = None
    locked: bool = False
    constraints: FieldConstraints = Field(default_factory=FieldConstraints)

    @property
    def display_label(self) -> str:
        return self.label or self.key


class BaseField(FieldBase):
    type: Literal["text", "textarea", "imageUrl", "url", "number", "color", "json"]


class SelectField(FieldBase):
    type: Literal["select"]
    options: Union[list[str], list[FieldOption]] = []

    def option_values(self) -> list[str]:
        return [o.value if isinstance(o, FieldOption) else o for o in self.options]


class ItemSchema(SchemaModel):
    title: str = ""
    fields: list[SchemaField] = []


class RepeatableField(FieldBase):
    type: Literal["repeatable"]
    item_schema: ItemSchema = Field(default_factory=ItemSchema)


SchemaField = Annotated[
    Union[BaseField, SelectField, RepeatableField],
    Field(discriminator="type"),
]


class Section(SchemaModel):
    id: str
    title: str = ""
    fields: list[SchemaField] = []
    repeatable: bool = False
    key: Optional[str] = None
    constraints: FieldConstraints = Field(default_factory=FieldConstraints)
    item_schema: Optional[ItemSchema] = None

    @model_validator(mode="after")
    def validate_shape(self) -> "Section":
        if self.repeatable:
            if not self.key:
                raise ValueError(f"Repeatable section '{self.id}' requires a key")
            if self.item_schema is None:
                raise ValueError(f"Repeatable section '{self.id}' requires an itemSchema")
            if self.fields:
                raise ValueError(
                    f"Repeatable section '{self.id}' cannot also declare fields"
                )
        elif self.item_schema is not None:
            raise ValueError(
                f"Section '{self.id}' declares an itemSchema but is not repeatable"
            )
        return self

    @property
    def display_title(self) -> str:
        return self.title or self.key or self.id


class FormSchema(SchemaModel):
    schema_version: int = 1
    title: str = ""
    sections: list[Section] = []


ItemSchema.model_rebuild()
RepeatableField.model_rebuild()
