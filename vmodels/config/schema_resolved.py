"""Schemas for the result of resolving a virtual model."""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import Field, StrictBool

from .schema_definition import (
    AppendSystemPromptEffect,
    ConcreteModelBase,
    CustomFieldDefinition,
    KVConfig,
    MetadataOverrides,
    PrependSystemPromptEffect,
    Suggestion,
    WireModel,
)


class ActiveSetJinjaVariableEffect(WireModel):
    """Assign ``value`` to template variable ``variable``."""
    type: Literal["setJinjaVariable"] = "setJinjaVariable"
    variable: str
    value: Union[StrictBool, str]


# Applied by the template renderer in list order.
ActiveEffect = Annotated[
    Union[ActiveSetJinjaVariableEffect, PrependSystemPromptEffect, AppendSystemPromptEffect],
    Field(discriminator="type"),
]


class ResolvedModel(WireModel):
    model: str
    chain: List[str] = Field(description="Definition keys, most specific first")
    tags: List[str] = Field(default_factory=list)
    concrete_bases: List[ConcreteModelBase]
    load: KVConfig = Field(default_factory=KVConfig)
    operation: KVConfig = Field(default_factory=KVConfig)
    metadata: MetadataOverrides = Field(default_factory=MetadataOverrides)
    custom_field_definitions: List[CustomFieldDefinition] = Field(default_factory=list)
    custom_field_values: Dict[str, Union[StrictBool, str]] = Field(default_factory=dict)
    active_effects: List[ActiveEffect] = Field(default_factory=list)
    active_suggestions: List[Suggestion] = Field(default_factory=list)

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)
