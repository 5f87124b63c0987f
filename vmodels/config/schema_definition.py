"""Schemas for authored virtual model definitions.

The wire shape is the camelCase JSON a catalog author writes; attributes are
snake_case. Every model is frozen: definitions are read-only once published.
"""

from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, JsonValue, StrictBool, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..util.const import DEFAULTS, EffectType, MIXED


class WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Dump to the authored JSON shape (absent optionals are omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- config blocks ---------------------------------------------------------

class KVConfigField(WireModel):
    key: str
    value: JsonValue = None


class KVConfig(WireModel):
    """Key/value config block. Field-level get/set; set returns a new block."""
    fields: List[KVConfigField] = Field(default_factory=list)

    def has(self, key: str) -> bool:
        return any(f.key == key for f in self.fields)

    def get(self, key: str, default: Any = None) -> Any:
        for f in self.fields:
            if f.key == key:
                return f.value
        return default

    def set(self, key: str, value: Any) -> "KVConfig":
        replaced = False
        out: List[KVConfigField] = []
        for f in self.fields:
            if f.key == key:
                out.append(KVConfigField(key=key, value=value))
                replaced = True
            else:
                out.append(f)
        if not replaced:
            out.append(KVConfigField(key=key, value=value))
        return KVConfig(fields=out)

    def keys(self) -> List[str]:
        return [f.key for f in self.fields]

    def to_dict(self) -> Dict[str, Any]:
        return {f.key: f.value for f in self.fields}


class DefinitionConfig(WireModel):
    load: Optional[KVConfig] = None
    operation: Optional[KVConfig] = None


# --- concrete bases --------------------------------------------------------

class HuggingFaceModelDownloadSource(WireModel):
    type: Literal["huggingface"] = "huggingface"
    user: str
    repo: str


# Only one source kind exists today; widen to a discriminated union when more arrive.
ModelDownloadSource = HuggingFaceModelDownloadSource


class ConcreteModelBase(WireModel):
    key: str = Field(description="Key of the concrete model once downloaded")
    sources: List[ModelDownloadSource] = Field(description="Download locations, first preferred")


# --- metadata --------------------------------------------------------------

ModelDomainType = Literal["llm", "embedding", "imageGen", "transcription", "tts"]
ModelCompatibilityType = Literal["gguf", "safetensors", "onnx", "ggml", "mlx_placeholder", "torch_safetensors"]
TriState = Union[StrictBool, Literal["mixed"]]


class MetadataOverrides(WireModel):
    domain: Optional[ModelDomainType] = None
    architectures: Optional[List[str]] = None
    compatibility_types: Optional[List[ModelCompatibilityType]] = None
    params_strings: Optional[List[str]] = None
    min_memory_usage_bytes: Optional[Union[int, float]] = None
    context_lengths: Optional[List[Union[int, float]]] = None
    trained_for_tool_use: Optional[TriState] = None
    vision: Optional[TriState] = None


# --- custom fields ---------------------------------------------------------

class SetJinjaVariableEffect(WireModel):
    type: Literal["setJinjaVariable"] = "setJinjaVariable"
    variable: str


class PrependSystemPromptEffect(WireModel):
    type: Literal["prependSystemPrompt"] = "prependSystemPrompt"
    content: str


class AppendSystemPromptEffect(WireModel):
    type: Literal["appendSystemPrompt"] = "appendSystemPrompt"
    content: str


CustomFieldEffect = Annotated[
    Union[SetJinjaVariableEffect, PrependSystemPromptEffect, AppendSystemPromptEffect],
    Field(discriminator="type"),
]


class BooleanCustomFieldDefinition(WireModel):
    type: Literal["boolean"] = "boolean"
    key: str
    display_name: str
    description: str
    default_value: StrictBool
    effects: List[CustomFieldEffect] = Field(default_factory=list)


class StringCustomFieldDefinition(WireModel):
    type: Literal["string"] = "string"
    key: str
    display_name: str
    description: str
    default_value: str
    effects: List[SetJinjaVariableEffect] = Field(default_factory=list)

    @field_validator("effects", mode="before")
    @classmethod
    def _only_jinja_variables(cls, value: Any) -> Any:
        # Prompt effects are boolean-gated; a string value has nothing to gate them on.
        for item in value or []:
            kind = item.get("type") if isinstance(item, dict) else getattr(item, "type", None)
            if kind != EffectType.SET_JINJA_VARIABLE.value:
                raise ValueError(f"string custom fields only support setJinjaVariable effects, got {kind!r}")
        return value


CustomFieldDefinition = Annotated[
    Union[BooleanCustomFieldDefinition, StringCustomFieldDefinition],
    Field(discriminator="type"),
]


# --- suggestions -----------------------------------------------------------

class ConditionEquals(WireModel):
    """Holds when the resolved value at ``key`` deep-equals ``value``."""
    type: Literal["equals"] = "equals"
    key: str
    value: JsonValue = None


# Single condition kind; see ModelDownloadSource.
Condition = ConditionEquals


class Suggestion(WireModel):
    message: str
    conditions: List[Condition] = Field(default_factory=list)
    fields: Optional[List[KVConfigField]] = None


# --- definitions -----------------------------------------------------------

@dataclass(frozen=True)
class BaseReference:
    """``base`` names another virtual model."""
    model: str


@dataclass(frozen=True)
class ConcreteBases:
    """``base`` ends the chain with downloadable artifacts."""
    bases: List[ConcreteModelBase]


BaseRef = Union[BaseReference, ConcreteBases]


class VirtualModelDefinition(WireModel):
    model: str = Field(pattern=r"^[^/]+/[^/]+$", description="Indexed identifier, user/repo")
    base: Union[str, List[ConcreteModelBase]]
    tags: Optional[List[Annotated[str, Field(max_length=DEFAULTS["MAX_TAG_LENGTH"])]]] = None
    config: Optional[DefinitionConfig] = None
    metadata_overrides: Optional[MetadataOverrides] = None
    custom_fields: Optional[List[CustomFieldDefinition]] = None
    suggestions: Optional[List[Suggestion]] = None

    @field_validator("base")
    @classmethod
    def _non_empty_base(cls, value: Union[str, List[ConcreteModelBase]]) -> Union[str, List[ConcreteModelBase]]:
        if isinstance(value, str) and not value:
            raise ValueError("base reference must not be empty")
        if isinstance(value, list) and not value:
            raise ValueError("concrete base list must not be empty")
        return value

    @model_validator(mode="after")
    def _unique_custom_field_keys(self) -> "VirtualModelDefinition":
        seen = set()
        for cf in self.custom_fields or []:
            if cf.key in seen:
                raise ValueError(f"custom field key {cf.key!r} declared twice in {self.model}")
            seen.add(cf.key)
        return self

    def base_ref(self) -> BaseRef:
        if isinstance(self.base, str):
            return BaseReference(self.base)
        return ConcreteBases(list(self.base))

    def load_config(self) -> KVConfig:
        return (self.config.load if self.config else None) or KVConfig()

    def operation_config(self) -> KVConfig:
        return (self.config.operation if self.config else None) or KVConfig()


def is_mixed(value: Any) -> bool:
    return value == MIXED and isinstance(value, str)
