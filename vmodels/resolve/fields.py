"""Custom field engine.

Merges custom field declarations across a chain, validates caller-supplied
values against them and computes the ordered effects handed to the prompt
template renderer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..config.schema_definition import (
    AppendSystemPromptEffect,
    BooleanCustomFieldDefinition,
    PrependSystemPromptEffect,
    SetJinjaVariableEffect,
    StringCustomFieldDefinition,
)
from ..config.schema_resolved import ActiveSetJinjaVariableEffect
from ..util.const import FieldType
from ..util.errors import (
    CustomFieldTypeMismatchError,
    DuplicateCustomFieldKeyAcrossVariantsError,
    InvalidCustomFieldEffectError,
    UnknownCustomFieldError,
    VirtualModelError,
)
from ..util.logging import log

AnyFieldDefinition = Union[BooleanCustomFieldDefinition, StringCustomFieldDefinition]
FieldValue = Union[bool, str]


@dataclass(frozen=True)
class FieldResolution:
    definitions: Dict[str, AnyFieldDefinition]
    values: Dict[str, FieldValue]
    effects: List[Any]
    errors: List[VirtualModelError] = field(default_factory=list)


def merge_field_definitions(chain) -> Dict[str, AnyFieldDefinition]:
    """Most specific declaration of each key wins outright; order is first-seen.

    Raises DuplicateCustomFieldKeyAcrossVariantsError when two levels declare
    the same key with different types.
    """
    merged: Dict[str, Tuple[str, AnyFieldDefinition]] = {}
    for definition in chain.definitions:
        for cf in definition.custom_fields or []:
            if cf.key not in merged:
                merged[cf.key] = (definition.model, cf)
                continue
            owner, kept = merged[cf.key]
            if kept.type != cf.type:
                raise DuplicateCustomFieldKeyAcrossVariantsError(cf.key, owner, kept.type, definition.model, cf.type)
    return {key: cf for key, (_, cf) in merged.items()}


def _matches(cf: AnyFieldDefinition, value: Any) -> bool:
    if cf.type == FieldType.BOOLEAN.value:
        return isinstance(value, bool)
    if cf.type == FieldType.STRING.value:
        return isinstance(value, str)
    raise TypeError(f"unknown custom field type: {cf.type!r}")


def _effects_for(cf: AnyFieldDefinition, value: FieldValue) -> List[Any]:
    if isinstance(cf, BooleanCustomFieldDefinition):
        if value is not True:
            return []
        out: List[Any] = []
        for effect in cf.effects:
            if isinstance(effect, SetJinjaVariableEffect):
                out.append(ActiveSetJinjaVariableEffect(variable=effect.variable, value=True))
            elif isinstance(effect, (PrependSystemPromptEffect, AppendSystemPromptEffect)):
                out.append(effect)
            else:
                raise TypeError(f"unknown effect type: {effect.type!r}")
        return out
    if isinstance(cf, StringCustomFieldDefinition):
        out = []
        for effect in cf.effects:
            # model_construct() bypasses the schema validator; check again here.
            if not isinstance(effect, SetJinjaVariableEffect):
                raise InvalidCustomFieldEffectError(cf.key, getattr(effect, "type", type(effect).__name__))
            out.append(ActiveSetJinjaVariableEffect(variable=effect.variable, value=value))
        return out
    raise TypeError(f"unknown custom field definition: {type(cf).__name__}")


def resolve_fields(chain, user_values: Optional[Mapping[str, Any]] = None) -> FieldResolution:
    user_values = user_values or {}
    definitions = merge_field_definitions(chain)
    errors: List[VirtualModelError] = []
    values: Dict[str, FieldValue] = {}
    effects: List[Any] = []

    for key, cf in definitions.items():
        value = cf.default_value
        if key in user_values:
            if _matches(cf, user_values[key]):
                value = user_values[key]
            else:
                err = CustomFieldTypeMismatchError(key, cf.type, user_values[key])
                log("WARN", "resolve.fields", "type_mismatch", model=chain.start.model, key=key, expected=cf.type)
                errors.append(err)
        values[key] = value
        effects.extend(_effects_for(cf, value))

    for key in user_values:
        if key not in definitions:
            log("WARN", "resolve.fields", "unknown_field", model=chain.start.model, key=key)
            errors.append(UnknownCustomFieldError(key))

    return FieldResolution(definitions=definitions, values=values, effects=effects, errors=errors)
