"""Evaluates declared suggestions against the resolved configuration."""

from typing import Any, Dict, Iterator, List, Mapping

from ..config.schema_definition import ConditionEquals, KVConfig, MetadataOverrides, Suggestion
from ..util.jsonvalue import json_equals


class ResolvedState(Mapping[str, Any]):
    """Flat key -> value view of metadata, load config and operation config.

    Later sources win on key collisions: operation over load over metadata.
    """

    def __init__(self, metadata: MetadataOverrides, load: KVConfig, operation: KVConfig) -> None:
        values: Dict[str, Any] = dict(metadata.to_wire())
        values.update(load.to_dict())
        values.update(operation.to_dict())
        self._values = values

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "ResolvedState":
        return cls(MetadataOverrides(), KVConfig(fields=[{"key": k, "value": v} for k, v in values.items()]), KVConfig())

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)


def condition_holds(condition, state: Mapping[str, Any]) -> bool:
    if isinstance(condition, ConditionEquals):
        return condition.key in state and json_equals(state[condition.key], condition.value)
    raise TypeError(f"unknown condition type: {getattr(condition, 'type', type(condition).__name__)!r}")


def already_applied(suggestion: Suggestion, state: Mapping[str, Any]) -> bool:
    """True when the suggestion proposes fields and every one is already in effect."""
    if not suggestion.fields:
        return False
    return all(f.key in state and json_equals(state[f.key], f.value) for f in suggestion.fields)


def evaluate_suggestions(chain, state: Mapping[str, Any]) -> List[Suggestion]:
    active: List[Suggestion] = []
    for definition in chain.definitions:
        for suggestion in definition.suggestions or []:
            if not all(condition_holds(c, state) for c in suggestion.conditions):
                continue
            if already_applied(suggestion, state):
                continue
            active.append(suggestion)
    return active
