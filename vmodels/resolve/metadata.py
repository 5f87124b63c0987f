"""Reduces ``metadataOverrides`` across a chain into one metadata record."""

from typing import Iterable, List, Optional, Union

from ..config.schema_definition import MetadataOverrides, is_mixed
from ..util.const import MIXED
from .merge import ConfigMerger

TriStateValue = Union[bool, str]

SET_FIELDS = ("architectures", "compatibility_types", "params_strings", "context_lengths")
SCALAR_FIELDS = ("domain", "min_memory_usage_bytes")
TRISTATE_FIELDS = ("trained_for_tool_use", "vision")


def reduce_tristate(values: Iterable[Optional[TriStateValue]]) -> Optional[TriStateValue]:
    """None when nobody contributes, the agreed bool when all agree, else "mixed".

    "mixed" is absorbing: once seen, the result stays "mixed".
    """
    result: Optional[TriStateValue] = None
    for value in values:
        if value is None:
            continue
        if is_mixed(value):
            return MIXED
        if result is None:
            result = value
        elif result != value:
            return MIXED
    return result


def reduce_metadata(chain) -> MetadataOverrides:
    merger = ConfigMerger()
    overrides: List[MetadataOverrides] = [
        d.metadata_overrides for d in chain.definitions if d.metadata_overrides is not None
    ]

    reduced = {}
    for name in SET_FIELDS:
        contributions = [getattr(o, name) for o in overrides if getattr(o, name) is not None]
        if contributions:
            reduced[name] = merger.merge_lists(contributions)
    for name in SCALAR_FIELDS:
        value = merger.merge_scalars(getattr(o, name) for o in overrides)
        if value is not None:
            reduced[name] = value
    for name in TRISTATE_FIELDS:
        value = reduce_tristate(getattr(o, name) for o in overrides)
        if value is not None:
            reduced[name] = value
    return MetadataOverrides(**reduced)
