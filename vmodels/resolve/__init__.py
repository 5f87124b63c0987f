"""Resolution engine: chain walk, config merge, metadata reduce, custom fields, suggestions."""

from .chain import Chain, resolve_chain, resolve_chain_async
from .merge import ConfigMerger, MergedConfig
from .metadata import reduce_metadata, reduce_tristate
from .fields import FieldResolution, resolve_fields
from .suggestions import ResolvedState, evaluate_suggestions
from .resolver import build_resolved_model, resolve_model, resolve_model_async, resolve_many_async

__all__ = [
    "Chain", "resolve_chain", "resolve_chain_async",
    "ConfigMerger", "MergedConfig",
    "reduce_metadata", "reduce_tristate",
    "FieldResolution", "resolve_fields",
    "ResolvedState", "evaluate_suggestions",
    "build_resolved_model", "resolve_model", "resolve_model_async", "resolve_many_async",
]
