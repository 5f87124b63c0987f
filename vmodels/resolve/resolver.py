"""Aggregate resolution: chain -> config, metadata, fields, suggestions."""

import asyncio
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..config.schema_resolved import ResolvedModel
from ..config.schema_settings import ResolverSettings
from ..util.errors import VirtualModelError
from ..util.logging import log
from ..util.types import ErrorInfo, Result
from .chain import AsyncLookupLike, Chain, LookupLike, resolve_chain, resolve_chain_async
from .fields import resolve_fields
from .merge import ConfigMerger
from .metadata import reduce_metadata
from .suggestions import ResolvedState, evaluate_suggestions


def build_resolved_model(chain: Chain, user_values: Optional[Mapping[str, Any]] = None) -> Result[ResolvedModel]:
    """Run the merge stages over an already resolved chain."""
    merger = ConfigMerger()
    try:
        config = merger.merge_chain(chain)
        metadata = reduce_metadata(chain)
        fields = resolve_fields(chain, user_values)
    except VirtualModelError as e:
        log("ERROR", "resolve.model", "fields_failed", model=chain.start.model, code=e.code, error=e.message)
        return Result(ok=False, error=e.to_error_info())

    state = ResolvedState(metadata, config.load, config.operation)
    resolved = ResolvedModel(
        model=chain.start.model,
        chain=chain.keys(),
        tags=merger.merge_lists(d.tags for d in chain.definitions),
        concrete_bases=list(chain.concrete_bases),
        load=config.load,
        operation=config.operation,
        metadata=metadata,
        custom_field_definitions=list(fields.definitions.values()),
        custom_field_values=fields.values,
        active_effects=fields.effects,
        active_suggestions=evaluate_suggestions(chain, state),
    )
    warnings: List[ErrorInfo] = [err.to_error_info() for err in fields.errors]
    log("INFO", "resolve.model", "resolved", model=resolved.model, chain=resolved.chain,
        effects=len(resolved.active_effects), suggestions=len(resolved.active_suggestions), warnings=len(warnings))
    return Result(ok=True, value=resolved, warnings=warnings)


def resolve_model(start_model: str, lookup: LookupLike,
                  user_values: Optional[Mapping[str, Any]] = None,
                  settings: Optional[ResolverSettings] = None) -> Result[ResolvedModel]:
    """Resolve ``start_model`` into one effective model.

    Chain-level failures come back as ``Result(ok=False)``; field-level
    problems come back in ``Result.warnings`` next to the resolved model.
    """
    settings = settings or ResolverSettings()
    try:
        chain = resolve_chain(start_model, lookup, max_depth=settings.max_chain_depth)
    except VirtualModelError as e:
        log("ERROR", "resolve.model", "chain_failed", model=start_model, code=e.code, error=e.message)
        return Result(ok=False, error=e.to_error_info())
    return build_resolved_model(chain, user_values)


async def resolve_model_async(start_model: str, lookup: AsyncLookupLike,
                              user_values: Optional[Mapping[str, Any]] = None,
                              settings: Optional[ResolverSettings] = None) -> Result[ResolvedModel]:
    settings = settings or ResolverSettings()
    try:
        chain = await resolve_chain_async(start_model, lookup, max_depth=settings.max_chain_depth,
                                          timeout=settings.lookup_timeout_sec)
    except VirtualModelError as e:
        log("ERROR", "resolve.model", "chain_failed", model=start_model, code=e.code, error=e.message)
        return Result(ok=False, error=e.to_error_info())
    return build_resolved_model(chain, user_values)


async def resolve_many_async(start_models: Iterable[str], lookup: AsyncLookupLike,
                             settings: Optional[ResolverSettings] = None) -> Dict[str, Result[ResolvedModel]]:
    """Resolve several models concurrently with default field values (catalog listings)."""
    keys = list(dict.fromkeys(start_models))
    results = await asyncio.gather(*(resolve_model_async(k, lookup, settings=settings) for k in keys))
    return dict(zip(keys, results))
