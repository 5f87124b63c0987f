"""Walks ``base`` references from a virtual model down to its concrete bases."""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Protocol, Set, Tuple, Union

from ..config.schema_definition import BaseReference, ConcreteBases, ConcreteModelBase, VirtualModelDefinition
from ..util.const import DEFAULTS
from ..util.errors import ChainTooDeepError, CyclicChainError, UnresolvedBaseError
from ..util.logging import log


class DefinitionLookup(Protocol):
    def get(self, key: str) -> Optional[VirtualModelDefinition]: ...


class AsyncDefinitionLookup(Protocol):
    async def get(self, key: str) -> Optional[VirtualModelDefinition]: ...


LookupLike = Union[DefinitionLookup, Callable[[str], Optional[VirtualModelDefinition]]]
AsyncLookupLike = Union[AsyncDefinitionLookup, Callable[[str], Awaitable[Optional[VirtualModelDefinition]]]]


@dataclass(frozen=True)
class Chain:
    """Definitions most specific first, plus the terminal concrete bases."""
    definitions: Tuple[VirtualModelDefinition, ...]
    concrete_bases: Tuple[ConcreteModelBase, ...]

    @property
    def start(self) -> VirtualModelDefinition:
        return self.definitions[0]

    def keys(self) -> List[str]:
        return [d.model for d in self.definitions]

    def __len__(self) -> int:
        return len(self.definitions)


class _Walk:
    """Traversal state shared by the sync and async drivers."""

    def __init__(self, start_model: str, max_depth: int) -> None:
        self.start_model = start_model
        self.max_depth = max_depth
        self.path: List[str] = []
        self.visited: Set[str] = set()
        self.definitions: List[VirtualModelDefinition] = []
        self.next_key = start_model

    def check_key(self, key: str) -> None:
        if key in self.visited:
            raise CyclicChainError(self.path + [key])
        if len(self.definitions) >= self.max_depth:
            raise ChainTooDeepError(self.start_model, self.max_depth)

    def referrer(self) -> Optional[str]:
        return self.path[-1] if self.path else None

    def accept(self, key: str, definition: Optional[VirtualModelDefinition]) -> Optional[Chain]:
        """Record a looked-up definition; return the chain once it terminates, else None."""
        if definition is None:
            raise UnresolvedBaseError(key, self.referrer())
        if definition.model != key:
            raise UnresolvedBaseError(key, self.referrer(), reason=f"lookup returned {definition.model!r}")
        self.visited.add(key)
        self.path.append(key)
        self.definitions.append(definition)

        ref = definition.base_ref()
        if isinstance(ref, ConcreteBases):
            chain = Chain(tuple(self.definitions), tuple(ref.bases))
            log("DEBUG", "resolve.chain", "resolved", start=self.start_model, chain=chain.keys(),
                bases=[b.key for b in chain.concrete_bases])
            return chain
        if isinstance(ref, BaseReference):
            self.next_key = ref.model
            return None
        raise TypeError(f"unknown base reference kind: {type(ref).__name__}")


def _sync_get(lookup: LookupLike) -> Callable[[str], Optional[VirtualModelDefinition]]:
    getter = getattr(lookup, "get", None)
    return getter if callable(getter) else lookup  # type: ignore[return-value]


def resolve_chain(start_model: str, lookup: LookupLike, max_depth: int = DEFAULTS["MAX_CHAIN_DEPTH"]) -> Chain:
    """Follow ``base`` references from ``start_model`` until a concrete base list.

    Raises CyclicChainError, UnresolvedBaseError or ChainTooDeepError.
    """
    get = _sync_get(lookup)
    walk = _Walk(start_model, max_depth)
    key = start_model
    while True:
        walk.check_key(key)
        try:
            definition = get(key)
        except Exception as e:
            log("WARN", "resolve.chain", "lookup_failed", key=key, error=str(e))
            raise UnresolvedBaseError(key, walk.referrer(), reason=f"lookup_failed: {e}") from e
        chain = walk.accept(key, definition)
        if chain is not None:
            return chain
        key = walk.next_key


async def resolve_chain_async(start_model: str, lookup: AsyncLookupLike,
                              max_depth: int = DEFAULTS["MAX_CHAIN_DEPTH"],
                              timeout: Optional[float] = None) -> Chain:
    """Async variant: suspends only at each lookup; lookups run strictly in sequence.

    A lookup that times out or fails is reported as UnresolvedBaseError.
    Cancellation propagates unchanged.
    """
    getter = getattr(lookup, "get", None)
    get: Callable[[str], Awaitable[Any]] = getter if callable(getter) else lookup  # type: ignore[assignment]
    walk = _Walk(start_model, max_depth)
    key = start_model
    while True:
        walk.check_key(key)
        try:
            definition = await asyncio.wait_for(get(key), timeout)
        except asyncio.TimeoutError:
            log("WARN", "resolve.chain", "lookup_timeout", key=key, timeout=timeout)
            raise UnresolvedBaseError(key, walk.referrer(), reason="timeout")
        except Exception as e:
            log("WARN", "resolve.chain", "lookup_failed", key=key, error=str(e))
            raise UnresolvedBaseError(key, walk.referrer(), reason=f"lookup_failed: {e}") from e
        chain = walk.accept(key, definition)
        if chain is not None:
            return chain
        key = walk.next_key
