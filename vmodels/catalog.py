"""Definition lookup capabilities consumed by the resolver."""

import asyncio
from typing import Awaitable, Callable, Dict, Iterable, Iterator, List, Optional

from .config.schema_definition import VirtualModelDefinition
from .util.errors import CatalogError


class Catalog:
    """In-memory, read-only set of definitions keyed by model identifier."""

    def __init__(self, definitions: Iterable[VirtualModelDefinition] = ()) -> None:
        self._defs: Dict[str, VirtualModelDefinition] = {}
        for d in definitions:
            if d.model in self._defs:
                raise CatalogError("catalog.duplicate_model", f"model {d.model!r} defined twice", {"key": d.model})
            self._defs[d.model] = d

    def get(self, key: str) -> Optional[VirtualModelDefinition]:
        return self._defs.get(key)

    def keys(self) -> List[str]:
        return list(self._defs)

    def __contains__(self, key: str) -> bool:
        return key in self._defs

    def __iter__(self) -> Iterator[VirtualModelDefinition]:
        return iter(self._defs.values())

    def __len__(self) -> int:
        return len(self._defs)


class AsyncCatalog:
    """Async lookup over a fetch coroutine, e.g. a remote catalog client.

    Without a fetch function it serves an in-memory Catalog, yielding to the
    loop at each lookup like a real remote would.
    """

    def __init__(self, fetch: Optional[Callable[[str], Awaitable[Optional[VirtualModelDefinition]]]] = None,
                 catalog: Optional[Catalog] = None) -> None:
        if fetch is None and catalog is None:
            raise ValueError("AsyncCatalog needs a fetch function or a catalog")
        self._fetch = fetch
        self._catalog = catalog

    async def get(self, key: str) -> Optional[VirtualModelDefinition]:
        if self._fetch is not None:
            return await self._fetch(key)
        await asyncio.sleep(0)
        return self._catalog.get(key)
