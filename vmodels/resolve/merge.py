import copy
from dataclasses import dataclass
from typing import Dict, Any, List, Iterable, Optional

from ..config.schema_definition import KVConfig, KVConfigField


@dataclass(frozen=True)
class MergedConfig:
    load: KVConfig
    operation: KVConfig


class ConfigMerger:
    """Precedence helpers. Inputs are always ordered highest priority first."""

    def merge_scalars(self, values: Iterable[Any]) -> Any:
        """Return first non-None value (highest priority wins)."""
        for value in values:
            if value is not None:
                return value
        return None

    def merge_dicts(self, dicts: List[Optional[Dict[str, Any]]]) -> Dict[str, Any]:
        """Deep merge dictionaries; a key set by a higher layer is never overwritten."""
        result: Dict[str, Any] = {}
        for d in dicts:
            if d:
                self._fill_missing(result, d)
        return result

    def merge_lists(self, lists: Iterable[Optional[List[Any]]]) -> List[Any]:
        """Union with de-dupe by value, first-seen order."""
        seen = set()
        result = []
        for lst in lists:
            for item in lst or []:
                if item not in seen:
                    seen.add(item)
                    result.append(item)
        return result

    def merge_configs(self, configs: Iterable[Optional[KVConfig]]) -> KVConfig:
        """First writer wins per field key; output keeps first-seen order."""
        adopted: Dict[str, KVConfigField] = {}
        for cfg in configs:
            if cfg is None:
                continue
            for f in cfg.fields:
                if f.key not in adopted:
                    adopted[f.key] = f
        return KVConfig(fields=list(adopted.values()))

    def merge_chain(self, chain) -> MergedConfig:
        """Flatten the chain's load and operation blocks; the most specific definition wins per field."""
        return MergedConfig(
            load=self.merge_configs(d.load_config() for d in chain.definitions),
            operation=self.merge_configs(d.operation_config() for d in chain.definitions),
        )

    def _fill_missing(self, target: Dict[str, Any], source: Dict[str, Any]) -> None:
        """Recursively copy keys of source that target does not have yet."""
        for key, value in source.items():
            if key not in target:
                target[key] = copy.deepcopy(value)
            elif isinstance(target[key], dict) and isinstance(value, dict):
                self._fill_missing(target[key], value)
