import json
import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List, Tuple
from pydantic import ValidationError
from .schema_definition import VirtualModelDefinition
from .schema_settings import ResolverSettings
from .discovery import ConfigDiscovery
from ..catalog import Catalog
from ..resolve.merge import ConfigMerger
from ..util.const import CATALOG_DIR, CATALOG_SUFFIXES, SETTINGS_FILE
from ..util.errors import CatalogError
from ..util.logging import log
from ..util.types import Result, ErrorInfo

ENV_OVERRIDES = {
    "VMODELS_MAX_CHAIN_DEPTH": "max_chain_depth",
    "VMODELS_LOOKUP_TIMEOUT_SEC": "lookup_timeout_sec",
}

def load_yaml(path: Path) -> Any:
    """Load YAML (or JSON) file, return empty dict if file doesn't exist."""
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        return json.loads(text)
    return yaml.safe_load(text) or {}

def load_definition_file(path: Path) -> List[VirtualModelDefinition]:
    """A file holds one definition, a list of them, or a mapping with a ``definitions`` list."""
    raw = load_yaml(path)
    if isinstance(raw, dict) and "definitions" in raw:
        raw = raw["definitions"]
    if not raw:
        return []
    items = raw if isinstance(raw, list) else [raw]
    return [VirtualModelDefinition.model_validate(item) for item in items]

def load_catalog(catalog_dirs: List[str]) -> Result[Catalog]:
    """Load definitions from catalog dirs (highest→lowest priority).

    A higher layer shadows a model key from lower layers; the same key twice
    within one layer is an error.
    """
    merged: Dict[str, VirtualModelDefinition] = {}
    for layer in catalog_dirs:
        root = Path(layer)
        if not root.is_dir():
            continue
        layer_defs: Dict[str, Path] = {}
        for path in sorted(p for p in root.rglob("*") if p.suffix in CATALOG_SUFFIXES and p.is_file()):
            try:
                definitions = load_definition_file(path)
            except ValidationError as e:
                return Result(ok=False, error=ErrorInfo("catalog.invalid_definition", str(e), {"path": str(path)}))
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                return Result(ok=False, error=ErrorInfo("catalog.parse_failed", str(e), {"path": str(path)}))
            if not definitions:
                log("DEBUG", "config.loader", "empty_file", path=str(path))
                continue
            for d in definitions:
                if d.model in layer_defs:
                    err = CatalogError("catalog.duplicate_model", f"model {d.model!r} defined twice in {layer}",
                                       {"key": d.model, "paths": [str(layer_defs[d.model]), str(path)]})
                    return Result(ok=False, error=err.to_error_info())
                layer_defs[d.model] = path
                if d.model in merged:
                    log("DEBUG", "config.loader", "shadowed", key=d.model, path=str(path))
                    continue
                merged[d.model] = d
    log("INFO", "config.loader", "catalog_loaded", layers=len(catalog_dirs), models=len(merged))
    return Result(ok=True, value=Catalog(merged.values()))

def load_settings(stack: List[str], env: Optional[Dict[str, str]] = None) -> Result[ResolverSettings]:
    """Merge settings.yaml across the stack; environment variables win over every layer."""
    env = os.environ if env is None else env
    merger = ConfigMerger()
    try:
        overrides = {field: env[var] for var, field in ENV_OVERRIDES.items() if env.get(var)}
        layers = [overrides]
        for root in stack:
            path = Path(root) / SETTINGS_FILE
            layer = load_yaml(path)
            if not isinstance(layer, dict):
                return Result(ok=False, error=ErrorInfo(
                    "settings.invalid", f"expected a mapping, got {type(layer).__name__}", {"path": str(path)}))
            layers.append(layer)
        return Result(ok=True, value=ResolverSettings(**merger.merge_dicts(layers)))
    except ValidationError as e:
        return Result(ok=False, error=ErrorInfo("settings.invalid", str(e)))
    except yaml.YAMLError as e:
        return Result(ok=False, error=ErrorInfo("settings.parse_failed", str(e)))

def load_stack(start_cwd: str, extra_catalog_dirs: Optional[List[str]] = None) -> Result[Tuple[ResolverSettings, Catalog]]:
    """Discover the .vmodels stack and load its settings and catalog.

    Explicit ``extra_catalog_dirs`` take priority over discovered layers.
    """
    stack_result = ConfigDiscovery(start_cwd).discover_stack()
    if not stack_result.ok:
        return Result(ok=False, error=stack_result.error)
    stack = stack_result.value

    settings = load_settings(stack)
    if not settings.ok:
        return Result(ok=False, error=settings.error)

    catalog_dirs = list(extra_catalog_dirs or []) + [str(Path(root) / CATALOG_DIR) for root in stack]
    catalog = load_catalog(catalog_dirs)
    if not catalog.ok:
        return Result(ok=False, error=catalog.error)
    return Result(ok=True, value=(settings.value, catalog.value))
