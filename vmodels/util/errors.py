"""Error kinds raised while resolving virtual models.

Every error carries a stable dotted ``code`` so callers can tell kinds apart
without string matching, plus a ``detail`` dict naming the offending key(s).
Chain-level errors are fatal to a resolution; field-level errors are collected
and reported next to a successful result.
"""

from typing import Any, Dict, List, Optional
from .types import ErrorInfo


class VirtualModelError(Exception):
    code = "vmodel.error"
    fatal = True

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_error_info(self) -> ErrorInfo:
        return ErrorInfo(self.code, self.message, dict(self.detail))


class CyclicChainError(VirtualModelError):
    code = "chain.cyclic"

    def __init__(self, cycle: List[str]) -> None:
        super().__init__(f"base reference cycle: {' -> '.join(cycle)}", {"cycle": list(cycle), "key": cycle[-1]})
        self.cycle = list(cycle)


class UnresolvedBaseError(VirtualModelError):
    code = "chain.unresolved_base"

    def __init__(self, missing_key: str, referenced_by: Optional[str] = None, reason: str = "not_found") -> None:
        where = f" (referenced by {referenced_by})" if referenced_by else ""
        super().__init__(
            f"cannot resolve base {missing_key!r}{where}: {reason}",
            {"key": missing_key, "referenced_by": referenced_by, "reason": reason},
        )
        self.missing_key = missing_key
        self.referenced_by = referenced_by
        self.reason = reason


class ChainTooDeepError(VirtualModelError):
    code = "chain.too_deep"

    def __init__(self, start_model: str, max_depth: int) -> None:
        super().__init__(
            f"chain starting at {start_model!r} exceeds {max_depth} definitions",
            {"key": start_model, "max_depth": max_depth},
        )


class DuplicateCustomFieldKeyAcrossVariantsError(VirtualModelError):
    code = "fields.variant_conflict"

    def __init__(self, key: str, first_model: str, first_type: str, other_model: str, other_type: str) -> None:
        super().__init__(
            f"custom field {key!r} is {first_type} in {first_model} but {other_type} in {other_model}",
            {"key": key, "models": [first_model, other_model], "types": [first_type, other_type]},
        )
        self.key = key


class InvalidCustomFieldEffectError(VirtualModelError):
    code = "fields.invalid_effect"

    def __init__(self, key: str, effect_type: str) -> None:
        super().__init__(
            f"string custom field {key!r} cannot carry a {effect_type} effect",
            {"key": key, "effect": effect_type},
        )
        self.key = key


class CustomFieldTypeMismatchError(VirtualModelError):
    code = "fields.type_mismatch"
    fatal = False

    def __init__(self, key: str, expected: str, value: Any) -> None:
        super().__init__(
            f"field {key!r} has an invalid value, using default (expected {expected}, got {type(value).__name__})",
            {"key": key, "expected": expected, "got": type(value).__name__},
        )
        self.key = key


class UnknownCustomFieldError(VirtualModelError):
    code = "fields.unknown"
    fatal = False

    def __init__(self, key: str) -> None:
        super().__init__(f"no custom field named {key!r}, value ignored", {"key": key})
        self.key = key


class CatalogError(VirtualModelError):
    code = "catalog.error"

    def __init__(self, code: str, message: str, detail: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, detail)
        self.code = code
