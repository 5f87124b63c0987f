from dataclasses import dataclass, field
from typing import Generic, TypeVar, Optional, Dict, Any, List

T = TypeVar("T")

@dataclass(frozen=True)
class ErrorInfo:
    code: str         # e.g., "chain.cyclic", "fields.type_mismatch"
    message: str
    detail: Optional[Dict[str, Any]] = None

@dataclass(frozen=True)
class Result(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[ErrorInfo] = None
    warnings: List[ErrorInfo] = field(default_factory=list)  # non-fatal, reported with ok=True
