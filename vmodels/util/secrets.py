"""Secrets redaction for log records.

Catalog content can embed download credentials (Hugging Face tokens, signed
mirror URLs); these must never reach the logs.
"""

import os
import re
from typing import Any, List, Optional, Pattern


class SecretsRedactor:
    """Redact sensitive information from text using configurable regex patterns."""

    def __init__(self, patterns: Optional[List[str]] = None) -> None:
        if patterns is None:
            patterns = self._load_default_patterns()

        self.patterns: List[Pattern[str]] = [re.compile(pattern, re.IGNORECASE) for pattern in patterns]

    def _load_default_patterns(self) -> List[str]:
        """Load redaction patterns from environment or use defaults."""
        env_patterns = os.environ.get("VMODELS_SECRETS_PATTERNS")
        if env_patterns:
            return [p.strip() for p in env_patterns.split(",") if p.strip()]

        return [
            # Hugging Face access tokens
            r'\bhf_[a-zA-Z0-9]{20,}\b',

            # API keys and tokens in key=value form
            r'(api[_-]?key|token|secret|password|auth)[\s]*[=:]\s*["\']?[a-zA-Z0-9\-_]{16,}["\']?',

            # Bearer headers
            r'bearer\s+[a-zA-Z0-9\-_.=]{16,}',

            # URLs with inline credentials
            r'[a-z][a-z0-9+.-]*://[^:/\s]+:[^@\s]+@[^\s]+',

            # Signed URL query parameters
            r'([?&](sig|signature|x-amz-signature|x-amz-credential|token)=)[^&\s]+',
        ]

    def redact(self, text: str, replacement: str = "***REDACTED***") -> str:
        if not text:
            return text

        redacted = text
        for pattern in self.patterns:
            redacted = pattern.sub(replacement, redacted)
        return redacted

    def redact_value(self, value: Any, replacement: str = "***REDACTED***") -> Any:
        """Redact strings nested anywhere inside dicts, lists and tuples."""
        if isinstance(value, str):
            return self.redact(value, replacement)
        if isinstance(value, dict):
            return self.redact_dict(value, replacement)
        if isinstance(value, (list, tuple)):
            return [self.redact_value(item, replacement) for item in value]
        return value

    def redact_dict(self, data: dict, replacement: str = "***REDACTED***") -> dict:
        if not data:
            return data
        return {key: self.redact_value(value, replacement) for key, value in data.items()}


_redactor: Optional[SecretsRedactor] = None


def get_redactor() -> SecretsRedactor:
    """Get the global secrets redactor instance."""
    global _redactor
    if _redactor is None:
        _redactor = SecretsRedactor()
    return _redactor


def redact(text: str, replacement: str = "***REDACTED***") -> str:
    return get_redactor().redact(text, replacement)


def redact_dict(data: dict, replacement: str = "***REDACTED***") -> dict:
    return get_redactor().redact_dict(data, replacement)
