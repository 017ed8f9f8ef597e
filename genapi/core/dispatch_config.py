"""Dispatch Configuration: process-wide immutable knobs shared by operation groups.

Invariants:
    - Built once at wiring time and passed by reference into OperationGroup
    - Frozen: no group can alter what another group sees
"""

import re
from dataclasses import dataclass, field

from genapi.config import Settings
from genapi.core.language_strings import Language, parse_language

OPERATION_NAME_PATTERN = re.compile(r"[A-Za-z]+")


@dataclass(frozen=True)
class DispatchConfig:
    name_pattern: re.Pattern = field(default=OPERATION_NAME_PATTERN)
    auth_header: str = "Authorization"
    bearer_prefix: str = "Bearer "
    mask_internal_errors: bool = False
    docs_language: Language = Language.EN
    docs_indent: int = 8

    @classmethod
    def from_settings(cls, settings: Settings) -> "DispatchConfig":
        return cls(
            mask_internal_errors=settings.mask_internal_errors,
            docs_language=parse_language(settings.docs_language),
            docs_indent=settings.docs_indent,
        )


DEFAULT_CONFIG = DispatchConfig()
