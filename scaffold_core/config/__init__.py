"""scaffold_core.config

Layered configuration: per-invocation answers > persisted store > default.
"""

from __future__ import annotations

from .answers import ANSWER_ALIASES, AnswersOverride, env_name_for, key_for_env
from .store import ConfigStore

__all__ = [
    "ANSWER_ALIASES",
    "AnswersOverride",
    "ConfigStore",
    "env_name_for",
    "key_for_env",
]
