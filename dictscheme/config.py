from __future__ import annotations
import os

from dictscheme.desugar import DesugarStrategy

_TRUTHY = {"1", "true", "yes", "on"}

# Defaults
_DEFAULT_STRATEGY = DesugarStrategy.CONSTRUCT


def flag_from_env(var: str, default: bool = False) -> bool:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def desugar_enabled() -> bool:
    """Whether programs are desugared before evaluation (DICTSCHEME_DESUGAR)."""
    return flag_from_env('DICTSCHEME_DESUGAR')


def get_desugar_strategy() -> DesugarStrategy:
    """Strategy named by DICTSCHEME_DESUGAR_STRATEGY; raises ValueError if unknown."""
    raw = os.environ.get('DICTSCHEME_DESUGAR_STRATEGY')
    if not raw or not raw.strip():
        return _DEFAULT_STRATEGY
    return DesugarStrategy.from_name(raw)
