"""Weaviate operator compilers for portable filter leaves."""

from __future__ import annotations

from .set import (
    compile_set,
    is_match_everything,
    is_match_nothing,
    match_everything,
    match_nothing,
)
from .standard import compile_leaf, compile_standard

__all__ = [
    "compile_standard",
    "compile_set",
    "compile_leaf",
    "match_nothing",
    "match_everything",
    "is_match_nothing",
    "is_match_everything",
]
