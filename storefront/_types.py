"""
Core types for storefront.

Re-exports from kungfu + custom type aliases.
"""

from __future__ import annotations

from collections.abc import Callable

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Computation Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail."""

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Cents = int
"""Amount of money in the smallest currency unit (centavos)."""

# ═══════════════════════════════════════════════════════════════════════════════
# Callbacks
# ═══════════════════════════════════════════════════════════════════════════════

type Callback = Callable[[], None]
"""Fire-and-forget notification with no payload."""

type Unsubscribe = Callable[[], None]
"""Detaches a previously registered listener."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Type aliases
    "Lazy",
    "Cents",
    "Callback",
    "Unsubscribe",
)
