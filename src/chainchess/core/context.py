"""
Who is calling, and when.

The hosting platform resolves both; the services never look at the system clock themselves.
"""

from dataclasses import dataclass

from chainchess.core.models import Address


@dataclass(frozen=True)
class CallContext:
    caller: Address
    now: float
