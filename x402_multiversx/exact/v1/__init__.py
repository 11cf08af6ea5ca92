"""V1 backward compatibility wrappers for MultiversX exact payment scheme.

These wrappers provide backward compatibility for V1 protocol clients
by mapping V1 network names to V2 CAIP-2 identifiers.
"""

from .client import ExactMultiversXSchemeV1 as ExactMultiversXSchemeV1Client
from .facilitator import ExactMultiversXSchemeV1 as ExactMultiversXSchemeV1Facilitator

# For convenience, expose both
ExactMultiversXSchemeV1 = ExactMultiversXSchemeV1Client

__all__ = [
    "ExactMultiversXSchemeV1",
    "ExactMultiversXSchemeV1Client",
    "ExactMultiversXSchemeV1Facilitator",
]
