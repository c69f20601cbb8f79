"""Domain probes for cross-cutting infrastructure.

Probes give the storage handle a domain-level instrumentation API, so
the code that owns the engine never calls a logger directly.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from shared_kernel.observability_context import ObservationContext
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)

__all__ = [
    "ConnectionProbe",
    "DefaultConnectionProbe",
    "ObservationContext",
]
