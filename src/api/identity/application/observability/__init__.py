"""Domain-Oriented Observability for the identity application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from identity.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "UserServiceProbe",
    "DefaultUserServiceProbe",
]
