"""Application services for the identity bounded context.

Application services orchestrate domain aggregates and repositories to
fulfill use cases. They are the "front door" to the identity context.
"""

from identity.application.services.user_service import UserService

__all__ = [
    "UserService",
]
