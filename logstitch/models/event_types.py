"""
Event Types
===========
Enumerations shared by event inputs, filters and responses.
"""

from enum import Enum


class ActorType(str, Enum):
    """Kind of principal that performed an action."""
    USER = "user"
    API_KEY = "api_key"
    SERVICE = "service"
    SYSTEM = "system"


class EventCategory(str, Enum):
    """Coarse classification used for filtering in the dashboard."""
    AUTH = "auth"
    ACCESS = "access"
    MUTATION = "mutation"
    ADMIN = "admin"
    SECURITY = "security"
    SYSTEM = "system"
