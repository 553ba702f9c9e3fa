"""
Pydantic schemas for trip members.
"""
from tripsplit.schemas.base import CamelModel

UNKNOWN_DISPLAY_NAME = "Unknown user"


class Member(CamelModel):
    """A trip member as provided by the membership source."""
    user_id: str
    display_name: str = UNKNOWN_DISPLAY_NAME
