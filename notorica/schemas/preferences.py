"""
Preference Schemas.
"""

from pydantic import BaseModel, ConfigDict


class Preferences(BaseModel):
    """User preferences, each persisted under its own key."""

    is_dark: bool = False
    is_nepali_date: bool = False
    user_set_theme: bool = False

    model_config = ConfigDict(frozen=True)
