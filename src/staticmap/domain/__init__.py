"""Domain layer - settings model and profiles."""
from staticmap.domain.models import MapSettings
from staticmap.domain.profiles import (
    load_profile,
    load_settings,
    save_settings,
    tools_from_profile,
)

__all__ = [
    'MapSettings',
    'load_profile',
    'load_settings',
    'save_settings',
    'tools_from_profile',
]
