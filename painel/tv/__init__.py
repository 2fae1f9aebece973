"""TV (kiosk) mode."""

from .scenes import DEFAULT_SCENES, Scene, SceneFilters, TVClient, apply_scene, grid_columns
from .rotation import SceneRotation

__all__ = [
    'DEFAULT_SCENES',
    'Scene',
    'SceneFilters',
    'TVClient',
    'apply_scene',
    'grid_columns',
    'SceneRotation'
]
