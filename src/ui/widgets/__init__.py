"""
UI Widgets Module
"""

from .player_controls import PlayerControls
from .sprite_view import SpriteView

__all__ = ['PlayerControls', 'SpriteView']
