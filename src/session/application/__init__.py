"""
Application слой домена Session.
"""

from .factory import KeyboardNavigator, SessionComponentFactory

__all__ = [
    "KeyboardNavigator",
    "SessionComponentFactory",
]
