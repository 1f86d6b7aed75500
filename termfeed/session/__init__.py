"""Interactive session: state aggregate and key handling."""

from .controller import handle_key
from .state import AppState

__all__ = ["AppState", "handle_key"]
