from .security import SecurityValidator, UrlValidationResult
from .state import RuntimeState, state

__all__ = ["RuntimeState", "SecurityValidator", "UrlValidationResult", "state"]
