"""Public schema exports."""

from .auth import SecretResponse
from .settings import WrittenResponse

__all__ = [
    "SecretResponse",
    "WrittenResponse",
]
