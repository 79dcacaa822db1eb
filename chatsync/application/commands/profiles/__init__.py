"""Profile commands."""

from .sign_in import SignInCommand, SignInHandler, SignInResult
from .update_profile import UpdateProfileCommand, UpdateProfileHandler

__all__ = [
    "SignInCommand",
    "SignInHandler",
    "SignInResult",
    "UpdateProfileCommand",
    "UpdateProfileHandler",
]
