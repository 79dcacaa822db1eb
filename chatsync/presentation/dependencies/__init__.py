"""Request dependencies shared by the routers."""

from chatsync.presentation.dependencies.auth import (
    AuthUser,
    InvalidTokenError,
    decode_token,
    get_current_user,
)

__all__ = ["AuthUser", "InvalidTokenError", "decode_token", "get_current_user"]
