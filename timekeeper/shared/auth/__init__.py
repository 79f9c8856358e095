from .auth import (
    decode_token,
    get_current_user_id,
    get_user_id_from_token
)

__all__ = [
    'decode_token',
    'get_current_user_id',
    'get_user_id_from_token'
]
