"""Request rate limiting."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from bookshelf.config import get_settings

limiter = Limiter(key_func=get_remote_address)

AUTH_RATE_LIMIT = get_settings().AUTH_RATE_LIMIT
