"""Shared slowapi limiter, registered on app.state by the app factory."""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
