"""
api/limiter.py -- Shared slowapi rate limiter instance.

Imported by api/main.py (mounted as middleware, exposed on app.state) and by
api/routes/auth.py (per-route limit on POST /auth/login).

A single shared instance means every route shares one in-memory counter
store. Counters are per client IP and reset with the process.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")
