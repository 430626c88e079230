"""userservice — account registration and session lifecycle.

Signup, login with access/refresh JWTs, refresh, logout, profile
read/update, and soft-delete of accounts.
"""

__version__ = "0.1.0"
