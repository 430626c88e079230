"""Authentication primitives.

Learn: Two pieces back the session lifecycle:
1. password — bcrypt digests for account secrets (hash + verify)
2. jwt — signed access/refresh tokens carrying username + account id

dependencies.py turns a Bearer access token into the current identity
for authenticated routes.
"""
