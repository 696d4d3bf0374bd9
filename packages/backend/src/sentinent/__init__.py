"""Sentinent — multi-tenant decision records.

Users sign up, create workspaces, invite members, and record decisions
scoped to a workspace. The backend owns the trust core: credential
hashing, session tokens, origin gating, and per-resource authorization.
"""

__version__ = "0.1.0"
