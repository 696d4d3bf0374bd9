"""Authentication: credentials, session tokens, identity extraction.

Learn: One authentication path — email/password → signed JWT. The token
travels back either as the `token` cookie (browsers) or as a Bearer
header (everything else), and both resolve to the same CurrentIdentity.
"""
