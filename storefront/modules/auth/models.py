# Local auth
# Sessions are self-issued tokens kept in the client's storage, see token_codec.py
# No Supabase tables are used for authentication

"""
Client storage:
- auth_token: text - the current session token
  (base64(header).base64(payload).signature, expires 24h after issue)

Client session storage (dropped when the context goes away):
- just_logged_out: "true" after a logout, cleared on first read

Shared storage:
- password_reset_tokens: object
  - <token>: {"email": text, "expires_at": unix seconds (issue + 1h)}
  Tokens are single-use; all tokens for an email are consumed by a reset.
"""
