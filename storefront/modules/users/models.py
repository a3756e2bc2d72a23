# Shared local storage keys: registered_users, password_hashes
# This file documents the persisted layout
# Actual operations are handled in store.py

"""
Expected shared storage layout (JSON values):

registered_users: list of
- id: text ("user_<unix-ms>_<9 base36 chars>")
- email: text (lower-cased, unique case-insensitively)
- first_name: text
- last_name: text
- role: text ("user" | "admin", default "user")
- created_at: ISO-8601 timestamp
- is_active: bool (default true)
- last_login: ISO-8601 timestamp (nullable)

password_hashes: object
- <user id>: base64(password + salt)

Note: the password encoding is reversible. It is a demonstration-grade
credential check and must not be mistaken for a one-way hash.
"""
