"""
Session token encoding.

Tokens have the three-segment shape of a JWT: base64(header).base64(payload).signature.
The signature segment is base64("<header>.<payload>.<secret>"). That is a fixed
re-encoding and not a keyed MAC, so anyone can mint a token that decodes. Tokens
are session markers for a trusted single-origin setup only.
"""
import base64
import binascii
import json
import logging
from typing import Optional

from pydantic import ValidationError

from storefront.modules.auth.schemas import TokenPayload
from storefront.modules.users.schemas import User

logger = logging.getLogger(__name__)

HEADER = {"alg": "HS256", "typ": "JWT"}


def _encode_segment(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":"))
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def _decode_segment(segment: str) -> dict:
    return json.loads(base64.b64decode(segment, validate=True).decode("utf-8"))


def build_payload(user: User, issued_at: int, ttl_seconds: int) -> TokenPayload:
    return TokenPayload(
        user_id=user.id,
        email=user.email,
        role=user.role,
        iat=issued_at,
        exp=issued_at + ttl_seconds,
    )


def encode_token(payload: TokenPayload, secret: str) -> str:
    encoded_header = _encode_segment(HEADER)
    encoded_payload = _encode_segment(payload.model_dump(by_alias=True))
    signature = base64.b64encode(
        f"{encoded_header}.{encoded_payload}.{secret}".encode("utf-8")
    ).decode("ascii")
    return f"{encoded_header}.{encoded_payload}.{signature}"


def decode_token(token: Optional[str]) -> Optional[TokenPayload]:
    """Return the payload of a well-formed token, or None. The signature is not checked."""
    if not token:
        return None
    parts = token.split(".")
    if len(parts) != 3:
        return None
    try:
        return TokenPayload.model_validate(_decode_segment(parts[1]))
    except (binascii.Error, UnicodeDecodeError, ValueError, ValidationError) as e:
        logger.debug(f"Rejecting undecodable session token: {e}")
        return None


def is_token_valid(token: Optional[str], now: float) -> bool:
    payload = decode_token(token)
    return payload is not None and payload.exp > now
