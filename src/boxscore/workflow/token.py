"""Self-contained tokens carrying a previewed document to confirmation."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac

from pydantic import BaseModel, ValidationError

from boxscore.models import ParsedMatch


TOKEN_VERSION = "v1"


class InvalidUploadToken(ValueError):
    pass


class UploadTokenPayload(BaseModel):
    file_name: str
    document: ParsedMatch


def _digest(body: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), body.encode("ascii"), hashlib.sha256).hexdigest()


def encode_upload_token(document: ParsedMatch, *, file_name: str, secret: str) -> str:
    payload = UploadTokenPayload(file_name=file_name, document=document)
    body = base64.urlsafe_b64encode(payload.model_dump_json().encode("utf-8")).decode("ascii")
    return f"{TOKEN_VERSION}.{body}.{_digest(body, secret)}"


def decode_upload_token(token: str, *, secret: str) -> UploadTokenPayload:
    """Verify and decode a token; anything malformed or altered is rejected."""
    parts = token.strip().split(".") if token else []
    if len(parts) != 3 or parts[0] != TOKEN_VERSION:
        raise InvalidUploadToken("Invalid upload token format")
    _, body, signature = parts
    try:
        expected = _digest(body, secret)
    except UnicodeEncodeError:
        raise InvalidUploadToken("Invalid upload token format") from None
    if not signature.isascii() or not hmac.compare_digest(expected, signature):
        raise InvalidUploadToken("Upload token signature mismatch")
    try:
        raw = base64.urlsafe_b64decode(body.encode("ascii"))
        return UploadTokenPayload.model_validate_json(raw)
    except (binascii.Error, ValueError, ValidationError) as exc:
        raise InvalidUploadToken(f"Upload token payload is invalid: {exc}") from None
