import base64
import json

import pytest

from boxscore.ingest import parse_lines
from boxscore.workflow import InvalidUploadToken, decode_upload_token, encode_upload_token
from boxscore.workflow.token import _digest


@pytest.fixture
def document(profile, box_score_lines):
    return parse_lines(box_score_lines, profile)


def test_token_decodes_to_the_same_document(document):
    token = encode_upload_token(document, file_name="game.pdf", secret="s3cret")
    payload = decode_upload_token(token, secret="s3cret")
    assert payload.file_name == "game.pdf"
    assert payload.document == document


def test_token_from_another_secret_is_rejected(document):
    token = encode_upload_token(document, file_name="game.pdf", secret="one")
    with pytest.raises(InvalidUploadToken):
        decode_upload_token(token, secret="two")


def test_tampered_body_is_rejected(document):
    token = encode_upload_token(document, file_name="game.pdf", secret="s3cret")
    version, body, signature = token.split(".")
    payload = json.loads(base64.urlsafe_b64decode(body))
    payload["document"]["home_team"]["score"] = 99
    forged = base64.urlsafe_b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")
    with pytest.raises(InvalidUploadToken):
        decode_upload_token(f"{version}.{forged}.{signature}", secret="s3cret")


@pytest.mark.parametrize(
    "token",
    ["", "garbage", "v1.only-two", "v2.abc.def", "v1.абв.гд", "v1.!!!.0000"],
)
def test_malformed_tokens_are_rejected(token):
    with pytest.raises(InvalidUploadToken):
        decode_upload_token(token, secret="s3cret")


def test_signed_payload_that_is_not_a_document_is_rejected():
    body = base64.urlsafe_b64encode(b'{"file_name": "x.pdf"}').decode("ascii")
    token = f"v1.{body}.{_digest(body, 's3cret')}"
    with pytest.raises(InvalidUploadToken):
        decode_upload_token(token, secret="s3cret")
