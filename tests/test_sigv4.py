import hashlib
import hmac
from datetime import UTC, datetime

import pytest

from s3direct.errors import SigningError
from s3direct.services.post_policy import build_post_policy
from s3direct.services.sigv4 import calculate_signature, credential_scope, derive_signing_key, sign_policy


def test_derive_signing_key_matches_aws_reference_vector():
    signing_key = derive_signing_key(
        "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
        "20120215",
        "us-east-1",
        "iam",
    )

    assert signing_key.hex() == "f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d"


def test_calculate_signature_matches_s3_get_object_reference_vector():
    signing_key = derive_signing_key("wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY", "20130524", "us-east-1")
    string_to_sign = "\n".join(
        [
            "AWS4-HMAC-SHA256",
            "20130524T000000Z",
            "20130524/us-east-1/s3/aws4_request",
            "7344ae5b7ee6c3e7e6b0fe0640412a37625d1fbfff95c48bbb2dc43964946972",
        ]
    )

    assert (
        calculate_signature(signing_key, string_to_sign)
        == "f0e8bdb87c964420e857bd35b5d6ed310bd44f0170aba48dd91039c6036bdb41"
    )


def test_derive_signing_key_uses_date_part_of_amz_date_stamp():
    short = derive_signing_key("secret", "20240131", "eu-west-1")
    full = derive_signing_key("secret", "20240131T235959Z", "eu-west-1")

    assert short == full


def test_sign_policy_is_deterministic_and_matches_manual_hmac_chain():
    policy = build_post_policy(
        "uploads/a.png",
        "test-bucket",
        "AKIDEXAMPLE",
        45,
        1024,
        "public-read",
        region="us-east-1",
        now=datetime(2024, 1, 31, 12, 0, 0, tzinfo=UTC),
    )

    first = sign_policy("secret", policy)
    second = sign_policy("secret", policy)

    k_date = _hmac(b"AWS4secret", "20240131")
    k_region = _hmac(k_date, "us-east-1")
    k_service = _hmac(k_region, "s3")
    k_signing = _hmac(k_service, "aws4_request")
    expected = hmac.new(k_signing, policy.encode().encode("utf-8"), hashlib.sha256).hexdigest()

    assert first == second == expected
    assert len(first) == 64
    assert first == first.lower()


def test_credential_scope_format():
    assert credential_scope("AKID", "20240131T000000Z", "us-east-1") == "AKID/20240131/us-east-1/s3/aws4_request"


@pytest.mark.parametrize(
    ("secret_key", "date", "region"),
    [
        ("", "20240131", "us-east-1"),
        ("secret", "20240131", ""),
        ("secret", "2024-01-31", "us-east-1"),
        ("secret", "", "us-east-1"),
    ],
)
def test_derive_signing_key_rejects_malformed_inputs(secret_key, date, region):
    with pytest.raises(SigningError):
        derive_signing_key(secret_key, date, region)


def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()
