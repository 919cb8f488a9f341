import uuid

import pytest

from conftest import TEST_JWT_SECRET, make_access_token
from portal.core.errors import AuthError
from portal.core.tokens import check_token_subject, read_access_token_claims


def test_claims_are_read_without_secret():
    subject = uuid.uuid4()
    token = make_access_token(subject, secret="whatever")

    claims = read_access_token_claims(token)

    assert claims["sub"] == str(subject)


def test_signature_is_checked_with_secret():
    token = make_access_token(uuid.uuid4(), secret="another-secret")

    with pytest.raises(AuthError):
        read_access_token_claims(token, secret=TEST_JWT_SECRET)


def test_malformed_token_is_rejected():
    with pytest.raises(AuthError):
        read_access_token_claims("not-a-jwt")


def test_subject_must_match():
    subject = uuid.uuid4()
    token = make_access_token(subject)

    check_token_subject(token, str(subject), secret=TEST_JWT_SECRET)
    with pytest.raises(AuthError):
        check_token_subject(token, str(uuid.uuid4()), secret=TEST_JWT_SECRET)
