"""
Tests for registration, login and profile updates.
"""

import hashlib

import pytest

from linkme.crypt.encrypt_decrypt import EncryptionDec
from linkme.database.core.funcs import get_user, login_user, update_user
from linkme.database.daos.user_dao import UserDao
from linkme.database.helpers.transactionManagement import SessionFactory
from linkme.exceptions import DuplicateIdentity, InvalidCredentials, NotFound, ValidationError

PASSWORD = "Str0ng!pass"

MISSING_ID = "00000000-0000-4000-8000-000000000000"


def test_register_stores_hashes_only(make_user):
    user = make_user(name="Ana", email="Ana@Example.com", jmbg="0101990710006")

    assert user["email"] == "ana@example.com"
    assert "jmbg_hash" not in user
    assert "password" not in user
    session = SessionFactory()
    try:
        stored = UserDao().fetchUserByJmbgHash(session, hashlib.sha256(b"0101990710006").hexdigest())
    finally:
        session.close()
    assert stored is not None
    assert stored.id == user["id"]
    assert user["rating"] == 0
    assert user["rating_count"] == 0


def test_help_categories_are_a_set(make_user):
    user = make_user(role="volunteer", help_categories=["tech", "shopping", "tech"])

    assert user["help_categories"] == ["shopping", "tech"]


def test_duplicate_email(make_user):
    make_user(email="same@example.com")

    with pytest.raises(DuplicateIdentity, match="Email"):
        make_user(email="SAME@example.com")


def test_duplicate_jmbg(make_user):
    make_user(jmbg="0101990710006")

    with pytest.raises(DuplicateIdentity, match="JMBG"):
        make_user(jmbg="0101990710006")


@pytest.mark.parametrize(
    "overrides",
    [
        {"role": "admin"},
        {"jmbg": "12345"},
        {"jmbg": "01019907100ab"},
        {"password": "short1!"},
        {"password": "alllowercase1!"},
        {"email": ""},
        {"help_categories": ["gardening"]},
    ],
)
def test_register_rejects_bad_input(make_user, overrides):
    with pytest.raises(ValidationError):
        make_user(**overrides)


def test_login(make_user):
    user = make_user(email="login@example.com")

    assert login_user(email="LOGIN@example.com", password=PASSWORD)["id"] == user["id"]


@pytest.mark.parametrize("email, password", [("login@example.com", "Wr0ng!pass"), ("nobody@example.com", PASSWORD)])
def test_login_failures_look_the_same(make_user, email, password):
    make_user(email="login@example.com")

    with pytest.raises(InvalidCredentials, match="Invalid credentials"):
        login_user(email=email, password=password)


def test_update_profile(make_user):
    user = make_user(role="user")

    updated = update_user(user_id=user["id"], role="volunteer", help_categories=["transport", "tools"])

    assert updated["role"] == "volunteer"
    assert updated["help_categories"] == ["tools", "transport"]
    assert updated["name"] == user["name"]
    assert get_user(user_id=user["id"])["role"] == "volunteer"


def test_update_unknown_user():
    with pytest.raises(NotFound):
        update_user(user_id=MISSING_ID, name="Nobody")


def test_password_policy():
    enc = EncryptionDec()

    assert enc.is_valid_password("Str0ng!pass")
    assert not enc.is_valid_password("Str0ngpass")
    assert not enc.is_valid_password("str0ng!pass")


def test_password_hash_roundtrip():
    enc = EncryptionDec()
    hashed = enc.hash_password("Str0ng!pass")

    assert hashed != "Str0ng!pass"
    assert enc.check_passwords("Str0ng!pass", hashed)
    assert not enc.check_passwords("Other!pass1", hashed)
