import pytest
from app.core.security import hash_password, password_needs_rehash, verify_password


def test_hash_then_verify_roundtrip():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)


def test_verify_rejects_other_password():
    hashed = hash_password("secret123")
    assert not verify_password("secret124", hashed)
    assert not verify_password("", hashed)


def test_hash_is_salted():
    assert hash_password("same-password") != hash_password("same-password")


def test_hash_uses_cost_factor_ten():
    hashed = hash_password("secret123")
    assert hashed.startswith("$2b$10$")
    assert not password_needs_rehash(hashed)


def test_malformed_stored_hash_raises():
    with pytest.raises(ValueError):
        verify_password("secret123", "not-a-bcrypt-hash")
