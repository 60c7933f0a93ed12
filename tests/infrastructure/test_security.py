"""Tests for password hashing."""

from bakery.infrastructure.security import hash_password, pwd_context


class TestPasswordHashing:

    def test_hash_is_salted_and_verifiable(self):
        hashed = hash_password("s3cret")

        assert hashed != "s3cret"
        assert hashed != hash_password("s3cret")
        assert pwd_context.verify("s3cret", hashed)
        assert not pwd_context.verify("wrong", hashed)
