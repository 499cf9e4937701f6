"""
Forge API - Password Hasher Unit Tests
========================================

What:  Tests for PasswordHasher (bcrypt hash and verify).
How:   Uses the minimum bcrypt work factor so the suite stays fast.

What we test:
    ✅ Digests are salted (same password, different digests)
    ✅ Correct password verifies, wrong password does not
    ✅ Malformed stored digest verifies as False instead of raising
    ✅ The configured work factor ends up in the digest
"""

from forge_api.services.password_hasher import PasswordHasher


class TestPasswordHasher:

    def setup_method(self):
        self.hasher = PasswordHasher(rounds=4)

    def test_hash_is_not_plaintext(self):
        digest = self.hasher.hash("s3cret")
        assert digest != "s3cret"
        assert digest.startswith("$2")

    def test_hash_uses_fresh_salt(self):
        """Hashing the same password twice gives two different digests."""
        assert self.hasher.hash("s3cret") != self.hasher.hash("s3cret")

    def test_verify_correct_password(self):
        digest = self.hasher.hash("s3cret")
        assert self.hasher.verify("s3cret", digest) is True

    def test_verify_wrong_password(self):
        digest = self.hasher.hash("s3cret")
        assert self.hasher.verify("wrong", digest) is False

    def test_verify_is_case_sensitive(self):
        digest = self.hasher.hash("s3cret")
        assert self.hasher.verify("S3CRET", digest) is False

    def test_verify_malformed_digest(self):
        """A corrupt stored digest is treated like a wrong password."""
        assert self.hasher.verify("s3cret", "not-a-bcrypt-digest") is False

    def test_rounds_recorded_in_digest(self):
        digest = self.hasher.hash("s3cret")
        assert digest.split("$")[2] == "04"

    def test_unicode_password(self):
        digest = self.hasher.hash("pässwörd✓")
        assert self.hasher.verify("pässwörd✓", digest) is True
        assert self.hasher.verify("passwort", digest) is False
