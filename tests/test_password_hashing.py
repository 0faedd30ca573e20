"""Tests for salted password hashing."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from passlib.hash import bcrypt

from authboard.passwords import PasswordHasher


class PasswordHashingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.hasher = PasswordHasher(rounds=4)

    def test_hash_and_verify_round_trip(self) -> None:
        hashed = self.hasher.hash("Str0ngPass!")
        self.assertNotEqual(hashed, "Str0ngPass!")
        self.assertTrue(self.hasher.verify("Str0ngPass!", hashed))
        self.assertFalse(self.hasher.verify("str0ngpass!", hashed))

    def test_hashes_are_salted(self) -> None:
        first = self.hasher.hash("supersecurepassword")
        second = self.hasher.hash("supersecurepassword")
        self.assertNotEqual(first, second)
        self.assertTrue(self.hasher.verify("supersecurepassword", first))
        self.assertTrue(self.hasher.verify("supersecurepassword", second))

    def test_hash_of_other_password_does_not_verify(self) -> None:
        hashed = self.hasher.hash("anothersecurepassword")
        self.assertFalse(self.hasher.verify("incorrect", hashed))

    def test_malformed_or_empty_hash_is_rejected(self) -> None:
        self.assertFalse(self.hasher.verify("whatever", "not-a-real-hash"))
        self.assertFalse(self.hasher.verify("whatever", ""))
        self.assertFalse(self.hasher.verify("", self.hasher.hash("whatever")))

    def test_empty_password_cannot_be_hashed(self) -> None:
        with self.assertRaises(ValueError):
            self.hasher.hash("")

    def test_passwords_sharing_a_long_prefix_are_distinct(self) -> None:
        hashed = self.hasher.hash("A" * 72 + "one")
        self.assertTrue(self.hasher.verify("A" * 72 + "one", hashed))
        self.assertFalse(self.hasher.verify("A" * 72 + "two", hashed))

    def test_plain_bcrypt_hash_still_verifies(self) -> None:
        legacy = bcrypt.using(rounds=4).hash("legacy-password")
        self.assertTrue(self.hasher.verify("legacy-password", legacy))
        self.assertFalse(self.hasher.verify("other-password", legacy))

    def test_dummy_verify_runs(self) -> None:
        self.hasher.dummy_verify()


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
