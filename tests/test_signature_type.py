import unittest

from src.domain.signature_type import UNKNOWN, get_name


class TestSignatureType(unittest.TestCase):
    def test_known_codes(self) -> None:
        self.assertEqual(get_name(2), "CONTRACT")
        self.assertEqual(get_name(3), "ED25519")
        self.assertEqual(get_name(4), "RSA_3072")
        self.assertEqual(get_name(5), "ECDSA_384")
        self.assertEqual(get_name(6), "ECDSA_SECP256K1")

    def test_unknown_codes(self) -> None:
        for code in [-1, 0, 1, 7, 999]:
            with self.subTest(code=code):
                self.assertEqual(get_name(code), UNKNOWN)
