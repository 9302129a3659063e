"""
Unit tests for HMAC signing, verification and REST request authentication.
"""

import hashlib
import hmac
import unittest
from unittest.mock import patch

from pusher_lib.config import PusherConfig
from pusher_lib.signature import canonical_query, md5_hex, sign, sign_request, verify


class TestSign(unittest.TestCase):
    """Test HMAC-SHA256 signing."""

    def test_known_vector(self):
        """RFC 4231 test case 2."""
        self.assertEqual(
            sign("Jefe", "what do ya want for nothing?"),
            "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843",
        )

    def test_matches_hmac_module(self):
        expected = hmac.new(b"secret", b"1234.1234:private-foobar", hashlib.sha256).hexdigest()
        self.assertEqual(sign("secret", "1234.1234:private-foobar"), expected)

    def test_lowercase_hex(self):
        signature = sign("secret", "message")
        self.assertEqual(len(signature), 64)
        self.assertEqual(signature, signature.lower())
        int(signature, 16)

    def test_deterministic(self):
        """Test that same inputs produce same signature."""
        self.assertEqual(sign("secret", "message"), sign("secret", "message"))

    def test_different_inputs(self):
        """Test that changing either input changes the signature."""
        base = sign("secret", "message")
        self.assertNotEqual(base, sign("secret2", "message"))
        self.assertNotEqual(base, sign("secret", "message2"))


class TestVerify(unittest.TestCase):
    """Test signature verification."""

    def test_roundtrip(self):
        for secret, message in [("s", ""), ("secret", "body"), ("ü-secret", '{"time_ms":1}')]:
            self.assertTrue(verify(secret, message, sign(secret, message)))

    def test_altered_message(self):
        signature = sign("secret", "message")
        self.assertFalse(verify("secret", "messagf", signature))

    def test_altered_signature(self):
        signature = sign("secret", "message")
        flipped = ("0" if signature[0] != "0" else "1") + signature[1:]
        self.assertFalse(verify("secret", "message", flipped))
        self.assertFalse(verify("secret", "message", signature[:-1]))
        self.assertFalse(verify("secret", "message", ""))

    def test_uses_constant_time_comparison(self):
        with patch("pusher_lib.signature.hmac.compare_digest", wraps=hmac.compare_digest) as compare:
            verify("secret", "message", "abc")
        compare.assert_called_once()


class TestRequestSigning(unittest.TestCase):
    """Test REST request authentication parameters."""

    def setUp(self):
        self.config = PusherConfig(app_id="3", key="278d425bdf160c739803", secret="7ad3773142a6692b25b8")

    def test_md5_hex(self):
        self.assertEqual(md5_hex(""), "d41d8cd98f00b204e9800998ecf8427e")

    def test_canonical_query_sorted_and_lowercased(self):
        self.assertEqual(canonical_query({"b": "2", "A": "1", "info": "x,y"}), "a=1&b=2&info=x,y")

    def test_get_request(self):
        params = sign_request(self.config, "get", "/apps/3/channels", {"info": "user_count"}, timestamp=1353088179)

        self.assertEqual(params["auth_key"], self.config.key)
        self.assertEqual(params["auth_timestamp"], "1353088179")
        self.assertEqual(params["auth_version"], "1.0")
        self.assertNotIn("body_md5", params)

        string_to_sign = (
            "GET\n/apps/3/channels\n"
            "auth_key=278d425bdf160c739803&auth_timestamp=1353088179&auth_version=1.0&info=user_count"
        )
        self.assertEqual(params["auth_signature"], sign(self.config.secret, string_to_sign))

    def test_post_request_includes_body_md5(self):
        """Published example from the REST API documentation."""
        body = '{"name":"foo","channels":["project-3"],"data":"{\\"some\\":\\"data\\"}"}'
        params = sign_request(self.config, "POST", "/apps/3/events", body=body, timestamp=1353088179)

        self.assertEqual(params["body_md5"], md5_hex(body))
        string_to_sign = "\n".join([
            "POST",
            "/apps/3/events",
            f"auth_key=278d425bdf160c739803&auth_timestamp=1353088179&auth_version=1.0&body_md5={md5_hex(body)}",
        ])
        self.assertEqual(params["auth_signature"], sign(self.config.secret, string_to_sign))

    def test_does_not_mutate_params(self):
        original = {"info": "user_count"}
        sign_request(self.config, "GET", "/apps/3/channels", original)
        self.assertEqual(original, {"info": "user_count"})

    @patch("pusher_lib.signature.time.time", return_value=1700000000.7)
    def test_default_timestamp(self, _):
        params = sign_request(self.config, "GET", "/apps/3/channels")
        self.assertEqual(params["auth_timestamp"], "1700000000")


if __name__ == "__main__":
    unittest.main()
