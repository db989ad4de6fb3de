"""
Unit-тесты для issue_challenge: состав полей, свежий paymentId, extra.
"""
import unittest

from x402gate.paywall.challenge import PAYMENT_ID_PREFIX, issue_challenge, new_payment_id, payment_ref
from x402gate.paywall.config import PaywallConfig

REQUIRED_FIELDS = (
    "scheme",
    "network",
    "asset",
    "payTo",
    "maxAmountRequired",
    "resource",
    "description",
    "mimeType",
    "maxTimeoutSeconds",
)


def _config(**overrides) -> PaywallConfig:
    params = {
        "network": "cronos-testnet",
        "pay_to": "0x" + "11" * 20,
        "asset": "0xc01efAaF7C5C61bEbFAeb358E1161b537b8bC0e0",
        "max_amount_required": "1000000",
        "description": "Unlock /api/data",
        "resource": "http://localhost:8787/api/secret",
    }
    params.update(overrides)
    return PaywallConfig(**params)


class TestIssueChallenge(unittest.TestCase):
    def test_envelope(self):
        body = issue_challenge(_config()).to_wire()
        self.assertEqual(body["x402Version"], 1)
        self.assertEqual(body["error"], "payment_required")
        self.assertEqual(len(body["accepts"]), 1)

    def test_required_fields_without_optional(self):
        option = issue_challenge(_config()).to_wire()["accepts"][0]
        for field in REQUIRED_FIELDS:
            self.assertIn(field, option)
        self.assertNotIn("outputSchema", option)
        self.assertEqual(option["scheme"], "exact")

    def test_required_fields_with_output_schema(self):
        schema = {"input": {"type": "http", "method": "GET"}, "output": {"type": "object"}}
        option = issue_challenge(_config(output_schema=schema)).to_wire()["accepts"][0]
        for field in REQUIRED_FIELDS:
            self.assertIn(field, option)
        self.assertEqual(option["outputSchema"], schema)

    def test_defaults_timeout_and_mime_type(self):
        option = issue_challenge(_config()).accepts[0]
        self.assertEqual(option.max_timeout_seconds, 300)
        self.assertEqual(option.mime_type, "application/json")

    def test_payment_id_in_extra(self):
        option = issue_challenge(_config()).accepts[0]
        self.assertTrue(option.payment_id.startswith(PAYMENT_ID_PREFIX))
        self.assertEqual(option.to_wire()["extra"]["paymentId"], option.payment_id)

    def test_config_extra_cannot_replace_payment_id(self):
        option = issue_challenge(_config(extra={"paymentId": "fixed", "tier": "gold"})).accepts[0]
        self.assertNotEqual(option.payment_id, "fixed")
        self.assertEqual(option.extra["tier"], "gold")

    def test_fresh_payment_id_per_challenge(self):
        config = _config()
        ids = {issue_challenge(config).accepts[0].payment_id for _ in range(500)}
        self.assertEqual(len(ids), 500)

    def test_payment_id_has_128_bits(self):
        payment_id = new_payment_id()
        token = payment_id[len(PAYMENT_ID_PREFIX):]
        self.assertEqual(len(token), 32)
        int(token, 16)


class TestChallengeLogging(unittest.TestCase):
    def test_log_carries_ref_not_payment_id(self):
        with self.assertLogs("x402gate.paywall.challenge", level="INFO") as logs:
            payment_id = issue_challenge(_config()).accepts[0].payment_id

        (record,) = logs.records
        self.assertEqual(record.getMessage(), "paywall_challenge_issued")
        self.assertIsNone(getattr(record, "payment_id", None))
        self.assertEqual(record.payment_ref, payment_ref(payment_id))
        self.assertNotIn(payment_id, logs.output[0])

    def test_ref_is_stable_and_short(self):
        self.assertEqual(payment_ref("pay_abc"), payment_ref("pay_abc"))
        self.assertNotEqual(payment_ref("pay_abc"), payment_ref("pay_abd"))
        self.assertEqual(len(payment_ref(new_payment_id())), 12)


if __name__ == "__main__":
    unittest.main()
