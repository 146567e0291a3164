import unittest

from histree.data.billing import (
    Currency,
    cost_rate_for_model,
    estimate_cost_usd,
    format_cost,
    format_cost_summary,
    summarize_cost,
    summarize_usage,
)
from histree.data.models import Entry, Message, Role, Session, TextBlock, Usage


def _assistant(model, usage):
    return Entry(role=Role.ASSISTANT, message=Message("assistant", [TextBlock("x")], model=model, usage=usage))


class TestCostRate(unittest.TestCase):
    def test_specific_variant_beats_family(self):
        self.assertEqual(cost_rate_for_model("gpt-5-mini-2025").input_per_million, 0.25)
        self.assertEqual(cost_rate_for_model("gpt-5.2-pro").output_per_million, 168.0)
        self.assertEqual(cost_rate_for_model("gpt-5").input_per_million, 1.25)

    def test_case_insensitive(self):
        self.assertEqual(cost_rate_for_model("Claude-Opus-4-5-20251101").input_per_million, 5.0)

    def test_unknown_model(self):
        self.assertIsNone(cost_rate_for_model("mystery-model"))


class TestEstimateCost(unittest.TestCase):
    def test_cache_tokens_count_as_input(self):
        usage = Usage(input_tokens=500_000, output_tokens=100_000, cache_read_input_tokens=500_000)
        self.assertAlmostEqual(estimate_cost_usd("gpt-5", usage), 1.25 + 1.0)

    def test_unknown_rate_is_none_not_zero(self):
        usage = Usage(input_tokens=10)
        self.assertIsNone(estimate_cost_usd("mystery-model", usage))
        self.assertIsNone(estimate_cost_usd(None, usage))
        self.assertEqual(format_cost(None, Currency.USD), "n/a")


class TestSummaries(unittest.TestCase):
    def test_partial_unknown(self):
        session = Session("s", "/p", [
            _assistant("gpt-5", Usage(input_tokens=1_000_000)),
            _assistant("mystery", Usage(output_tokens=10)),
            _assistant("gpt-5", None),
        ])
        usage = summarize_usage(session)
        self.assertEqual(usage.input_tokens, 1_000_000)
        self.assertEqual(usage.output_tokens, 10)
        self.assertTrue(usage.has_unknown)

        cost = summarize_cost(session)
        self.assertAlmostEqual(cost.usd, 1.25)
        self.assertTrue(cost.has_unknown)
        self.assertEqual(format_cost_summary(cost, Currency.USD), "$1.2500+")
        self.assertEqual(format_cost_summary(cost, Currency.JPY), "¥188+")

    def test_no_usage_at_all(self):
        session = Session("s", "/p", [_assistant("gpt-5", None)])
        self.assertEqual(format_cost_summary(summarize_cost(session), Currency.USD), "-")

    def test_currency_toggle(self):
        self.assertIs(Currency.USD.toggle(), Currency.JPY)
        self.assertIs(Currency.JPY.toggle(), Currency.USD)


if __name__ == "__main__":
    unittest.main()
