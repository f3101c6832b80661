import unittest

from lumina.exceptions import ExpressionError, ProviderFailure
from lumina.models import CopyText
from lumina.search.calculator import (
    ExpressionEvaluator,
    evaluate_expression,
    is_math_expression,
)
from lumina.search.outcome import OutcomeStatus


class TestIsMathExpression(unittest.TestCase):

    def test_requires_an_operator(self):
        self.assertTrue(is_math_expression("5+5"))
        self.assertTrue(is_math_expression("(1 + 2) * 3"))
        self.assertFalse(is_math_expression("42"))
        self.assertFalse(is_math_expression("(3.5)"))

    def test_rejects_foreign_characters(self):
        for query in ["5+x", "2^3", "1,000+1", "how much is 2+2", "5%2"]:
            with self.subTest(query=query):
                self.assertFalse(is_math_expression(query))


class TestEvaluate(unittest.TestCase):
    def setUp(self):
        self.evaluator = ExpressionEvaluator()

    def test_simple_sum(self):
        result = self.evaluator.evaluate("5+5")

        self.assertEqual(result.title, "5+5 = 10")
        self.assertEqual(result.score, 0.9)
        self.assertEqual(result.action, CopyText(text="10"))
        self.assertEqual(result.id, "calculator")

    def test_qualifying_queries_copy_their_result(self):
        cases = {
            "10/4": "2",
            "10/2": "5",
            "-7/2": "-3",
            "7/-2": "-3",
            "10.0/4": "2.5",
            "10/4.0": "2.5",
            "(1+2)*3": "9",
            "-3+1": "-2",
            "0.5 * 4": "2",
            "1.5+1.25": "2.75",
            " 7 - 2 ": "5",
        }
        for query, expected in cases.items():
            with self.subTest(query=query):
                result = self.evaluator.evaluate(query)
                self.assertEqual(result.action, CopyText(text=expected))
                self.assertEqual(result.score, 0.9)
                self.assertEqual(result.title, f"{query} = {expected}")

    def test_float_division_by_zero_is_not_an_error(self):
        cases = {"1.0/0": "inf", "-1/0.0": "-inf", "0.0/0": "NaN"}
        for query, expected in cases.items():
            with self.subTest(query=query):
                self.assertEqual(self.evaluator.evaluate(query).action, CopyText(text=expected))

    def test_non_arithmetic_is_not_applicable(self):
        for query in ["hello", "42", "notes.txt", "what is 2+2?"]:
            with self.subTest(query=query):
                self.assertIsNone(self.evaluator.evaluate(query))

    def test_invalid_expressions_raise(self):
        for query in ["1/0", "5++", "2**3", "(1+2", "1..2+3", "4//2"]:
            with self.subTest(query=query):
                with self.assertRaises(ExpressionError):
                    self.evaluator.evaluate(query)

    def test_expression_error_is_a_provider_failure(self):
        with self.assertRaises(ProviderFailure):
            evaluate_expression("3/0")


class TestSearchOutcome(unittest.TestCase):
    def setUp(self):
        self.evaluator = ExpressionEvaluator()

    def test_matched(self):
        outcome = self.evaluator.search("2*21")
        self.assertEqual(outcome.status, OutcomeStatus.MATCHED)
        self.assertEqual(outcome.results[0].title, "2*21 = 42")

    def test_not_applicable_is_not_a_failure(self):
        outcome = self.evaluator.search("firefox")
        self.assertEqual(outcome.status, OutcomeStatus.NOT_APPLICABLE)
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.usable_results(), [])

    def test_failed(self):
        outcome = self.evaluator.search("1/0")
        self.assertEqual(outcome.status, OutcomeStatus.FAILED)
        self.assertFalse(outcome.ok)
        self.assertIsInstance(outcome.error, ExpressionError)
        self.assertEqual(outcome.usable_results(), [])


if __name__ == "__main__":
    unittest.main()
