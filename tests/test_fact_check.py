import unittest

from autoblog.generation.fact_check import (
    MAX_ISSUES,
    build_fact_check_prompt,
    fact_check,
    parse_fact_check_response,
)
from autoblog.generation.gemini_client import GeminiError

from helpers import FakeGeminiClient


class TestFactCheck(unittest.TestCase):
    def test_empty_context_skips_the_model(self):
        client = FakeGeminiClient()
        result = fact_check(client, "draft", "   ")
        self.assertTrue(result.ok)
        self.assertEqual(client.prompts, [])

    def test_ok_reply_passes(self):
        client = FakeGeminiClient(texts=["  ok \n"])
        result = fact_check(client, "draft", "article body")
        self.assertTrue(result.ok)
        self.assertEqual(result.issues, [])
        self.assertIn("article body", client.prompts[0])

    def test_issue_lines_fail_the_gate(self):
        client = FakeGeminiClient(texts=["- Claim A is unsupported\n\n- Claim B is wrong\n"])
        result = fact_check(client, "draft", "article")
        self.assertFalse(result.ok)
        self.assertEqual(result.issues, ["- Claim A is unsupported", "- Claim B is wrong"])

    def test_issues_are_capped(self):
        text = "\n".join(f"issue {i}" for i in range(25))
        result = parse_fact_check_response(text)
        self.assertEqual(len(result.issues), MAX_ISSUES)
        self.assertEqual(result.issues[0], "issue 0")

    def test_request_failure_fails_open(self):
        client = FakeGeminiClient(texts=[GeminiError("quota")])
        with self.assertLogs("autoblog.generation.fact_check", level="WARNING"):
            result = fact_check(client, "draft", "article")
        self.assertTrue(result.ok)

    def test_prompt_exempts_opinion_lines(self):
        prompt = build_fact_check_prompt("draft", "context")
        self.assertIn('"My take:"', prompt)
        self.assertIn("--- BLOG DRAFT ---", prompt)


if __name__ == "__main__":
    unittest.main()
