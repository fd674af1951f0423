import os
import unittest
from unittest import mock

from autoblog.config import Settings

BASE_ENV = {
    "GEMINI_API_KEY": "test-key",
    "GUARDIAN_KEY": "",
    "DATE": "",
    "SITE_URL": "https://blog.example.com/",
    "LOG_LEVEL": "info",
    "SKIP_DUPLICATE_CHECK": "",
    "DEBUG": "",
}


class TestSettings(unittest.TestCase):
    def _load(self, **overrides):
        env = dict(BASE_ENV, **overrides)
        with mock.patch.dict(os.environ, env), mock.patch("autoblog.config.load_dotenv"):
            return Settings.from_env()

    def test_defaults(self):
        s = self._load()
        self.assertEqual(s.text_model, "gemini-2.5-flash")
        self.assertEqual(s.site_url, "https://blog.example.com")
        self.assertEqual(s.log_level, "INFO")
        self.assertIsNone(s.date_override)
        self.assertFalse(s.skip_duplicate_check)

    def test_flags_and_date(self):
        s = self._load(SKIP_DUPLICATE_CHECK="true", DEBUG="1", DATE="2024-02-29")
        self.assertTrue(s.skip_duplicate_check)
        self.assertTrue(s.debug)
        self.assertEqual(s.date_override, "2024-02-29")

    def test_malformed_date_is_ignored(self):
        with self.assertLogs("autoblog.config", level="WARNING"):
            s = self._load(DATE="tomorrow")
        self.assertIsNone(s.date_override)

    def test_missing_api_key(self):
        with self.assertRaisesRegex(ValueError, "GEMINI_API_KEY is required"):
            self._load(GEMINI_API_KEY="")

    def test_errors_are_collected(self):
        with self.assertRaises(ValueError) as ctx:
            self._load(GEMINI_API_KEY="", SITE_URL="blog.example.com", LOG_LEVEL="loud")
        msg = str(ctx.exception)
        self.assertTrue(msg.startswith("Configuration validation failed:"))
        self.assertEqual(msg.count("\n  - "), 3)


class TestWorkerEntryPoint(unittest.TestCase):
    def test_config_error_exit_code(self):
        import generate_post_worker

        with mock.patch.object(generate_post_worker.Settings, "from_env", side_effect=ValueError("bad config")):
            self.assertEqual(generate_post_worker.main([]), 1)

    def test_aborted_run_exit_code(self):
        import generate_post_worker
        from autoblog.pipeline.orchestrator import DuplicateTopicError

        settings = Settings(gemini_api_key="k")
        with mock.patch.object(generate_post_worker.Settings, "from_env", return_value=settings), \
                mock.patch("generate_post_worker.run_once", side_effect=DuplicateTopicError("AI Revolution")) as run:
            self.assertEqual(generate_post_worker.main(["--skip-duplicate-check", "--date", "2024-01-15"]), 2)
        passed = run.call_args.args[0]
        self.assertTrue(passed.skip_duplicate_check)
        self.assertEqual(passed.date_override, "2024-01-15")


if __name__ == "__main__":
    unittest.main()
