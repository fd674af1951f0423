import json
import os
import random
import tempfile
import unittest
from datetime import datetime, timezone
from unittest import mock

from autoblog.generation.gemini_client import GeminiError
from autoblog.generation.outcomes import FATAL, SUCCESS
from autoblog.imaging.hero import PLACEHOLDER, PlaceholderHeroImage
from autoblog.ingestion.aggregator import TopicAggregator
from autoblog.ingestion.topic_types import Topic, TopicCandidate
from autoblog.pipeline.orchestrator import (
    DuplicateTopicError,
    FactCheckFailedError,
    PipelineOptions,
    check_duplicate,
    check_facts,
    generate_blog_post,
)
from autoblog.publishing.post_writer import missing_post_files
from autoblog.storage.history import history_path, load_history, save_history

from helpers import FakeGeminiClient, StaticImage, StaticSource, png_bytes

NOW = datetime(2024, 1, 15, 6, 0, tzinfo=timezone.utc)
DRAFT = "## Why it matters\n\n" + "Quantum networks link processors across cities. " * 60
ARTICLE = "Researchers demonstrated a quantum network. " * 30


def _aggregator(candidates, text=""):
    return TopicAggregator([StaticSource("Test", candidates)], extractor=lambda url: text, rng=random.Random(3))


class TestGates(unittest.TestCase):
    def test_duplicate_is_fatal(self):
        gate = check_duplicate(" AI Revolution", ["ai revolution"])
        self.assertEqual(gate.status, FATAL)
        self.assertTrue(gate.fatal)
        self.assertEqual(gate.source, "check_duplicate")
        self.assertIn("AI Revolution", gate.reason)

    def test_new_title_passes(self):
        gate = check_duplicate("AI Revolution 2", ["AI Revolution"])
        self.assertEqual(gate.status, SUCCESS)
        self.assertFalse(gate.fatal)

    def test_unsupported_claims_are_fatal(self):
        client = FakeGeminiClient(texts=["- claim one\n- claim two"])
        gate = check_facts(client, DRAFT, Topic(title="T", full_content=ARTICLE))
        self.assertTrue(gate.fatal)
        self.assertEqual(gate.source, "fact_check")
        self.assertEqual(gate.value.issues, ["- claim one", "- claim two"])

    def test_failed_check_request_is_not_fatal(self):
        client = FakeGeminiClient(texts=[GeminiError("quota")])
        gate = check_facts(client, DRAFT, Topic(title="T", full_content=ARTICLE))
        self.assertEqual(gate.status, SUCCESS)
        self.assertTrue(gate.value.ok)


class TestGenerateBlogPost(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.out = self.tmp.name
        self.options = PipelineOptions(output_dir=self.out, date="2024-01-15", site_url="https://blog.example.com")

    def tearDown(self):
        self.tmp.cleanup()

    def _posts(self):
        posts_dir = os.path.join(self.out, "posts")
        return sorted(os.listdir(posts_dir)) if os.path.isdir(posts_dir) else []

    def test_synthesized_topic_end_to_end(self):
        client = FakeGeminiClient(texts=['{"title": "Quantum Networks Go Metro", "description": "Cities get qubits."}', DRAFT])
        result = generate_blog_post(
            self.options,
            client=client,
            aggregator=_aggregator([]),
            image_strategies=[StaticImage(png_bytes(), "gen"), PlaceholderHeroImage()],
            now=NOW,
        )
        self.assertEqual(result.folder_name, "2024-01-15-quantum-networks-go-metro")
        self.assertEqual(result.image_source, "gen")
        self.assertEqual(missing_post_files(result.post_dir, result.image_path), [])
        # synthesized topics have no context, so no fact-check call
        self.assertEqual(len(client.prompts), 2)

        with open(os.path.join(result.post_dir, "content.md"), encoding="utf-8") as f:
            content = f.read()
        self.assertTrue(content.startswith("# Quantum Networks Go Metro\n\n## Why it matters"))
        with open(os.path.join(result.post_dir, "metadata.json"), encoding="utf-8") as f:
            meta = json.load(f)
        self.assertEqual(meta["description"], "Cities get qubits.")
        self.assertEqual(meta["readingTime"], "2 min read")
        with open(os.path.join(result.post_dir, "index.tsx"), encoding="utf-8") as f:
            self.assertIn("'posts', '2024-01-15-quantum-networks-go-metro', 'content.md'", f.read())

        self.assertEqual(load_history(history_path(self.out)), ["Quantum Networks Go Metro"])
        with open(os.path.join(self.out, "rss.xml"), encoding="utf-8") as f:
            self.assertIn("https://blog.example.com/blog/2024-01-15-quantum-networks-go-metro", f.read())
        self.assertTrue(os.path.isfile(os.path.join(self.out, "sitemap.xml")))

    def test_blank_synthesized_title_still_publishes(self):
        client = FakeGeminiClient(texts=['{"title": "   ", "description": "Edge AI"}', DRAFT])
        result = generate_blog_post(self.options, client=client, aggregator=_aggregator([]),
                                    image_strategies=[PlaceholderHeroImage()], now=NOW)
        self.assertTrue(result.metadata["title"].strip())
        self.assertEqual(missing_post_files(result.post_dir, result.image_path), [])

    def test_context_topic_is_fact_checked(self):
        cand = TopicCandidate(title="Quantum Network Demo", url="https://n.example.com/q", description="d", source="Test")
        client = FakeGeminiClient(texts=[DRAFT, "OK"])
        result = generate_blog_post(
            self.options, client=client, aggregator=_aggregator([cand], ARTICLE),
            image_strategies=[PlaceholderHeroImage()], now=NOW,
        )
        self.assertEqual(len(client.prompts), 2)
        self.assertIn(ARTICLE[:100], client.prompts[0])
        self.assertIn("--- ORIGINAL ARTICLE ---", client.prompts[1])
        self.assertEqual(result.image_source, PLACEHOLDER)

    def test_duplicate_aborts_before_drafting(self):
        save_history(history_path(self.out), ["AI Revolution"])
        cand = TopicCandidate(title="ai revolution ", url="https://n.example.com/ai", source="Test")
        client = FakeGeminiClient(texts=[DRAFT])
        with self.assertRaises(DuplicateTopicError) as ctx:
            generate_blog_post(self.options, client=client, aggregator=_aggregator([cand]),
                               image_strategies=[PlaceholderHeroImage()], now=NOW)
        self.assertIn("[check_duplicate]", str(ctx.exception))
        self.assertEqual(client.prompts, [])
        self.assertEqual(self._posts(), [])
        self.assertEqual(load_history(history_path(self.out)), ["AI Revolution"])

    def test_skip_duplicate_check_leaves_history_alone(self):
        save_history(history_path(self.out), ["AI Revolution"])
        cand = TopicCandidate(title="AI Revolution", url="https://n.example.com/ai", source="Test")
        options = PipelineOptions(output_dir=self.out, date="2024-01-15", skip_duplicate_check=True)
        generate_blog_post(options, client=FakeGeminiClient(texts=[DRAFT]), aggregator=_aggregator([cand]),
                           image_strategies=[PlaceholderHeroImage()], now=NOW)
        self.assertEqual(self._posts(), ["2024-01-15-ai-revolution"])
        self.assertEqual(load_history(history_path(self.out)), ["AI Revolution"])

    def test_failed_fact_check_writes_nothing(self):
        cand = TopicCandidate(title="Quantum Network Demo", url="https://n.example.com/q", source="Test")
        client = FakeGeminiClient(texts=[DRAFT, "- The network spans 40 cities (article says 4)"])
        strategy = StaticImage(png_bytes(), "gen")
        strategy.produce = mock.Mock(wraps=strategy.produce)
        with self.assertRaises(FactCheckFailedError) as ctx:
            generate_blog_post(self.options, client=client, aggregator=_aggregator([cand], ARTICLE),
                               image_strategies=[strategy], now=NOW)
        self.assertEqual(ctx.exception.issues, ["- The network spans 40 cities (article says 4)"])
        strategy.produce.assert_not_called()
        self.assertEqual(self._posts(), [])
        self.assertFalse(os.path.exists(history_path(self.out)))
        self.assertFalse(os.path.exists(os.path.join(self.out, "rss.xml")))

    def test_tiny_image_payload_still_completes_post(self):
        cand = TopicCandidate(title="Edge Inference", url="https://n.example.com/e", source="Test")
        result = generate_blog_post(
            self.options, client=FakeGeminiClient(texts=[DRAFT]), aggregator=_aggregator([cand]),
            image_strategies=[StaticImage(b"x" * 50, "gen"), PlaceholderHeroImage()], now=NOW,
        )
        self.assertEqual(result.image_source, PLACEHOLDER)
        self.assertEqual(missing_post_files(result.post_dir, result.image_path), [])

    def test_index_failure_does_not_fail_run(self):
        cand = TopicCandidate(title="Edge Inference", url="https://n.example.com/e", source="Test")
        with mock.patch("autoblog.publishing.indexes.generate_sitemap", side_effect=ValueError("bad")):
            result = generate_blog_post(
                self.options, client=FakeGeminiClient(texts=[DRAFT]), aggregator=_aggregator([cand]),
                image_strategies=[PlaceholderHeroImage()], now=NOW,
            )
        self.assertEqual(missing_post_files(result.post_dir, result.image_path), [])
        self.assertFalse(os.path.exists(os.path.join(self.out, "sitemap.xml")))
        self.assertTrue(os.path.exists(os.path.join(self.out, "rss.xml")))

    def test_date_defaults_to_ist_today(self):
        options = PipelineOptions(output_dir=self.out)
        late_utc = datetime(2024, 1, 15, 22, 0, tzinfo=timezone.utc)
        cand = TopicCandidate(title="Edge Inference", url="https://n.example.com/e", source="Test")
        with mock.patch.dict(os.environ, {"DATE": ""}):
            result = generate_blog_post(options, client=FakeGeminiClient(texts=[DRAFT]),
                                        aggregator=_aggregator([cand]),
                                        image_strategies=[PlaceholderHeroImage()], now=late_utc)
        self.assertEqual(result.folder_name, "2024-01-16-edge-inference")


if __name__ == "__main__":
    unittest.main()
