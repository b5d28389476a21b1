from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from click.testing import CliRunner
from tokenizers import Tokenizer
from tokenizers.models import WordPiece
from tokenizers.normalizers import BertNormalizer
from tokenizers.pre_tokenizers import BertPreTokenizer

from tokembed.cli import main

CLEAN_ENV = {
    "TOKEMBED_CONFIG": None,
    "TOKEMBED_OUTPUT": None,
    "TOKEMBED_LOG_LEVEL": None,
    "TOKEMBED_SEED": None,
}


def _write_tokenizer(path: Path) -> Path:
    vocab = {"[UNK]": 0, "hello": 1, ",": 2, "world": 3, "!": 4}
    tokenizer = Tokenizer(WordPiece(vocab, unk_token="[UNK]"))
    tokenizer.normalizer = BertNormalizer(lowercase=True)
    tokenizer.pre_tokenizer = BertPreTokenizer()
    tokenizer.save(str(path))
    return path


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_path = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_cli_embeds_text(self) -> None:
        with self.runner.isolated_filesystem(temp_dir=self.tmp_path):
            _write_tokenizer(Path("tokenizer.json"))

            result = self.runner.invoke(main, ["--text", "Hello, world!"], env=CLEAN_ENV)

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("Input text: Hello, world!", result.output)
            self.assertIn("Embedding dimension: 384", result.output)
            self.assertIn("First 10 values:", result.output)
            self.assertIn("Embedding norm: 1.000000", result.output)
            payload = json.loads(Path("embedding.json").read_text(encoding="utf-8"))
            self.assertEqual(payload["dimension"], 384)
            self.assertEqual(len(payload["embedding"]), 384)
            self.assertTrue(all(isinstance(value, float) for value in payload["embedding"]))

    def test_cli_short_options(self) -> None:
        with self.runner.isolated_filesystem(temp_dir=self.tmp_path):
            _write_tokenizer(Path("custom.json"))

            result = self.runner.invoke(main, ["-t", "hello", "-k", "custom.json"], env=CLEAN_ENV)

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertTrue(Path("embedding.json").exists())

    def test_cli_missing_tokenizer(self) -> None:
        with self.runner.isolated_filesystem(temp_dir=self.tmp_path):
            result = self.runner.invoke(
                main, ["--text", "Hello, world!", "--tokenizer-path", "missing.json"], env=CLEAN_ENV
            )

            self.assertNotEqual(result.exit_code, 0)
            self.assertIn("missing.json", result.output)
            self.assertFalse(Path("embedding.json").exists())

    def test_cli_empty_text(self) -> None:
        with self.runner.isolated_filesystem(temp_dir=self.tmp_path):
            _write_tokenizer(Path("tokenizer.json"))

            result = self.runner.invoke(main, ["--text", ""], env=CLEAN_ENV)

            self.assertEqual(result.exit_code, 0, result.output)
            payload = json.loads(Path("embedding.json").read_text(encoding="utf-8"))
            self.assertEqual(len(payload["embedding"]), 384)
            self.assertEqual(payload["token_count"], 0)

    def test_cli_empty_text_reports_zero_norm(self) -> None:
        with self.runner.isolated_filesystem(temp_dir=self.tmp_path):
            _write_tokenizer(Path("tokenizer.json"))

            result = self.runner.invoke(main, ["--text", ""], env=CLEAN_ENV)

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("Embedding dimension: 384", result.output)
            self.assertIn("Embedding norm: 0.000000", result.output)
            self.assertNotIn("nan", result.output)

    def test_cli_zero_epsilon_config_is_rejected(self) -> None:
        with self.runner.isolated_filesystem(temp_dir=self.tmp_path):
            _write_tokenizer(Path("tokenizer.json"))
            Path("tokembed.yaml").write_text("embedding:\n  epsilon: 0\n", encoding="utf-8")

            result = self.runner.invoke(main, ["--text", ""], env=CLEAN_ENV)

            self.assertNotEqual(result.exit_code, 0)
            self.assertIn("epsilon", result.output)
            self.assertFalse(Path("embedding.json").exists())

    def test_cli_out_of_range_seed(self) -> None:
        with self.runner.isolated_filesystem(temp_dir=self.tmp_path):
            _write_tokenizer(Path("tokenizer.json"))
            env = {**CLEAN_ENV, "TOKEMBED_SEED": str(2**64)}

            result = self.runner.invoke(main, ["--text", "hello"], env=env)

            self.assertEqual(result.exit_code, 1)
            self.assertIsInstance(result.exception, SystemExit)
            self.assertIn("TOKEMBED_SEED", result.output)
            self.assertFalse(Path("embedding.json").exists())

    def test_cli_undecodable_text(self) -> None:
        with self.runner.isolated_filesystem(temp_dir=self.tmp_path):
            _write_tokenizer(Path("tokenizer.json"))

            result = self.runner.invoke(main, ["--text", "hi\udcff"], env=CLEAN_ENV)

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("Input text: hi\ufffd", result.output)
            payload = json.loads(Path("embedding.json").read_text(encoding="utf-8"))
            self.assertEqual(payload["text"], "hi\ufffd")
            self.assertEqual(len(payload["embedding"]), 384)

    def test_cli_requires_text(self) -> None:
        result = self.runner.invoke(main, [], env=CLEAN_ENV)

        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("--text", result.output)

    def test_cli_write_failure(self) -> None:
        with self.runner.isolated_filesystem(temp_dir=self.tmp_path):
            _write_tokenizer(Path("tokenizer.json"))
            env = {**CLEAN_ENV, "TOKEMBED_OUTPUT": "no-such-dir/embedding.json"}

            result = self.runner.invoke(main, ["--text", "hello"], env=env)

            self.assertNotEqual(result.exit_code, 0)
            self.assertIn("no-such-dir", result.output)

    def test_cli_reads_config_file(self) -> None:
        with self.runner.isolated_filesystem(temp_dir=self.tmp_path):
            _write_tokenizer(Path("vocab.json"))
            Path("tokembed.yaml").write_text(
                "tokenizer:\n  path: vocab.json\noutput:\n  path: vector.json\n  preview: 3\n",
                encoding="utf-8",
            )

            result = self.runner.invoke(main, ["--text", "hello"], env=CLEAN_ENV)

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("First 3 values:", result.output)
            self.assertTrue(Path("vector.json").exists())

    def test_cli_bad_config_file(self) -> None:
        with self.runner.isolated_filesystem(temp_dir=self.tmp_path):
            env = {**CLEAN_ENV, "TOKEMBED_CONFIG": "absent.yaml"}

            result = self.runner.invoke(main, ["--text", "hello"], env=env)

            self.assertNotEqual(result.exit_code, 0)
            self.assertIn("absent.yaml", result.output)


if __name__ == "__main__":
    unittest.main()
