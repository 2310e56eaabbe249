import tempfile
import textwrap
import unittest
from pathlib import Path

from roommatetap.config.documents import (
    canonicalize_keys,
    deep_merge,
    find_document,
    load_documents,
    read_document,
)
from roommatetap.config.errors import MissingBaseConfig, MissingOverlayConfig


def _write(configs_dir: Path, name: str, text: str) -> Path:
    path = configs_dir / name
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


class DeepMergeTests(unittest.TestCase):
    def test_nested_siblings_survive(self) -> None:
        base = {"http": {"port": 8000, "readTimeout": "10s"}, "limiter": {"rps": 10}}
        deep_merge(base, {"http": {"port": 9000}})
        self.assertEqual(base, {"http": {"port": 9000, "readTimeout": "10s"}, "limiter": {"rps": 10}})

    def test_scalars_and_lists_replaced(self) -> None:
        base = {"google": {"scopes": ["a", "b"]}, "cache": {"ttl": "1m"}}
        deep_merge(base, {"google": {"scopes": ["c"]}, "cache": "off"})
        self.assertEqual(base, {"google": {"scopes": ["c"]}, "cache": "off"})

    def test_null_values_keep_base(self) -> None:
        base = {"limiter": {"rps": 20, "burst": 5}, "cache": {"ttl": "1m"}}
        deep_merge(base, {"limiter": None, "cache": {"ttl": None}, "smtp": None})
        self.assertEqual(base, {"limiter": {"rps": 20, "burst": 5}, "cache": {"ttl": "1m"}, "smtp": None})

    def test_mapping_replaces_null_base(self) -> None:
        base = {"limiter": None}
        deep_merge(base, {"limiter": {"rps": 30}})
        self.assertEqual(base, {"limiter": {"rps": 30}})

    def test_override_is_not_aliased(self) -> None:
        override = {"email": {"templates": {"verification_email": "a.html"}}}
        base: dict = {}
        deep_merge(base, override)
        base["email"]["templates"]["verification_email"] = "b.html"
        self.assertEqual(override["email"]["templates"]["verification_email"], "a.html")


class CanonicalizeKeysTests(unittest.TestCase):
    def test_legacy_header_key(self) -> None:
        self.assertEqual(
            canonicalize_keys({"http": {"maxHeaderBytes": 4, "port": 80}}),
            {"http": {"maxHeaderMegabytes": 4, "port": 80}},
        )

    def test_canonical_key_wins_within_one_document(self) -> None:
        tree = canonicalize_keys({"http": {"maxHeaderBytes": 4, "maxHeaderMegabytes": 2}})
        self.assertEqual(tree, {"http": {"maxHeaderMegabytes": 2}})

    def test_other_shapes_untouched(self) -> None:
        self.assertEqual(canonicalize_keys({"http": None}), {"http": None})


class ReadDocumentTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_empty_document_is_empty_mapping(self) -> None:
        self.assertEqual(read_document(_write(self.dir, "main.yml", "")), {})

    def test_top_level_must_be_mapping(self) -> None:
        with self.assertRaises(ValueError):
            read_document(_write(self.dir, "main.yml", "- a\n- b\n"))

    def test_invalid_yaml(self) -> None:
        with self.assertRaises(ValueError):
            read_document(_write(self.dir, "main.yml", "http: [unclosed\n"))

    def test_find_document_suffixes(self) -> None:
        self.assertIsNone(find_document(self.dir, "main"))
        path = _write(self.dir, "main.yaml", "http: {}\n")
        self.assertEqual(find_document(self.dir, "main"), path)
        self.assertIsNone(find_document(self.dir, ""))
        self.assertIsNone(find_document(self.dir, "../main"))


class LoadDocumentsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_base(self) -> None:
        with self.assertRaises(MissingBaseConfig):
            load_documents(self.dir, "env")

    def test_unparsable_base(self) -> None:
        _write(self.dir, "main.yml", "limiter: [1, 2\n")
        with self.assertRaises(MissingBaseConfig) as ctx:
            load_documents(self.dir, "env")
        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    def test_local_environment_never_opens_overlay(self) -> None:
        _write(self.dir, "main.yml", "limiter:\n  rps: 20\n")
        _write(self.dir, "env.yml", "limiter: [broken\n")
        self.assertEqual(load_documents(self.dir, "env"), {"limiter": {"rps": 20}})

    def test_overlay_merged_over_base(self) -> None:
        _write(
            self.dir,
            "main.yml",
            """
            limiter:
              rps: 20
              burst: 5
            smtp:
              host: smtp.example.com
            """,
        )
        _write(self.dir, "prod.yml", "limiter:\n  rps: 30\n")
        tree = load_documents(self.dir, "prod")
        self.assertEqual(tree["limiter"], {"rps": 30, "burst": 5})
        self.assertEqual(tree["smtp"], {"host": "smtp.example.com"})

    def test_missing_overlay(self) -> None:
        _write(self.dir, "main.yml", "{}\n")
        with self.assertRaises(MissingOverlayConfig) as ctx:
            load_documents(self.dir, "prod")
        self.assertEqual(ctx.exception.environment, "prod")

    def test_empty_environment_requires_overlay(self) -> None:
        _write(self.dir, "main.yml", "{}\n")
        with self.assertRaises(MissingOverlayConfig):
            load_documents(self.dir, "")

    def test_unparsable_overlay(self) -> None:
        _write(self.dir, "main.yml", "{}\n")
        _write(self.dir, "staging.yaml", "- not a mapping\n")
        with self.assertRaises(MissingOverlayConfig):
            load_documents(self.dir, "staging")


if __name__ == "__main__":
    unittest.main()
