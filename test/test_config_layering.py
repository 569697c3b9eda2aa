"""Tests for layered config parsing and validation."""

import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from LogbookSearch.compiler import SearchQueryCompiler
from LogbookSearch.config import load_config, load_config_with_defaults, merge_config_dicts, parse_config_dict


def _base_raw_config() -> dict:
    return {
        "log": {"level": "info", "to_file": False, "dir": "log"},
        "search": {"index": "olog_logs", "default_size": 100, "max_size": 1000},
        "elasticsearch": {"url": "http://es:9200", "url_env": "TEST_LOGBOOK_ES_URL", "timeout": 15},
    }


class TestConfigLayering(unittest.TestCase):
    def test_parse_success_nested_access(self) -> None:
        cfg = parse_config_dict(_base_raw_config())
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertEqual(cfg.search.index, "olog_logs")
        self.assertEqual(cfg.search.max_size, 1000)
        self.assertEqual(cfg.elasticsearch.url, "http://es:9200")
        self.assertEqual(cfg.elasticsearch.timeout, 15.0)

    def test_empty_mapping_uses_defaults(self) -> None:
        cfg = parse_config_dict({})
        self.assertEqual(cfg.search.index, "olog_logs")
        self.assertEqual(cfg.search.default_size, 100)
        self.assertEqual(cfg.search.max_size, 1000)

    def test_compiler_from_config(self) -> None:
        raw = _base_raw_config()
        raw["search"] = {"index": "logs", "default_size": 10, "max_size": 20}
        compiler = SearchQueryCompiler.from_config(parse_config_dict(raw).search)
        self.assertEqual(compiler, SearchQueryCompiler(index="logs", default_size=10, max_size=20))

    def test_non_positive_size_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["search"]["max_size"] = 0
        with self.assertRaisesRegex(ValueError, "search\\.max_size"):
            parse_config_dict(raw)

    def test_size_type_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["search"]["default_size"] = "100"
        with self.assertRaisesRegex(TypeError, "search\\.default_size"):
            parse_config_dict(raw)

    def test_bool_is_not_an_integer(self) -> None:
        raw = _base_raw_config()
        raw["search"]["default_size"] = True
        with self.assertRaises(TypeError):
            parse_config_dict(raw)

    def test_timeout_type_errors_name_the_key(self) -> None:
        for bad in ("15", True, None):
            raw = _base_raw_config()
            raw["elasticsearch"]["timeout"] = bad
            with self.subTest(timeout=bad):
                with self.assertRaisesRegex(TypeError, "elasticsearch\\.timeout must be a number"):
                    parse_config_dict(raw)

    def test_to_file_must_be_boolean(self) -> None:
        raw = _base_raw_config()
        raw["log"]["to_file"] = "yes"
        with self.assertRaisesRegex(TypeError, "log\\.to_file must be a boolean"):
            parse_config_dict(raw)

    def test_missing_keys_in_present_section_use_defaults(self) -> None:
        raw = _base_raw_config()
        raw["elasticsearch"] = {"url_env": ""}
        raw["log"] = {}
        cfg = parse_config_dict(raw)
        self.assertEqual(cfg.elasticsearch.url, "http://localhost:9200")
        self.assertEqual(cfg.elasticsearch.timeout, 30.0)
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertFalse(cfg.runtime.to_file)

    def test_non_positive_timeout_error(self) -> None:
        raw = _base_raw_config()
        raw["elasticsearch"]["timeout"] = 0
        with self.assertRaisesRegex(ValueError, "elasticsearch\\.timeout must be positive"):
            parse_config_dict(raw)

    def test_empty_index_error(self) -> None:
        raw = _base_raw_config()
        raw["search"]["index"] = "  "
        with self.assertRaisesRegex(ValueError, "search\\.index"):
            parse_config_dict(raw)

    def test_unknown_log_level_error(self) -> None:
        raw = _base_raw_config()
        raw["log"]["level"] = "verbose"
        with self.assertRaisesRegex(ValueError, "log\\.level"):
            parse_config_dict(raw)

    def test_url_env_overrides_url(self) -> None:
        with patch.dict(os.environ, {"TEST_LOGBOOK_ES_URL": "https://override:9200"}, clear=False):
            cfg = parse_config_dict(_base_raw_config())
        self.assertEqual(cfg.elasticsearch.url, "https://override:9200")

    def test_invalid_url_scheme_error(self) -> None:
        raw = _base_raw_config()
        raw["elasticsearch"]["url"] = "es:9200"
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaisesRegex(ValueError, "elasticsearch\\.url"):
                parse_config_dict(raw)

    def test_section_must_be_mapping(self) -> None:
        raw = _base_raw_config()
        raw["search"] = ["olog_logs"]
        with self.assertRaisesRegex(TypeError, "search must be an object"):
            parse_config_dict(raw)


class TestConfigFiles(unittest.TestCase):
    def test_repository_default_config_loads(self) -> None:
        cfg = load_config(REPO_ROOT / "config" / "default.yml")
        self.assertEqual(cfg.search.index, "olog_logs")
        self.assertEqual(cfg.search.default_size, 100)

    def test_override_merges_over_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            override = Path(tmp) / "override.yml"
            override.write_text("search:\n  max_size: 250\n", encoding="utf-8")
            cfg = load_config_with_defaults(override, default_path=REPO_ROOT / "config" / "default.yml")
        self.assertEqual(cfg.search.max_size, 250)
        self.assertEqual(cfg.search.index, "olog_logs")

    def test_missing_default_file_uses_builtin_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            override = Path(tmp) / "override.yml"
            override.write_text("search:\n  index: custom\n", encoding="utf-8")
            cfg = load_config_with_defaults(override, default_path=Path(tmp) / "missing.yml")
        self.assertEqual(cfg.search.index, "custom")
        self.assertEqual(cfg.search.max_size, 1000)

    def test_non_mapping_root_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.yml"
            path.write_text("- a\n- b\n", encoding="utf-8")
            with self.assertRaisesRegex(ValueError, "Config root"):
                load_config(path)

    def test_merge_is_deep(self) -> None:
        merged = merge_config_dicts({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}})
        self.assertEqual(merged, {"a": {"b": 1, "c": 3}})


if __name__ == "__main__":
    unittest.main()
