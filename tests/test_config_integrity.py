"""Tests for config.json integrity and compatibility with the extractors.

Tests cover:
1. JSON file syntax and section presence
2. Portal selectors, timeouts and delays used by the scraper
3. Table parsing and name normalization settings
4. Section accessors and their fallbacks
"""

from __future__ import annotations

import re

import pytest

from ebeszamolo.config import (
    CONFIG_DIR,
    get_browserbase_config,
    get_config,
    get_legal_suffixes,
    get_run_config,
    get_source_config,
    get_table_parsing_config,
    validate_api_keys,
)

# =============================================================================
# JSON Syntax and Loading Tests
# =============================================================================


class TestJsonSyntax:
    """Tests that the config file is valid and complete."""

    def test_config_json_exists(self) -> None:
        assert (CONFIG_DIR / "config.json").exists()

    def test_config_json_loads(self) -> None:
        config = get_config()
        assert isinstance(config, dict)
        assert len(config) > 0

    def test_top_level_sections(self) -> None:
        config = get_config()
        for section in ["sources", "name_normalization", "table_parsing", "browserbase", "run"]:
            assert section in config, f"config.json missing section: {section}"


# =============================================================================
# Portal Source Tests
# =============================================================================


class TestSourceConfig:
    """Tests for sources.e_beszamolo."""

    @pytest.fixture
    def source(self) -> dict:
        return get_source_config()

    def test_urls(self, source: dict) -> None:
        assert source["base_url"] == "https://e-beszamolo.im.gov.hu"
        assert source["search_path"].startswith("/")

    def test_required_selectors(self, source: dict) -> None:
        required = [
            "tax_number_input",
            "name_input",
            "submit",
            "terms_checkbox",
            "terms_confirm",
            "result_anchor",
            "result_links",
            "results_header",
            "report_container",
            "report_link",
        ]
        for key in required:
            assert source["selectors"].get(key), f"Missing selector: {key}"

    def test_class_selectors_are_simple(self, source: dict) -> None:
        """Container and link selectors must be plain tag.class for snapshot lookups."""
        for key in ["report_container", "report_link"]:
            assert re.fullmatch(r"[a-z]*\.[\w-]+", source["selectors"][key]), key

    def test_timeouts_and_delays_are_positive(self, source: dict) -> None:
        for name, value in {**source["timeouts_ms"], **source["delays_ms"]}.items():
            assert isinstance(value, int), name
            assert value > 0, name

    def test_results_wait_shorter_than_navigation(self, source: dict) -> None:
        assert source["timeouts_ms"]["results"] <= source["timeouts_ms"]["navigation"]


# =============================================================================
# Parsing Settings Tests
# =============================================================================


class TestParsingConfig:
    """Tests for table_parsing and name_normalization."""

    def test_line_code_pattern_compiles(self) -> None:
        pattern = re.compile(get_table_parsing_config()["line_code_pattern"])
        assert pattern.match("001.")
        assert pattern.match("245")
        assert not pattern.match("12.")

    def test_statement_tokens(self) -> None:
        parsing = get_table_parsing_config()
        assert parsing["balance_sheet_token"] == "MÉRLEGE"
        assert parsing["income_statement_token"] == "EREDMÉNYKIMUTATÁS"

    def test_header_labels_lowercase(self) -> None:
        for label in get_table_parsing_config()["header_labels"]:
            assert label == label.lower()

    def test_legal_suffixes_have_no_trailing_period(self) -> None:
        suffixes = get_legal_suffixes()
        assert "Kft" in suffixes
        assert "Nyrt" in suffixes
        assert all(not suffix.endswith(".") for suffix in suffixes)


# =============================================================================
# Accessor Tests
# =============================================================================


class TestAccessors:
    """Tests for section accessors."""

    def test_run_config_types(self) -> None:
        run = get_run_config()
        assert isinstance(run["default_year"], int)
        assert run["hold_seconds"] == 5.0
        assert run["budget_seconds"] == 60.0

    def test_run_config_fallbacks(self) -> None:
        assert get_run_config({}) == {"default_year": 2024, "hold_seconds": 5.0, "budget_seconds": 60.0}

    def test_missing_optional_sections(self) -> None:
        assert get_legal_suffixes({}) == []
        assert get_table_parsing_config({}) == {}
        assert get_browserbase_config({}) == {}

    def test_browserbase_viewport(self) -> None:
        assert get_browserbase_config()["viewport"] == {"width": 1280, "height": 720}

    def test_api_key_flags(self) -> None:
        flags = validate_api_keys()
        assert set(flags) == {"browserbase_api_key", "browserbase_project_id"}
        assert all(isinstance(value, bool) for value in flags.values())
