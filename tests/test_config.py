"""Tests for configuration loading and validation."""

import json
import logging
import warnings

import pytest
from pydantic import ValidationError

from axecrawler.config import (
    DEFAULT_VIEWPORTS,
    CrawlerConfig,
    ViewPort,
    build_config,
    load_config_file,
    parse_viewports_arg,
)
from axecrawler.errors import SamplingConfigWarning
from axecrawler.links import FilterConfig


class TestCrawlerConfig:
    """Test cases for CrawlerConfig validation."""

    def test_defaults(self):
        """Test defaults match the documented command line defaults."""
        config = CrawlerConfig(domain="example.com")

        assert config.depth == 5
        assert config.check is None
        assert config.random == 1.0
        assert config.output == "reports"
        assert config.db_type == "memory"
        assert [view.name for view in config.view_ports] == [
            "mobile", "tablet_vertical", "tablet_horizontal", "desktop",
        ]
        assert config.seed_url == "http://example.com"

    def test_config_is_frozen(self):
        """Test a finalized config cannot be modified."""
        config = CrawlerConfig(domain="example.com")
        with pytest.raises(ValidationError):
            config.depth = 2

    def test_negative_depth_rejected(self):
        """Test depth must be a natural number."""
        with pytest.raises(ValidationError):
            CrawlerConfig(domain="example.com", depth=-1)

    @pytest.mark.parametrize("rate", [0, -0.5, 1.5, "abc"])
    def test_out_of_range_sampling_rate_corrected(self, rate, caplog):
        """Test an invalid sampling rate falls back to 1 with an error and a warning."""
        with caplog.at_level(logging.ERROR, logger="axecrawler.config"):
            with pytest.warns(SamplingConfigWarning):
                config = CrawlerConfig(domain="example.com", random=rate)

        assert config.random == 1.0
        assert "Invalid random sampling rate" in caplog.text

    @pytest.mark.parametrize("rate", [None, False])
    def test_no_sampling_normalized_silently(self, rate):
        """Test unset sampling means a full sample without a warning."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            config = CrawlerConfig(domain="example.com", random=rate)
        assert config.random == 1.0

    def test_valid_sampling_rate_kept(self):
        """Test a rate inside (0, 1] is kept."""
        assert CrawlerConfig(domain="example.com", random=0.25).random == 0.25

    @pytest.mark.parametrize("check,expected", [
        (None, None),
        (False, None),
        (0, 0),
        (10, 10),
        ("3", 3),
        (-1, None),
        (2.5, None),
        ("many", None),
        (True, None),
        (float("inf"), None),
        (float("nan"), None),
    ])
    def test_check_normalization(self, check, expected):
        """Test check is a natural number or unbounded."""
        assert CrawlerConfig(domain="example.com", check=check).check == expected

    def test_invalid_regex_rejected(self):
        """Test ignore and whitelist must compile."""
        with pytest.raises(ValidationError):
            CrawlerConfig(domain="example.com", ignore="(unclosed")
        with pytest.raises(ValidationError):
            CrawlerConfig(domain="example.com", whitelist="[")

    def test_empty_policy_means_unset(self):
        """Test empty ignore or whitelist patterns are treated as unset."""
        config = CrawlerConfig(domain="example.com", ignore="", whitelist=False)
        assert config.ignore is None
        assert config.whitelist is None

    def test_duplicate_viewport_names_rejected(self):
        """Test viewport names must be unique."""
        with pytest.raises(ValidationError):
            CrawlerConfig(
                domain="example.com",
                view_ports=[
                    ViewPort(name="mobile", width=360, height=640),
                    ViewPort(name="mobile", width=375, height=667),
                ],
            )

    def test_empty_viewports_use_defaults(self):
        """Test an empty viewport list falls back to the defaults."""
        config = CrawlerConfig(domain="example.com", view_ports=[])
        assert config.view_ports == DEFAULT_VIEWPORTS

    def test_viewports_accept_alias(self):
        """Test the camelCase option name from config files is accepted."""
        config = CrawlerConfig(domain="example.com", viewPorts=[{"name": "a", "width": 1, "height": 2}])
        assert config.view_ports == [ViewPort(name="a", width=1, height=2)]

    def test_filter_config(self):
        """Test the filter policy mirrors the configured domain and patterns."""
        config = CrawlerConfig(domain=" example.com ", ignore="www", whitelist="net")
        assert config.filter_config == FilterConfig(domain="example.com", ignore="www", whitelist="net")


class TestViewPorts:
    """Test cases for viewport parsing."""

    def test_parse_viewports_arg(self):
        """Test a comma separated viewport list is parsed in order."""
        view_ports = parse_viewports_arg("mobile:360x640,tablet:768x1024")

        assert view_ports == [
            ViewPort(name="mobile", width=360, height=640),
            ViewPort(name="tablet", width=768, height=1024),
        ]

    @pytest.mark.parametrize("views", ["mobile", "mobile:360", "mobile:360x640,bad", "mobile:axb"])
    def test_malformed_viewports(self, views):
        """Test a malformed entry names the argument in the error."""
        with pytest.raises(ValueError, match="Invalid viewports"):
            parse_viewports_arg(views)

    def test_viewport_label(self):
        """Test the storage label includes the dimensions."""
        assert ViewPort(name="mobile", width=360, height=640).label == "mobile:360x640"

    def test_viewport_dimensions_positive(self):
        """Test zero sized viewports are rejected."""
        with pytest.raises(ValidationError):
            ViewPort(name="broken", width=0, height=640)


class TestConfigFile:
    """Test cases for load_config_file."""

    def test_missing_file(self, tmp_path, caplog):
        """Test a missing file is reported and ignored."""
        with caplog.at_level(logging.ERROR, logger="axecrawler.config"):
            assert load_config_file(str(tmp_path / "missing.json")) == {}
        assert "No config file found" in caplog.text

    def test_invalid_json(self, tmp_path):
        """Test a malformed file is ignored."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert load_config_file(str(path)) == {}

    def test_non_object_json(self, tmp_path):
        """Test a file not holding an object is ignored."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert load_config_file(str(path)) == {}

    def test_valid_file(self, tmp_path):
        """Test options are read from a JSON object."""
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"depth": 2, "ignore": "www"}))
        assert load_config_file(str(path)) == {"depth": 2, "ignore": "www"}


class TestBuildConfig:
    """Test cases for build_config precedence and flags."""

    def write_options(self, tmp_path, options):
        path = tmp_path / "axe-crawler.json"
        path.write_text(json.dumps(options))
        return str(path)

    def test_command_line_overrides_file(self, tmp_path):
        """Test command line options take precedence over the JSON file."""
        config_file = self.write_options(tmp_path, {"depth": 2, "check": 10, "ignore": "www"})

        config = build_config({"domain": "example.com", "depth": 3, "ignore": None}, config_file)

        assert config.depth == 3
        assert config.check == 10
        assert config.ignore == "www"

    def test_file_viewports_string(self, tmp_path):
        """Test viewports given as a string in the file are parsed."""
        config_file = self.write_options(tmp_path, {"viewPorts": "small:320x480"})

        config = build_config({"domain": "example.com"}, config_file)

        assert config.view_ports == [ViewPort(name="small", width=320, height=480)]

    def test_dry_run(self, tmp_path):
        """Test a dry run tests nothing and logs at debug level."""
        config = build_config(
            {"domain": "example.com", "dry_run": True, "check": 50},
            str(tmp_path / "missing.json"),
        )

        assert config.dry_run is True
        assert config.check == 0
        assert config.verbose == "debug"

    def test_dry_run_keeps_explicit_verbosity(self, tmp_path):
        """Test an explicit verbosity wins over the dry run default."""
        config = build_config(
            {"domain": "example.com", "dry_run": True, "verbose": "info"},
            str(tmp_path / "missing.json"),
        )
        assert config.verbose == "info"

    def test_quiet_overrides_verbosity(self, tmp_path):
        """Test quiet silences logging whatever else is requested."""
        config = build_config(
            {"domain": "example.com", "verbose": "debug", "quiet": True},
            str(tmp_path / "missing.json"),
        )
        assert config.verbose == "quiet"

    def test_missing_domain_rejected(self, tmp_path):
        """Test a domain is required."""
        with pytest.raises(ValidationError):
            build_config({}, str(tmp_path / "missing.json"))
