"""Tests for kaydle.options module."""

import pytest

from kaydle.numbers import default_number_policy
from kaydle.options import DEFAULT_MAX_DEPTH, MAX_DEPTH_ENV, DeserializeOptions


class TestDeserializeOptions:
    """Test option defaults and validation."""

    def test_defaults(self):
        """Test the default options."""
        options = DeserializeOptions()
        assert options.max_depth == DEFAULT_MAX_DEPTH == 128
        assert options.number_policy is default_number_policy

    def test_rejects_non_positive_depth(self):
        """Test that the depth limit must be positive."""
        with pytest.raises(ValueError, match="max_depth must be positive"):
            DeserializeOptions(max_depth=0)

    def test_frozen(self):
        """Test that options are immutable."""
        options = DeserializeOptions()
        with pytest.raises((AttributeError, TypeError)):
            options.max_depth = 3


class TestFromEnv:
    """Test reading options from the environment."""

    def test_unset(self):
        """Test that a missing variable keeps the defaults."""
        assert DeserializeOptions.from_env({}) == DeserializeOptions()

    def test_blank(self):
        """Test that a blank variable keeps the defaults."""
        assert DeserializeOptions.from_env({MAX_DEPTH_ENV: "  "}).max_depth == DEFAULT_MAX_DEPTH

    def test_override(self):
        """Test overriding the depth limit."""
        assert DeserializeOptions.from_env({MAX_DEPTH_ENV: "16"}).max_depth == 16

    def test_invalid(self):
        """Test that a non-numeric value is rejected."""
        with pytest.raises(ValueError, match=MAX_DEPTH_ENV):
            DeserializeOptions.from_env({MAX_DEPTH_ENV: "deep"})

    def test_process_environment(self, monkeypatch):
        """Test that os.environ is read by default."""
        monkeypatch.setenv(MAX_DEPTH_ENV, "8")
        assert DeserializeOptions.from_env().max_depth == 8
