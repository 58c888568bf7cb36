"""Tests for the configuration system."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from frc_docs_mcp.config import Config, _apply_env_overrides, get_api_key, load_config
from frc_docs_mcp.errors import ConfigurationError


def test_config_defaults():
	"""Config should have sensible defaults."""
	config = Config()
	assert config.config_dir.is_absolute()
	assert config.data_dir.is_absolute()
	assert config.bundle_path == config.data_dir / "docs.json"
	assert config.log_dir == config.data_dir / "logs"
	assert config.batch_size == 10
	assert config.batch_delay == 5.0


def test_config_env_overrides():
	"""Environment variables should override defaults."""
	config = Config()
	with patch.dict(os.environ, {
		"FRC_DOCS_MCP_DATA_DIR": "/tmp/test-data",
		"FRC_DOCS_MCP_CONFIG_DIR": "/tmp/test-config",
		"FRC_DOCS_MCP_GEMINI_MODEL": "gemini-test",
	}):
		config = _apply_env_overrides(config)
		assert config.data_dir == Path("/tmp/test-data")
		assert config.config_dir == Path("/tmp/test-config")
		assert config.gemini_model == "gemini-test"
		# Derived paths should be recomputed
		assert config.bundle_path == Path("/tmp/test-data/docs.json")
		assert config.log_dir == Path("/tmp/test-data/logs")


def test_bundle_path_override():
	"""An explicit bundle path wins over the data-dir default."""
	config = Config()
	with patch.dict(os.environ, {"FRC_DOCS_MCP_BUNDLE_PATH": "/tmp/elsewhere/bundle.json"}):
		config = _apply_env_overrides(config)
		assert config.bundle_path == Path("/tmp/elsewhere/bundle.json")


def test_config_ensure_dirs(tmp_path: Path):
	"""ensure_dirs should create all required directories."""
	config = Config(
		config_dir=tmp_path / "config",
		data_dir=tmp_path / "data",
	)
	assert not config.config_dir.exists()
	assert not config.data_dir.exists()

	config.ensure_dirs()

	assert config.config_dir.exists()
	assert config.data_dir.exists()
	assert config.log_dir.exists()


def test_load_config_creates_dirs(tmp_path: Path):
	"""load_config should create directories."""
	with patch.dict(os.environ, {
		"FRC_DOCS_MCP_DATA_DIR": str(tmp_path / "data"),
		"FRC_DOCS_MCP_CONFIG_DIR": str(tmp_path / "config"),
	}):
		config = load_config()
		assert config.data_dir.exists()
		assert config.log_dir.exists()


def test_load_config_reads_toml(tmp_path: Path):
	"""config.toml values apply, and environment variables still win."""
	config_dir = tmp_path / "config"
	config_dir.mkdir()
	(config_dir / "config.toml").write_text(
		'batch_size = 4\n'
		'gemini_model = "from-toml"\n'
		f'bundle_path = "{(tmp_path / "custom.json").as_posix()}"\n',
		encoding="utf-8",
	)
	with patch.dict(os.environ, {
		"FRC_DOCS_MCP_DATA_DIR": str(tmp_path / "data"),
		"FRC_DOCS_MCP_CONFIG_DIR": str(config_dir),
		"FRC_DOCS_MCP_GEMINI_MODEL": "from-env",
	}):
		config = load_config()
	assert config.batch_size == 4
	assert config.gemini_model == "from-env"
	assert config.bundle_path == tmp_path / "custom.json"


class TestApiKey:
	"""Gemini credential lookup."""

	def test_gemini_key_preferred(self, monkeypatch):
		"""GEMINI_API_KEY is used when both are set."""
		monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
		monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
		assert get_api_key() == "gemini-key"

	def test_google_key_fallback(self, monkeypatch):
		"""GOOGLE_API_KEY is accepted on its own."""
		monkeypatch.delenv("GEMINI_API_KEY", raising=False)
		monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
		assert get_api_key() == "google-key"

	def test_missing_key(self, monkeypatch):
		"""No key is a configuration error."""
		monkeypatch.delenv("GEMINI_API_KEY", raising=False)
		monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
		with pytest.raises(ConfigurationError):
			get_api_key()
