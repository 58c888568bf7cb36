"""Configuration system using platformdirs for cross-platform paths."""

import os
import tempfile
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import platformdirs

from .constants import BATCH_DELAY_SECONDS, BATCH_SIZE, GEMINI_MODEL, USER_AGENT
from .errors import ConfigurationError

APP_NAME = "frc-docs-mcp"
APP_AUTHOR = "frc-docs-mcp"

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")


@dataclass
class Config:
	"""Central configuration with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))
	clone_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()) / "frc-docs-mcp-clone")

	# Optional explicit bundle location (otherwise derived from data_dir)
	bundle_override: Path | None = None

	# Derived paths
	bundle_path: Path = field(init=False)
	log_dir: Path = field(init=False)

	# Ingestion tuning
	gemini_model: str = GEMINI_MODEL
	batch_size: int = BATCH_SIZE
	batch_delay: float = BATCH_DELAY_SECONDS
	request_timeout: int = 30
	user_agent: str = USER_AGENT

	def __post_init__(self) -> None:
		self.bundle_path = self.bundle_override or self.data_dir / "docs.json"
		self.log_dir = self.data_dir / "logs"

	def ensure_dirs(self) -> None:
		"""Create all required directories."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)


def _apply_env_overrides(config: Config) -> Config:
	"""Apply FRC_DOCS_MCP_* environment variable overrides."""
	path_map = {
		"FRC_DOCS_MCP_CONFIG_DIR": "config_dir",
		"FRC_DOCS_MCP_DATA_DIR": "data_dir",
		"FRC_DOCS_MCP_BUNDLE_PATH": "bundle_override",
	}
	for env_key, attr in path_map.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, Path(val))

	model = os.getenv("FRC_DOCS_MCP_GEMINI_MODEL")
	if model:
		config.gemini_model = model

	# Recompute derived paths after overrides
	config.__post_init__()
	return config


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	# The config file lives in the env-selected config dir when one is set
	config_dir = Path(os.getenv("FRC_DOCS_MCP_CONFIG_DIR") or config.config_dir)
	toml_path = config_dir / "config.toml"
	if not toml_path.exists():
		return config

	with open(toml_path, "rb") as f:
		data = tomllib.load(f)

	path_fields = {"config_dir", "data_dir", "clone_dir", "bundle_override"}
	for key, val in data.items():
		if key == "bundle_path":
			key = "bundle_override"
		if hasattr(config, key):
			if key in path_fields:
				setattr(config, key, Path(os.path.expanduser(val)))
			else:
				setattr(config, key, val)

	# Recompute derived paths after toml overrides
	config.__post_init__()
	return config


def load_config() -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	config = Config()
	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	config.ensure_dirs()
	return config


def get_api_key() -> str:
	"""
	Read the Gemini credential from the environment.

	Raises:
		ConfigurationError: if none of the supported variables is set
	"""
	for env_key in API_KEY_ENV_VARS:
		val = os.getenv(env_key, "").strip()
		if val:
			return val
	raise ConfigurationError(
		f"{API_KEY_ENV_VARS[0]} is not set. Export it (or add it to .env) before scraping web sources."
	)
