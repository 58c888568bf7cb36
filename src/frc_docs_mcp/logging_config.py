"""Centralized logging configuration for frc-docs-mcp."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "frc_docs_mcp"


def setup_logging(
	level: str | None = None,
	log_dir: Path | None = None,
) -> logging.Logger:
	"""
	Set up logging with a stderr console handler and an optional file handler.

	stdout is reserved for the MCP stdio transport, so console output always
	goes to stderr.

	Args:
		level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO.
		log_dir: Directory for the rotating log file; no file handler when None

	Returns:
		Configured package logger
	"""
	level = level or os.getenv("LOG_LEVEL", "INFO")
	log_level = getattr(logging, level.upper(), logging.INFO)

	logger = logging.getLogger(ROOT_LOGGER)
	logger.setLevel(log_level)

	# Avoid duplicate handlers
	if logger.handlers:
		return logger

	detailed_formatter = logging.Formatter(
		"%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
		datefmt="%Y-%m-%d %H:%M:%S",
	)
	simple_formatter = logging.Formatter(
		"%(asctime)s [%(levelname)s] %(message)s",
		datefmt="%H:%M:%S",
	)

	console_handler = logging.StreamHandler(sys.stderr)
	console_handler.setLevel(log_level)
	console_handler.setFormatter(simple_formatter)
	logger.addHandler(console_handler)

	if log_dir is not None:
		log_dir.mkdir(parents=True, exist_ok=True)
		file_handler = RotatingFileHandler(
			log_dir / f"{ROOT_LOGGER}.log",
			maxBytes=10 * 1024 * 1024,  # 10 MB
			backupCount=5,
		)
		file_handler.setLevel(logging.DEBUG)  # File gets all logs
		file_handler.setFormatter(detailed_formatter)
		logger.addHandler(file_handler)

	return logger

