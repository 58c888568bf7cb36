"""
WPILib source extraction - builds pages straight from the frc-docs RST tree.

The repository is shallow-cloned, every .rst file under source/ is run
through the RST converter, and the published URL is rebuilt from the
relative path.
"""

import asyncio
import logging
import re
import shutil
from pathlib import Path

from ..config import Config
from ..constants import BASE_URLS, UNTITLED, WPILIB_REPO_URL, Library
from ..errors import DiscoveryError
from ..models import Page, slugify_id
from .rst import rst_to_markdown

logger = logging.getLogger(__name__)

MIN_RST_CHARS = 100
MIN_MARKDOWN_CHARS = 50
CLONE_TIMEOUT = 600


async def _run_git(args: list[str], cwd: Path | None = None, timeout: int = CLONE_TIMEOUT) -> tuple[str, str, int]:
	"""Run a git command and return (stdout, stderr, returncode)."""
	try:
		proc = await asyncio.create_subprocess_exec(
			"git", *args,
			stdout=asyncio.subprocess.PIPE,
			stderr=asyncio.subprocess.PIPE,
			cwd=str(cwd) if cwd else None,
		)
	except OSError as e:
		return ("", f"could not run git: {e}", -1)
	try:
		stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
	except asyncio.TimeoutError:
		proc.kill()
		return ("", f"git {args[0]} timed out after {timeout}s", -1)
	return (
		stdout.decode().strip(),
		stderr.decode().strip(),
		proc.returncode or 0,
	)


def rst_file_to_page(file_path: Path, source_dir: Path, base_url: str) -> Page | None:
	"""Convert one RST file to a Page, or None if it is too short to be useful."""
	rst = file_path.read_text(encoding="utf-8")
	if len(rst.strip()) < MIN_RST_CHARS:
		return None

	markdown = rst_to_markdown(rst)
	if len(markdown.strip()) < MIN_MARKDOWN_CHARS:
		return None

	rel_path = re.sub(r"\.rst$", ".html", file_path.relative_to(source_dir).as_posix())
	title_match = re.search(r"^#[ \t]+(.+)$", markdown, re.MULTILINE)
	title = title_match.group(1).strip() if title_match else (file_path.stem or UNTITLED)

	return Page(
		id=f"wpilib_{slugify_id(rel_path)}",
		title=title,
		library=Library.WPILIB.value,
		url=f"{base_url.rstrip('/')}/{rel_path}",
		content=markdown,
	)


def extract_from_directory(source_dir: Path, base_url: str = BASE_URLS[Library.WPILIB]) -> list[Page]:
	"""Convert every .rst file below source_dir, skipping stubs and unreadable files."""
	rst_files = sorted(source_dir.rglob("*.rst"))
	logger.info(f"Found {len(rst_files)} RST files in {source_dir}")

	pages: list[Page] = []
	skipped = 0
	for file_path in rst_files:
		try:
			page = rst_file_to_page(file_path, source_dir, base_url)
		except (OSError, UnicodeDecodeError) as e:
			logger.warning(f"Error processing {file_path}: {e}")
			skipped += 1
			continue
		if page is None:
			skipped += 1
			continue
		pages.append(page)

	logger.info(f"Extracted {len(pages)} pages ({skipped} skipped)")
	return pages


async def extract_wpilib_docs(config: Config) -> list[Page]:
	"""
	Clone frc-docs and convert its RST sources.

	Raises:
		DiscoveryError: if the clone fails or has no source/ directory
	"""
	clone_dir = config.clone_dir
	if clone_dir.exists():
		shutil.rmtree(clone_dir, ignore_errors=True)

	logger.info(f"Cloning {WPILIB_REPO_URL} (shallow)...")
	_, stderr, rc = await _run_git(["clone", "--depth", "1", WPILIB_REPO_URL, str(clone_dir)])
	if rc != 0:
		raise DiscoveryError(f"git clone of {WPILIB_REPO_URL} failed: {stderr}")

	try:
		source_dir = clone_dir / "source"
		if not source_dir.is_dir():
			raise DiscoveryError("source/ directory not found in frc-docs repo")
		return extract_from_directory(source_dir)
	finally:
		shutil.rmtree(clone_dir, ignore_errors=True)
