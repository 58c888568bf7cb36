"""Shared test fakes and factories for frc-docs-mcp tests."""

import json
from pathlib import Path
from types import SimpleNamespace
from typing import Callable, Optional
from unittest.mock import AsyncMock

import aiohttp

from frc_docs_mcp.config import Config
from frc_docs_mcp.knowledge.bundle import DocsBundle, build_bundle, load_bundle
from frc_docs_mcp.models import Page

HTML = "text/html; charset=utf-8"
XML = "application/xml"


class FakeResponse:
	"""Minimal stand-in for aiohttp.ClientResponse used as an async context manager."""

	def __init__(self, status: int, content_type: str, text: str):
		self.status = status
		self.headers = {"Content-Type": content_type}
		self._text = text

	async def text(self) -> str:
		return self._text

	async def __aenter__(self) -> "FakeResponse":
		return self

	async def __aexit__(self, *exc) -> None:
		return None


class FakeSession:
	"""
	Serves canned responses keyed by URL; unknown URLs raise a connection error.

	routes values are (status, content_type, body) tuples or an Exception to raise.
	"""

	def __init__(self, routes: dict[str, object]):
		self.routes = routes
		self.requested: list[str] = []
		self.closed = False

	def get(self, url: str) -> FakeResponse:
		self.requested.append(url)
		route = self.routes.get(url)
		if route is None:
			raise aiohttp.ClientConnectionError(f"no route for {url}")
		if isinstance(route, Exception):
			raise route
		status, content_type, body = route
		return FakeResponse(status, content_type, body)

	async def close(self) -> None:
		self.closed = True

	async def __aenter__(self) -> "FakeSession":
		return self

	async def __aexit__(self, *exc) -> None:
		await self.close()


def html_page(title: str, body: str, chrome: bool = True) -> str:
	"""Build an HTML document with optional nav/footer chrome around a <main>."""
	nav = "<nav><a href='/'>Home</a> | <a href='/other'>Other</a></nav>" if chrome else ""
	footer = "<footer>Copyright FRC Docs</footer>" if chrome else ""
	return (
		f"<html><head><title>{title}</title><script>var x = 1;</script></head>"
		f"<body>{nav}<main><h1>{title}</h1><p>{body}</p></main>{footer}</body></html>"
	)


def fake_genai_client(
	respond: Optional[Callable[[str], str]] = None,
	side_effect: Optional[object] = None,
) -> SimpleNamespace:
	"""Build an object shaped like google.genai.Client with an async generate_content."""
	async def generate_content(model: str, contents: str):
		return SimpleNamespace(text=respond(contents) if respond else "# Converted\n\nBody text.")

	mock = AsyncMock(side_effect=side_effect or generate_content)
	return SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=mock)))


def make_config(tmp_path: Path, **overrides) -> Config:
	"""Config rooted in tmp_path with batching throttle disabled."""
	values = {
		"config_dir": tmp_path / "config",
		"data_dir": tmp_path / "data",
		"clone_dir": tmp_path / "clone",
		"batch_delay": 0.0,
	}
	values.update(overrides)
	return Config(**values)


def make_page(
	page_id: str = "docs_example_org_page_html",
	title: str = "Example Page",
	library: str = "WPILib",
	url: str = "https://docs.example.org/page.html",
	content: str = "Example content for a documentation page.",
) -> Page:
	"""Create a Page with realistic defaults."""
	return Page(id=page_id, title=title, library=library, url=url, content=content)


def sample_pages() -> list[Page]:
	"""A small multi-library corpus used by search tests."""
	return [
		make_page(
			page_id="wpilib_docs_pid_basics",
			title="PIDController Basics",
			library="WPILib",
			url="https://docs.wpilib.org/en/stable/docs/pid-basics.html",
			content=(
				"# PIDController Basics\n\nWPILib provides the PIDController class for "
				"closed-loop control. Use the PIDController class to drive a mechanism "
				"to a setpoint with proportional, integral and derivative gains."
			),
		),
		make_page(
			page_id="docs_revrobotics_com_spark_pid",
			title="SPARK MAX Closed Loop Control",
			library="REV Robotics",
			url="https://docs.revrobotics.com/spark/pid",
			content=(
				"# SPARK MAX Closed Loop Control\n\nThe SPARK MAX runs its own PID loop "
				"on the motor controller. Configure the P, I and D gains with REV Hardware Client."
			),
		),
		make_page(
			page_id="docs_limelightvision_io_apriltags",
			title="AprilTag Tracking",
			library="Limelight",
			url="https://docs.limelightvision.io/apriltags",
			content="# AprilTag Tracking\n\nLimelight detects AprilTags and reports robot pose estimates.",
		),
		make_page(
			page_id="v6_docs_ctr_electronics_com_swerve",
			title="Swerve Drive",
			library="CTRE Phoenix 6",
			url="https://v6.docs.ctr-electronics.com/en/stable/docs/swerve.html",
			content="# Swerve Drive\n\nPhoenix 6 swerve uses a PID controller per module for steering.",
		),
	]


def load_sample_bundle(tmp_path, pages: Optional[list[Page]] = None) -> DocsBundle:
	"""Write pages to a bundle file under tmp_path and load it back."""
	path = tmp_path / "docs.json"
	path.write_text(json.dumps(build_bundle(pages if pages is not None else sample_pages())), encoding="utf-8")
	return load_bundle(path)


def capture_tools(bundle: DocsBundle, register_fn: Callable) -> dict:
	"""Register tools on a mock MCP and return the captured tool functions.

	Args:
		bundle: Bundle to bind the tools to
		register_fn: The registration function (e.g., register_docs_tools)

	Returns:
		Dict mapping tool name to the tool function
	"""
	captured = {}

	class MockMCP:
		def tool(self):
			def decorator(fn):
				captured[fn.__name__] = fn
				return fn
			return decorator

	register_fn(MockMCP(), bundle)
	return captured
