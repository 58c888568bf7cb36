"""Library identifiers, base URLs, and ingestion constants."""

from enum import Enum


class Library(str, Enum):
	"""Documentation sources bundled by the scraper."""
	WPILIB = "WPILib"
	CTRE_PHOENIX6 = "CTRE Phoenix 6"
	ADVANTAGEKIT = "AdvantageKit"
	REV_ROBOTICS = "REV Robotics"
	LIMELIGHT = "Limelight"


LIBRARY_NAMES: tuple[str, ...] = tuple(lib.value for lib in Library)

BASE_URLS: dict[Library, str] = {
	Library.WPILIB: "https://docs.wpilib.org/en/stable",
	Library.CTRE_PHOENIX6: "https://v6.docs.ctr-electronics.com/en/stable",
	Library.ADVANTAGEKIT: "https://docs.advantagekit.org",
	Library.REV_ROBOTICS: "https://docs.revrobotics.com",
	Library.LIMELIGHT: "https://docs.limelightvision.io",
}

WPILIB_REPO_URL = "https://github.com/wpilibsuite/frc-docs.git"

BATCH_SIZE = 10
BATCH_DELAY_SECONDS = 5.0
GEMINI_MODEL = "gemini-3-flash-preview"
USER_AGENT = "frc-docs-mcp/1.0 (documentation indexer; +https://github.com/frc-docs-mcp)"

UNTITLED = "Untitled"
