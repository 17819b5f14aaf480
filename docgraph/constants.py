"""Shared constants for the document graph."""

# Canonical content tiers, shallowest first
CANONICAL_DEPTHS: tuple[str, ...] = ("surface", "mid-depth", "deep-water")

DEPTH_ORDER: dict[str, int] = {depth: i for i, depth in enumerate(CANONICAL_DEPTHS)}

# Phases observed in the published corpus
DEFAULT_PHASES: tuple[str, ...] = (
    "01-discovery-planning",
    "02-design",
    "03-development",
    "04-testing-security",
    "05-deployment",
    "06-operations",
    "07-iteration",
)

REQUIRED_FIELDS: tuple[str, ...] = ("title", "phase", "topic", "depth")

FRONTMATTER_DELIMITER = "---"

DEFAULT_STALE_THRESHOLD_DAYS = 180

CORPUS_EXTENSIONS: tuple[str, ...] = ("*.md", "*.mdx")

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
