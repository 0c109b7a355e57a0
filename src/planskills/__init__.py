"""planskills — budgeted skill injection for agent task plans.

Picks the skill documents a plan needs (explicit header list, keyword
inference, registry defaults), loads them under a count and line budget,
and renders them as a single block for the agent's context.
"""

__version__ = "0.1.0"

SKILLS_DIRNAME = ".claude/skills"
REGISTRY_FILENAMES = ("registry.json", "registry.yaml")
LOG_DIRNAME = ".planning/logs"

from .inference import infer_skills  # noqa: E402
from .loader import select_and_load  # noqa: E402
from .recorder import record_load  # noqa: E402
from .registry import find_registry_location, load_registry  # noqa: E402

__all__ = [
    "__version__",
    "find_registry_location",
    "infer_skills",
    "load_registry",
    "record_load",
    "select_and_load",
]
