"""Course-specific tutor instructions keyed by course slug."""

import json
import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

import structlog

from smart_tutor.schemas.course_schema import COURSE_SLUG_PATTERN

logger = structlog.get_logger()

COURSE_KEY_PATTERN = re.compile(COURSE_SLUG_PATTERN)

DEFAULT_COURSE_PROMPTS: dict[str, str] = {
    "mathematics": (
        "This student is taking Introduction to Mathematics. Focus on "
        "algebra, geometry and the first ideas of calculus. Work through "
        "problems step by step and check understanding before moving on."
    ),
    "physics": (
        "This student is taking Physics Fundamentals. Focus on motion, "
        "energy and forces. Tie every law to an everyday example and show "
        "the units in each calculation."
    ),
    "english-literature": (
        "This student is taking English Literature. Focus on close reading, "
        "themes, characters and literary devices in classic and contemporary "
        "works. Ask the student for their own interpretation before offering one."
    ),
    "computer-science": (
        "This student is taking Computer Science Basics. Focus on programming "
        "concepts, algorithms and computational thinking. Keep code examples "
        "short and explain each line."
    ),
    "world-history": (
        "This student is taking World History. Focus on causes, consequences "
        "and the people behind major events. Place events on a timeline and "
        "connect them to the present day."
    ),
    "chemistry": (
        "This student is taking Chemistry Essentials. Focus on chemical "
        "reactions, the periodic table and molecular structure. Balance "
        "equations step by step and stress lab safety."
    ),
}


class CoursePromptTable(Mapping[str, str]):
    """Finite, validated mapping of course slug to tutor instructions.

    Keys are the lower-case slugs of catalog courses. Looking up an unknown or absent key is a
    no-op that returns ``None``; the table never raises on lookup.
    """

    def __init__(self, prompts: Mapping[str, str]) -> None:
        validated: dict[str, str] = {}
        for raw_key, raw_text in prompts.items():
            key = str(raw_key).strip()
            if not COURSE_KEY_PATTERN.match(key):
                raise ValueError(f"Invalid course key: {raw_key!r}")
            if not isinstance(raw_text, str) or not raw_text.strip():
                raise ValueError(f"Course {key!r} has no instructions")
            validated[key] = raw_text.strip()
        self._prompts = MappingProxyType(validated)

    def __getitem__(self, key: str) -> str:
        return self._prompts[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._prompts)

    def __len__(self) -> int:
        return len(self._prompts)

    def lookup(self, course_id: str | None) -> str | None:
        """Return the instructions for ``course_id`` or None when unknown."""
        if course_id is None:
            return None
        return self._prompts.get(course_id.strip())

    @classmethod
    def default(cls) -> "CoursePromptTable":
        """Built-in table shipped with the service."""
        return cls(DEFAULT_COURSE_PROMPTS)

    @classmethod
    def from_json_file(cls, path: Path) -> "CoursePromptTable":
        """Load a table from a JSON object of ``{course_id: instructions}``."""
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a JSON object")
        return cls(data)

    @classmethod
    def load(cls, path: Path | None) -> "CoursePromptTable":
        """Load from ``path`` when given, otherwise use the built-in table."""
        if path is None:
            return cls.default()
        table = cls.from_json_file(path)
        logger.info("Loaded course prompts", path=str(path), courses=len(table))
        return table
