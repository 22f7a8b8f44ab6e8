"""
Curriculum loading and caching.

This module loads department curriculum files (course catalog plus
graduation policy) so that audits don't re-read JSON for every transcript.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..config import CURRICULA_DIR
from ..models import CourseType, EligibilityConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Curriculum:
    """
    Everything the classifier and the eligibility analyzer need for one department.

    course_types: course code -> CourseType
    course_names: course code -> display name
    config: EligibilityConfig built from the file's policy block
    """
    name: str
    course_types: dict = field(default_factory=dict)
    course_names: dict = field(default_factory=dict)
    config: EligibilityConfig = field(default_factory=EligibilityConfig)


class DataLoader:
    """
    Loads and caches curriculum files.

    FILE FORMAT (data/curricula/<name>.json):
        {
            "name": "Computer Engineering",
            "courses": [
                {"code": "CENG111", "name": "Concepts in Computer Engineering", "type": "Mandatory"},
                {"code": "CENG411", "name": "Machine Learning", "type": "Technical Elective"}
            ],
            "policy": {
                "min_technical_electives": 6,
                "min_non_technical_electives": 3,
                "min_total_credits": 240,
                "min_gpa": 2.0
            }
        }

    When the policy omits "required_mandatory_course_codes", every Mandatory
    course of the catalog is required.

    Usage:
        loader = DataLoader()
        curriculum = loader.load_curriculum("computer_engineering")
        classifier = CourseClassifier(curriculum.course_types)
    """

    def __init__(self, curricula_dir: Path = None):
        self.curricula_dir = Path(curricula_dir) if curricula_dir else CURRICULA_DIR
        self._curricula_cache = {}  # Keyed by resolved file path

    def load_curriculum(self, name: str) -> Curriculum:
        """
        Load a curriculum by name from the curricula directory.

        Args:
            name: File stem (e.g., "computer_engineering")

        Raises:
            FileNotFoundError: if no such curriculum file exists
        """
        filepath = self.curricula_dir / f"{name}.json"
        if not filepath.exists():
            raise FileNotFoundError(f"No curriculum file found for: {name}")
        return self.load_curriculum_file(filepath)

    def load_curriculum_file(self, path) -> Curriculum:
        """Load a curriculum from an explicit path (cached)."""
        filepath = Path(path).resolve()
        if filepath not in self._curricula_cache:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._curricula_cache[filepath] = self.build_curriculum(data, default_name=filepath.stem)
            logger.debug("Loaded curriculum %s", filepath)
        return self._curricula_cache[filepath]

    def list_available_curricula(self) -> list:
        """Curriculum names available in the curricula directory."""
        return sorted(f.stem for f in self.curricula_dir.glob("*.json"))

    @staticmethod
    def build_curriculum(data: dict, default_name: str = "") -> Curriculum:
        """
        Build a Curriculum from an already-parsed mapping.

        Catalog entries with an unrecognized type are skipped with a warning;
        those courses then count as unclassified at audit time.
        """
        course_types = {}
        course_names = {}
        for entry in data.get("courses", []):
            code = entry.get("code", "").strip()
            if not code:
                continue
            course_names[code] = entry.get("name", code)
            course_type = CourseType.parse(entry.get("type"))
            if course_type is None:
                logger.warning("Curriculum course %s has unrecognized type %r", code, entry.get("type"))
                continue
            course_types[code] = course_type

        policy = dict(data.get("policy", {}))
        if "required_mandatory_course_codes" not in policy:
            policy["required_mandatory_course_codes"] = [
                code for code, course_type in course_types.items()
                if course_type is CourseType.MANDATORY
            ]

        return Curriculum(
            name=data.get("name", default_name),
            course_types=course_types,
            course_names=course_names,
            config=EligibilityConfig.from_dict(policy, course_names=course_names),
        )
