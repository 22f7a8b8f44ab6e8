"""
Processing engines: classification, eligibility and conflict handling.
"""

from .classifier import calculate_gpa, CourseClassifier
from .eligibility import EligibilityAnalyzer
from .conflicts import ConflictDetector, ConflictResolver, gpas_agree

__all__ = [
    "calculate_gpa",
    "CourseClassifier",
    "EligibilityAnalyzer",
    "ConflictDetector",
    "ConflictResolver",
    "gpas_agree",
]
