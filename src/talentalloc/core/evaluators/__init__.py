"""Sub-scorers combined by the eligibility engine."""

from .education import EducationConfig, EducationEvaluator
from .experience import ExperienceConfig, ExperienceEvaluator
from .skills import SkillsConfig, SkillsEvaluator
from .baseline import CertificationsEvaluator, LocationEvaluator

__all__ = [
    "EducationConfig",
    "EducationEvaluator",
    "ExperienceConfig",
    "ExperienceEvaluator",
    "SkillsConfig",
    "SkillsEvaluator",
    "CertificationsEvaluator",
    "LocationEvaluator",
]
