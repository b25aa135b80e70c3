"""
Rule-based first-pass screening of job applications.

Screening never rejects anything by itself; it records issues and
recommendations for a reviewer. An application passes when no issue is found.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.models.job_posting import ExperienceLevel

logger = logging.getLogger(__name__)


@dataclass
class ScreeningResult:
    application_id: Any
    passed: bool
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


def certification_key(name: str) -> str:
    """Form-response key for a certification: lowercased, whitespace runs to '_'."""
    return re.sub(r"\s+", "_", name.lower())


def _parse_birth_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            return None
    return None


def calculate_age(birth_date: date, today: date) -> int:
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def red_flags(responses: Dict[str, Any]) -> List[str]:
    flags = []

    employers = responses.get("previous_employers")
    if employers and isinstance(employers, str) and len(employers.split("\n")) < 2:
        flags.append("Limited work history")

    if responses.get("criminal_background") == "yes":
        flags.append("Criminal background disclosed")

    if responses.get("drug_test_result") == "positive":
        flags.append("Failed drug test")

    return flags


def screen_application(application, job_posting=None, today: Optional[date] = None) -> ScreeningResult:
    """
    Screen one application against its posting.

    Args:
        application: JobApplication (or anything with the same attributes)
        job_posting: The posting applied to; posting-specific rules are
            skipped when None
        today: Reference date for the age check (defaults to date.today())

    Returns:
        ScreeningResult with issues in rule order
    """
    today = today or date.today()
    issues: List[str] = []
    recommendations: List[str] = []

    if not application.resume_url:
        issues.append("Missing resume")
        recommendations.append("Request resume from applicant")

    if not application.cover_letter:
        issues.append("Missing cover letter")
        recommendations.append("Request cover letter from applicant")

    responses = application.form_responses or {}

    if job_posting is not None:
        certifications = job_posting.required_certifications or []
        missing = [c for c in certifications if not responses.get(certification_key(c))]
        if missing:
            issues.append(f"Missing certifications: {', '.join(missing)}")
            recommendations.append("Request missing certifications")

        if job_posting.age_requirement:
            birth_date = _parse_birth_date(responses.get("date_of_birth"))
            if birth_date is not None:
                age = calculate_age(birth_date, today)
                if age < job_posting.age_requirement:
                    issues.append(f"Age requirement not met ({age} < {job_posting.age_requirement})")
                    recommendations.append("Reject due to age requirement")

        experience = responses.get("experience_years")
        try:
            experience = float(experience) if experience else None
        except (TypeError, ValueError):
            experience = None
        if (
            experience
            and job_posting.experience_level == ExperienceLevel.SENIOR
            and experience < settings.SENIOR_MIN_EXPERIENCE_YEARS
        ):
            issues.append("Insufficient experience for senior position")
            recommendations.append("Consider for mid-level position instead")

    issues.extend(red_flags(responses))

    return ScreeningResult(
        application_id=application.id,
        passed=not issues,
        issues=issues,
        recommendations=recommendations,
    )
