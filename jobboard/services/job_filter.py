"""Derived views over the job and application lists.

All functions are pure: they take the current lists from the stores and
return filtered lists without reordering them.
"""

from typing import Dict, Iterable, List, Optional

from jobboard.models import AuthenticatedUser, Candidate, Job, JobStatus

ALL_STATUSES = "all"


def _contains(text: str, term: str) -> bool:
    return term.lower() in (text or "").lower()


def split_terms(query: str) -> List[str]:
    """Split a comma-separated query into trimmed, non-empty terms."""
    return [term.strip() for term in (query or "").split(",") if term.strip()]


def filter_jobs(
    jobs: Iterable[Job],
    search_term: str = "",
    location_selections: Optional[Iterable[str]] = None,
    location_query: str = "",
    requirements_query: str = ""
) -> List[Job]:
    """Filter jobs for the public listing.

    Stages are applied in order, each on the output of the previous one:

    1. Only active jobs.
    2. `search_term` (trimmed) found in title, description or requirements.
    3. Location: when `location_selections` is non-empty, the location
       must equal one of them; otherwise, when `location_query` is given,
       the location must contain it.
    4. `requirements_query` split on commas: the job must have
       requirements containing at least one of the terms.

    All text matching is case-insensitive substring matching.

    Args:
        jobs: Jobs in display order.
        search_term: Free-text search.
        location_selections: Locations picked in the multi-select.
        location_query: Free-text location search.
        requirements_query: Comma-separated requirement keywords.

    Returns:
        Matching jobs in their original order.
    """
    filtered = [job for job in jobs if job.status == JobStatus.ACTIVE.value]

    term = (search_term or "").strip()
    if term:
        filtered = [
            job for job in filtered
            if _contains(job.title, term)
            or _contains(job.description, term)
            or _contains(job.requirements, term)
        ]

    selections = set(location_selections or [])
    location_text = (location_query or "").strip()
    if selections:
        filtered = [job for job in filtered if job.location in selections]
    elif location_text:
        filtered = [job for job in filtered if _contains(job.location, location_text)]

    requirement_terms = split_terms(requirements_query)
    if requirement_terms:
        filtered = [
            job for job in filtered
            if job.requirements
            and any(_contains(job.requirements, requirement) for requirement in requirement_terms)
        ]

    return filtered


def available_locations(jobs: Iterable[Job]) -> List[str]:
    """Distinct non-empty locations of active jobs, sorted, for the location multi-select."""
    return sorted({
        job.location for job in jobs
        if job.status == JobStatus.ACTIVE.value and job.location
    })


def filter_admin_jobs(
    jobs: Iterable[Job],
    search_term: str = "",
    status: str = ALL_STATUSES
) -> List[Job]:
    """Admin job table filter: title contains `search_term`, status matches or is "all"."""
    return [
        job for job in jobs
        if _contains(job.title, search_term or "")
        and (status == ALL_STATUSES or job.status == status)
    ]


def filter_admin_candidates(
    candidates: Iterable[Candidate],
    search_term: str = "",
    status: str = ALL_STATUSES
) -> List[Candidate]:
    """Admin application table filter.

    `search_term` is matched against name, email, job title and company.
    """
    term = search_term or ""
    return [
        candidate for candidate in candidates
        if (
            _contains(candidate.name, term)
            or _contains(candidate.email, term)
            or _contains(candidate.job_title, term)
            or _contains(candidate.company, term)
        )
        and (status == ALL_STATUSES or candidate.status == status)
    ]


def job_stats(jobs: Iterable[Job]) -> Dict[str, int]:
    """Dashboard counters: jobs per status and total applications."""
    jobs = list(jobs)
    return {
        "total": len(jobs),
        "active": sum(1 for job in jobs if job.status == JobStatus.ACTIVE.value),
        "inactive": sum(1 for job in jobs if job.status == JobStatus.INACTIVE.value),
        "draft": sum(1 for job in jobs if job.status == JobStatus.DRAFT.value),
        "total_applications": sum(job.applications for job in jobs),
    }


def applications_for_user(candidates: Iterable[Candidate], user: AuthenticatedUser) -> List[Candidate]:
    """Applications made by a user, matched by user id or by email."""
    return [
        candidate for candidate in candidates
        if candidate.candidate_user_id == user.id
        or (user.email and candidate.email == user.email)
    ]
