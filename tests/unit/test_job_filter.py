from datetime import date

import pytest

from jobboard.models import AuthenticatedUser, Candidate, Job
from jobboard.services.job_filter import (
    applications_for_user,
    available_locations,
    filter_admin_candidates,
    filter_admin_jobs,
    filter_jobs,
    job_stats,
    split_terms
)


def make_job(job_id, **fields):
    fields.setdefault("status", "active")
    fields.setdefault("posted_at", date(2024, 1, 1))
    return Job(id=job_id, **fields)


def make_candidate(candidate_id, **fields):
    fields.setdefault("applied_at", date(2024, 1, 1))
    return Candidate(id=candidate_id, **fields)


@pytest.fixture()
def jobs():
    return [
        make_job("1", title="Backend Engineer", location="São Paulo", requirements="Node, SQL"),
        make_job("2", title="Frontend Engineer", location="Rio de Janeiro", requirements="React, CSS"),
        make_job("3", title="Data Analyst", location="Remoto", description="Backend data pipelines"),
        make_job("4", title="Backend Lead", location="São Paulo", status="inactive", requirements="Node"),
        make_job("5", title="Designer", location="Curitiba", status="draft"),
    ]


def ids(jobs):
    return [job.id for job in jobs]


def test_without_filters_only_active_jobs_are_listed(jobs):
    assert ids(filter_jobs(jobs)) == ["1", "2", "3"]


def test_search_matches_title_description_or_requirements(jobs):
    assert ids(filter_jobs(jobs, search_term="backend")) == ["1", "3"]
    assert ids(filter_jobs(jobs, search_term="  css ")) == ["2"]


def test_search_for_both_sides_of_the_stack(jobs):
    backend = ids(filter_jobs(jobs, search_term="backend"))
    frontend = ids(filter_jobs(jobs, search_term="frontend"))

    assert set(backend).isdisjoint(frontend)
    assert frontend == ["2"]


def test_selected_locations_require_exact_match(jobs):
    assert ids(filter_jobs(jobs, location_selections=["São Paulo"])) == ["1"]
    assert ids(filter_jobs(jobs, location_selections=["São Paulo", "Remoto"])) == ["1", "3"]
    assert filter_jobs(jobs, location_selections=["são paulo"]) == []


def test_location_query_is_ignored_when_locations_are_selected(jobs):
    result = filter_jobs(jobs, location_selections=["Remoto"], location_query="rio")

    assert ids(result) == ["3"]


def test_location_query_matches_substring(jobs):
    assert ids(filter_jobs(jobs, location_query="RIO")) == ["2"]


def test_requirements_match_any_comma_separated_term(jobs):
    assert ids(filter_jobs(jobs, requirements_query="react, node")) == ["1", "2"]
    assert ids(filter_jobs(jobs, requirements_query="sql")) == ["1"]


def test_requirements_filter_drops_jobs_without_requirements(jobs):
    assert "3" not in ids(filter_jobs(jobs, requirements_query="python"))


def test_blank_requirements_query_does_not_filter(jobs):
    assert ids(filter_jobs(jobs, requirements_query=" , ,")) == ["1", "2", "3"]


def test_inactive_jobs_never_match(jobs):
    result = filter_jobs(
        jobs,
        search_term="Lead",
        location_selections=["São Paulo"],
        requirements_query="node"
    )

    assert result == []


def test_filters_preserve_input_order(jobs):
    reversed_jobs = list(reversed(jobs))

    assert ids(filter_jobs(reversed_jobs, search_term="engineer")) == ["2", "1"]


def test_split_terms():
    assert split_terms(" react ,node,, ") == ["react", "node"]
    assert split_terms("") == []


def test_available_locations_lists_active_jobs_only(jobs):
    assert available_locations(jobs) == ["Remoto", "Rio de Janeiro", "São Paulo"]


def test_admin_job_filter(jobs):
    assert ids(filter_admin_jobs(jobs, "backend")) == ["1", "4"]
    assert ids(filter_admin_jobs(jobs, "backend", "inactive")) == ["4"]
    assert ids(filter_admin_jobs(jobs, status="draft")) == ["5"]


def test_admin_candidate_filter():
    candidates = [
        make_candidate("a", name="Ana", email="ana@example.com", job_title="Backend", company="Acme"),
        make_candidate("b", name="Bruno", email="bruno@corp.com", job_title="Design", status="interview"),
    ]

    assert [c.id for c in filter_admin_candidates(candidates, "acme")] == ["a"]
    assert [c.id for c in filter_admin_candidates(candidates, "CORP")] == ["b"]
    assert [c.id for c in filter_admin_candidates(candidates, status="interview")] == ["b"]
    assert [c.id for c in filter_admin_candidates(candidates)] == ["a", "b"]


def test_job_stats(jobs):
    jobs[0] = jobs[0].model_copy(update={"applications": 3})
    jobs[3] = jobs[3].model_copy(update={"applications": 2})

    assert job_stats(jobs) == {
        "total": 5,
        "active": 3,
        "inactive": 1,
        "draft": 1,
        "total_applications": 5,
    }


def test_applications_for_user_match_by_id_or_email():
    candidates = [
        make_candidate("a", candidate_user_id="user-1"),
        make_candidate("b", email="ana@example.com"),
        make_candidate("c", candidate_user_id="user-2", email="other@example.com"),
    ]
    user = AuthenticatedUser(id="user-1", email="ana@example.com")

    assert [c.id for c in applications_for_user(candidates, user)] == ["a", "b"]
