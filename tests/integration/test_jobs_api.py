"""Job board posting and applications."""

import pytest
from libs.auth.models import Role

from conftest import auth_headers_for, make_auth_user

JOBS_URL = "/api/v1/jobs"

APPLICATION = {
    "skills": ["python", "sql"],
    "experience": "Four years building APIs",
    "contact_name": "Ada Applicant",
    "contact_email": "ada@example.com",
    "contact_phone": "+1 555 0100",
    "message": "Keen to join",
}


async def _post_job(client, poster, **overrides):
    payload = {
        "title": "Data Engineer",
        "company": "Northwind",
        "location": "Lagos",
        "job_type": "full-time",
        "remote": True,
        "description": "Own the data platform",
    }
    payload.update(overrides)
    response = await client.post(JOBS_URL, json=payload, headers=auth_headers_for(poster))
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_post_and_search_jobs(client, alumni_user):
    await _post_job(client, alumni_user)
    await _post_job(client, alumni_user, title="Designer", description="Brand work")

    response = await client.get(
        JOBS_URL, params={"search": "data"}, headers=auth_headers_for(alumni_user)
    )

    assert response.status_code == 200
    assert [j["title"] for j in response.json()["data"]] == ["Data Engineer"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_apply_once(client, alumni_user, tenant_id):
    job = await _post_job(client, alumni_user)
    applicant = make_auth_user(Role.ALUMNI, tenant_id)
    url = f"{JOBS_URL}/{job['id']}/applications"

    response = await client.post(url, json=APPLICATION, headers=auth_headers_for(applicant))
    assert response.status_code == 201, response.text
    assert response.json()["data"]["status"] == "Applied"

    again = await client.post(url, json=APPLICATION, headers=auth_headers_for(applicant))
    assert again.status_code == 400
    assert again.json()["message"] == "You have already applied for this job"

    mine = await client.get(f"{JOBS_URL}/applications/me", headers=auth_headers_for(applicant))
    assert mine.json()["pagination"]["total"] == 1
    assert mine.json()["data"][0]["job"]["id"] == job["id"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cannot_apply_to_own_post(client, alumni_user):
    job = await _post_job(client, alumni_user)

    response = await client.post(
        f"{JOBS_URL}/{job['id']}/applications",
        json=APPLICATION,
        headers=auth_headers_for(alumni_user),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "You cannot apply to your own job post"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_application_requires_skills(client, alumni_user, tenant_id):
    job = await _post_job(client, alumni_user)
    applicant = make_auth_user(Role.ALUMNI, tenant_id)

    response = await client.post(
        f"{JOBS_URL}/{job['id']}/applications",
        json={**APPLICATION, "skills": []},
        headers=auth_headers_for(applicant),
    )

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_only_poster_reviews_applications(client, alumni_user, tenant_id):
    job = await _post_job(client, alumni_user)
    applicant = make_auth_user(Role.ALUMNI, tenant_id)
    response = await client.post(
        f"{JOBS_URL}/{job['id']}/applications",
        json=APPLICATION,
        headers=auth_headers_for(applicant),
    )
    application_id = response.json()["data"]["id"]

    forbidden = await client.get(
        f"{JOBS_URL}/{job['id']}/applications", headers=auth_headers_for(applicant)
    )
    assert forbidden.status_code == 403

    listing = await client.get(
        f"{JOBS_URL}/{job['id']}/applications", headers=auth_headers_for(alumni_user)
    )
    assert listing.json()["pagination"]["total"] == 1

    response = await client.patch(
        f"{JOBS_URL}/applications/{application_id}/status",
        json={"status": "Shortlisted", "review_notes": "Strong SQL"},
        headers=auth_headers_for(alumni_user),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "Shortlisted"
    assert data["reviewed_by"] == str(alumni_user.user_id)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_closed_job_rejects_applications(client, alumni_user, tenant_id):
    job = await _post_job(client, alumni_user)
    response = await client.post(
        f"{JOBS_URL}/{job['id']}/close", headers=auth_headers_for(alumni_user)
    )
    assert response.json()["data"]["status"] == "closed"

    applicant = make_auth_user(Role.ALUMNI, tenant_id)
    response = await client.post(
        f"{JOBS_URL}/{job['id']}/applications",
        json=APPLICATION,
        headers=auth_headers_for(applicant),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Job post is not available for applications"
