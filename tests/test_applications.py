"""
Tests for applying to events and the approve / reject flow.
"""

import pytest
from fastapi import HTTPException
from httpx import AsyncClient

from dancelink.schemas.application import ApplicationStatus
from dancelink.schemas.session import SessionContext
from dancelink.services.application_service import ApplicationService

from fakes import DANCER_ID, OTHER_ORGANIZER_ID, FakeNotifier


def _set_status(svc, ctx, status, **overrides):
    kwargs = dict(
        dancer_id=DANCER_ID,
        new_status=status,
        dancer_email="dana@example.com",
        dancer_name="Dana",
        event_name="Spring Gala",
    )
    kwargs.update(overrides)
    return svc.set_status(ctx, "app-1", **kwargs)


# ----------------------------
# 지원
# ----------------------------

@pytest.mark.asyncio
async def test_submit_application_creates_pending(store, notifier, dancer, event):
    svc = ApplicationService(store, notifier)

    application = await svc.submit_application(dancer, event.id)

    assert application.status == ApplicationStatus.pending
    assert application.dancer_id == DANCER_ID
    assert application.event_id == event.id


@pytest.mark.asyncio
async def test_submit_application_twice_is_rejected(store, notifier, dancer, event):
    """Second application to the same event returns 409 and leaves one row."""
    svc = ApplicationService(store, notifier)
    await svc.submit_application(dancer, event.id)

    with pytest.raises(HTTPException) as exc:
        await svc.submit_application(dancer, event.id)

    assert exc.value.status_code == 409
    assert exc.value.detail["message"] == "already_applied"
    assert len(store.applications) == 1


@pytest.mark.asyncio
async def test_submit_application_unknown_event(store, notifier, dancer):
    svc = ApplicationService(store, notifier)

    with pytest.raises(HTTPException) as exc:
        await svc.submit_application(dancer, "missing-event")

    assert exc.value.status_code == 404
    assert "create_application" not in store.calls


# ----------------------------
# 승인 / 거절
# ----------------------------

@pytest.mark.asyncio
async def test_approve_sends_notification_payload(store, notifier, organizer, application):
    svc = ApplicationService(store, notifier)

    created_at = store.applications["app-1"]["created_at"]

    updated = await _set_status(svc, organizer, "approved")

    assert updated.status == ApplicationStatus.approved
    assert store.applications["app-1"]["status"] == "approved"
    assert notifier.sent == [
        {
            "dancerEmail": "dana@example.com",
            "dancerName": "Dana",
            "eventName": "Spring Gala",
            "status": "approved",
            "organizerName": "Olivia",
        }
    ]
    # 상태 커밋이 주최자 이름 조회보다 먼저
    assert store.calls.index("update_application") < store.calls.index("get_organizer")
    assert updated.updated_at is not None
    assert updated.updated_at > created_at


@pytest.mark.asyncio
async def test_reject_sends_rejected_status(store, notifier, organizer, application):
    svc = ApplicationService(store, notifier)

    updated = await _set_status(svc, organizer, "rejected")

    assert updated.status == ApplicationStatus.rejected
    assert notifier.sent[0]["status"] == "rejected"


@pytest.mark.asyncio
async def test_invalid_status_fails_before_store_access(store, notifier, organizer, application):
    svc = ApplicationService(store, notifier)

    with pytest.raises(HTTPException) as exc:
        await _set_status(svc, organizer, "archived")

    assert exc.value.status_code == 400
    assert exc.value.detail["message"] == "invalid_status"
    assert store.calls == []
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_decided_application_cannot_change_again(store, notifier, organizer, application):
    """approved / rejected are terminal."""
    svc = ApplicationService(store, notifier)
    await _set_status(svc, organizer, "approved")

    with pytest.raises(HTTPException) as exc:
        await _set_status(svc, organizer, "rejected")

    assert exc.value.status_code == 409
    assert exc.value.detail["message"] == "invalid_transition"
    assert store.applications["app-1"]["status"] == "approved"
    assert len(notifier.sent) == 1


@pytest.mark.asyncio
async def test_notification_failure_keeps_status(store, organizer, application):
    svc = ApplicationService(store, FakeNotifier(fail=True))

    updated = await _set_status(svc, organizer, "approved")

    assert updated.status == ApplicationStatus.approved
    assert store.applications["app-1"]["status"] == "approved"


@pytest.mark.asyncio
async def test_organizer_name_falls_back(store, notifier, organizer, application):
    store.organizers.clear()
    svc = ApplicationService(store, notifier)

    await _set_status(svc, organizer, "approved")

    assert notifier.sent[0]["organizerName"] == "Event Organizer"


@pytest.mark.asyncio
async def test_organizer_lookup_error_falls_back(store, notifier, organizer, application):
    store.fail_on.add("get_organizer")
    svc = ApplicationService(store, notifier)

    updated = await _set_status(svc, organizer, "approved")

    assert updated.status == ApplicationStatus.approved
    assert notifier.sent[0]["organizerName"] == "Event Organizer"


@pytest.mark.asyncio
async def test_only_event_owner_can_decide(store, notifier, application):
    other = SessionContext(user_id=OTHER_ORGANIZER_ID, role="organizer")
    svc = ApplicationService(store, notifier)

    with pytest.raises(HTTPException) as exc:
        await _set_status(svc, other, "approved")

    assert exc.value.status_code == 403
    assert store.applications["app-1"]["status"] == "pending"
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_dancer_mismatch(store, notifier, organizer, application):
    svc = ApplicationService(store, notifier)

    with pytest.raises(HTTPException) as exc:
        await _set_status(svc, organizer, "approved", dancer_id="someone-else")

    assert exc.value.status_code == 400
    assert exc.value.detail["message"] == "dancer_mismatch"


@pytest.mark.asyncio
async def test_decide_reads_application_and_event_once(store, notifier, organizer, application):
    svc = ApplicationService(store, notifier)

    updated = await svc.decide(organizer, "app-1", "rejected")

    assert updated.status == ApplicationStatus.rejected
    assert store.calls.count("get_application") == 1
    assert store.calls.count("get_event") == 1
    assert notifier.sent[0]["dancerName"] == "Dana"
    assert notifier.sent[0]["eventName"] == "Spring Gala"


@pytest.mark.asyncio
async def test_decide_rejects_bad_status_before_store_access(store, notifier, organizer, application):
    svc = ApplicationService(store, notifier)

    with pytest.raises(HTTPException) as exc:
        await svc.decide(organizer, "app-1", "pending")

    assert exc.value.status_code == 400
    assert store.calls == []


# ----------------------------
# HTTP
# ----------------------------

@pytest.mark.asyncio
async def test_apply_endpoint(client: AsyncClient, dancer_headers, event):
    response = await client.post(f"/api/events/{event.id}/applications", headers=dancer_headers)
    assert response.status_code == 201
    assert response.json()["status"] == "pending"

    again = await client.post(f"/api/events/{event.id}/applications", headers=dancer_headers)
    assert again.status_code == 409
    assert again.json()["detail"]["message"] == "already_applied"


@pytest.mark.asyncio
async def test_apply_requires_dancer_role(client: AsyncClient, organizer_headers, event):
    response = await client.post(f"/api/events/{event.id}/applications", headers=organizer_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_status_endpoint_approves(client: AsyncClient, organizer_headers, notifier, application):
    response = await client.patch(
        "/api/applications/app-1/status",
        json={"status": "approved"},
        headers=organizer_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    assert notifier.sent[0]["dancerEmail"] == "dana@example.com"
    assert notifier.sent[0]["eventName"] == "Spring Gala"


@pytest.mark.asyncio
async def test_status_endpoint_rejects_pending_target(client: AsyncClient, organizer_headers, application):
    response = await client.patch(
        "/api/applications/app-1/status",
        json={"status": "pending"},
        headers=organizer_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_status_endpoint_requires_organizer(client: AsyncClient, dancer_headers, application):
    response = await client.patch(
        "/api/applications/app-1/status",
        json={"status": "approved"},
        headers=dancer_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_my_applications_include_event_and_organizer(client: AsyncClient, dancer_headers, application):
    response = await client.get("/api/applications/mine", headers=dancer_headers)

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["event"]["name"] == "Spring Gala"
    assert data[0]["event"]["organizer"]["name"] == "Olivia"


@pytest.mark.asyncio
async def test_applicants_list_for_owner(client: AsyncClient, organizer_headers, event, application):
    response = await client.get(f"/api/events/{event.id}/applicants", headers=organizer_headers)

    assert response.status_code == 200
    data = response.json()
    assert data[0]["status"] == "pending"
    assert data[0]["dancer"]["name"] == "Dana"
    assert data[0]["dancer"]["email"] == "dana@example.com"
