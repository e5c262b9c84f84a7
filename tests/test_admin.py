import pytest

from app.errors import NotFound, PermissionDenied
from app.models.profile import UserRole
from app.services import admin as admin_service


async def test_non_admins_are_refused(db, alumnus):
    with pytest.raises(PermissionDenied):
        await admin_service.list_profiles(db, alumnus.caller)
    with pytest.raises(PermissionDenied):
        await admin_service.set_verification(db, alumnus.caller, alumnus.profile.id, True)


async def test_role_change_is_logged(db, admin, alumnus):
    meta = admin_service.RequestMeta(ip_address="10.0.0.1", user_agent="pytest")
    profile = await admin_service.set_role(
        db, admin.caller, alumnus.profile.id, UserRole.VERIFIED_ALUMNI, meta
    )
    assert profile.role == UserRole.VERIFIED_ALUMNI

    entries = await admin_service.list_activity(db, admin.caller)
    assert len(entries) == 1
    entry = entries[0]
    assert entry.action == "update_role"
    assert entry.admin_id == admin.id
    assert entry.user_id == alumnus.id
    assert entry.details == {"profile_id": alumnus.profile.id, "from": "alumni", "to": "verified_alumni"}
    assert entry.ip_address == "10.0.0.1"


async def test_list_profiles_filters_and_summary(db, admin, make_member):
    await make_member(full_name="Kiran Verified", verified=True, company="Siemens")
    await make_member(full_name="Meera Pending")

    page = await admin_service.list_profiles(db, admin.caller, verification="unverified")
    assert [p.full_name for p in page.profiles] == ["Meera Pending"]
    assert page.summary.total == 3
    assert page.summary.verified == 2

    page = await admin_service.list_profiles(db, admin.caller, search="siemens")
    assert [p.full_name for p in page.profiles] == ["Kiran Verified"]


async def test_delete_profile(db, admin, alumnus):
    await admin_service.delete_profile(db, admin.caller, alumnus.profile.id)
    with pytest.raises(NotFound):
        await admin_service.delete_profile(db, admin.caller, alumnus.profile.id)

    actions = [e.action for e in await admin_service.list_activity(db, admin.caller)]
    assert actions == ["delete_profile"]


async def test_export_csv(db, admin):
    csv_text = await admin_service.export_profiles(db, admin.caller)
    header, row = csv_text.splitlines()[:2]
    assert header.startswith('"Full Name","Email"')
    assert f'"{admin.profile.full_name}"' in row


async def test_admin_endpoints(client, admin, alumnus):
    response = await client.patch(
        f"/admin/profiles/{alumnus.profile.id}/verification",
        json={"verified": True},
        headers=admin.headers,
    )
    assert response.status_code == 200
    assert response.json()["verified"] is True

    response = await client.get("/admin/profiles", headers=alumnus.headers)
    assert response.status_code == 403

    response = await client.get("/admin/profiles/export", headers=admin.headers)
    assert response.status_code == 200
    assert "attachment" in response.headers["content-disposition"]

    response = await client.get("/admin/activity", headers=admin.headers)
    assert [e["action"] for e in response.json()] == ["verify_profile"]
