"""HTTP API tests."""

import pytest

from cardshow_authz.config.settings import settings

pytestmark = pytest.mark.asyncio

API = settings.API_PREFIX


async def test_health(async_client):
    response = await async_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestAuthorizeEndpoint:
    async def test_anonymous_public_read(self, async_client, world):
        response = await async_client.post(
            f"{API}/authorize",
            json={"entity_type": "show", "operation": "select", "entity_id": world.show.id},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["decision"] == "allow"
        assert body["allowed"] is True

    async def test_anonymous_private_read(self, async_client, world):
        response = await async_client.post(
            f"{API}/authorize",
            json={"entity_type": "review", "operation": "select", "entity_id": world.row("review").id},
        )

        body = response.json()
        assert body["decision"] == "unauthenticated"
        assert body["message"] == "must sign in"

    async def test_deny_names_no_predicate(self, async_client, world, auth_headers):
        response = await async_client.post(
            f"{API}/authorize",
            json={"entity_type": "want_list", "operation": "select", "entity_id": world.row("want_list").id},
            headers=auth_headers(world.users["outsider"]),
        )

        body = response.json()
        assert body["decision"] == "deny"
        assert body["message"] == "not permitted"
        assert "reason" not in body

    async def test_shared_want_list_visible_to_dealer_at_show(self, async_client, world, auth_headers):
        response = await async_client.post(
            f"{API}/authorize",
            json={"entity_type": "want_list", "operation": "select", "entity_id": world.row("want_list").id},
            headers=auth_headers(world.users["mvp_dealer"]),
        )
        assert response.json()["allowed"] is True

    async def test_insert_with_proposed_values(self, async_client, world, auth_headers):
        attendee_id = world.users["attendee"]
        response = await async_client.post(
            f"{API}/authorize",
            json={
                "entity_type": "favorite",
                "operation": "insert",
                "resource": {"show_id": world.show.id, "user_id": attendee_id},
            },
            headers=auth_headers(attendee_id),
        )
        assert response.json()["allowed"] is True

    async def test_unknown_entity_type(self, async_client):
        response = await async_client.post(f"{API}/authorize", json={"entity_type": "user", "operation": "select"})
        assert response.status_code == 422

    async def test_denies_are_audited(self, async_client, world, auth_headers, audit, audit_sink):
        await async_client.post(
            f"{API}/authorize",
            json={"entity_type": "message", "operation": "select", "entity_id": world.row("message").id},
            headers=auth_headers(world.users["outsider"]),
        )
        await audit.flush()

        (event,) = audit_sink.events
        assert event.decision.value == "deny"
        assert event.principal_id == world.users["outsider"]


class TestPrincipalEndpoint:
    async def test_me(self, async_client, world, auth_headers):
        response = await async_client.get(f"{API}/principal/me", headers=auth_headers(world.users["outsider"]))

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == world.users["outsider"]
        assert body["role"] == "mvp_dealer"

    async def test_service_token(self, async_client, auth_headers):
        response = await async_client.get(f"{API}/principal/me", headers=auth_headers("platform", role="service_role"))
        assert response.json()["is_service"] is True

    async def test_missing_token(self, async_client):
        response = await async_client.get(f"{API}/principal/me")

        assert response.status_code == 401
        assert response.json()["message"] == "must sign in"
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_expired_token(self, async_client, world, auth_headers):
        response = await async_client.get(
            f"{API}/principal/me", headers=auth_headers(world.users["attendee"], expires_in=-60)
        )
        assert response.status_code == 401


class TestEntityEndpoints:
    async def test_get_allowed(self, async_client, world, auth_headers):
        response = await async_client.get(
            f"{API}/entities/want_list/{world.row('want_list').id}", headers=auth_headers(world.users["attendee"])
        )

        assert response.status_code == 200
        assert response.json()["data"]["content"] == "1986 Fleer Jordan"

    async def test_hidden_and_missing_rows_look_alike(self, async_client, world, auth_headers):
        headers = auth_headers(world.users["outsider"])

        hidden = await async_client.get(f"{API}/entities/want_list/{world.row('want_list').id}", headers=headers)
        missing = await async_client.get(f"{API}/entities/want_list/missing", headers=headers)

        assert hidden.status_code == missing.status_code == 403
        assert hidden.json() == missing.json() == {
            "success": False,
            "message": "not permitted",
            "error_code": "NOT_PERMITTED",
        }

    async def test_admin_sees_not_found(self, async_client, world, auth_headers):
        response = await async_client.get(
            f"{API}/entities/want_list/missing", headers=auth_headers(world.users["admin"])
        )
        assert response.status_code == 404

    async def test_anonymous_show_read(self, async_client, world):
        response = await async_client.get(f"{API}/entities/show/{world.show.id}")

        assert response.status_code == 200
        assert response.json()["data"]["dealers"] == [world.users["dealer"]]

    async def test_list_filters_invisible_rows(self, async_client, world, auth_headers):
        organizer = await async_client.get(
            f"{API}/entities/show_participation",
            params={"show_id": world.show.id},
            headers=auth_headers(world.users["organizer"]),
        )
        dealer = await async_client.get(
            f"{API}/entities/show_participation",
            params={"show_id": world.show.id},
            headers=auth_headers(world.users["dealer"]),
        )

        assert organizer.json()["count"] == 3
        assert dealer.json()["count"] == 1

    async def test_anonymous_list_of_private_entity(self, async_client, world):
        empty = await async_client.get(f"{API}/entities/message", params={"conversation_id": "no-such-conversation"})
        populated = await async_client.get(
            f"{API}/entities/message", params={"conversation_id": world.row("conversation").id}
        )

        assert empty.status_code == populated.status_code == 401
        assert empty.json() == populated.json()

    async def test_create_update_delete(self, async_client, world, auth_headers):
        attendee_id = world.users["attendee"]
        headers = auth_headers(attendee_id)

        created = await async_client.post(
            f"{API}/entities/want_list", json={"user_id": attendee_id, "content": "Topps Chrome"}, headers=headers
        )
        assert created.status_code == 201
        want_list_id = created.json()["data"]["id"]

        updated = await async_client.patch(
            f"{API}/entities/want_list/{want_list_id}", json={"content": "Topps Chrome refractors"}, headers=headers
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["content"] == "Topps Chrome refractors"

        handed_over = await async_client.patch(
            f"{API}/entities/want_list/{want_list_id}", json={"user_id": world.users["dealer"]}, headers=headers
        )
        assert handed_over.status_code == 403

        deleted = await async_client.delete(f"{API}/entities/want_list/{want_list_id}", headers=headers)
        assert deleted.status_code == 204

    async def test_create_requires_sign_in(self, async_client, world):
        response = await async_client.post(
            f"{API}/entities/favorite", json={"show_id": world.show.id, "user_id": world.users["attendee"]}
        )
        assert response.status_code == 401

    async def test_create_for_someone_else(self, async_client, world, auth_headers):
        response = await async_client.post(
            f"{API}/entities/favorite",
            json={"show_id": world.show.id, "user_id": world.users["dealer"]},
            headers=auth_headers(world.users["attendee"]),
        )
        assert response.status_code == 403

    async def test_unknown_field(self, async_client, world, auth_headers):
        attendee_id = world.users["attendee"]
        response = await async_client.patch(
            f"{API}/entities/want_list/{world.row('want_list').id}",
            json={"colour": "red"},
            headers=auth_headers(attendee_id),
        )
        assert response.status_code == 400
