"""
End-to-end tests through the HTTP layer: envelopes, status codes,
authentication and authorization.
"""

import pytest

from constants import Authority, TokenHeaders
from models import User


def login(client, username, password):
    return client.post("/api/login", data={"username": username, "password": password})


class TestAuth:
    def test_login_returns_tokens_in_headers(self, client, admin):
        response = login(client, admin.username, "secret-pass")

        assert response.status_code == 200
        assert response.headers[TokenHeaders.AUTHORIZATION].startswith("Bearer ")
        assert response.headers[TokenHeaders.REFRESH_TOKEN]
        assert response.headers[TokenHeaders.AUTHORITIES] == "ADMIN"
        assert response.json()["success"] is True

    def test_login_token_grants_access(self, client, member):
        token = login(client, member.username, "secret-pass").headers[TokenHeaders.AUTHORIZATION]

        response = client.get("/api/users/me", headers={"Authorization": token})

        assert response.status_code == 200
        assert response.json()["data"]["username"] == member.username

    def test_wrong_password(self, client, member):
        response = login(client, member.username, "wrong")

        assert response.status_code == 401
        assert response.json()["success"] is False
        assert response.headers[TokenHeaders.ERROR] == "bad_credentials"

    def test_disabled_user_rejected(self, client, make_user):
        user = make_user("off@x.com", enabled=False)

        response = login(client, user.username, "secret-pass")

        assert response.status_code == 401
        assert response.headers[TokenHeaders.ERROR] == "user_disabled"

    def test_login_attempts_are_logged(self, client, db_session, member):
        from models import LoginLog

        login(client, member.username, "wrong")
        login(client, member.username, "secret-pass")

        db_session.expire_all()
        logs = db_session.query(LoginLog).order_by(LoginLog.id).all()
        assert [log.authenticated for log in logs] == [False, True]

    def test_refresh_token_exchange(self, client, member):
        refresh = login(client, member.username, "secret-pass").headers[TokenHeaders.REFRESH_TOKEN]

        response = client.post("/api/public/refreshToken", headers={"Authorization": f"Bearer {refresh}"})

        assert response.status_code == 200
        assert response.headers[TokenHeaders.AUTHORIZATION].startswith("Bearer ")

    def test_refresh_requires_bearer_header(self, client):
        response = client.post("/api/public/refreshToken")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_missing_token(self, client):
        response = client.get("/api/users/me")

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Authentication required", "data": {"error": "missing_token"}}

    def test_member_cannot_list_users(self, client, member, auth_headers):
        response = client.get("/api/users", headers=auth_headers(member))

        assert response.status_code == 403
        assert response.json()["data"] == {"required": ["ADMIN"]}


class TestUsers:
    def test_admin_registers_user(self, client, db_session, admin, auth_headers):
        response = client.post(
            "/api/users/save",
            json={"username": "New@X.com", "password": "pass1234", "names": "Ana"},
            headers=auth_headers(admin)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["username"] == "new@x.com"
        assert data["authorities"] == ["MEMBER"]
        assert data["user_register"] == admin.username
        assert "password" not in data

        stored = db_session.query(User).filter(User.username == "new@x.com").one()
        assert stored.password != "pass1234"

    def test_duplicate_username_conflict(self, client, admin, member, auth_headers):
        response = client.post(
            "/api/users/save",
            json={"username": member.username, "password": "pass1234"},
            headers=auth_headers(admin)
        )

        assert response.status_code == 409
        body = response.json()
        assert body["message"] == "username is already registered"
        assert body["data"] == {"field": "username", "value": member.username}

    def test_new_user_requires_password(self, client, admin, auth_headers):
        response = client.post("/api/users/save", json={"username": "nopass@x.com"}, headers=auth_headers(admin))

        assert response.status_code == 400
        assert response.json()["data"][0]["field"] == "password"

    def test_empty_body(self, client, admin, auth_headers):
        response = client.post("/api/users/save", content=b"", headers=auth_headers(admin))

        assert response.status_code == 400
        assert response.json()["message"].startswith("Conversion content failed")

    def test_non_utf8_body(self, client, admin, auth_headers):
        headers = {**auth_headers(admin), "Content-Type": "application/json"}
        response = client.post("/api/users/save", content=b'{"username": "\xff\xfe"}', headers=headers)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["data"][0]["field"] == "body"
        assert body["data"][0]["rejected_value"] is None

    def test_truncated_json_not_echoed(self, client, admin, auth_headers):
        headers = {**auth_headers(admin), "Content-Type": "application/json"}
        response = client.post(
            "/api/users/save",
            content=b'{"username": "ana@x.com", "password": "hunter22"',
            headers=headers
        )

        assert response.status_code == 400
        assert response.json()["data"][0]["rejected_value"] is None
        assert "hunter22" not in response.text

    def test_validation_violations_listed(self, client, admin, auth_headers):
        response = client.post(
            "/api/users/save",
            json={"username": "bad", "role": "PASTOR"},
            headers=auth_headers(admin)
        )

        assert response.status_code == 400
        assert {v["field"] for v in response.json()["data"]} == {"username", "role"}

    def test_update_keeps_password_unless_sent(self, client, db_session, admin, member, auth_headers):
        original_hash = member.password

        response = client.post(
            "/api/users/save",
            json={"id_user": member.id_user, "names": "Renamed"},
            headers=auth_headers(admin)
        )
        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.get(User, member.id_user).password == original_hash

        client.post(
            "/api/users/save",
            json={"id_user": member.id_user, "password": "changed-pass"},
            headers=auth_headers(admin)
        )
        assert login(client, member.username, "changed-pass").status_code == 200

    def test_update_unknown_user(self, client, admin, auth_headers):
        response = client.post("/api/users/save", json={"id_user": 999, "names": "X"}, headers=auth_headers(admin))

        assert response.status_code == 404
        assert response.json()["message"] == "'User' not found."

    def test_paged_filtered_list(self, client, admin, make_user, auth_headers):
        for i in range(3):
            make_user(f"leader{i}@x.com", Authority.INSTRUCTOR)
        make_user("plain@x.com")

        response = client.get(
            "/api/users",
            params={"authority": "INSTRUCTOR", "size": 2, "page": 0},
            headers=auth_headers(admin)
        )

        page = response.json()["data"]
        assert page["total_elements"] == 3
        assert page["total_pages"] == 2
        assert [u["username"] for u in page["content"]] == ["leader2@x.com", "leader1@x.com"]

    def test_toggle_enabled(self, client, admin, member, auth_headers):
        response = client.put(f"/api/users/{member.id_user}/toggle-enabled", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json()["data"]["enabled"] is False

    def test_cannot_disable_self(self, client, admin, auth_headers):
        response = client.put(f"/api/users/{admin.id_user}/toggle-enabled", headers=auth_headers(admin))

        assert response.status_code == 400


class TestGroups:
    def test_save_group_with_references(self, client, admin, instructor, make_category, auth_headers):
        category = make_category("Alpha")

        response = client.post(
            "/api/group/save",
            json={
                "name": "Youth",
                "day_of_week": "wednesday",
                "hour": "19:00",
                "category": {"id_category": category.id_category},
                "instructor_ids": [instructor.id_user],
            },
            headers=auth_headers(admin)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["category"]["name_category"] == "Alpha"
        assert data["day_of_week"] == "WEDNESDAY"
        assert [u["id_user"] for u in data["instructors"]] == [instructor.id_user]
        assert data["user_responsible"]["id_user"] == admin.id_user

    def test_save_group_unknown_instructor(self, client, admin, instructor, auth_headers):
        response = client.post(
            "/api/group/save",
            json={"name": "Youth", "day_of_week": "MONDAY", "instructor_ids": [instructor.id_user, 999]},
            headers=auth_headers(admin)
        )

        assert response.status_code == 404
        assert response.json()["data"] == {"type": "User", "id": 999}

    def test_new_group_requires_day(self, client, admin, auth_headers):
        response = client.post("/api/group/save", json={"name": "Youth"}, headers=auth_headers(admin))

        assert response.status_code == 400
        assert response.json()["data"][0]["field"] == "day_of_week"

    def test_assign_instructors_skips_non_instructors(
        self, client, admin, instructor, member, make_group, auth_headers
    ):
        group = make_group("Youth")

        response = client.put(
            f"/api/group/{group.id_group}/instructors",
            json={"instructor_ids": [instructor.id_user, member.id_user, instructor.id_user]},
            headers=auth_headers(admin)
        )

        assert response.status_code == 200
        assert [u["id_user"] for u in response.json()["data"]["instructors"]] == [instructor.id_user]

        mine = client.get("/api/group/findInstructorGroups", headers=auth_headers(instructor))
        assert [g["name"] for g in mine.json()["data"]] == ["Youth"]

    def test_find_by_category(self, client, member, make_category, make_group, auth_headers):
        category = make_category("Alpha")
        make_group("Youth", category=category)
        make_group("Adults")

        response = client.get("/api/group/findGroupByCategory/Alpha", headers=auth_headers(member))

        assert [g["name"] for g in response.json()["data"]] == ["Youth"]

    def test_join_once(self, client, member, make_group, auth_headers):
        group = make_group("Youth")

        first = client.post("/api/group/join", json={"id": group.id_group}, headers=auth_headers(member))
        second = client.post("/api/group/join", json={"id": group.id_group}, headers=auth_headers(member))

        assert first.status_code == 200
        assert first.json()["data"]["role"] == "MEMBER"
        assert second.status_code == 400

        members = client.get(f"/api/group/{group.id_group}/members", headers=auth_headers(member))
        assert [m["user"]["username"] for m in members.json()["data"]] == [member.username]

    def test_delete_group(self, client, admin, make_group, auth_headers):
        group = make_group("Youth")

        assert client.delete(f"/api/group/{group.id_group}", headers=auth_headers(admin)).status_code == 200
        assert client.delete(f"/api/group/{group.id_group}", headers=auth_headers(admin)).status_code == 404


class TestSpecialEvents:
    def test_save_with_pre_registered_members(self, client, admin, member, auth_headers):
        response = client.post(
            "/api/specialEvent/save",
            json={
                "name": "Retreat",
                "day_of_week": "SATURDAY",
                "number_of_slots": 2,
                "members": [{"user": {"id_user": member.id_user}}],
            },
            headers=auth_headers(admin)
        )

        assert response.status_code == 200
        assert response.json()["data"]["available_slots"] == 1

    def test_too_many_members_rejected(self, client, admin, member, instructor, auth_headers):
        response = client.post(
            "/api/specialEvent/save",
            json={
                "name": "Retreat",
                "day_of_week": "SATURDAY",
                "number_of_slots": 1,
                "members": [{"user": {"id_user": member.id_user}}, {"user": {"id_user": instructor.id_user}}],
            },
            headers=auth_headers(admin)
        )

        assert response.status_code == 400

    def test_join_respects_slot_limit(self, client, admin, member, instructor, auth_headers):
        saved = client.post(
            "/api/specialEvent/save",
            json={"name": "Retreat", "day_of_week": "SATURDAY", "number_of_slots": 1},
            headers=auth_headers(admin)
        )
        event_id = saved.json()["data"]["id_special_event"]

        first = client.post("/api/specialEvent/join", json={"id": event_id}, headers=auth_headers(member))
        second = client.post("/api/specialEvent/join", json={"id": event_id}, headers=auth_headers(instructor))

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json()["message"] == "There are no slots left for this event"

        public = client.get("/api/public/specialEvents")
        assert public.status_code == 200
        assert public.json()["data"] == []


class TestWorshipsAndCategories:
    def test_worship_save_join_and_members(self, client, admin, member, auth_headers):
        saved = client.post(
            "/api/worship/save",
            json={"name": "Sunday service", "day_of_week": "sunday", "hour": "10:00"},
            headers=auth_headers(admin)
        )
        worship_id = saved.json()["data"]["id_worship"]

        client.post("/api/worship/join", json={"id": worship_id}, headers=auth_headers(member))
        members = client.get(f"/api/worship/{worship_id}/members", headers=auth_headers(member))

        assert [m["user"]["id_user"] for m in members.json()["data"]] == [member.id_user]

    def test_duplicate_worship_name(self, client, admin, auth_headers):
        payload = {"name": "Sunday service", "day_of_week": "SUNDAY"}
        client.post("/api/worship/save", json=payload, headers=auth_headers(admin))

        response = client.post("/api/worship/save", json=payload, headers=auth_headers(admin))

        assert response.status_code == 409
        assert response.json()["message"] == "name is already registered"

    def test_categories(self, client, admin, member, auth_headers):
        created = client.post("/api/category", json={"name_category": "Alpha"}, headers=auth_headers(admin))
        listed = client.get("/api/category", headers=auth_headers(member))

        assert created.status_code == 200
        assert [c["name_category"] for c in listed.json()["data"]] == ["Alpha"]

    def test_member_cannot_create_category(self, client, member, auth_headers):
        response = client.post("/api/category", json={"name_category": "Alpha"}, headers=auth_headers(member))

        assert response.status_code == 403


def test_health(client):
    assert client.get("/api/health").json()["status"] == "ok"
