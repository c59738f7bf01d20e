"""End-to-end tests for the comment and moderation endpoints."""

import pytest
from fastapi.testclient import TestClient

from discuss.config import Settings
from discuss.domain.service.reparent_service import PARENT_NOT_FOUND
from discuss.interface.api.app import create_app
from discuss.util.di.container import setup_di
from discuss.util.jwt import create_principal_token
from tests.di import build_test_container


@pytest.fixture
def client():
    """Create test client with test container."""
    app_instance = create_app()
    test_container = build_test_container()
    setup_di(app_instance, test_container)
    return TestClient(app_instance)


def _moderator_token() -> str:
    return create_principal_token("mod-1", Settings().auth, is_moderator=True)


def _post_comment(client: TestClient, page_id: str = "page-1", **fields):
    data = {"body": "Hello there", **fields}
    return client.post(f"/pages/{page_id}/comments", data=data)


def _approve(client: TestClient, comment_id: str):
    return client.post(
        f"/moderation/comments/{comment_id}/approve",
        cookies={"auth_token": _moderator_token()},
    )


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestSubmitAndRead:
    """Submission, moderation and thread reads."""

    def test_anonymous_comment_is_hidden_until_approved(self, client):
        # Submit
        response = _post_comment(client, author="Ada")
        assert response.status_code == 201
        created = response.json()
        assert created["status"] == "pending"
        assert "comment_tokens" in response.cookies

        # Hidden while pending
        thread = client.get("/pages/page-1/comments").json()
        assert thread == {"roots": [], "total_root_count": 0}

        # Approve
        approved = _approve(client, created["comment_id"])
        assert approved.status_code == 200
        assert approved.json()["outcome"] == "changed"

        # Visible and owned by the submitting browser
        thread = client.get("/pages/page-1/comments").json()
        assert thread["total_root_count"] == 1
        root = thread["roots"][0]
        assert root["comment_id"] == created["comment_id"]
        assert root["author"] == "Ada"
        assert root["depth"] == 0
        assert root["owned"] is True

    def test_replies_are_nested(self, client):
        root_id = _post_comment(client).json()["comment_id"]
        _approve(client, root_id)

        reply = _post_comment(client, body="Reply", parent_id=root_id)
        assert reply.status_code == 201
        _approve(client, reply.json()["comment_id"])

        thread = client.get("/pages/page-1/comments").json()
        children = thread["roots"][0]["children"]
        assert [c["comment_id"] for c in children] == [reply.json()["comment_id"]]
        assert children[0]["depth"] == 1
        assert children[0]["parent_id"] == root_id

    def test_root_pagination(self, client):
        ids = []
        for body in ("one", "two", "three"):
            comment_id = _post_comment(client, body=body).json()["comment_id"]
            _approve(client, comment_id)
            ids.append(comment_id)

        thread = client.get(
            "/pages/page-1/comments", params={"limit": 1, "offset": 1}
        ).json()

        assert [r["comment_id"] for r in thread["roots"]] == [ids[1]]
        assert thread["total_root_count"] == 3

    def test_validation_errors_are_returned_together(self, client):
        response = _post_comment(
            client, body="   ", website="http://spam.example", parent_id="ghost"
        )

        assert response.status_code == 422
        errors = response.json()["errors"]
        assert len(errors) == 3

    def test_spoofed_forwarded_header_does_not_break_submission(self, client):
        response = client.post(
            "/pages/page-1/comments",
            data={"body": "Hello there"},
            headers={"X-Forwarded-For": "x" * 300},
        )

        assert response.status_code == 201

    def test_attachments_are_accepted_and_served_paths_returned(self, client):
        response = client.post(
            "/pages/page-1/comments",
            data={"body": "With a picture"},
            files=[("attachments", ("photo.png", b"\x89PNG", "image/png"))],
        )

        assert response.status_code == 201
        attachments = response.json()["attachments"]
        assert len(attachments) == 1
        assert attachments[0]["original_name"] == "photo.png"
        assert attachments[0]["is_image"] is True
        assert attachments[0]["url"].startswith("/public/uploads/comments/")

    def test_disallowed_attachment_type_is_rejected(self, client):
        response = client.post(
            "/pages/page-1/comments",
            data={"body": "Run this"},
            files=[("attachments", ("run.exe", b"MZ", "application/x-msdownload"))],
        )

        assert response.status_code == 422
        assert response.json()["errors"] == [
            "This file type is not allowed for comments."
        ]


class TestEditAndDelete:
    """Owner and stranger mutations."""

    def test_owner_can_edit_and_edit_requires_moderation_again(self, client):
        comment_id = _post_comment(client).json()["comment_id"]
        _approve(client, comment_id)

        response = client.patch(f"/comments/{comment_id}", json={"body": "Edited"})

        assert response.status_code == 200
        assert response.json()["body"] == "Edited"
        assert response.json()["status"] == "pending"
        thread = client.get("/pages/page-1/comments").json()
        assert thread["roots"] == []

    def test_stranger_cannot_edit_or_delete(self, client):
        comment_id = _post_comment(client).json()["comment_id"]
        client.cookies.clear()

        edit = client.patch(f"/comments/{comment_id}", json={"body": "Mine now"})
        delete = client.delete(f"/comments/{comment_id}")

        assert edit.status_code == 403
        assert delete.status_code == 403

    def test_edit_missing_comment(self, client):
        response = client.patch(
            "/comments/ghost",
            json={"body": "x"},
            cookies={"auth_token": _moderator_token()},
        )

        assert response.status_code == 404

    def test_edit_reports_body_and_parent_problems_together(self, client):
        comment_id = _post_comment(client).json()["comment_id"]

        response = client.patch(
            f"/comments/{comment_id}",
            json={"body": "x" * 20001, "parent_id": "does-not-exist"},
            cookies={"auth_token": _moderator_token()},
        )

        assert response.status_code == 422
        assert response.json() == {
            "errors": [
                "The message is too long (2000 characters max).",
                PARENT_NOT_FOUND,
            ]
        }

    def test_owner_delete_then_repeat(self, client):
        comment_id = _post_comment(client).json()["comment_id"]

        first = client.delete(f"/comments/{comment_id}")
        second = client.delete(f"/comments/{comment_id}")

        assert first.status_code == 200
        assert first.json() == {"outcome": "deleted"}
        assert second.json() == {"outcome": "not_found"}


class TestModeration:
    """Moderation endpoints."""

    def test_readers_cannot_moderate(self, client):
        comment_id = _post_comment(client).json()["comment_id"]

        response = client.post(f"/moderation/comments/{comment_id}/approve")

        assert response.status_code == 403

    def test_pending_queue_for_moderators(self, client):
        _post_comment(client, body="first")
        _post_comment(client, body="second")

        anonymous = client.get("/moderation/comments/pending")
        moderator = client.get(
            "/moderation/comments/pending",
            cookies={"auth_token": _moderator_token()},
        )

        assert anonymous.status_code == 403
        assert moderator.status_code == 200
        body = moderator.json()
        assert body["total"] == 2
        assert [c["body"] for c in body["comments"]] == ["first", "second"]

    def test_reversing_a_decision_conflicts(self, client):
        comment_id = _post_comment(client).json()["comment_id"]
        _approve(client, comment_id)

        response = client.post(
            f"/moderation/comments/{comment_id}/reject",
            cookies={"auth_token": _moderator_token()},
        )

        assert response.status_code == 409
        assert response.json()["status"] == "approved"

    def test_unknown_decision_is_rejected(self, client):
        response = client.post(
            "/moderation/comments/anything/delete",
            cookies={"auth_token": _moderator_token()},
        )

        assert response.status_code == 422
