"""Tests for comment and reply endpoints."""

import pytest


@pytest.fixture
async def forum_id(client, users, auth_headers) -> int:
    resp = await client.post(
        "/manageforum",
        json={"title": "Tethers", "description": "Neutral buoyancy tethers"},
        headers=auth_headers(users["alice"]),
    )
    return resp.json()["forumId"]


async def test_create_comment_returns_stored_comment(client, users, auth_headers, forum_id):
    resp = await client.post(
        "/view_forum",
        json={"c": "Fathom slim works well", "topic_id": forum_id},
        headers=auth_headers(users["bob"]),
    )

    assert resp.status_code == 200
    comment = resp.json()
    assert comment["comment"] == "Fathom slim works well"
    assert comment["topic_id"] == forum_id
    assert comment["user_id"] == users["bob"]
    assert comment["parent_comment"] is None


async def test_create_comment_requires_token(client, forum_id):
    resp = await client.post("/view_forum", json={"c": "anon", "topic_id": forum_id})

    assert resp.status_code == 401


async def test_list_comments_with_author_info(client, users, auth_headers, forum_id):
    await client.post(
        "/view_forum",
        json={"c": "first", "topic_id": forum_id},
        headers=auth_headers(users["alice"]),
    )
    await client.post(
        "/view_forum",
        json={"c": "second", "topic_id": forum_id},
        headers=auth_headers(users["bob"]),
    )
    await client.post(
        "/view_forum",
        json={"c": "third", "topic_id": forum_id},
        headers=auth_headers(777),
    )

    resp = await client.get(f"/forums/{forum_id}/comments")

    assert resp.status_code == 200
    comments = resp.json()
    assert [c["comment"] for c in comments] == ["first", "second", "third"]
    assert comments[0]["authorName"] == "Alice"
    assert comments[0]["authorAvatar"] == "/avatars/alice.png"
    # Known author without an avatar keeps it empty
    assert comments[1]["authorName"] == "Bob"
    assert comments[1]["authorAvatar"] is None
    # Unknown author gets the default
    assert comments[2]["authorName"] is None
    assert comments[2]["authorAvatar"] == "/default-avatar.png"


async def test_reply_is_distinguishable_from_top_level(client, users, auth_headers, forum_id):
    headers = auth_headers(users["bob"])
    parent = (
        await client.post(
            "/view_forum", json={"c": "question", "topic_id": forum_id}, headers=headers
        )
    ).json()

    resp = await client.post(
        "/reply",
        json={"comment": "answer", "topic_id": forum_id, "parent_comment": parent["id"]},
        headers=auth_headers(users["alice"]),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Reply added"

    comments = {c["id"]: c for c in (await client.get(f"/forums/{forum_id}/comments")).json()}
    assert comments[parent["id"]]["parent_comment"] is None
    assert comments[body["commentId"]]["parent_comment"] == parent["id"]
    assert comments[body["commentId"]]["comment"] == "answer"


async def test_reply_without_parent_is_top_level(client, users, auth_headers, forum_id):
    resp = await client.post(
        "/reply",
        json={"comment": "standalone", "topic_id": forum_id},
        headers=auth_headers(users["alice"]),
    )

    comments = (await client.get(f"/forums/{forum_id}/comments")).json()
    assert comments[0]["id"] == resp.json()["commentId"]
    assert comments[0]["parent_comment"] is None


async def test_update_comment_replaces_text_only(client, users, auth_headers, forum_id):
    created = (
        await client.post(
            "/view_forum",
            json={"c": "typo here", "topic_id": forum_id},
            headers=auth_headers(users["bob"]),
        )
    ).json()

    new_text = "  fixed: no typo here \n"
    resp = await client.put(f"/view_forum/{created['id']}", json={"comment": new_text})

    assert resp.status_code == 200
    assert resp.json() == {"message": "Comment updated"}
    [stored] = (await client.get(f"/forums/{forum_id}/comments")).json()
    assert stored["comment"] == new_text
    assert stored["topic_id"] == forum_id
    assert stored["user_id"] == users["bob"]


async def test_update_unknown_comment(client):
    resp = await client.put("/view_forum/9999", json={"comment": "x"})

    assert resp.status_code == 404
    assert resp.json() == {"error": "Comment not found"}


async def test_delete_comment(client, users, auth_headers, forum_id):
    headers = auth_headers(users["alice"])
    gone = (
        await client.post("/view_forum", json={"c": "gone", "topic_id": forum_id}, headers=headers)
    ).json()
    await client.post("/view_forum", json={"c": "kept", "topic_id": forum_id}, headers=headers)

    resp = await client.delete(f"/view_forum/{gone['id']}")

    assert resp.status_code == 200
    assert resp.json() == {"message": "Comment deleted"}
    comments = (await client.get(f"/forums/{forum_id}/comments")).json()
    assert [c["comment"] for c in comments] == ["kept"]
    assert (await client.get(f"/forums/{forum_id}")).json()["comments_count"] == 1
