"""Tests for the note endpoints."""

from fastapi import status


async def create_tag(client, name="python") -> int:
    return (await client.post("/tags", json={"Name": name})).json()


class TestNoteEndpoints:
    async def test_requires_token(self, client):
        response = await client.post("/notes", json={"Text": "x", "Topic": "y"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_author_is_the_caller(self, auth_client):
        client, me = auth_client
        tag_id = await create_tag(client)

        response = await client.post("/notes", json={"Text": "async with", "Topic": "asyncio", "TagId": tag_id})
        assert response.status_code == status.HTTP_201_CREATED
        note_id = response.json()

        response = await client.get(f"/notes/{note_id}")
        assert response.json() == {
            "Id": note_id,
            "Text": "async with",
            "Topic": "asyncio",
            "TagId": tag_id,
            "UserId": me.id,
            "State": "new",
        }

    async def test_body_cannot_choose_author(self, auth_client, make_user):
        client, me = auth_client
        other = await make_user()

        note_id = (await client.post("/notes", json={"Text": "t", "Topic": "x", "UserId": other.id})).json()

        response = await client.get(f"/notes/{note_id}")
        assert response.json()["UserId"] == me.id

    async def test_unknown_tag(self, auth_client):
        client, _ = auth_client

        response = await client.post("/notes", json={"Text": "t", "Topic": "x", "TagId": 404})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"detail": "Tag not found"}

    async def test_filter_by_tag(self, auth_client):
        client, _ = auth_client
        python = await create_tag(client, "python")
        sql = await create_tag(client, "sql")
        await client.post("/notes", json={"Text": "a", "Topic": "x", "TagId": python})
        await client.post("/notes", json={"Text": "b", "Topic": "x", "TagId": sql})
        await client.post("/notes", json={"Text": "c", "Topic": "x"})

        response = await client.get("/notes", params={"tag_id": sql})

        assert [n["Text"] for n in response.json()] == ["b"]

    async def test_update_and_delete(self, auth_client):
        client, _ = auth_client
        note_id = (await client.post("/notes", json={"Text": "draft", "Topic": "x"})).json()

        response = await client.put(f"/notes/{note_id}", json={"Text": "final", "State": "blocked"})
        assert response.json()["Text"] == "final"
        assert response.json()["State"] == "blocked"

        response = await client.delete(f"/notes/{note_id}")
        assert response.json() == "Done"

        response = await client.get(f"/notes/{note_id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND
