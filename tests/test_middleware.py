"""
Forge API - Middleware Tests
==============================

What:  Tests for Authorization header parsing, the access log and request IDs.
"""

import logging

import pytest

from forge_api.middleware.auth import extract_token
from forge_api.middleware.logging import level_for_status


class TestExtractToken:

    @pytest.mark.parametrize(
        "header, expected",
        [
            ("Bearer abc.def.ghi", "abc.def.ghi"),
            ("bearer abc.def.ghi", "abc.def.ghi"),
            ("abc.def.ghi", "abc.def.ghi"),
            ("  Bearer   abc.def.ghi  ", "abc.def.ghi"),
            ("", None),
            (None, None),
            ("   ", None),
        ],
    )
    def test_extract_token(self, header, expected):
        assert extract_token(header) == expected


class TestAccessLog:

    def test_level_for_status(self):
        assert level_for_status(200) == logging.INFO
        assert level_for_status(404) == logging.WARNING
        assert level_for_status(500) == logging.ERROR

    @pytest.mark.asyncio
    async def test_authorized_request_logs_subject_not_token(
        self, client, register_and_login, caplog
    ):
        token = await register_and_login("alice", "s3cret")
        note_id = (await client.post("/notes", json={"text": "one"})).json()["id"]

        with caplog.at_level(logging.INFO, logger="forge_api.access"):
            response = await client.put(
                f"/notes/{note_id}",
                json={"text": "two"},
                headers={"Authorization": f"Bearer {token}"},
            )

        assert response.status_code == 200
        access = [r for r in caplog.records if r.name == "forge_api.access"]
        assert any(r.getMessage().endswith("as alice") for r in access)
        assert all(token not in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_passwords_never_logged(self, client, caplog):
        with caplog.at_level(logging.DEBUG):
            await client.post("/register", json={"name": "alice", "password": "hunter2-secret"})
            await client.post("/login", json={"name": "alice", "password": "wrong-secret"})

        assert "hunter2-secret" not in caplog.text
        assert "wrong-secret" not in caplog.text

    @pytest.mark.asyncio
    async def test_health_is_not_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="forge_api.access"):
            await client.get("/health")

        assert not [r for r in caplog.records if r.name == "forge_api.access"]


class TestRequestId:

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed(self, client):
        response = await client.get("/notes", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, client):
        response = await client.get("/nope", headers={"X-Request-ID": "abc123"})
        assert response.json()["request_id"] == "abc123"
