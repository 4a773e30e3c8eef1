"""Builders shared across the test suites."""

import json

import aiosqlite
import httpx

from whispernotes.database.db import LocalStorage


def user_payload(**overrides) -> dict:
    payload = {
        "id": "user-42",
        "email": "chihiro@example.com",
        "name": "Chihiro",
        "avatar": None,
        "createdAt": "2026-01-02T03:04:05+00:00",
    }
    payload.update(overrides)
    return payload


def read_json(request: httpx.Request) -> dict:
    return json.loads(request.content.decode("utf-8"))


class FailingStorage(LocalStorage):
    """Storage whose writes fail once ``fail_writes`` is switched on."""

    def __init__(self, db_path: str):
        super().__init__(db_path)
        self.fail_writes = False

    async def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise aiosqlite.OperationalError("disk I/O error")
        await super().set_item(key, value)

    async def remove_item(self, key: str) -> bool:
        if self.fail_writes:
            raise aiosqlite.OperationalError("disk I/O error")
        return await super().remove_item(key)
