"""
pytest 配置与共享 fixture。

单元测试连到 tests.fake_server.FakeSpaceServer（httpx.MockTransport），无需真实网络。
"""

from __future__ import annotations

from typing import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from spaceapi import HttpSpacePrimitives

from tests.config import SPACE_BASE_URL, SPACE_PASSWORD, SPACE_USERNAME
from tests.fake_server import FakeSpaceServer


@pytest.fixture
def server() -> FakeSpaceServer:
    return FakeSpaceServer()


@pytest.fixture
def resets() -> list[str]:
    """记录 on_reset 被调用的次数。"""
    return []


@pytest_asyncio.fixture
async def space(server: FakeSpaceServer, resets: list[str]) -> AsyncIterator[HttpSpacePrimitives]:
    """使用测试账号、连到假服务器的客户端。"""
    async with HttpSpacePrimitives(
        SPACE_BASE_URL,
        username=SPACE_USERNAME,
        password=SPACE_PASSWORD,
        on_reset=lambda: resets.append("reset"),
        transport=httpx.MockTransport(server.handle),
    ) as client:
        yield client
