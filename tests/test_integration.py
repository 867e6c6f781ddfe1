"""
对真实 Space 服务器的集成测试。地址与账号见 tests.config（可用环境变量覆盖）；服务器不可达时跳过。
"""

from __future__ import annotations

import time
from typing import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from spaceapi import FileEncoding, HttpSpacePrimitives, NotFound

from tests.config import SPACE_INTEGRATION_PASSWORD, SPACE_INTEGRATION_URL, SPACE_INTEGRATION_USERNAME


@pytest_asyncio.fixture
async def live_space() -> AsyncIterator[HttpSpacePrimitives]:
    async with HttpSpacePrimitives(
        SPACE_INTEGRATION_URL,
        username=SPACE_INTEGRATION_USERNAME,
        password=SPACE_INTEGRATION_PASSWORD,
        timeout=10.0,
    ) as space:
        try:
            await space.fetch_file_list()
        except httpx.HTTPError as e:
            pytest.skip(f"Space 测试服务器不可用 ({SPACE_INTEGRATION_URL}): {e}")
        yield space


@pytest.mark.integration
@pytest.mark.asyncio
async def test_write_read_stat_delete(live_space: HttpSpacePrimitives) -> None:
    name = f"_spaceapi_test/{int(time.time() * 1000)}.md"
    written = await live_space.write_file(name, FileEncoding.TEXT, "hello", last_modified=1_600_000_000_000)
    try:
        content = await live_space.read_file(name, FileEncoding.TEXT)
        assert content.data.value == "hello"
        assert content.meta.size == written.size == 5
        assert await live_space.get_file_meta(name) == content.meta
        assert name in [f.name for f in await live_space.fetch_file_list()]
    finally:
        await live_space.delete_file(name)
    with pytest.raises(NotFound):
        await live_space.get_file_meta(name)
