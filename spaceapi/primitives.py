"""
Space 存储能力接口。HTTP、本地磁盘、内存测试替身等各自独立实现，不共享基类状态。
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from spaceapi.encoding import RawData
from spaceapi.models import FileContent, FileData, FileEncoding, FileMeta


@runtime_checkable
class SpacePrimitives(Protocol):
    async def fetch_file_list(self) -> list[FileMeta]: ...

    async def read_file(self, name: str, encoding: FileEncoding) -> FileContent: ...

    async def write_file(
        self,
        name: str,
        encoding: FileEncoding,
        data: FileData | RawData,
        self_update: bool = False,
        last_modified: Optional[int] = None,
    ) -> FileMeta: ...

    async def delete_file(self, name: str) -> None: ...

    async def get_file_meta(self, name: str) -> FileMeta: ...

    async def proxy_syscall(self, *args: Any, **kwargs: Any) -> Any: ...

    async def invoke_function(self, *args: Any, **kwargs: Any) -> Any: ...
