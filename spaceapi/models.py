"""
Space 数据模型：文件元数据 FileMeta、三种内容表示 FileData 及编码选择 FileEncoding。

元数据只来自 HTTP 响应头（读/写/stat）或列表 JSON，不会从请求体构造。
响应头约定：
- X-Content-Length: 文件大小（字节）
- Content-Type: 内容类型
- X-Last-Modified: 修改时间（epoch 毫秒）
- X-Permission: rw | ro
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Mapping, Union

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class FileEncoding(str, Enum):
    """读写时选择的内容表示，仅影响单次调用的内存转换。"""

    BINARY = "binary"
    TEXT = "text"
    DATAURL = "dataurl"

    @classmethod
    def _missing_(cls, value: object) -> FileEncoding | None:
        # 兼容旧名称：arraybuffer / utf8
        aliases = {"arraybuffer": cls.BINARY, "utf8": cls.TEXT, "utf-8": cls.TEXT}
        if isinstance(value, str):
            return aliases.get(value.lower())
        return None


class Permission(str, Enum):
    READ_WRITE = "rw"
    READ_ONLY = "ro"


@dataclass(frozen=True)
class BinaryData:
    value: bytes
    encoding: ClassVar[FileEncoding] = FileEncoding.BINARY


@dataclass(frozen=True)
class TextData:
    value: str
    encoding: ClassVar[FileEncoding] = FileEncoding.TEXT


@dataclass(frozen=True)
class DataUrlData:
    """data:<mime>;base64,<payload> 形式的自描述字符串。"""

    value: str
    encoding: ClassVar[FileEncoding] = FileEncoding.DATAURL


FileData = Union[BinaryData, TextData, DataUrlData]


def _to_int(value: Any) -> int:
    """宽松转 int；缺失或无法解析时为 0。"""
    if value is None or value == "":
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        # inf / nan / 1e400 等
        return 0


def _to_size(value: Any) -> int:
    return max(0, _to_int(value))


def _to_perm(value: Any) -> Permission:
    return Permission.READ_ONLY if value == Permission.READ_ONLY.value else Permission.READ_WRITE


@dataclass(frozen=True)
class FileMeta:
    name: str
    size: int = 0
    content_type: str = DEFAULT_CONTENT_TYPE
    last_modified: int = 0
    perm: Permission = Permission.READ_WRITE

    @classmethod
    def from_dict(cls, entry: Mapping[str, Any]) -> FileMeta:
        """列表 JSON 中的一项（name/size/contentType/lastModified/perm）转为 FileMeta。"""
        return cls(
            name=str(entry.get("name", "")),
            size=_to_size(entry.get("size")),
            content_type=entry.get("contentType") or DEFAULT_CONTENT_TYPE,
            last_modified=_to_int(entry.get("lastModified")),
            perm=_to_perm(entry.get("perm")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "contentType": self.content_type,
            "lastModified": self.last_modified,
            "perm": self.perm.value,
        }


@dataclass(frozen=True)
class FileContent:
    """read_file 的返回值：内容 + 元数据。"""

    data: FileData
    meta: FileMeta


def response_to_meta(name: str, headers: Mapping[str, str]) -> FileMeta:
    """
    由响应头推导 FileMeta。总是成功：头缺失或格式错误时取默认值。

    :param name: 文件名（请求时使用的名称，而非服务端返回）
    :param headers: 响应头；httpx.Headers 大小写不敏感，普通 dict 需用规范大小写
    """
    return FileMeta(
        name=name,
        size=_to_size(headers.get("X-Content-Length")),
        content_type=headers.get("Content-Type") or DEFAULT_CONTENT_TYPE,
        last_modified=_to_int(headers.get("X-Last-Modified")),
        perm=_to_perm(headers.get("X-Permission")),
    )
