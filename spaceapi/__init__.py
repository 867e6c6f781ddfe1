"""Space 远程文件存储 Python 客户端：通过 HTTP 列出、读取、写入、删除文件及其元数据。"""

from spaceapi.client import HttpSpacePrimitives
from spaceapi.encoding import decode_data_url, encode_data_url
from spaceapi.errors import (
    AuthenticationInvalid,
    DeleteFailed,
    NotFound,
    SpaceError,
    SpaceMismatch,
    Unsupported,
)
from spaceapi.models import (
    BinaryData,
    DataUrlData,
    FileContent,
    FileData,
    FileEncoding,
    FileMeta,
    Permission,
    TextData,
    response_to_meta,
)
from spaceapi.primitives import SpacePrimitives

__all__ = [
    "HttpSpacePrimitives",
    "SpacePrimitives",
    "FileMeta",
    "FileContent",
    "FileData",
    "FileEncoding",
    "Permission",
    "BinaryData",
    "TextData",
    "DataUrlData",
    "response_to_meta",
    "encode_data_url",
    "decode_data_url",
    "SpaceError",
    "AuthenticationInvalid",
    "NotFound",
    "DeleteFailed",
    "SpaceMismatch",
    "Unsupported",
]
