"""
内容编码桥：在响应体/请求体（bytes）与 FileData 三种表示之间转换。
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
from typing import Callable, Optional, Union
from urllib.parse import unquote_to_bytes

from spaceapi.models import (
    DEFAULT_CONTENT_TYPE,
    BinaryData,
    DataUrlData,
    FileData,
    FileEncoding,
    TextData,
)

MimeLookup = Callable[[str], Optional[str]]

# write_file 接受的原始内容类型；也可直接传 FileData
RawData = Union[bytes, bytearray, memoryview, str]


def guess_mime_type(name: str) -> str | None:
    """按文件名猜测 MIME 类型，未知时返回 None。"""
    mime, _ = mimetypes.guess_type(name, strict=False)
    return mime


def encode_data_url(mime_type: str, data: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(url: str) -> bytes:
    """
    解析 data URL 为原始字节。支持 ;base64 与百分号编码两种载荷。

    :raises ValueError: 不是合法的 data URL
    """
    if not url.startswith("data:") or "," not in url:
        raise ValueError("not a data URL")
    header, payload = url[len("data:"):].split(",", 1)
    if header.split(";")[-1].lower() == "base64":
        try:
            return base64.b64decode(payload, validate=False)
        except binascii.Error as e:
            raise ValueError(f"invalid base64 payload in data URL: {e}") from e
    return unquote_to_bytes(payload)


def decode_body(
    name: str,
    encoding: FileEncoding,
    body: bytes,
    mime_lookup: MimeLookup = guess_mime_type,
) -> FileData:
    """响应体 → FileData。dataurl 的 MIME 类型按文件名查找，未知时用 application/octet-stream。"""
    encoding = FileEncoding(encoding)
    if encoding is FileEncoding.BINARY:
        return BinaryData(bytes(body))
    if encoding is FileEncoding.TEXT:
        return TextData(body.decode("utf-8", errors="replace"))
    return DataUrlData(encode_data_url(mime_lookup(name) or DEFAULT_CONTENT_TYPE, body))


def encode_body(encoding: FileEncoding, data: FileData | RawData) -> bytes | str:
    """
    FileData（或原始值）→ 请求体。dataurl 解码为字节后发送。

    :raises ValueError: FileData 自带的编码与 encoding 不一致
    :raises TypeError: 原始值类型与 encoding 不匹配
    """
    encoding = FileEncoding(encoding)
    if isinstance(data, (BinaryData, TextData, DataUrlData)):
        if data.encoding is not encoding:
            raise ValueError(f"data is {data.encoding.value}, but encoding {encoding.value} was declared")
        data = data.value
    if encoding is FileEncoding.BINARY:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"binary encoding expects bytes, got {type(data).__name__}")
        return bytes(data)
    if not isinstance(data, str):
        raise TypeError(f"{encoding.value} encoding expects str, got {type(data).__name__}")
    if encoding is FileEncoding.TEXT:
        return data
    return decode_data_url(data)
