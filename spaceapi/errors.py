"""
Space 访问层的异常类型。

网络层错误（httpx.HTTPError）不在此包装，原样抛给调用方。
"""

from __future__ import annotations


class SpaceError(Exception):
    """所有 Space 操作错误的基类。"""


class AuthenticationInvalid(SpaceError):
    """服务端返回 401 或发生重定向：凭证失效，需要重新登录。"""


class NotFound(SpaceError):
    """读取或 stat 的文件不存在（404）。"""


class DeleteFailed(SpaceError):
    """DELETE 返回非 200。"""

    def __init__(self, status_text: str, status_code: int | None = None):
        super().__init__(f"Failed to delete file: {status_text}")
        self.status_text = status_text
        self.status_code = status_code


class SpaceMismatch(SpaceError):
    """服务端 X-Space-Path 与客户端期望的 space 路径不一致。"""

    def __init__(self, expected: str, actual: str | None):
        super().__init__(f"Space folder path different on server: expected {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual


class Unsupported(SpaceError, NotImplementedError):
    """HTTP 传输不支持的操作（插件代理、函数调用）。"""
