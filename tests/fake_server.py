"""
内存版 Space 服务器，按 Space HTTP 约定实现，经 httpx.MockTransport 接入客户端。
"""

from __future__ import annotations

import json
import mimetypes
from dataclasses import dataclass

import httpx

from spaceapi.client import auth_cookie

from tests.config import (
    SPACE_PASSWORD,
    SPACE_PATH,
    SPACE_SERVER_CLOCK_MS,
    SPACE_URL_PREFIX,
    SPACE_USERNAME,
)


@dataclass
class StoredFile:
    data: bytes
    last_modified: int
    perm: str = "rw"


class FakeSpaceServer:
    """
    内存版 Space 服务器。

    - require_auth: 要求 cookie 与 SPACE_USERNAME/SPACE_PASSWORD 一致，否则 401
    - redirect_to_login: 所有请求 302 到 /login（模拟会话过期跳转登录页）
    - force_status: 非 None 时所有文件请求直接返回该状态码
    """

    def __init__(self, space_path: str = SPACE_PATH):
        self.files: dict[str, StoredFile] = {}
        self.space_path = space_path
        self.require_auth = True
        self.redirect_to_login = False
        self.force_status: int | None = None
        self.requests: list[httpx.Request] = []

    def put(self, name: str, data: bytes, last_modified: int = SPACE_SERVER_CLOCK_MS, perm: str = "rw") -> None:
        self.files[name] = StoredFile(data, last_modified, perm)

    def _meta_headers(self, name: str, f: StoredFile) -> dict[str, str]:
        return {
            "Content-Type": mimetypes.guess_type(name)[0] or "application/octet-stream",
            "X-Content-Length": str(len(f.data)),
            "X-Last-Modified": str(f.last_modified),
            "X-Permission": f.perm,
        }

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/login":
            return httpx.Response(200, text="login page")
        if self.redirect_to_login:
            return httpx.Response(302, headers={"Location": "/login"})
        if self.require_auth and request.headers.get("cookie") != auth_cookie(SPACE_USERNAME, SPACE_PASSWORD):
            return httpx.Response(401, text="Unauthorized")
        if path == SPACE_URL_PREFIX:
            listing = [
                {
                    "name": name,
                    "size": len(f.data),
                    "contentType": mimetypes.guess_type(name)[0] or "application/octet-stream",
                    "lastModified": f.last_modified,
                    "perm": f.perm,
                }
                for name, f in self.files.items()
            ]
            return httpx.Response(
                200,
                content=json.dumps(listing).encode("utf-8"),
                headers={"Content-Type": "application/json", "X-Space-Path": self.space_path},
            )
        if self.force_status is not None:
            return httpx.Response(self.force_status, text="server error")
        name = path[len(SPACE_URL_PREFIX) + 1:]
        if request.method == "PUT":
            lm = request.headers.get("X-Last-Modified")
            self.put(name, request.content, int(lm) if lm else SPACE_SERVER_CLOCK_MS)
            return httpx.Response(200, headers=self._meta_headers(name, self.files[name]))
        f = self.files.get(name)
        if f is None:
            return httpx.Response(404, text="Not found")
        if request.method == "GET":
            return httpx.Response(200, content=f.data, headers=self._meta_headers(name, f))
        if request.method == "OPTIONS":
            return httpx.Response(200, headers=self._meta_headers(name, f))
        if request.method == "DELETE":
            del self.files[name]
            return httpx.Response(200, text="OK")
        return httpx.Response(405)
