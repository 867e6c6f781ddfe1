"""
Space HTTP 客户端：把 list/read/write/delete/stat 映射为 HTTP 动词。

每个操作恰好一次网络往返，不重试；认证失效（401 或重定向）时调用 on_reset 回调并抛出
AuthenticationInvalid。除文档列出的状态外，读/写的非 2xx 响应原样透传。
"""

from __future__ import annotations

import base64
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union
from urllib.parse import quote

import httpx

from spaceapi.encoding import MimeLookup, RawData, decode_body, encode_body, guess_mime_type
from spaceapi.errors import AuthenticationInvalid, DeleteFailed, NotFound, SpaceMismatch, Unsupported
from spaceapi.models import FileContent, FileData, FileEncoding, FileMeta, response_to_meta

logger = logging.getLogger(__name__)

SPACE_PATH_HEADER = "X-Space-Path"
LAST_MODIFIED_HEADER = "X-Last-Modified"

Callback = Callable[..., Union[Awaitable[None], None]]


def _path_for_url(path: str) -> str:
    """将路径按段做 UTF-8 百分号编码，供 URL 使用。"""
    segments = (path.strip("/").split("/") if path.strip("/") else [])
    return "/" + "/".join(quote(seg, safe="") for seg in segments) if segments else "/"


def auth_cookie(username: str, password: str) -> str:
    """认证 cookie：auth=base64("user:password")。与服务端约定一致，仅是可逆编码。"""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"auth={token}"


async def _run_callback(callback: Callback | None, *args: Any) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class HttpSpacePrimitives:
    """
    基于 HTTP 的 Space 存储实现。

    示例： HttpSpacePrimitives("http://127.0.0.1:3000/fs", username="admin", password="admin")
    """

    def __init__(
        self,
        url: str,
        space_path: str | None = None,
        username: str | None = None,
        password: str | None = None,
        *,
        on_reset: Callback | None = None,
        on_flush_caches: Callback | None = None,
        on_alert: Callback | None = None,
        mime_lookup: MimeLookup = guess_mime_type,
        timeout: float = 30.0,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        :param url: space 根地址，文件路径会拼接在其后
        :param space_path: 期望的服务端 space 路径；列表时与 X-Space-Path 比对
        :param username: 用户名（与 password 同时提供时才注入认证 cookie）
        :param password: 密码
        :param on_reset: 认证失效或 space 不一致时调用，用于让宿主重新开始会话
        :param on_flush_caches: space 不一致时调用，清理本地缓存
        :param on_alert: space 不一致时以提示文本调用
        :param mime_lookup: 文件名 → MIME 类型，dataurl 读取时使用
        :param timeout: 请求超时秒数，直接交给 httpx
        :param verify: 是否验证 HTTPS 证书
        :param transport: 自定义 httpx 传输（测试时用 httpx.MockTransport）
        """
        self.url = url.rstrip("/")
        self.space_path = space_path
        self.username = username
        self.password = password
        self.on_reset = on_reset
        self.on_flush_caches = on_flush_caches
        self.on_alert = on_alert
        self.mime_lookup = mime_lookup
        self.timeout = timeout
        self.verify = verify
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                verify=self.verify,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """关闭底层 HTTP 客户端。"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpSpacePrimitives:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def file_url(self, name: str) -> str:
        return self.url + _path_for_url(name)

    # ------------------------- 认证传输 -------------------------

    async def authenticated_request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        发送请求；配置了用户名和密码时强制设置认证 cookie（覆盖调用方传入的 cookie 头）。

        :raises AuthenticationInvalid: 401 或响应经过重定向
        """
        headers = dict(kwargs.pop("headers", None) or {})
        if self.username and self.password:
            for key in [k for k in headers if k.lower() == "cookie"]:
                del headers[key]
            headers["cookie"] = auth_cookie(self.username, self.password)
        logger.debug("%s %s", method, url)
        r = await self._get_client().request(method, url, headers=headers, **kwargs)
        if r.status_code == 401 or r.history:
            logger.warning("authentication invalid (%s %s -> %s)", method, url, r.status_code)
            await _run_callback(self.on_reset)
            raise AuthenticationInvalid("Unauthorized")
        return r

    # ------------------------- 文件操作 -------------------------

    async def fetch_file_list(self) -> list[FileMeta]:
        """列出 space 下全部文件。"""
        r = await self.authenticated_request("GET", self.url)
        if self.space_path:
            actual = r.headers.get(SPACE_PATH_HEADER)
            if actual != self.space_path:
                logger.warning("space path mismatch: expected %r, server has %r", self.space_path, actual)
                await _run_callback(self.on_flush_caches)
                await _run_callback(self.on_alert, "Space folder path different on server, reloading")
                await _run_callback(self.on_reset)
                raise SpaceMismatch(self.space_path, actual)
        return [FileMeta.from_dict(entry) for entry in r.json()]

    async def read_file(self, name: str, encoding: FileEncoding) -> FileContent:
        """
        读取文件内容与元数据。

        :param name: 相对路径，如 "notes/a.md"
        :param encoding: binary / text / dataurl
        :raises NotFound: 404
        """
        encoding = FileEncoding(encoding)
        r = await self.authenticated_request("GET", self.file_url(name))
        if r.status_code == 404:
            raise NotFound("Page not found")
        if not r.is_success:
            logger.warning("read %s returned %s, passing through", name, r.status_code)
        return FileContent(
            data=decode_body(name, encoding, r.content, self.mime_lookup),
            meta=response_to_meta(name, r.headers),
        )

    async def write_file(
        self,
        name: str,
        encoding: FileEncoding,
        data: FileData | RawData,
        self_update: bool = False,
        last_modified: Optional[int] = None,
    ) -> FileMeta:
        """
        写入文件。Content-Type 固定为 application/octet-stream，由服务端推导真实类型。

        :param data: FileData，或与 encoding 对应的原始值（bytes / str / data URL 字符串）
        :param self_update: 保留参数，HTTP 传输不使用
        :param last_modified: 期望的修改时间（epoch 毫秒），以 X-Last-Modified 头发送
        """
        body = encode_body(FileEncoding(encoding), data)
        headers = {"Content-Type": "application/octet-stream"}
        if last_modified:
            headers[LAST_MODIFIED_HEADER] = str(last_modified)
        r = await self.authenticated_request("PUT", self.file_url(name), headers=headers, content=body)
        if not r.is_success:
            logger.warning("write %s returned %s, passing through", name, r.status_code)
        return response_to_meta(name, r.headers)

    async def delete_file(self, name: str) -> None:
        """
        删除文件。

        :raises DeleteFailed: 状态码不是 200
        """
        r = await self.authenticated_request("DELETE", self.file_url(name))
        if r.status_code != 200:
            raise DeleteFailed(r.reason_phrase, r.status_code)

    async def get_file_meta(self, name: str) -> FileMeta:
        """
        只取元数据（OPTIONS），不传输内容。

        :raises NotFound: 404
        """
        r = await self.authenticated_request("OPTIONS", self.file_url(name))
        if r.status_code == 404:
            raise NotFound("File not found")
        return response_to_meta(name, r.headers)

    # 插件相关调用只属于本地传输
    async def proxy_syscall(self, *args: Any, **kwargs: Any) -> Any:
        raise Unsupported("Not supported")

    async def invoke_function(self, *args: Any, **kwargs: Any) -> Any:
        raise Unsupported("Not supported")
