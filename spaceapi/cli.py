"""
space CLI：认证一次保存到本地，之后的命令都使用保存的连接信息。
"""

from __future__ import annotations

import asyncio
import getpass
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any, Awaitable, Callable, Optional, TypeVar

import httpx
import typer

from spaceapi import FileEncoding, HttpSpacePrimitives, SpaceError
from spaceapi.cli_config import clear_config, load_config, save_config

T = TypeVar("T")


def _format_size(n: int) -> str:
    """将字节数格式化为人类可读（KiB/MiB/GiB）。"""
    if n < 1024:
        return f"{n} B"
    if n < 1024 * 1024:
        return f"{n / 1024:.1f} KiB"
    if n < 1024 * 1024 * 1024:
        return f"{n / (1024 * 1024):.1f} MiB"
    return f"{n / (1024 * 1024 * 1024):.1f} GiB"


def _format_mtime(ms: int) -> str:
    """epoch 毫秒 → ISO 时间（UTC）；0 表示未知。"""
    if not ms:
        return "-"
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


app = typer.Typer(
    name="space",
    help="Space file storage CLI. Auth once and save; use saved auth for all commands.",
)

_base_url_option: type = Annotated[
    Optional[str],
    typer.Option("--base-url", "-b", help="Override saved base URL (or required if not logged in)"),
]

_encoding_option: type = Annotated[
    FileEncoding,
    typer.Option("--encoding", "-e", help="Content encoding: binary, text or dataurl"),
]


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log HTTP requests")] = False,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _on_reset() -> None:
    # 命令行无法自行重载，只提示重新登录
    typer.echo("error: session is no longer valid. run 'space login' again", err=True)


def _on_alert(message: str) -> None:
    typer.echo(f"warning: {message}", err=True)


def _get_client(base_url: str | None) -> HttpSpacePrimitives | None:
    cfg = load_config()
    url = base_url or (cfg and cfg.get("base_url"))
    if not url:
        return None
    # 保存的凭证只发给保存的服务器，--base-url 指向其他地址时匿名访问
    saved = cfg if cfg and cfg.get("base_url") == url.rstrip("/") else {}
    return HttpSpacePrimitives(
        url,
        space_path=saved.get("space_path"),
        username=saved.get("username"),
        password=saved.get("password"),
        on_reset=_on_reset,
        on_alert=_on_alert,
        timeout=30.0,
    )


def _require_client(base_url: str | None) -> HttpSpacePrimitives:
    client = _get_client(base_url)
    if client is None:
        typer.echo("error: no saved credentials. run 'space login' or pass --base-url", err=True)
        raise typer.Exit(1)
    return client


def _run(base_url: str | None, op: Callable[[HttpSpacePrimitives], Awaitable[T]]) -> T:
    """在事件循环中执行一次操作；Space/网络错误输出到 stderr 并以 1 退出。"""
    client = _require_client(base_url)

    async def _go() -> T:
        async with client:
            return await op(client)

    try:
        return asyncio.run(_go())
    except (SpaceError, httpx.HTTPError, ValueError, TypeError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)


# ------------------------- login / logout / auth -------------------------


@app.command("login", help="Save connection and credentials to local config")
def login(
    base_url: Annotated[Optional[str], typer.Option("--base-url", "-b", help="Space base URL")] = None,
    username: Annotated[Optional[str], typer.Option("--username", "-u", help="Username")] = None,
    password: Annotated[Optional[str], typer.Option("--password", "-p", help="Password (unsafe in shell)")] = None,
    space_path: Annotated[Optional[str], typer.Option("--space-path", "-s", help="Expected space folder path on server")] = None,
) -> None:
    base_url = base_url or input("Base URL (e.g. http://127.0.0.1:3000/fs): ").strip()
    if not base_url:
        typer.echo("error: base URL required", err=True)
        raise typer.Exit(1)
    username = username or input("Username: ").strip() or None
    if username and password is None:
        password = getpass.getpass("Password: ")
    save_config(base_url, username, password, space_path)
    typer.echo("Saved.")


@app.command("logout", help="Clear saved credentials")
def logout() -> None:
    if clear_config():
        typer.echo("Cleared.")
    else:
        typer.echo("No saved credentials.")


auth_app = typer.Typer(help="Auth subcommands")
app.add_typer(auth_app, name="auth")


@auth_app.command("status", help="Show whether credentials are saved")
def auth_status() -> None:
    cfg = load_config()
    if not cfg:
        typer.echo("Not logged in.")
        return
    has_auth = bool(cfg.get("username") and cfg.get("password"))
    typer.echo(f"base_url: {cfg.get('base_url', '')}")
    typer.echo(f"auth: {'yes' if has_auth else 'no'}")


# ------------------------- list / ls -------------------------


def _cmd_list_impl(base_url: str | None) -> None:
    files = _run(base_url, lambda c: c.fetch_file_list())
    for meta in files:
        typer.echo(
            f"  {meta.name}  {_format_size(meta.size)}  {meta.perm.value}  {_format_mtime(meta.last_modified)}"
        )


@app.command("list", help="List all files in the space")
def list_cmd(base_url: _base_url_option = None) -> None:
    _cmd_list_impl(base_url)


@app.command("ls", help="Alias for list")
def ls_cmd(base_url: _base_url_option = None) -> None:
    _cmd_list_impl(base_url)


# ------------------------- read / cat -------------------------


def _cmd_read_impl(name: str, encoding: FileEncoding, output: Path | None, base_url: str | None) -> None:
    if output is not None:
        # 写本地文件时总是取原始字节
        content = _run(base_url, lambda c: c.read_file(name, FileEncoding.BINARY))
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(content.data.value)
        typer.echo(f"Saved to {output}.")
        return
    content = _run(base_url, lambda c: c.read_file(name, encoding))
    typer.echo(content.data.value, nl=encoding is not FileEncoding.BINARY)


@app.command("read", help="Read a file and print it (or save with --output)")
def read_cmd(
    name: Annotated[str, typer.Argument(help="File name in the space, e.g. notes/a.md")],
    encoding: _encoding_option = FileEncoding.TEXT,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Save raw bytes to local path")] = None,
    base_url: _base_url_option = None,
) -> None:
    _cmd_read_impl(name, encoding, output, base_url)


@app.command("cat", help="Alias for read")
def cat_cmd(
    name: Annotated[str, typer.Argument(help="File name in the space")],
    encoding: _encoding_option = FileEncoding.TEXT,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Save raw bytes to local path")] = None,
    base_url: _base_url_option = None,
) -> None:
    _cmd_read_impl(name, encoding, output, base_url)


# ------------------------- write -------------------------


@app.command("write", help="Write a local file into the space")
def write_cmd(
    path: Annotated[Path, typer.Argument(help="Local file path")],
    name: Annotated[Optional[str], typer.Option("--name", "-n", help="Remote file name (default: local name)")] = None,
    encoding: _encoding_option = FileEncoding.BINARY,
    last_modified: Annotated[Optional[int], typer.Option("--last-modified", help="Timestamp (epoch ms) to keep on server")] = None,
    base_url: _base_url_option = None,
) -> None:
    if not path.is_file():
        typer.echo(f"error: not a file: {path}", err=True)
        raise typer.Exit(1)
    remote_name = name or path.name
    # text / dataurl 时按 UTF-8 文本读取；dataurl 即文件内容本身是 data URL，去掉首尾空白
    data: Any = path.read_bytes() if encoding is FileEncoding.BINARY else path.read_text(encoding="utf-8")
    if encoding is FileEncoding.DATAURL:
        data = data.strip()
    meta = _run(base_url, lambda c: c.write_file(remote_name, encoding, data, last_modified=last_modified))
    typer.echo(f"Written {meta.name} ({_format_size(meta.size)}).")


# ------------------------- delete -------------------------


@app.command("delete", help="Delete a file")
def delete_cmd(
    name: Annotated[str, typer.Argument(help="File name in the space")],
    base_url: _base_url_option = None,
) -> None:
    _run(base_url, lambda c: c.delete_file(name))
    typer.echo("Deleted.")


# ------------------------- stat -------------------------


@app.command("stat", help="Show file metadata")
def stat_cmd(
    name: Annotated[str, typer.Argument(help="File name in the space")],
    base_url: _base_url_option = None,
) -> None:
    meta = _run(base_url, lambda c: c.get_file_meta(name))
    typer.echo(f"name: {meta.name}")
    typer.echo(f"size: {meta.size}")
    typer.echo(f"content_type: {meta.content_type}")
    typer.echo(f"last_modified: {_format_mtime(meta.last_modified)}")
    typer.echo(f"perm: {meta.perm.value}")


# ------------------------- info -------------------------


@app.command("info", help="Show saved base_url and auth status")
def info_cmd() -> None:
    cfg = load_config()
    if not cfg:
        typer.echo("Not logged in. Run 'space login' or pass --base-url for commands.")
        return
    typer.echo(f"base_url: {cfg.get('base_url')}")
    typer.echo(f"space_path: {cfg.get('space_path') or '-'}")
    typer.echo(f"auth: {'yes' if (cfg.get('username') and cfg.get('password')) else 'no'}")


# ------------------------- main -------------------------


def main() -> None:
    app()


if __name__ == "__main__":
    main()
