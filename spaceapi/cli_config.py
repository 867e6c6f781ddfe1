"""
space CLI 的连接配置。

保存在 ~/.config/spaceapi/config.json，字段：
- base_url: space 根地址（必填，去掉末尾 /）
- username / password: 生成 auth cookie 的凭证
- space_path: 服务端 space 目录；列表时与 X-Space-Path 比对
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "config.json"


def _config_dir() -> Path:
    return Path.home() / ".config" / "spaceapi"


def _config_path() -> Path:
    return _config_dir() / CONFIG_FILENAME


def load_config() -> dict[str, Any] | None:
    """读取保存的 space 连接；文件缺失、JSON 损坏或没有 base_url 时视为未登录（None）。"""
    path = _config_path()
    if not path.is_file():
        return None
    try:
        cfg = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if isinstance(cfg, dict) and cfg.get("base_url"):
        return cfg
    return None


def save_config(
    base_url: str,
    username: str | None = None,
    password: str | None = None,
    space_path: str | None = None,
) -> None:
    """覆盖保存 space 连接；值为 None 的可选字段不写入。"""
    optional = {"username": username, "password": password, "space_path": space_path}
    cfg: dict[str, Any] = {"base_url": base_url.rstrip("/")}
    cfg.update({key: value for key, value in optional.items() if value is not None})
    path = _config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg, ensure_ascii=False, indent=2), encoding="utf-8")


def clear_config() -> bool:
    """忘记保存的 space 连接；返回之前是否已登录过。"""
    path = _config_path()
    if not path.is_file():
        return False
    path.unlink()
    return True
