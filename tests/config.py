"""
测试用配置：Space 地址、期望的 space 路径、账号。

仅在此处维护，conftest 及各 test_*.py 均从此导入。
- 单元测试：对 conftest 中的内存假服务器（httpx.MockTransport）发请求，使用本配置中的 URL/账号。
- 集成测试：SPACE_INTEGRATION_URL 指向真实服务器，不可达时跳过。
"""

import os

# ---------- 假服务器 ----------
SPACE_BASE_URL = "http://space.test/fs"
SPACE_URL_PREFIX = "/fs"
SPACE_PATH = "/home/user/space"
# 假服务器为未带 X-Last-Modified 的写入打的时间戳
SPACE_SERVER_CLOCK_MS = 1_700_000_000_000

# ---------- 账号 ----------
SPACE_TEST_ACCOUNTS = [
    {"username": "admin", "password": "admin123"},
    {"username": "你好", "password": "abc123"},
]
SPACE_USERNAME = SPACE_TEST_ACCOUNTS[0]["username"]
SPACE_PASSWORD = SPACE_TEST_ACCOUNTS[0]["password"]

# ---------- 集成测试 ----------
SPACE_INTEGRATION_URL = os.environ.get("SPACE_INTEGRATION_URL", "http://127.0.0.1:3000/fs")
SPACE_INTEGRATION_USERNAME = os.environ.get("SPACE_INTEGRATION_USERNAME")
SPACE_INTEGRATION_PASSWORD = os.environ.get("SPACE_INTEGRATION_PASSWORD")
