"""
HTTP 客户端

封装 aiohttp，为所有上游请求提供统一的超时、User-Agent 与错误转换。
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import aiohttp
from loguru import logger

from echoregistry.exceptions import APIError, APITimeoutError
from echoregistry.models.config import HttpConfig


@dataclass
class HttpResponse:
    """上游响应"""

    status: int
    body: str
    url: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """将响应体解析为 JSON"""
        try:
            return json.loads(self.body)
        except ValueError as e:
            raise APIError(
                f"无法解析 JSON 响应: {e}", status=self.status, url=self.url
            )

    def raise_for_status(self, message: str) -> "HttpResponse":
        """非成功状态时抛出对应的 APIError"""
        if not self.ok:
            raise APIError.from_status(message, self.status, self.url)
        return self


class HttpClient:
    """带超时的 HTTP 客户端"""

    def __init__(
        self,
        config: Optional[HttpConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.config = config or HttpConfig()
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.config.user_agent}
            )
            self._owned_session = True
        return self._session

    async def fetch(
        self,
        url: str,
        timeout: Optional[float] = None,
        params: Optional[Mapping[str, str]] = None,
        method: str = "GET",
    ) -> HttpResponse:
        """
        发送请求并读取完整响应体

        Args:
            url: 请求地址
            timeout: 超时时间（秒），默认使用配置值
            params: 查询参数
            method: HTTP 方法

        Returns:
            HttpResponse，非 2xx 状态不会抛出异常

        Raises:
            APITimeoutError: 请求超时
            APIError: 网络错误
        """
        client_timeout = aiohttp.ClientTimeout(total=timeout or self.config.timeout)
        logger.debug(f"[请求] {method} {url}")
        try:
            async with self.session.request(
                method, url, params=params, timeout=client_timeout
            ) as response:
                try:
                    body = await response.text() if method != "HEAD" else ""
                except UnicodeDecodeError as e:
                    raise APIError(
                        f"无法解码响应: {e}", status=response.status, url=url
                    )
                return HttpResponse(
                    status=response.status, body=body, url=str(response.url)
                )
        except asyncio.TimeoutError:
            raise APITimeoutError(f"请求超时: {url}", status=408, url=url)
        except aiohttp.ClientError as e:
            raise APIError(f"请求失败: {e}", url=url)

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
