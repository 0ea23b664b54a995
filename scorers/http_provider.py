# scorers/http_provider.py
"""
[V5.0] 默认评分供应商：直接调用远程评分接口。
POST {endpoint}，Authorization: Bearer <key>，
请求体 {"code_diff": ..., "commit_message": ...}。
"""
import logging

import requests

from scorers.provider_abc import ScoringProvider, parse_analysis_payload, register_provider
from context import RunContext
from errors import AuthenticationError, RemoteServiceError, TransportError
from models import AnalysisResult

logger = logging.getLogger(__name__)

USER_AGENT = "commit-score/5.0"


@register_provider("http")
class HttpScoringProvider(ScoringProvider):
    """
    (V5.0) 通过 requests.Session 访问评分接口，整次运行复用同一个会话。
    不做重试：任何失败都直接抛出。
    """

    def __init__(self, context: RunContext):
        super().__init__(context)
        self.endpoint = context.endpoint
        self.timeout = context.timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {context.api_key}",
                "User-Agent": USER_AGENT,
            }
        )
        logger.info(f"✅ HttpScoringProvider 初始化成功 (地址: {self.endpoint})")

    def analyze(self, code_diff: str, commit_message: str) -> AnalysisResult:
        body = {"code_diff": code_diff, "commit_message": commit_message}
        try:
            response = self.session.post(self.endpoint, json=body, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ [HttpScoringProvider] 请求评分接口失败: {e}")
            raise TransportError(f"无法连接评分服务 {self.endpoint}: {e}") from e

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"评分服务拒绝了凭证 (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        if not response.ok:
            raise RemoteServiceError(
                f"评分服务返回错误 HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteServiceError(
                f"评分服务响应不是合法 JSON: {response.text[:200]}",
                status_code=response.status_code,
            ) from e
        return parse_analysis_payload(payload)

    def close(self) -> None:
        self.session.close()
