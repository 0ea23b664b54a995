# scorers/deepseek_provider.py
"""
[V3.5] ScoringProvider 针对 DeepSeek 的具体实现。
[V4.1] 使用 @register_provider 进行自动注册。
[V5.0] 改为通过 Chat Completions (JSON 输出) 完成提交评分。
"""
import json
import logging
import os
from typing import Dict

import openai
from openai import OpenAI

from scorers.provider_abc import ScoringProvider, parse_analysis_payload, register_provider
from context import RunContext
from errors import AuthenticationError, RemoteServiceError, TransportError
from models import AnalysisResult

logger = logging.getLogger(__name__)

PROMPT_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "prompts", "deepseek")


@register_provider("deepseek")
class DeepSeekProvider(ScoringProvider):
    """
    (V3.5) DeepSeek 策略实现 (OpenAI 兼容)。
    """

    def __init__(self, context: RunContext):
        """
        (V4.0) 初始化 DeepSeek 客户端并加载 DeepSeek 专用提示词。
        """
        super().__init__(context)
        self.client = OpenAI(
            api_key=context.api_key,
            base_url=self.global_config.DEEPSEEK_BASE_URL,
            timeout=context.timeout,
            max_retries=0,
        )
        self.default_model = self.global_config.DEFAULT_MODEL_DEEPSEEK

        # (V3.6) 加载 DeepSeek 专用提示词
        self.prompts = self._load_prompts_from_dir(PROMPT_DIR)
        self.system_prompt = self.prompts.get("system", "你是一个资深的代码评审专家。")

        logger.info(
            f"✅ (V3.6) DeepSeekProvider 初始化成功 (已加载 {len(self.prompts)} 个提示)"
        )

    def _load_prompts_from_dir(self, prompt_dir: str) -> Dict[str, str]:
        prompts = {}
        for root, _, files in os.walk(prompt_dir):
            for filename in files:
                if filename.endswith(".txt"):
                    file_path = os.path.join(root, filename)
                    relative_path = os.path.relpath(file_path, prompt_dir)
                    key = os.path.splitext(relative_path)[0]
                    key = key.replace(os.path.sep, "/")
                    with open(file_path, "r", encoding="utf-8") as f:
                        prompts[key] = f.read()
        return prompts

    def analyze(self, code_diff: str, commit_message: str) -> AnalysisResult:
        user_prompt_template = self.prompts.get("commit_score")
        if not user_prompt_template:
            raise RemoteServiceError("未找到 DeepSeek 评分提示词: 'commit_score'")
        user_prompt = user_prompt_template.format(
            code_diff=code_diff, commit_message=commit_message
        )
        messages = [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        try:
            response = self.client.chat.completions.create(
                model=self.default_model,
                messages=messages,
                response_format={"type": "json_object"},
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise AuthenticationError(
                f"DeepSeek 拒绝了凭证: {e}", status_code=e.status_code
            ) from e
        except openai.APIConnectionError as e:
            logger.error(f"❌ [DeepSeekProvider 错误] 连接失败: {e}")
            raise TransportError(f"无法连接 DeepSeek: {e}") from e
        except openai.APIStatusError as e:
            raise RemoteServiceError(
                f"DeepSeek 返回错误 HTTP {e.status_code}: {e}", status_code=e.status_code
            ) from e
        except openai.APIError as e:
            raise RemoteServiceError(f"DeepSeek 调用失败: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise RemoteServiceError("未从 DeepSeek API 收到内容")
        content = response.choices[0].message.content.strip()
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            raise RemoteServiceError(f"DeepSeek 返回的内容不是合法 JSON: {content[:200]}") from e
        return parse_analysis_payload(payload)

    def close(self) -> None:
        self.client.close()
