"""
EchoRegistry

为 Minecraft 模组开发解析加载器、构建工具与第三方模组的最新兼容版本。
"""

__version__ = "1.0.0"

from echoregistry.orchestrator import EchoRegistry  # noqa: E402

__all__ = ["EchoRegistry", "__version__"]
