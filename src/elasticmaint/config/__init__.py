"""配置模块.

从 YAML 文件加载集群地址、对象存储、目录以及索引规则配置。

示例用法:
    >>> from elasticmaint.config import load_config
    >>> config = load_config("/etc/esmaint.yml")
    >>> resolver = config.rule_resolver()
"""

from .exceptions import ConfigError
from .models import (
    COSConfig,
    DirConfig,
    ElasticsearchConfig,
    IndicesConfig,
    MaintConfig,
    parse_check_window,
)
from .tool import load_config, parse_config

__all__ = [
    # 数据模型
    "MaintConfig",
    "ElasticsearchConfig",
    "COSConfig",
    "DirConfig",
    "IndicesConfig",
    # 异常类
    "ConfigError",
    # 工具函数
    "load_config",
    "parse_config",
    "parse_check_window",
]
