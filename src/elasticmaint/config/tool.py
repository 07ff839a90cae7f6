"""配置加载工具模块."""

import logging
from collections.abc import Mapping
from typing import Any

import yaml

from ..rules import RuleFormatError, parse_rule
from .exceptions import ConfigError
from .models import (
    COSConfig,
    DirConfig,
    ElasticsearchConfig,
    IndicesConfig,
    MaintConfig,
)

logger = logging.getLogger(__name__)


def _section(data: Mapping[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"配置项 '{name}' 必须是映射类型")
    return dict(value)


def _string_fields(
    section: dict[str, Any], name: str, keys: tuple[str, ...]
) -> dict[str, str]:
    fields: dict[str, str] = {}
    for key in keys:
        value = section.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigError(f"配置项 '{name}.{key}' 必须是字符串")
        fields[key] = value
    return fields


def _warn_rules(rules: Mapping[str, str]) -> None:
    # 规则在匹配时才会严格解析，这里只做提示
    for prefix, text in rules.items():
        try:
            rule = parse_rule(text)
        except RuleFormatError as e:
            logger.warning(
                f"规则 '{prefix}' 格式错误，匹配到该规则的索引将无法处理: {str(e)}"
            )
            continue
        if not rule.is_ascending:
            logger.warning(
                f"规则 '{prefix}' 的阈值未按 warm、move、cold、delete 递增: {text!r}"
            )


def parse_config(data: Mapping[str, Any] | None) -> MaintConfig:
    """将已解析的 YAML 数据转换为 MaintConfig.

    缺失的配置段使用默认值。

    Args:
        data: YAML 解析结果，None 视为空配置

    Returns:
        MaintConfig

    Raises:
        ConfigError: 配置项类型不合法时抛出
    """
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigError("配置文件顶层必须是映射类型")

    es = _section(data, "elasticsearch")
    cos = _section(data, "cos")
    dirs = _section(data, "dir")
    indices = _section(data, "indices")

    ignores = indices.get("ignores") or []
    rules = indices.get("rules") or {}
    if not isinstance(ignores, list):
        raise ConfigError("配置项 'indices.ignores' 必须是列表")
    if not isinstance(rules, Mapping):
        raise ConfigError("配置项 'indices.rules' 必须是映射类型")

    config = MaintConfig(
        elasticsearch=ElasticsearchConfig(
            **_string_fields(es, "elasticsearch", ("url",))
        ),
        cos=COSConfig(
            **_string_fields(cos, "cos", ("url", "secret_id", "secret_key", "check"))
        ),
        dir=DirConfig(**_string_fields(dirs, "dir", ("workspace", "templates"))),
        indices=IndicesConfig(ignores=list(ignores), rules=dict(rules)),
    )
    _warn_rules(config.indices.rules)
    return config


def load_config(filename: str) -> MaintConfig:
    """从 YAML 文件加载配置.

    Args:
        filename: 配置文件路径

    Returns:
        MaintConfig

    Raises:
        ConfigError: 文件无法读取、YAML 格式错误或配置项不合法时抛出

    Example:
        >>> config = load_config("/etc/esmaint.yml")
        >>> config.elasticsearch.url
        'http://127.0.0.1:9200'
    """
    try:
        with open(filename, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"读取配置文件 '{filename}' 失败: {str(e)}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"解析配置文件 '{filename}' 失败: {str(e)}") from e

    config = parse_config(data)
    logger.info(
        f"加载配置文件 '{filename}': {len(config.indices.rules)} 条规则，"
        f"{len(config.indices.ignores)} 条忽略规则"
    )
    return config
