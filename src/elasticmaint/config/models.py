"""配置数据模型定义模块.

提供维护配置相关的数据模型，包括：
- ElasticsearchConfig: 集群连接配置
- COSConfig: 对象存储配置（供归档实现使用）
- DirConfig: 工作目录配置（供归档实现使用）
- IndicesConfig: 索引忽略列表与规则表
- MaintConfig: 完整配置
"""

import re
from dataclasses import dataclass, field

from ..rules import PrefixMatchStrategy, RuleResolver
from .exceptions import ConfigError

# 归档检查窗口格式，如 "1:5"
_CHECK_WINDOW_PATTERN = re.compile(r"^\s*([0-9]+)\s*:\s*([0-9]+)\s*$")


def parse_check_window(check: str) -> tuple[int, int] | None:
    """解析归档检查窗口.

    Args:
        check: 检查窗口字符串，如 "1:5"

    Returns:
        (起始天数, 结束天数)，两端均包含；为空时返回 None

    Raises:
        ConfigError: 格式不合法或起始天数大于结束天数时抛出
    """
    if not check:
        return None
    match = _CHECK_WINDOW_PATTERN.match(check)
    if match is None:
        raise ConfigError(f"cos.check 格式不合法: {check!r}，应为 '1:5' 形式")
    start, end = int(match.group(1)), int(match.group(2))
    if start > end:
        raise ConfigError(f"cos.check 起始天数不能大于结束天数: {check!r}")
    return start, end


@dataclass
class ElasticsearchConfig:
    """集群连接配置.

    Attributes:
        url: 集群地址，如 "http://127.0.0.1:9200"
    """

    url: str = ""


@dataclass
class COSConfig:
    """对象存储配置.

    Attributes:
        url: 存储桶地址
        secret_id: 访问密钥 ID
        secret_key: 访问密钥
        check: 归档检查窗口，"1:5" 表示检查 1 天前到 5 天前的索引是否已归档
    """

    url: str = ""
    secret_id: str = ""
    secret_key: str = field(default="", repr=False)
    check: str = ""

    def __post_init__(self) -> None:
        """校验检查窗口格式."""
        parse_check_window(self.check)

    @property
    def check_window(self) -> tuple[int, int] | None:
        """归档检查窗口，见 parse_check_window()."""
        return parse_check_window(self.check)


@dataclass
class DirConfig:
    """目录配置.

    Attributes:
        workspace: 工作空间目录，用于将索引迁移至对象存储
        templates: 模板目录，包含若干 .json 文件
    """

    workspace: str = ""
    templates: str = ""


@dataclass
class IndicesConfig:
    """索引配置.

    Attributes:
        ignores: 忽略子串列表，索引名包含其中任意一个即被忽略
        rules: 规则表，索引名前缀 -> "warm,move,cold,delete"

    Raises:
        ConfigError: 配置项类型不合法时抛出
    """

    ignores: list[str] = field(default_factory=list)
    rules: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """校验配置项类型."""
        if not all(isinstance(s, str) and s for s in self.ignores):
            raise ConfigError("indices.ignores 只能包含非空字符串")
        for prefix, rule in self.rules.items():
            if not isinstance(prefix, str) or not isinstance(rule, str):
                raise ConfigError(
                    f"indices.rules 的键和值必须是字符串: {prefix!r}: {rule!r}"
                )


@dataclass
class MaintConfig:
    """完整维护配置.

    Examples:
        >>> config = load_config("/etc/esmaint.yml")
        >>> resolver = config.rule_resolver()
    """

    elasticsearch: ElasticsearchConfig = field(default_factory=ElasticsearchConfig)
    cos: COSConfig = field(default_factory=COSConfig)
    dir: DirConfig = field(default_factory=DirConfig)
    indices: IndicesConfig = field(default_factory=IndicesConfig)

    def rule_resolver(
        self, strategy: PrefixMatchStrategy = PrefixMatchStrategy.LONGEST
    ) -> RuleResolver:
        """根据索引配置创建规则解析器."""
        return RuleResolver(self.indices.ignores, self.indices.rules, strategy)
