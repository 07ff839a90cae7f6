"""索引管理器异常定义模块."""

from ..exceptions import EsMaintError


class IndexManagerError(EsMaintError):
    """索引管理器基础异常类."""

    pass


class IndexNotFoundError(IndexManagerError):
    """索引不存在异常."""

    pass


class SettingsNotFoundError(IndexNotFoundError):
    """索引配置不存在异常.

    通常意味着索引在列出之后、操作之前已被删除。
    """

    pass


class ClusterTransportError(IndexManagerError):
    """集群通信异常.

    包装 Elasticsearch 客户端抛出的异常，原始异常保存在 __cause__ 中。
    """

    pass
