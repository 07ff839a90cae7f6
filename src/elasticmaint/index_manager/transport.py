"""集群通信模块.

ClusterTransport 定义维护操作所需的最小集群接口，ElasticsearchTransport
基于官方 elasticsearch 客户端实现该接口。测试中可以注入任意满足该接口的实现。
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ApiError, NotFoundError, TransportError

from ..tasks import TaskContext
from .exceptions import ClusterTransportError
from .models import CLEAR, FlatSettings, SettingsUpdate

# _cat/indices 需要的列
CAT_INDICES_COLUMNS = "index,status,health,pri,pri.segments.count"

# _cat/recovery 需要的列
CAT_RECOVERY_COLUMNS = "index,shard,bytes_percent"


class ClusterTransport(Protocol):
    """维护操作依赖的集群接口.

    所有方法都绑定 TaskContext，实现方需要在请求前检查上下文状态。
    """

    def list_indices(self, ctx: TaskContext) -> list[dict[str, Any]]:
        """列出索引，每行包含 index、status、pri、pri.segments.count."""
        ...

    def open_index(self, ctx: TaskContext, index: str) -> None:
        """打开索引，等待所有分片就绪后返回."""
        ...

    def close_index(self, ctx: TaskContext, index: str) -> None:
        """关闭索引."""
        ...

    def get_settings(self, ctx: TaskContext, index: str) -> FlatSettings | None:
        """获取扁平化的索引配置，索引不存在时返回 None."""
        ...

    def put_settings(
        self, ctx: TaskContext, index: str, settings: SettingsUpdate
    ) -> None:
        """更新索引配置，值为 CLEAR 的配置项会被清除."""
        ...

    def force_merge(self, ctx: TaskContext, index: str, max_num_segments: int) -> None:
        """强制合并索引段."""
        ...

    def delete_index(self, ctx: TaskContext, index: str) -> None:
        """删除索引."""
        ...

    def list_active_recoveries(self, ctx: TaskContext) -> list[dict[str, Any]]:
        """列出正在进行的分片恢复，每行包含 index、shard、bytes_percent."""
        ...


class ElasticsearchTransport:
    """基于 elasticsearch 客户端的集群通信实现.

    上下文的截止时间会作为 request_timeout 传给客户端；客户端异常统一包装为
    ClusterTransportError，若异常发生时上下文已取消或超时，则抛出取消异常。

    Args:
        es_client: Elasticsearch 客户端实例

    Examples:
        >>> transport = ElasticsearchTransport.from_url("http://127.0.0.1:9200")
        >>> transport.list_indices(TaskContext(timeout=30))
    """

    def __init__(self, es_client: Elasticsearch) -> None:
        if es_client is None:
            raise ValueError("es_client 不能为 None")
        self.es_client = es_client

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "ElasticsearchTransport":
        """根据集群地址创建.

        Args:
            url: 集群地址，如 "http://127.0.0.1:9200"
            **kwargs: 透传给 Elasticsearch 构造函数的参数
        """
        if not url:
            raise ValueError("url 不能为空")
        return cls(Elasticsearch(url, **kwargs))

    def _client(self, ctx: TaskContext) -> Elasticsearch:
        ctx.check()
        remaining = ctx.remaining()
        if remaining is None:
            return self.es_client
        return self.es_client.options(request_timeout=remaining)

    @contextmanager
    def _request(self, ctx: TaskContext, action: str) -> Iterator[None]:
        try:
            yield
        except (ApiError, TransportError) as e:
            err = ctx.error()
            if err is not None:
                raise err from e
            raise ClusterTransportError(f"{action}失败: {str(e)}") from e

    def list_indices(self, ctx: TaskContext) -> list[dict[str, Any]]:
        with self._request(ctx, "列出索引"):
            rows = self._client(ctx).cat.indices(
                format="json", h=CAT_INDICES_COLUMNS
            )
        return [dict(row) for row in rows]

    def open_index(self, ctx: TaskContext, index: str) -> None:
        with self._request(ctx, f"打开索引 '{index}'"):
            self._client(ctx).indices.open(index=index, wait_for_active_shards="all")

    def close_index(self, ctx: TaskContext, index: str) -> None:
        with self._request(ctx, f"关闭索引 '{index}'"):
            self._client(ctx).indices.close(index=index)

    def get_settings(self, ctx: TaskContext, index: str) -> FlatSettings | None:
        with self._request(ctx, f"获取索引 '{index}' 配置"):
            try:
                response = self._client(ctx).indices.get_settings(
                    index=index, flat_settings=True
                )
            except NotFoundError:
                return None
        entry = response.get(index)
        if not entry or entry.get("settings") is None:
            return None
        return dict(entry["settings"])

    def put_settings(
        self, ctx: TaskContext, index: str, settings: SettingsUpdate
    ) -> None:
        body = {k: None if v is CLEAR else v for k, v in settings.items()}
        with self._request(ctx, f"更新索引 '{index}' 配置"):
            self._client(ctx).indices.put_settings(
                index=index, settings=body, flat_settings=True
            )

    def force_merge(self, ctx: TaskContext, index: str, max_num_segments: int) -> None:
        with self._request(ctx, f"强制合并索引 '{index}'"):
            response = self._client(ctx).indices.forcemerge(
                index=index, max_num_segments=max_num_segments
            )
        shards = response.get("_shards", {})
        failed = shards.get("failed", 0)
        if failed:
            raise ClusterTransportError(
                f"索引 '{index}' 部分合并失败: "
                f"{failed}/{shards.get('total', 0)} 个分片失败"
            )

    def delete_index(self, ctx: TaskContext, index: str) -> None:
        with self._request(ctx, f"删除索引 '{index}'"):
            self._client(ctx).indices.delete(index=index)

    def list_active_recoveries(self, ctx: TaskContext) -> list[dict[str, Any]]:
        with self._request(ctx, "列出分片恢复"):
            rows = self._client(ctx).cat.recovery(
                format="json", active_only=True, h=CAT_RECOVERY_COLUMNS
            )
        return [dict(row) for row in rows]
