"""索引维护操作核心工具类."""

import logging
from typing import Any

from elasticsearch import Elasticsearch

from ..tasks import FailSafeTask, LeafTask, TaskContext, serial, serial_fail_safe, task
from .exceptions import IndexNotFoundError, SettingsNotFoundError
from .models import (
    CLEAR,
    ElasticsearchIndex,
    FlatSettings,
    SettingsUpdate,
)
from .transport import ClusterTransport, ElasticsearchTransport
from .waiter import DEFAULT_POLL_INTERVAL, RecoveryWaiter

logger = logging.getLogger(__name__)

CODEC_BEST_COMPRESSION = "best_compression"
DISKTYPE_HDD = "hdd"

SETTING_CODEC = "index.codec"
SETTING_BLOCKS_WRITE = "index.blocks.write"
SETTING_EXCLUDE_DISKTYPE = "index.routing.allocation.exclude.disktype"
SETTING_REQUIRE_DISKTYPE = "index.routing.allocation.require.disktype"


def _validate_update(settings: SettingsUpdate) -> dict[str, Any]:
    """校验配置更新，清除配置项必须显式使用 CLEAR.

    Raises:
        ValueError: 配置为空或包含 None 值时抛出
    """
    if not settings:
        raise ValueError("settings 不能为空")
    for key, value in settings.items():
        if value is None:
            raise ValueError(f"配置项 '{key}' 的值为 None，清除配置请使用 CLEAR")
    return dict(settings)


def _is_true(value: Any) -> bool:
    """扁平化配置中的布尔值可能是字符串."""
    return value is True or str(value).lower() == "true"


class ClusterOperations:
    """索引维护操作集合.

    每个方法返回一个待执行的任务，通过 run_task() 绑定上下文执行。
    原子操作直接对应一次集群请求；组合操作使用串行和带补偿任务，
    保证索引不会停留在关闭或只读的中间状态。所有操作都直接查询集群，
    不缓存任何索引状态。

    Args:
        transport: 集群通信实现

    Examples:
        >>> ops = ClusterOperations.from_client(es_client)
        >>> ctx = TaskContext(timeout=3600)
        >>> indices = run_task(ops.list_indices(), ctx)
        >>> run_task(ops.merge_index("nginx-2020-01-01"), ctx)
    """

    def __init__(self, transport: ClusterTransport) -> None:
        if transport is None:
            raise ValueError("transport 不能为 None")
        self.transport = transport

    @classmethod
    def from_client(cls, es_client: Elasticsearch) -> "ClusterOperations":
        """基于 Elasticsearch 客户端创建."""
        return cls(ElasticsearchTransport(es_client))

    def list_indices(self) -> LeafTask:
        """列出所有索引，任务结果为 list[ElasticsearchIndex]."""

        def _list_indices(ctx: TaskContext) -> list[ElasticsearchIndex]:
            rows = self.transport.list_indices(ctx)
            return [ElasticsearchIndex.from_cat_row(row) for row in rows]

        return task(_list_indices, "list_indices")

    def open_index(self, index: str) -> LeafTask:
        """打开索引，等待所有分片就绪."""

        def _open_index(ctx: TaskContext) -> None:
            self.transport.open_index(ctx, index)
            logger.info(f"索引 '{index}' 已打开")

        return task(_open_index, f"open_index[{index}]")

    def close_index(self, index: str) -> LeafTask:
        """关闭索引."""

        def _close_index(ctx: TaskContext) -> None:
            self.transport.close_index(ctx, index)
            logger.info(f"索引 '{index}' 已关闭")

        return task(_close_index, f"close_index[{index}]")

    def _fetch_settings(self, ctx: TaskContext, index: str) -> FlatSettings:
        settings = self.transport.get_settings(ctx, index)
        if settings is None:
            raise SettingsNotFoundError(f"无法找到索引 '{index}' 的配置")
        return settings

    def get_settings(self, index: str) -> LeafTask:
        """获取扁平化的索引配置.

        任务结果为 FlatSettings；索引配置不存在时抛出 SettingsNotFoundError。
        """

        def _get_settings(ctx: TaskContext) -> FlatSettings:
            return self._fetch_settings(ctx, index)

        return task(_get_settings, f"get_settings[{index}]")

    def set_settings(self, index: str, settings: SettingsUpdate) -> LeafTask:
        """更新索引配置.

        Args:
            index: 索引名称
            settings: 扁平化的配置更新，值为 CLEAR 的配置项会被清除

        Raises:
            ValueError: 配置为空或包含 None 值时抛出

        Example:
            >>> ops.set_settings("nginx-2020-01-01", {"index.blocks.write": CLEAR})
        """
        update = _validate_update(settings)

        def _set_settings(ctx: TaskContext) -> None:
            self.transport.put_settings(ctx, index, update)
            logger.info(f"索引 '{index}' 配置更新成功: {sorted(update)}")

        return task(_set_settings, f"set_settings[{index}]")

    def check_best_compression(self, index: str) -> LeafTask:
        """检查索引是否已使用最佳压缩，任务结果为 bool."""

        def _check_best_compression(ctx: TaskContext) -> bool:
            settings = self._fetch_settings(ctx, index)
            return settings.get(SETTING_CODEC) == CODEC_BEST_COMPRESSION

        return task(_check_best_compression, f"check_best_compression[{index}]")

    def set_best_compression(self, index: str) -> FailSafeTask:
        """将索引编解码器设置为最佳压缩.

        修改 codec 需要关闭索引，无论修改成功与否都会重新打开索引。
        """
        return serial_fail_safe(
            serial(
                self.close_index(index),
                self.set_settings(index, {SETTING_CODEC: CODEC_BEST_COMPRESSION}),
            ),
            self.open_index(index),
            name=f"set_best_compression[{index}]",
        )

    def check_routing_hdd(self, index: str) -> LeafTask:
        """检查索引是否已迁移到 HDD 节点，任务结果为 bool."""

        def _check_routing_hdd(ctx: TaskContext) -> bool:
            settings = self._fetch_settings(ctx, index)
            exclude = settings.get(SETTING_EXCLUDE_DISKTYPE)
            require = settings.get(SETTING_REQUIRE_DISKTYPE)
            return not exclude and require == DISKTYPE_HDD

        return task(_check_routing_hdd, f"check_routing_hdd[{index}]")

    def set_routing_hdd(self, index: str) -> LeafTask:
        """将索引分片迁移到 HDD 节点，分配配置为动态配置，无需关闭索引."""
        return self.set_settings(
            index,
            {
                SETTING_EXCLUDE_DISKTYPE: CLEAR,
                SETTING_REQUIRE_DISKTYPE: DISKTYPE_HDD,
            },
        )

    def set_read_only(self, index: str, read_only: bool) -> LeafTask:
        """设置或清除索引写入阻塞."""
        return self.set_settings(
            index, {SETTING_BLOCKS_WRITE: True if read_only else CLEAR}
        )

    def force_merge(self, index: str, max_num_segments: int = 1) -> LeafTask:
        """强制合并索引段."""
        if max_num_segments < 1:
            raise ValueError(f"max_num_segments 必须大于 0，当前值: {max_num_segments}")

        def _force_merge(ctx: TaskContext) -> None:
            self.transport.force_merge(ctx, index, max_num_segments)
            logger.info(
                f"索引 '{index}' 强制合并成功 (max_num_segments={max_num_segments})"
            )

        return task(_force_merge, f"force_merge[{index}]")

    def check_merged(self, index: str) -> LeafTask:
        """查询索引当前是否已完全合并，任务结果为 bool.

        Raises:
            IndexNotFoundError: 索引不存在时抛出
        """

        def _check_merged(ctx: TaskContext) -> bool:
            for row in self.transport.list_indices(ctx):
                if row.get("index") == index:
                    return ElasticsearchIndex.from_cat_row(row).merged
            raise IndexNotFoundError(f"索引 '{index}' 不存在")

        return task(_check_merged, f"check_merged[{index}]")

    def merge_index(self, index: str) -> FailSafeTask:
        """将索引合并为 1 个段.

        合并前设置只读，无论合并成功与否都会将只读恢复为调用前的值。
        索引原本已只读时不修改只读配置。
        """
        previous: dict[str, Any] = {}

        def _block_write(ctx: TaskContext) -> None:
            settings = self._fetch_settings(ctx, index)
            value = settings.get(SETTING_BLOCKS_WRITE)
            previous[SETTING_BLOCKS_WRITE] = value
            if _is_true(value):
                logger.debug(f"索引 '{index}' 已处于只读状态")
                return
            self.transport.put_settings(ctx, index, {SETTING_BLOCKS_WRITE: True})
            logger.info(f"索引 '{index}' 已设置只读")

        def _restore_write(ctx: TaskContext) -> None:
            # 读取配置失败时未做任何修改
            if SETTING_BLOCKS_WRITE not in previous:
                return
            value = previous.pop(SETTING_BLOCKS_WRITE)
            if _is_true(value):
                return
            restored = CLEAR if value is None else value
            self.transport.put_settings(ctx, index, {SETTING_BLOCKS_WRITE: restored})
            logger.info(f"索引 '{index}' 只读配置已恢复")

        return serial_fail_safe(
            serial(
                task(_block_write, f"block_write[{index}]"),
                self.force_merge(index, 1),
            ),
            task(_restore_write, f"restore_write[{index}]"),
            name=f"merge_index[{index}]",
        )

    def delete_index(self, index: str) -> LeafTask:
        """删除索引，该操作不可逆."""

        def _delete_index(ctx: TaskContext) -> None:
            self.transport.delete_index(ctx, index)
            logger.info(f"索引 '{index}' 删除成功")

        return task(_delete_index, f"delete_index[{index}]")

    def list_recoveries(self) -> LeafTask:
        """列出正在进行的分片恢复，任务结果为 list[ElasticsearchRecovery]."""
        return task(RecoveryWaiter(self.transport).poll, "list_recoveries")

    def wait_recoveries(self, interval: float = DEFAULT_POLL_INTERVAL) -> LeafTask:
        """等待集群分片恢复完成，见 RecoveryWaiter."""
        return RecoveryWaiter(self.transport, interval=interval).task()
