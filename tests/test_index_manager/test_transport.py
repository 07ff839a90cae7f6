"""ElasticsearchTransport 单元测试."""

import unittest
from unittest.mock import MagicMock, patch

from elasticsearch.exceptions import ConnectionError as ESConnectionError
from elasticsearch.exceptions import NotFoundError

from elasticmaint.index_manager import (
    CLEAR,
    ClusterTransportError,
    ElasticsearchTransport,
)
from elasticmaint.tasks import TaskCancelledError, TaskContext


def _not_found_error() -> NotFoundError:
    return NotFoundError("index_not_found_exception", MagicMock(status=404), {})


class TestElasticsearchTransport(unittest.TestCase):
    """ElasticsearchTransport 类单元测试."""

    def setUp(self):
        """设置测试环境."""
        self.es_client = MagicMock()
        self.transport = ElasticsearchTransport(self.es_client)
        self.ctx = TaskContext()

    def test_requires_client(self):
        """测试客户端不能为 None."""
        with self.assertRaises(ValueError):
            ElasticsearchTransport(None)

    def test_from_url(self):
        """测试根据地址创建客户端."""
        with patch("elasticmaint.index_manager.transport.Elasticsearch") as mock_es:
            transport = ElasticsearchTransport.from_url("http://127.0.0.1:9200")
        mock_es.assert_called_once_with("http://127.0.0.1:9200")
        self.assertIs(transport.es_client, mock_es.return_value)

    def test_from_url_empty(self):
        with self.assertRaises(ValueError):
            ElasticsearchTransport.from_url("")

    def test_list_indices(self):
        """测试列出索引."""
        self.es_client.cat.indices.return_value = [
            {"index": "a", "status": "open", "pri": "1", "pri.segments.count": "3"}
        ]

        rows = self.transport.list_indices(self.ctx)

        self.assertEqual(rows[0]["index"], "a")
        kwargs = self.es_client.cat.indices.call_args.kwargs
        self.assertEqual(kwargs["format"], "json")
        self.assertIn("pri.segments.count", kwargs["h"])

    def test_open_index_waits_for_shards(self):
        """测试打开索引时等待所有分片."""
        self.transport.open_index(self.ctx, "a")
        self.es_client.indices.open.assert_called_once_with(
            index="a", wait_for_active_shards="all"
        )

    def test_close_index(self):
        self.transport.close_index(self.ctx, "a")
        self.es_client.indices.close.assert_called_once_with(index="a")

    def test_get_settings(self):
        """测试获取扁平化配置."""
        self.es_client.indices.get_settings.return_value = {
            "a": {"settings": {"index.codec": "best_compression"}}
        }

        settings = self.transport.get_settings(self.ctx, "a")

        self.assertEqual(settings, {"index.codec": "best_compression"})
        self.es_client.indices.get_settings.assert_called_once_with(
            index="a", flat_settings=True
        )

    def test_get_settings_missing_entry(self):
        """测试响应中没有该索引."""
        self.es_client.indices.get_settings.return_value = {}
        self.assertIsNone(self.transport.get_settings(self.ctx, "a"))

    def test_get_settings_not_found(self):
        """测试索引不存在."""
        self.es_client.indices.get_settings.side_effect = _not_found_error()
        self.assertIsNone(self.transport.get_settings(self.ctx, "a"))

    def test_put_settings_clear_becomes_null(self):
        """测试 CLEAR 转换为 null."""
        self.transport.put_settings(
            self.ctx,
            "a",
            {
                "index.routing.allocation.exclude.disktype": CLEAR,
                "index.routing.allocation.require.disktype": "hdd",
            },
        )
        self.es_client.indices.put_settings.assert_called_once_with(
            index="a",
            settings={
                "index.routing.allocation.exclude.disktype": None,
                "index.routing.allocation.require.disktype": "hdd",
            },
            flat_settings=True,
        )

    def test_force_merge(self):
        self.es_client.indices.forcemerge.return_value = {
            "_shards": {"total": 2, "successful": 2, "failed": 0}
        }
        self.transport.force_merge(self.ctx, "a", 1)
        self.es_client.indices.forcemerge.assert_called_once_with(
            index="a", max_num_segments=1
        )

    def test_force_merge_partial_failure(self):
        """测试部分分片合并失败."""
        self.es_client.indices.forcemerge.return_value = {
            "_shards": {"total": 2, "successful": 1, "failed": 1}
        }
        with self.assertRaisesRegex(ClusterTransportError, "1/2"):
            self.transport.force_merge(self.ctx, "a", 1)

    def test_delete_index(self):
        self.transport.delete_index(self.ctx, "a")
        self.es_client.indices.delete.assert_called_once_with(index="a")

    def test_list_active_recoveries(self):
        """测试列出进行中的分片恢复."""
        self.es_client.cat.recovery.return_value = [
            {"index": "a", "shard": "0", "bytes_percent": "12.5%"}
        ]
        rows = self.transport.list_active_recoveries(self.ctx)
        self.assertEqual(rows, [{"index": "a", "shard": "0", "bytes_percent": "12.5%"}])
        kwargs = self.es_client.cat.recovery.call_args.kwargs
        self.assertTrue(kwargs["active_only"])

    def test_api_error_wrapped(self):
        """测试客户端异常包装为 ClusterTransportError 并保留原因."""
        error = _not_found_error()
        self.es_client.indices.delete.side_effect = error
        with self.assertRaises(ClusterTransportError) as cm:
            self.transport.delete_index(self.ctx, "a")
        self.assertIs(cm.exception.__cause__, error)

    def test_connection_error_wrapped(self):
        """测试连接异常包装为 ClusterTransportError."""
        self.es_client.indices.close.side_effect = ESConnectionError("refused")
        with self.assertRaisesRegex(ClusterTransportError, "关闭索引 'a'"):
            self.transport.close_index(self.ctx, "a")

    def test_cancelled_before_request(self):
        """测试上下文取消后不发起请求."""
        self.ctx.cancel()
        with self.assertRaises(TaskCancelledError):
            self.transport.delete_index(self.ctx, "a")
        self.es_client.indices.delete.assert_not_called()

    def test_error_after_cancel_is_cancellation(self):
        """测试请求期间取消时抛出取消异常而不是通信异常."""

        def _close(**kwargs):
            self.ctx.cancel()
            raise ESConnectionError("aborted")

        self.es_client.indices.close.side_effect = _close
        with self.assertRaises(TaskCancelledError):
            self.transport.close_index(self.ctx, "a")

    def test_deadline_sets_request_timeout(self):
        """测试截止时间作为 request_timeout 传给客户端."""
        ctx = TaskContext(timeout=30)
        self.transport.close_index(ctx, "a")
        self.es_client.options.assert_called_once()
        timeout = self.es_client.options.call_args.kwargs["request_timeout"]
        self.assertGreater(timeout, 0)
        self.assertLessEqual(timeout, 30)
        self.es_client.options.return_value.indices.close.assert_called_once_with(
            index="a"
        )

    def test_no_deadline_uses_client(self):
        """测试未设截止时间时直接使用客户端."""
        self.transport.close_index(self.ctx, "a")
        self.es_client.options.assert_not_called()
