"""测试公共 fixtures."""

from typing import Any

import pytest

from elasticmaint.index_manager import CLEAR, ClusterOperations
from elasticmaint.tasks import TaskContext


class FakeTransport:
    """内存中的集群通信实现.

    记录每次调用，可通过 failures 指定某个方法抛出的异常。
    """

    def __init__(self) -> None:
        self.indices: dict[str, dict[str, Any]] = {}
        self.settings: dict[str, dict[str, Any]] = {}
        self.recoveries: list[list[dict[str, Any]]] = []
        self.calls: list[tuple[Any, ...]] = []
        self.failures: dict[str, Exception] = {}

    def add_index(
        self,
        name: str,
        status: str = "open",
        pri: int = 1,
        segments: int = 1,
        settings: dict[str, Any] | None = None,
    ) -> None:
        self.indices[name] = {"status": status, "pri": pri, "segments": segments}
        self.settings[name] = dict(settings or {})

    def _call(self, ctx: TaskContext, name: str, *args: Any) -> None:
        ctx.check()
        self.calls.append((name, *args))
        if name in self.failures:
            raise self.failures[name]

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def list_indices(self, ctx: TaskContext) -> list[dict[str, Any]]:
        self._call(ctx, "list_indices")
        return [
            {
                "index": name,
                "status": info["status"],
                "pri": str(info["pri"]),
                "pri.segments.count": str(info["segments"]),
            }
            for name, info in self.indices.items()
        ]

    def open_index(self, ctx: TaskContext, index: str) -> None:
        self._call(ctx, "open_index", index)
        self.indices[index]["status"] = "open"

    def close_index(self, ctx: TaskContext, index: str) -> None:
        self._call(ctx, "close_index", index)
        self.indices[index]["status"] = "close"

    def get_settings(self, ctx: TaskContext, index: str) -> dict[str, Any] | None:
        self._call(ctx, "get_settings", index)
        if index not in self.settings:
            return None
        return dict(self.settings[index])

    def put_settings(self, ctx: TaskContext, index: str, settings: dict) -> None:
        self._call(ctx, "put_settings", index, dict(settings))
        current = self.settings.setdefault(index, {})
        for key, value in settings.items():
            if value is CLEAR:
                current.pop(key, None)
            else:
                current[key] = value

    def force_merge(self, ctx: TaskContext, index: str, max_num_segments: int) -> None:
        self._call(ctx, "force_merge", index, max_num_segments)
        info = self.indices[index]
        info["segments"] = info["pri"] * max_num_segments

    def delete_index(self, ctx: TaskContext, index: str) -> None:
        self._call(ctx, "delete_index", index)
        self.indices.pop(index, None)
        self.settings.pop(index, None)

    def list_active_recoveries(self, ctx: TaskContext) -> list[dict[str, Any]]:
        self._call(ctx, "list_active_recoveries")
        if self.recoveries:
            return self.recoveries.pop(0)
        return []


@pytest.fixture
def transport() -> FakeTransport:
    """创建内存中的集群通信实现."""
    return FakeTransport()


@pytest.fixture
def ops(transport: FakeTransport) -> ClusterOperations:
    """创建基于 FakeTransport 的 ClusterOperations."""
    return ClusterOperations(transport)


@pytest.fixture
def ctx() -> TaskContext:
    """创建任务上下文."""
    return TaskContext(timeout=30)
