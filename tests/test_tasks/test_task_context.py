"""TaskContext 单元测试."""

import threading
import time
import unittest

from elasticmaint.tasks import (
    TaskCancelledError,
    TaskContext,
    TaskDeadlineExceededError,
)


class TestTaskContext(unittest.TestCase):
    """TaskContext 类单元测试."""

    def test_initial_state(self):
        """测试初始状态."""
        ctx = TaskContext()
        self.assertFalse(ctx.cancelled)
        self.assertFalse(ctx.expired)
        self.assertIsNone(ctx.remaining())
        self.assertIsNone(ctx.error())
        ctx.check()

    def test_cancel(self):
        """测试取消."""
        ctx = TaskContext()
        ctx.cancel("停止维护")
        self.assertTrue(ctx.cancelled)
        self.assertTrue(ctx.done)
        with self.assertRaisesRegex(TaskCancelledError, "停止维护"):
            ctx.check()

    def test_deadline(self):
        """测试超时."""
        ctx = TaskContext(timeout=0)
        self.assertTrue(ctx.expired)
        self.assertEqual(ctx.remaining(), 0.0)
        with self.assertRaises(TaskDeadlineExceededError):
            ctx.check()

    def test_deadline_is_cancellation(self):
        """测试超时异常属于取消异常."""
        self.assertTrue(issubclass(TaskDeadlineExceededError, TaskCancelledError))

    def test_remaining(self):
        """测试剩余时间."""
        ctx = TaskContext(timeout=60)
        remaining = ctx.remaining()
        self.assertIsNotNone(remaining)
        self.assertGreater(remaining, 50)
        self.assertLessEqual(remaining, 60)

    def test_wait_timeout(self):
        """测试等待到期后返回 False."""
        ctx = TaskContext()
        self.assertFalse(ctx.wait(0.01))

    def test_wait_interrupted_by_cancel(self):
        """测试其他线程取消时等待提前返回."""
        ctx = TaskContext()
        timer = threading.Timer(0.05, ctx.cancel)
        timer.start()
        start = time.monotonic()
        try:
            self.assertTrue(ctx.wait(10))
        finally:
            timer.cancel()
        self.assertLess(time.monotonic() - start, 5)

    def test_wait_bounded_by_deadline(self):
        """测试等待不会超过截止时间."""
        ctx = TaskContext(timeout=0.05)
        start = time.monotonic()
        self.assertTrue(ctx.wait(10))
        self.assertLess(time.monotonic() - start, 5)

    def test_shielded(self):
        """测试屏蔽上下文不受原上下文取消影响."""
        ctx = TaskContext()
        ctx.cancel()
        shielded = ctx.shielded()
        self.assertFalse(shielded.cancelled)
        shielded.check()
