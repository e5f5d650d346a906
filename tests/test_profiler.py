import asyncio
import unittest

from core.profiler import Profiler, Stopwatch


class Timed:
    @Profiler.profile
    def add(self, a, b):
        return a + b

    @Profiler.profile
    async def slow_add(self, a, b):
        await asyncio.sleep(0.01)
        return a + b


class TestStopwatch(unittest.IsolatedAsyncioTestCase):
    async def test_elapsed_ms(self):
        watch = Stopwatch()
        await asyncio.sleep(0.02)
        self.assertGreaterEqual(watch.elapsed_ms, 15)
        watch.restart()
        self.assertLess(watch.elapsed_ms, 15)


class TestProfiler(unittest.IsolatedAsyncioTestCase):
    async def test_wraps_sync_and_async(self):
        t = Timed()
        with self.assertLogs("core.profiler", level="DEBUG") as logs:
            self.assertEqual(t.add(1, 2), 3)
            self.assertEqual(await t.slow_add(2, 3), 5)
        self.assertTrue(any("Timed.add" in line for line in logs.output))
        self.assertTrue(any("Timed.slow_add" in line for line in logs.output))
        self.assertEqual(Timed.add.__name__, "add")


if __name__ == "__main__":
    unittest.main()
