import unittest

from PyQt6.QtCore import QCoreApplication, QEventLoop, QTimer

from periodic_timer import QtPeriodicTask, interval_to_ms


class TestIntervalToMs(unittest.TestCase):
    def test_rounding(self):
        self.assertEqual(interval_to_ms(0.5), 500)
        self.assertEqual(interval_to_ms(60 / 90), 667)
        self.assertEqual(interval_to_ms(60 / 240), 250)
        self.assertEqual(interval_to_ms(0.0), 1)


class TestQtPeriodicTask(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QCoreApplication.instance() or QCoreApplication([])

    def run_loop(self, ms):
        loop = QEventLoop()
        QTimer.singleShot(ms, loop.quit)
        loop.exec()

    def test_fires_repeatedly_until_cancelled(self):
        hits = []
        task = QtPeriodicTask(0.01, lambda: hits.append(1))
        self.assertTrue(task.active)
        self.assertEqual(task.interval_s, 0.01)

        self.run_loop(120)
        task.cancel()
        fired = len(hits)
        self.assertGreaterEqual(fired, 2)
        self.assertFalse(task.active)

        self.run_loop(60)
        self.assertEqual(len(hits), fired)

    def test_cancel_inside_callback(self):
        hits = []
        task = None

        def on_tick():
            hits.append(1)
            task.cancel()
            task.cancel()

        task = QtPeriodicTask(0.005, on_tick)
        self.run_loop(80)
        self.assertEqual(len(hits), 1)
        self.assertFalse(task.active)


if __name__ == "__main__":
    unittest.main()
