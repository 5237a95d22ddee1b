"""Background scheduler for periodic KPI refreshes."""
import logging
import threading
import schedule

logger = logging.getLogger("biogasmonitor.scheduler")


class MonitorScheduler:
    def __init__(self, monitor, interval_seconds=300):
        self.monitor = monitor
        self.interval = interval_seconds
        self._scheduler = schedule.Scheduler()
        self._thread = None
        self._stop = threading.Event()
        self._callbacks = []
        self._consecutive_failures = 0

    def on_refresh(self, callback):
        """Register callback(snapshot, triggered) called after each successful refresh."""
        self._callbacks.append(callback)

    def start(self):
        if self._thread is not None:
            return
        self._stop.clear()
        self._scheduler.every(self.interval).seconds.do(self._refresh_job)

        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()
        logger.info(f"Scheduler started (every {self.interval}s)")

    def stop(self):
        self._stop.set()
        self._scheduler.clear()
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None
        logger.info("Scheduler stopped")

    def _run_loop(self):
        self._refresh_job()
        while not self._stop.is_set():
            self._scheduler.run_pending()
            self._stop.wait(1)

    def _refresh_job(self):
        try:
            snapshot, triggered = self.monitor.refresh()
        except Exception as e:
            self._consecutive_failures += 1
            logger.error(f"Refresh failed ({self._consecutive_failures} consecutive): {e}")
            if self._consecutive_failures >= 5:
                logger.critical("5+ consecutive refresh failures!")
            return

        self._consecutive_failures = 0
        for cb in self._callbacks:
            try:
                cb(snapshot, triggered)
            except Exception as e:
                logger.warning(f"Callback error: {e}")
