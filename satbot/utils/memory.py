# satbot/utils/memory.py
import gc
import os
import threading
import time
from statistics import mean

import psutil


class MemoryTracker:
    """
    Samples the memory of the current process in a background thread while
    the ``with`` block runs. Usage is reported in KB relative to the memory
    in use when the block was entered.
    """

    def __init__(self, sample_interval=0.001):
        self.process = psutil.Process(os.getpid())
        self.interval = sample_interval
        self._baseline = None
        self._samples = []
        self._running = False
        self._thread = None
        self.min_usage = 0.0
        self.avg_usage = 0.0
        self.max_usage = 0.0

    def __enter__(self):
        gc.collect()
        self._baseline = self._get_usage()
        self._samples = []
        self._running = True
        self._thread = threading.Thread(target=self._sampler, daemon=True)
        self._thread.start()
        return self

    def _get_usage(self):
        try:
            return self.process.memory_full_info().uss / 1024
        except (AttributeError, psutil.AccessDenied):
            return self.process.memory_info().rss / 1024

    def _sampler(self):
        get = self._get_usage
        base = self._baseline
        while self._running:
            usage = get() - base
            self._samples.append(max(0.0, usage))
            time.sleep(self.interval)

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._running = False
        if self._thread:
            self._thread.join()
        if not self._samples:
            self._samples = [0.0]
        self.min_usage = min(self._samples)
        self.avg_usage = mean(self._samples)
        self.max_usage = max(self._samples)
