import pytest

from movie_browser.config import Settings
from movie_browser.utils.debounce import ScheduledTask, Scheduler


class ManualScheduler(Scheduler):
    """Virtual clock in whole milliseconds; callbacks run on advance_to()."""

    def __init__(self):
        self.now_ms = 0
        self.fired_at = []
        self._entries = []

    def schedule(self, delay, callback):
        entry = {'due': self.now_ms + round(delay * 1000), 'callback': callback}
        entry['task'] = ScheduledTask(lambda: self._entries.remove(entry))
        self._entries.append(entry)
        return entry['task']

    @property
    def pending(self):
        return len(self._entries)

    def advance_to(self, ms):
        while True:
            due = sorted((e for e in self._entries if e['due'] <= ms),
                         key=lambda e: e['due'])
            if not due:
                break
            entry = due[0]
            self._entries.remove(entry)
            self.now_ms = entry['due']
            entry['task'].done = True
            self.fired_at.append(self.now_ms)
            entry['callback']()
        self.now_ms = ms


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def test_settings():
    return Settings(TMDB_TOKEN='test-token', _env_file=None)


@pytest.fixture
def unconfigured_settings():
    return Settings(TMDB_TOKEN=None, _env_file=None)
