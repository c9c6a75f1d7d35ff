"""Test utilities and shared mocks."""


class MockLogger:
    """Mock logger that records messages per level."""

    def __init__(self):
        self.records = []

    def _record(self, level, msg, *args, **kwargs):
        self.records.append((level, msg % args if args else msg))

    def debug(self, *args, **kwargs): self._record("debug", *args, **kwargs)
    def info(self, *args, **kwargs): self._record("info", *args, **kwargs)
    def warning(self, *args, **kwargs): self._record("warning", *args, **kwargs)
    def error(self, *args, **kwargs): self._record("error", *args, **kwargs)
    def exception(self, *args, **kwargs): self._record("exception", *args, **kwargs)

    def messages(self, level):
        return [msg for lvl, msg in self.records if lvl == level]
