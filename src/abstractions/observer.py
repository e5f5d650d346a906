class RaceObserver:
    """
    Base class for anything that wants to watch a race. Every hook is a no-op,
    so subclasses override only what they need.
    """

    def on_race_started(self, total: int) -> None:
        """Called once, after every probe has been launched."""

    def on_probe_settled(self, outcome) -> None:
        """Called once per probe, in completion order."""

    def on_fastest(self, outcome) -> None:
        """Called at most once, when the first successful outcome is latched."""

    def on_race_finished(self, result) -> None:
        """Called once with the ranked RaceResult."""
