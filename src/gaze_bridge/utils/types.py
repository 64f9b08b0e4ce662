class TimeoutToken:
    """Sentinel type returned when a bounded receive got no data."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "<Timeout>"


TIMEOUT = TimeoutToken()
