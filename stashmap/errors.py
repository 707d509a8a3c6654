class StashError(Exception):
    """Base class for every failure the stash reader reports."""


class InputSizeMismatch(StashError):
    def __init__(self, expected, actual):
        super().__init__(f"stash snapshot must be {expected} bytes, got {actual}")
        self.expected = expected
        self.actual = actual


class UnsupportedVersion(StashError):
    def __init__(self, build_id):
        super().__init__(f"unsupported game version (build id {build_id})")
        self.build_id = build_id


class SessionUnavailable(StashError):
    pass


class WrongTitle(StashError):
    def __init__(self, title_id):
        super().__init__(f"unexpected title 0x{title_id:016X} is running")
        self.title_id = title_id


class MemoryReadError(StashError):
    pass


class ConfigError(StashError):
    pass
