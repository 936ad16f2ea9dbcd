"""Outcome of one lookup for one pinned host."""


class ResolutionResult:
    kind = None
    ip = None
    error = None

    def __eq__(self, other):
        return (type(self) is type(other)
                and self.ip == other.ip
                and self.error == other.error)

    def __hash__(self):
        return hash((self.kind, self.ip))

    def __repr__(self):
        return self.kind


class Unset(ResolutionResult):
    """No lookup has happened yet."""
    kind = 'UNSET'


class Resolved(ResolutionResult):
    kind = 'RESOLVED'

    def __init__(self, ip: str):
        self.ip = ip

    def __repr__(self):
        return self.ip


class NoRecord(ResolutionResult):
    """The server answered, but had no A record for the name."""
    kind = 'MISSING'


class LookupFailed(ResolutionResult):
    """The server could not be reached or gave an unusable answer.

    The error is kept for logging only; it is never written to the hosts file.
    """
    kind = 'ERROR'

    def __init__(self, error=None):
        self.error = error

    def __eq__(self, other):
        # errors carry exception instances, which never compare equal
        return type(self) is type(other)

    def __hash__(self):
        return hash(self.kind)

    def __repr__(self):
        return f'ERROR ({self.error})' if self.error else 'ERROR'
