"""
Host list loading for dnspin.

The host list is a plain text file, one pinned host per line:

    # hostname          server
    api.internal        10.0.0.53
    db.internal         ns1.example.net

Blank lines and lines starting with '#' are ignored.
"""

from dnspin.debug import log
from dnspin.results import Unset


class ConfigError(Exception):
    pass


class HostEntry:
    def __init__(self, hostname, server):
        self.hostname = hostname
        self.server = server
        self.last_result = Unset()

    def __repr__(self):
        return f'HostEntry({self.hostname!r}, {self.server!r}, {self.last_result!r})'


def parse_hosts(lines):
    hosts = []
    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip('\r\n')
        if not line.strip() or line.startswith('#'):
            continue

        # now split our line into two parts, hostname and dns server
        fields = line.split()
        if len(fields) != 2:
            raise ConfigError(f'Unexpected input on line {lineno}: {line}')

        hosts.append(HostEntry(fields[0], fields[1]))
    return hosts


def load_hosts(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            hosts = parse_hosts(f)
    except OSError as e:
        raise ConfigError(f'Could not read {path}: {e}') from e
    except UnicodeDecodeError as e:
        raise ConfigError(f'{path} is not valid UTF-8: {e}') from e

    log(f'Loaded {len(hosts)} pinned host(s) from {path}', 'debug')
    return hosts
