"""
Managed region handling for the system hosts file.

dnspin owns exactly one block of the hosts file, delimited by two marker
lines. Everything before and after that block belongs to whoever else edits
the file and is written back exactly as it was read:

    127.0.0.1   localhost
    ### DNSPIN BEGIN ###
    203.0.113.5	api.internal
    # db.internal: cached value, error during lookup to 10.0.0.53
    198.51.100.7	db.internal
    ### DNSPIN END #####
    # hand edited lines below are kept too

The block is the only record of what was pinned on the previous cycle: it is
parsed back every cycle, which is also where cached fallbacks come from when
a lookup fails.
"""

from dnspin.atomic import replace_file
from dnspin.debug import debug, log
from dnspin.results import Resolved, LookupFailed, Unset

BEGIN_MARKER = '### DNSPIN BEGIN ###'
END_MARKER = '### DNSPIN END #####'

PRE_REGION = 0
IN_REGION = 1
POST_REGION = 2

# Hosts files are not guaranteed to be UTF-8; keep unknown bytes intact
ENCODING = 'utf-8'
ENCODING_ERRORS = 'surrogateescape'


class ManagedRegionError(ValueError):
    pass


def _strip_eol(line: str) -> str:
    return line.rstrip('\r\n')


class HostsFile:
    """A hosts file split into the lines before, inside and after the managed region."""

    def __init__(self, pre_lines=None, managed_lines=None, post_lines=None):
        self.pre_lines = list(pre_lines or [])
        self.managed_lines = list(managed_lines or [])
        self.post_lines = list(post_lines or [])

    @classmethod
    def parse(cls, lines):
        """
        Split lines (line terminators included) into the three regions.

        Markers are matched against the whole line. A file without markers
        has every line in the pre region.
        """
        hosts_file = cls()
        location = PRE_REGION

        for lineno, line in enumerate(lines, start=1):
            text = _strip_eol(line)
            if text == BEGIN_MARKER:
                if location != PRE_REGION:
                    raise ManagedRegionError(f'line {lineno}: unexpected {BEGIN_MARKER!r}, only one managed region is allowed')
                location = IN_REGION
            elif text == END_MARKER:
                if location != IN_REGION:
                    raise ManagedRegionError(f'line {lineno}: {END_MARKER!r} without a matching {BEGIN_MARKER!r}')
                location = POST_REGION
            elif location == PRE_REGION:
                hosts_file.pre_lines.append(line)
            elif location == IN_REGION:
                hosts_file.managed_lines.append(line)
            else:
                hosts_file.post_lines.append(line)

        if location == IN_REGION:
            raise ManagedRegionError(f'{BEGIN_MARKER!r} is never closed by {END_MARKER!r}')

        return hosts_file

    def mappings(self):
        """Hostname to IP mapping currently persisted in the managed region."""
        current_mappings = {}
        for line in self.managed_lines:
            # comments are fallback or error notes from an earlier cycle
            if line.startswith('#'):
                continue

            fields = line.split()
            # if this line is a host mapping, save it
            if len(fields) == 2:
                current_mappings[fields[1]] = fields[0]
        return current_mappings

    def render(self, hosts, current_mappings=None):
        """Full file content with the managed region rebuilt for hosts."""
        if current_mappings is None:
            current_mappings = self.mappings()

        out = list(self.pre_lines)
        if out and not out[-1].endswith(('\n', '\r')):
            out[-1] += '\n'

        out.append(BEGIN_MARKER + '\n')
        out.extend(line + '\n' for line in render_region(hosts, current_mappings))
        out.append(END_MARKER + '\n')
        out.extend(self.post_lines)
        return ''.join(out)


def needs_rewrite(current_mappings, hosts):
    if len(current_mappings) != len(hosts):
        return True
    for host in hosts:
        ip_address = current_mappings.get(host.hostname)
        if ip_address is None or ip_address != host.last_result.ip:
            return True
    return False


def render_region(hosts, current_mappings):
    """Managed region lines for hosts, in host list order."""
    lines = []
    for host in hosts:
        result = host.last_result
        if isinstance(result, Resolved):
            lines.append(f'{result.ip}\t{host.hostname}')
        elif isinstance(result, LookupFailed):
            # we had trouble looking this up, use the old one if it exists
            ip_address = current_mappings.get(host.hostname)
            if ip_address is not None:
                lines.append(f'# {host.hostname}: cached value, error during lookup to {host.server}')
                lines.append(f'{ip_address}\t{host.hostname}')
            else:
                lines.append(f'# {host.hostname}: error during lookup to {host.server}')
        # NoRecord: the server has no address for it, leave it out
    return lines


def merge(lines, hosts):
    """
    New content for a hosts file made of lines, or None if it is already
    up to date for the results recorded on hosts.
    """
    pending = [host.hostname for host in hosts if isinstance(host.last_result, Unset)]
    if pending:
        raise ValueError(f'lookup cycle incomplete, no result for: {", ".join(pending)}')

    hosts_file = HostsFile.parse(lines)
    current_mappings = hosts_file.mappings()
    if not needs_rewrite(current_mappings, hosts):
        return None

    content = hosts_file.render(hosts, current_mappings)
    if content == ''.join(lines):
        # e.g. the same lookup failing again with the same cached fallback
        log('Managed region differs from lookups but renders identically', 'debug')
        return None
    return content


def read_lines(path):
    with open(path, 'r', encoding=ENCODING, errors=ENCODING_ERRORS, newline='') as f:
        return f.readlines()


@debug('update_hosts_file')
def update_hosts_file(path, hosts, write=True):
    """
    Bring the managed region of path in line with hosts.

    Returns (changed, content). content is the new file content when a
    change is needed, None otherwise. Nothing is written when write is False.
    """
    content = merge(read_lines(path), hosts)
    if content is None:
        return False, None

    if write:
        replace_file(path, content)
    return True, content
