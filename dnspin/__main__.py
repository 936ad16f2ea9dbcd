import sys

from dnspin.cli import parse_args
from dnspin.env import config_path, hosts_file, interval, lookup_workers
from dnspin.hosts_config import load_hosts, ConfigError
from dnspin.pinner import Pinner
from dnspin.debug import log


def start(argv=None):
    # Parse args first (handles --version and exits)
    parse_args(argv)

    path = config_path()
    try:
        hosts = load_hosts(path)
    except ConfigError as e:
        log(f'Error loading {path}: {e}', 'critical')
        sys.exit(1)

    pinner = Pinner(hosts, hosts_file(), interval=interval(), workers=lookup_workers())
    pinner.run()


if __name__ == '__main__':
    start()
