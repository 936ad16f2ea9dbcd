"""Command-line interface and argument parsing for dnspin."""

import argparse

VERSION = '1.0.0'

# Global args storage (set by parse_args)
_args = None


def parse_args(argv=None):
    """Parse command-line arguments. Handles --version and exits."""
    global _args
    parser = argparse.ArgumentParser(description='Pin hostnames in the hosts file to answers from chosen DNS servers')
    parser.add_argument('--version', action='version', version=f'dnspin {VERSION}')
    parser.add_argument('-c', '--config', help='Host list to pin (default: $DNSPIN_CONFIG or /etc/dnspin/dnspin.conf)')
    parser.add_argument('--hosts-file', help='Hosts file to manage (default: $HOSTS_FILE or /etc/hosts)')
    parser.add_argument('--interval', type=float, help='Seconds between lookup cycles (default: $INTERVAL or 5)')
    parser.add_argument('--dry-run', action='store_true', help='Run one cycle and print the result without writing')
    _args = parser.parse_args(argv)
    return _args


def get_args():
    """Get parsed arguments. Returns None if parse_args() hasn't been called."""
    return _args
