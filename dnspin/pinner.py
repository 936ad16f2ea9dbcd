#!/usr/bin/python

import sys
import time
import signal
import traceback
from concurrent.futures import ThreadPoolExecutor
from threading import Event

from dotenv import load_dotenv
import systemd_watchdog

from dnspin.cli import VERSION
from dnspin.env import env_file, dry_run
from dnspin.dns_resolver import resolve
from dnspin.hosts_file import update_hosts_file, ManagedRegionError
from dnspin.results import LookupFailed, Unset
from dnspin.debug import log

load_dotenv(dotenv_path=env_file())

# Exit event for safe shutdown
exit_event = Event()


class Pinner:
    """
    Runs lookup cycles for a fixed host list against one hosts file.

    Only one Pinner may manage a given hosts file at a time; nothing guards
    against a second process rewriting the same file.
    """

    def __init__(self, hosts, hosts_file, interval=5, workers=1):
        self.hosts = hosts
        self.hosts_file = hosts_file
        self.interval = interval
        self.workers = max(int(workers), 1)

    def _on_signal(self, signum, frame):
        # Only set the exit flag; the current cycle finishes first
        exit_event.set()

    def _install_signal_handlers(self):
        signal.signal(signal.SIGTERM, self._on_signal)
        signal.signal(signal.SIGINT,  self._on_signal)
        signal.signal(signal.SIGHUP,  self._on_signal)

    def _lookup(self, host):
        try:
            return resolve(host.hostname, host.server)
        except Exception as e:
            log(f'Unexpected error resolving {host.hostname}: {e}', 'error')
            return LookupFailed(e)

    def resolve_all(self):
        for host in self.hosts:
            host.last_result = Unset()

        if self.workers > 1 and len(self.hosts) > 1:
            # Whole batch completes before anything is merged
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                results = list(pool.map(self._lookup, self.hosts))
        else:
            results = [self._lookup(host) for host in self.hosts]

        for host, result in zip(self.hosts, results):
            host.last_result = result
            log(f'{host.hostname} = {result!r}')

    def write_hosts_file(self):
        write = not dry_run()
        try:
            changed, content = update_hosts_file(self.hosts_file, self.hosts, write=write)
        except (OSError, ManagedRegionError) as e:
            log(f'Error writing hosts file {self.hosts_file}: {e}', 'error')
            return False

        if not changed:
            log('No changes, hosts file not updated')
        elif write:
            log('Hosts file updated')
        else:
            log(f'Dry run, {self.hosts_file} would become:')
            print(content, end='', flush=True)
        return changed

    def run_cycle(self):
        self.resolve_all()
        return self.write_hosts_file()

    def run(self):
        self._install_signal_handlers()

        # Notify systemd watchdog
        wd = systemd_watchdog.watchdog() if systemd_watchdog is not None else None
        if wd is not None:
            wd.ready()

        log(f'dnspin v{VERSION} pinning {len(self.hosts)} host(s) in {self.hosts_file}')

        while not exit_event.is_set():
            if wd is not None:
                wd.notify()

            start = time.monotonic()
            try:
                self.run_cycle()
            except Exception as e:
                log(f'Unexpected error during cycle: {e}', 'error')
                traceback.print_exc(file=sys.stderr)

            # Exit immediately in dry-run
            if dry_run():
                exit_event.set()
                break

            self._wait_interval(time.monotonic() - start)

        log('dnspin shutting down')

    def _wait_interval(self, running_time):
        log(f'Cycle time: {running_time * 1000:.0f} ms, sleeping {self.interval}s', 'debug')
        exit_event.wait(self.interval)
