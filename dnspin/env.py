import os

from dnspin.cli import get_args

DEFAULT_INTERVAL = 5
DEFAULT_DNS_TIMEOUT = 2.0


def _arg(name):
  args = get_args()
  if args is None:
    return None
  return getattr(args, name, None)

def _number(name, default, cast=float, minimum=0):
  raw = os.environ.get(name)
  if raw is None or raw == '':
    return default
  try:
    value = cast(raw)
  except (TypeError, ValueError):
    print(f'[WARN] invalid {name}={raw!r}, using {default}')
    return default
  if value < minimum:
    print(f'[WARN] {name}={raw!r} below {minimum}, using {default}')
    return default
  return value

def config_dir():
  return os.environ.get('CONFIG_DIR', '/etc/dnspin')

def env_file():
  return os.path.join(config_dir(), '.env')

def config_path():
  return _arg('config') or os.environ.get('DNSPIN_CONFIG', os.path.join(config_dir(), 'dnspin.conf'))

def hosts_file():
  return _arg('hosts_file') or os.environ.get('HOSTS_FILE', '/etc/hosts')

def interval():
  value = _arg('interval')
  if value is not None:
    if value > 0:
      return value
    print(f'[WARN] invalid --interval {value!r}, ignoring it')
  return _number('INTERVAL', DEFAULT_INTERVAL, minimum=0.1)

def dns_timeout():
  return _number('DNS_TIMEOUT', DEFAULT_DNS_TIMEOUT, minimum=0.1)

def lookup_workers():
  return _number('LOOKUP_WORKERS', 1, cast=int, minimum=1)

def dry_run():
  # Check environment variable first
  if os.environ.get('DRY_RUN') == 'true':
    return True
  # Check parsed args
  args = get_args()
  return args is not None and args.dry_run

def log_level():
  if dry_run():
    return 'debug'
  else:
    return os.environ.get('LOG_LEVEL', 'info')
