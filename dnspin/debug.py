import time
import threading
from functools import wraps
from dnspin.env import dry_run, log_level

LOG_LEVELS = {
    'debug': 0,
    'info': 1,
    'warn': 2,
    'error': 3,
    'critical': 4,
}

class debug:
    def __init__(self, name: str):
        self.name = name

    def __call__(self, func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not dry_run():
                return func(*args, **kwargs)

            start = time.monotonic()
            result = func(*args, **kwargs)
            end = time.monotonic()
            if len(args) > 1:
                log(f"{self.name} - {args[1:]} ({(end - start)*1000:.0f} ms): {result!r}", 'debug')
            else:
                log(f"{self.name} ({(end - start)*1000:.0f} ms): {result!r}", 'debug')
            return result

        return wrapper

def log(message, level='info'):
    # Unknown LOG_LEVEL values behave like 'info'
    threshold = LOG_LEVELS.get(log_level(), LOG_LEVELS['info'])
    if LOG_LEVELS[level] >= threshold:
        print(f"[{level.upper()}][thread#{threading.get_native_id()}] {message}", flush=True)
