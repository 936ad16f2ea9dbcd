import os
import tempfile

from dnspin.debug import log

HOSTS_FILE_MODE = 0o644


def replace_file(path, content, mode=HOSTS_FILE_MODE):
    """
    Atomically replace path with content.

    The new content is written to a temporary file in the same directory
    (so the final rename never crosses filesystems) and renamed over the
    target. Readers see either the old file or the new one, never a partial
    write. On failure the temporary file is removed and the target is left
    untouched.
    """
    # Replace the file a symlink points to, not the symlink itself
    target = os.path.realpath(path)
    directory = os.path.dirname(target)

    fd, tmp_path = tempfile.mkstemp(prefix='.dnspin-', suffix='.tmp', dir=directory)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', errors='surrogateescape', newline='') as f:
            f.write(content)
            f.flush()
            os.fchmod(f.fileno(), mode)
            os.fsync(f.fileno())
        os.replace(tmp_path, target)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise

    log(f'Replaced {target} ({len(content)} bytes)', 'debug')
