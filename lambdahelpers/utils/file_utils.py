"""
File system utilities and object key <-> local path translation
"""
import os


def ensure_dir(directory, mode=0o777):
    """
    Ensure directory exists, create if it doesn't.

    Args:
        directory: Directory path
        mode: Permission bits for newly created directories (umask applies)
    """
    os.makedirs(directory, mode=mode, exist_ok=True)


def _key_segments(value):
    return [segment for segment in value.split('/') if segment and segment != '.']


def key_from_path(root, file_path, key_prefix=""):
    """
    Convert a local file path into an object key relative to *root*.

    Separators become ``/`` and repeated separators collapse, so the key
    never contains OS-specific separators or empty segments.

    Args:
        root: Directory the walk started from
        file_path: File inside *root*
        key_prefix: Optional key prefix the relative key is placed under

    Returns:
        Object key

    Examples:
        input, input/testUpload/Object1.txt -> testUpload/Object1.txt
        input, input/a.css, key_prefix="site/" -> site/a.css
        input, input/a.css, key_prefix="/" -> a.css
    """
    rel_path = os.path.relpath(file_path, root)
    key = '/'.join(_key_segments(rel_path.replace(os.sep, '/')))

    # A prefix made only of separators is the bucket root
    if key_prefix.strip('/'):
        return f"{key_prefix.rstrip('/')}/{key}"
    return key


def path_from_key(key):
    """
    Convert an object key into a path relative to a destination directory.

    A leading ``/`` and repeated ``/`` are dropped so the result always
    stays relative.

    Args:
        key: Object key

    Returns:
        Relative local path using the platform separator, or ``""`` when the
        key has no path segments

    Examples:
        /posts/Object1 -> posts/Object1
        a//b/c.txt -> a/b/c.txt
    """
    segments = _key_segments(key)
    if not segments:
        return ""
    return os.path.join(*segments)
