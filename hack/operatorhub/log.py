import sys

_verbose = False


def set_verbose(verbose):
    global _verbose
    _verbose = verbose


def log(*args, level="info", **kwargs):
    if level == "debug" and not _verbose:
        return
    if level == "info":
        print(*args, **kwargs)
    else:
        print(*args, file=sys.stderr, **kwargs)
