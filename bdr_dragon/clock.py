from datetime import datetime


def now():
    """Server-local wall clock. Route handlers read time only through here."""
    return datetime.now()
