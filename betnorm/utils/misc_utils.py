# betnorm/utils/misc_utils.py
import re
import hashlib
from datetime import datetime, timezone


def generate_canonical_id(*args: str) -> str:
    """Generates a consistent, URL-safe ID from one or more strings."""
    combined = "_".join(str(arg).strip().lower() for arg in args if arg)
    # Remove non-word characters (keeps underscores and accented letters)
    safe_string = re.sub(r"[^\w]+", "", combined.replace(" ", "_"))
    if len(safe_string) > 100:
        return hashlib.sha1(safe_string.encode()).hexdigest()[:16]
    return safe_string


def utc_now() -> datetime:
    """Timezone-aware current time; queue timestamps are always UTC."""
    return datetime.now(timezone.utc)
