"""Report id and tracking token generation."""
import random
import re
import uuid

TOKEN_DIGITS = 5
TOKEN_PATTERN = re.compile(r"^[A-Z0-9]+-[A-Z0-9]+-\d{4}-\d{5}$")


def generate_token(prefix: str, region: str, year: int) -> str:
    """Generate citizen tracking token: {PREFIX}-{REGION}-{YEAR}-{5digits}."""
    digits = str(random.randint(10 ** (TOKEN_DIGITS - 1), 10**TOKEN_DIGITS - 1))
    return f"{prefix}-{region}-{year}-{digits}"


def generate_report_id() -> str:
    """Generate unique report ID."""
    return f"RPT-{uuid.uuid4().hex[:12].upper()}"
