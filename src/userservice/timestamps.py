"""Fixed-width account timestamps.

Accounts record created_at / updated_at as 14-character yyyyMMddHHmmss
strings in the configured service timezone. They sort lexically.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from userservice.config import settings

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as yyyyMMddHHmmss in the service timezone.

    Naive datetimes are taken to already be in the service timezone.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(ZoneInfo(settings.timezone))
    return moment.strftime(TIMESTAMP_FORMAT)


def now_timestamp() -> str:
    return format_timestamp(datetime.now(ZoneInfo(settings.timezone)))
