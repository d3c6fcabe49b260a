"""
MODULE: services.batch_archive.date_filter
RESPONSIBILITY: Parse batch dates and decide whether a batch falls into the archival range.
ALLOWED: datetime, re.
FORBIDDEN: Filesystem access, logging of business events.
ERRORS: ValueError (malformed date text).
"""

import re
from datetime import date, datetime

from core.models import DateRange

DATE_FORMAT = "%Y-%m-%d"
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_batch_date(text: str) -> date:
    """
    Разбирает дату строго в формате YYYY-MM-DD.

    :param text: Строка даты (имя каталога или значение параметра)
    :return: Объект date
    :raises ValueError: Если строка не соответствует формату или дата не существует
    """
    if not _DATE_PATTERN.match(text):
        raise ValueError(f"Дата должна быть в формате YYYY-MM-DD: {text!r}")
    return datetime.strptime(text, DATE_FORMAT).date()


class DateRangeFilter:
    """Фильтр батчей по диапазону дат: граница cutoff не включается, earliest включается"""

    @staticmethod
    def includes(batch_date: date, date_range: DateRange) -> bool:
        if batch_date >= date_range.cutoff:
            return False
        return date_range.earliest is None or batch_date >= date_range.earliest
