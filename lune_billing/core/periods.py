"""Calendar-month billing periods."""

from dataclasses import dataclass
from datetime import date

from sqlalchemy import and_

from .config import settings
from .errors import InvalidArgumentError


@dataclass(frozen=True)
class BillingPeriod:
    """A calendar (year, month) pair.

    ``start`` is the first day of the month and ``end`` the first day of the
    following month, exclusive. Every query that buckets usage by month goes
    through :meth:`usage_filter` so invoices and drill-down views agree.
    """

    year: int
    month: int

    @classmethod
    def create(cls, year: int, month: int, min_year: int = None) -> "BillingPeriod":
        floor = settings.min_invoice_year if min_year is None else min_year
        if not isinstance(month, int) or not 1 <= month <= 12:
            raise InvalidArgumentError(f"Month must be between 1 and 12, got {month}")
        if not isinstance(year, int) or year < floor:
            raise InvalidArgumentError(f"Year must be {floor} or later, got {year}")
        # The exclusive end bound must itself be a representable date
        last_year = date.max.year - 1 if month == 12 else date.max.year
        if year > last_year:
            raise InvalidArgumentError(f"Year must be {last_year} or earlier for month {month}, got {year}")
        return cls(year=year, month=month)

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        if self.month == 12:
            return date(self.year + 1, 1, 1)
        return date(self.year, self.month + 1, 1)

    @property
    def label(self) -> str:
        return f"{self.year}{self.month:02d}"

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end

    def usage_filter(self, column):
        """SQL predicate matching ``column`` dates inside this month."""
        return and_(column >= self.start, column < self.end)
