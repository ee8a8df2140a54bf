from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import HolidayCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository

_COLUMNS = "holiday_id, holiday_date, name, category, is_paid, description"


def _to_holiday(r: dict) -> Holiday:
    return Holiday(
        holiday_id=int(r["holiday_id"]),
        holiday_date=r["holiday_date"],
        name=r["name"],
        category=HolidayCategory(r["category"]),
        is_paid=bool(r["is_paid"]),
        description=r.get("description"),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE holiday_date=%s", (holiday_date,))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def list_dates(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[date]:
        clauses = ["1=1"]
        params: list[object] = []
        if start is not None:
            clauses.append("holiday_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("holiday_date <= %s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT holiday_date FROM holidays WHERE {where}", tuple(params))
            return [r["holiday_date"] for r in fetchall(cur)]

    def list_all(self, *, year: Optional[int] = None) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            if year is None:
                cur.execute(f"SELECT {_COLUMNS} FROM holidays ORDER BY holiday_date ASC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM holidays WHERE YEAR(holiday_date)=%s ORDER BY holiday_date ASC",
                    (int(year),),
                )
            return [_to_holiday(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        holiday_date: date,
        name: str,
        category: HolidayCategory,
        is_paid: bool,
        description: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays(holiday_date, name, category, is_paid, description)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (holiday_date, name, category.value, int(bool(is_paid)), description),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        holiday_id: int,
        name: str,
        category: HolidayCategory,
        is_paid: bool,
        description: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE holidays
                SET name=%s, category=%s, is_paid=%s, description=%s
                WHERE holiday_id=%s
                """,
                (name, category.value, int(bool(is_paid)), description, int(holiday_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
