"""Ledger Engine - Merge, prune, sanitize, report and export ledger records.

The ledger is the pair of expense and income logs stored per save slot.

Merge-by-id:
    Stored logs are the authority. Incoming records whose id is already
    stored are dropped; the rest are appended.

Retention:
    Sort by timestamp descending, keep the N most recent, re-sort ascending.

Sanitizing (on load and before save), favoring repair over rejection:
    - Amounts are parsed and absolute-valued; zero or NaN rows are dropped
    - Unparseable timestamps become "now"; epoch millis become ISO strings
    - Legacy categories/sources are mapped onto the closed sets
    - Missing ids are regenerated from the row content, so the same row
      gets the same id on every load
    - Rows repeating an earlier id are dropped

The same sanitizing runs on both sides of a save, so the stored logs only
ever hold repaired rows.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
import csv
from datetime import UTC, datetime
import io
import math
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import (
    DATE_RANGE_ALL,
    dt_day_key,
    dt_now_utc,
    dt_parse,
    dt_range_start,
    dt_to_iso,
)
from ..utils.math_utils import coerce_number
from .economy_engine import EconomyEngine

if TYPE_CHECKING:
    from ..type_defs import ExpenseRecord, IncomeRecord, ReportModel

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _sort_key(record: dict[str, Any]) -> datetime:
    return dt_parse(record.get(const.DATA_RECORD_TIMESTAMP)) or _EPOCH


class LedgerEngine:
    """Stateless ledger rules."""

    # =========================================================================
    # MERGE & RETENTION
    # =========================================================================

    @staticmethod
    def merge_by_id(
        existing: Iterable[dict[str, Any]], incoming: Iterable[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Union of two logs keyed by record id; stored copies win."""
        merged = [dict(rec) for rec in existing]
        seen = {rec.get(const.DATA_RECORD_ID) for rec in merged}
        for rec in incoming:
            record_id = rec.get(const.DATA_RECORD_ID)
            if record_id in seen:
                continue
            seen.add(record_id)
            merged.append(dict(rec))
        return merged

    @staticmethod
    def prune_records(
        records: list[dict[str, Any]], max_records: int = const.DEFAULT_MAX_RECORDS
    ) -> list[dict[str, Any]]:
        """Keep the `max_records` most recent records, oldest first."""
        newest_first = sorted(records, key=_sort_key, reverse=True)
        kept = newest_first[: max(max_records, 0)]
        return sorted(kept, key=_sort_key)

    # =========================================================================
    # SANITIZING
    # =========================================================================

    @staticmethod
    def _repair_common(raw: dict[str, Any], now: datetime) -> dict[str, Any] | None:
        """Repair amount and timestamp; None means drop the row.

        The id is copied when present; missing ids are filled in by
        `_dedupe` once the label and category are known.
        """
        amount_raw = raw.get(const.DATA_RECORD_AMOUNT)
        amount = coerce_number(amount_raw, math.nan)
        if math.isnan(amount) or amount == 0:
            const.LOGGER.warning(
                "WARNING: Dropping ledger row %s with unusable amount %r",
                raw.get(const.DATA_RECORD_ID),
                amount_raw,
            )
            return None
        if amount < 0:
            const.LOGGER.warning(
                "WARNING: Negative ledger amount %s on %s, storing absolute value",
                amount,
                raw.get(const.DATA_RECORD_ID),
            )
            amount = abs(amount)
        if amount.is_integer():
            amount = int(amount)

        stamp = raw.get(const.DATA_RECORD_TIMESTAMP, raw.get(const.DATA_RECORD_LEGACY_DATE))
        parsed = dt_parse(stamp)
        if parsed is None:
            const.LOGGER.warning(
                "WARNING: Ledger row %s has bad timestamp %r, using now",
                raw.get(const.DATA_RECORD_ID),
                stamp,
            )
            parsed = now

        record_id = raw.get(const.DATA_RECORD_ID)
        return {
            const.DATA_RECORD_ID: str(record_id) if record_id else "",
            const.DATA_RECORD_TIMESTAMP: dt_to_iso(parsed),
            const.DATA_RECORD_AMOUNT: amount,
        }

    @staticmethod
    def normalize_category(raw: dict[str, Any]) -> str:
        """Resolve a (possibly legacy) expense row to a closed category."""
        category = raw.get(const.DATA_RECORD_CATEGORY)
        if category in const.EXPENSE_CATEGORY_OPTIONS:
            return category
        for candidate in (category, raw.get(const.DATA_RECORD_LEGACY_TYPE)):
            if isinstance(candidate, str):
                mapped = const.EXPENSE_CATEGORY_LEGACY_MAP.get(candidate.strip().lower())
                if mapped:
                    return mapped
        text = str(
            raw.get(const.DATA_RECORD_LABEL)
            or raw.get(const.DATA_RECORD_LEGACY_DESCRIPTION)
            or ""
        ).lower()
        for keyword, mapped in const.EXPENSE_CATEGORY_KEYWORDS:
            if keyword in text:
                return mapped
        return const.EXPENSE_CATEGORY_OTHER

    @staticmethod
    def normalize_source(raw: dict[str, Any]) -> str:
        """Resolve a (possibly legacy) income row to a closed source."""
        source = raw.get(const.DATA_RECORD_SOURCE)
        if source in const.INCOME_SOURCE_OPTIONS:
            return source
        if isinstance(source, str):
            mapped = const.INCOME_SOURCE_LEGACY_MAP.get(source.strip().lower())
            if mapped:
                return mapped
        return const.INCOME_SOURCE_OTHER

    @staticmethod
    def _dedupe(
        records: list[dict[str, Any]], prefix: str, group_field: str
    ) -> list[dict[str, Any]]:
        """Fill in missing ids, then drop rows repeating an earlier id.

        Two rows with the same content but different ids are both kept:
        buying the same item twice in a minute is two purchases.
        """
        seen_ids: set[str] = set()
        result: list[dict[str, Any]] = []
        for rec in records:
            if not rec[const.DATA_RECORD_ID]:
                stamp = rec[const.DATA_RECORD_TIMESTAMP]
                seed = "|".join(
                    (
                        stamp,
                        rec[const.DATA_RECORD_LABEL],
                        str(rec[const.DATA_RECORD_AMOUNT]),
                        rec[group_field],
                    )
                )
                rec[const.DATA_RECORD_ID] = EconomyEngine.new_record_id(
                    prefix, dt_parse(stamp), seed
                )
                const.LOGGER.warning(
                    "WARNING: Ledger row without id, assigned %s",
                    rec[const.DATA_RECORD_ID],
                )
            if rec[const.DATA_RECORD_ID] in seen_ids:
                const.LOGGER.warning(
                    "WARNING: Dropping duplicate ledger row %s",
                    rec[const.DATA_RECORD_ID],
                )
                continue
            seen_ids.add(rec[const.DATA_RECORD_ID])
            result.append(rec)
        return result

    @staticmethod
    def sanitize_expenses(
        records: Any, now: datetime | None = None
    ) -> list[ExpenseRecord]:
        """Repair an expense log (see module docstring)."""
        if not isinstance(records, list):
            return []
        current = now or dt_now_utc()
        cleaned: list[dict[str, Any]] = []
        for raw in records:
            if not isinstance(raw, dict):
                continue
            rec = LedgerEngine._repair_common(raw, current)
            if rec is None:
                continue
            category = LedgerEngine.normalize_category(raw)
            rec[const.DATA_RECORD_CATEGORY] = category
            rec[const.DATA_RECORD_LABEL] = str(
                raw.get(const.DATA_RECORD_LABEL)
                or raw.get(const.DATA_RECORD_LEGACY_DESCRIPTION)
                or category
            )
            legacy_type = raw.get(const.DATA_RECORD_LEGACY_TYPE)
            if legacy_type:
                rec[const.DATA_RECORD_LEGACY_TYPE] = legacy_type
            cleaned.append(rec)
        return LedgerEngine._dedupe(
            cleaned, const.RECORD_ID_PREFIX_EXPENSE, const.DATA_RECORD_CATEGORY
        )  # type: ignore[return-value]

    @staticmethod
    def sanitize_income(records: Any, now: datetime | None = None) -> list[IncomeRecord]:
        """Repair an income log (see module docstring)."""
        if not isinstance(records, list):
            return []
        current = now or dt_now_utc()
        cleaned: list[dict[str, Any]] = []
        for raw in records:
            if not isinstance(raw, dict):
                continue
            rec = LedgerEngine._repair_common(raw, current)
            if rec is None:
                continue
            source = LedgerEngine.normalize_source(raw)
            rec[const.DATA_RECORD_SOURCE] = source
            rec[const.DATA_RECORD_LABEL] = str(
                raw.get(const.DATA_RECORD_LABEL)
                or raw.get(const.DATA_RECORD_LEGACY_DESCRIPTION)
                or source
            )
            cleaned.append(rec)
        return LedgerEngine._dedupe(
            cleaned, const.RECORD_ID_PREFIX_INCOME, const.DATA_RECORD_SOURCE
        )  # type: ignore[return-value]

    @staticmethod
    def expense_view(expenses: list[ExpenseRecord]) -> list[ExpenseRecord]:
        """Pet-level expense list for older consumers (earning rows excluded)."""
        return [
            dict(rec)  # type: ignore[misc]
            for rec in expenses
            if rec.get(const.DATA_RECORD_LEGACY_TYPE) != const.LEGACY_RECORD_TYPE_EARNING
        ]

    # =========================================================================
    # REPORTS
    # =========================================================================

    @staticmethod
    def filter_by_range(
        records: Iterable[dict[str, Any]],
        date_range: str,
        now: datetime | None = None,
    ) -> list[dict[str, Any]]:
        """Records whose timestamp falls inside the range (up to now)."""
        current = now or dt_now_utc()
        start = dt_range_start(date_range, current)
        result = []
        for rec in records:
            stamp = dt_parse(rec.get(const.DATA_RECORD_TIMESTAMP))
            if stamp is None:
                continue
            if date_range != DATE_RANGE_ALL and (
                (start is not None and stamp < start) or stamp > current
            ):
                continue
            result.append(rec)
        return result

    @staticmethod
    def _daily_series(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        totals: dict[str, float] = defaultdict(float)
        for rec in records:
            day = dt_day_key(dt_parse(rec[const.DATA_RECORD_TIMESTAMP]))  # type: ignore[arg-type]
            totals[day] += rec[const.DATA_RECORD_AMOUNT]
        return [
            {"date": day, "amount": round(amount, 2)}
            for day, amount in sorted(totals.items())
        ]

    @staticmethod
    def build_report(
        expenses: list[ExpenseRecord],
        income: list[IncomeRecord],
        date_range: str = DATE_RANGE_ALL,
        now: datetime | None = None,
    ) -> ReportModel:
        """Aggregate totals, breakdowns, daily series and recent activity."""
        current = now or dt_now_utc()
        spent = LedgerEngine.filter_by_range(expenses, date_range, current)
        earned = LedgerEngine.filter_by_range(income, date_range, current)

        spent_by_category: dict[str, float] = dict.fromkeys(
            const.EXPENSE_CATEGORY_OPTIONS, 0
        )
        for rec in spent:
            spent_by_category[rec[const.DATA_RECORD_CATEGORY]] = (
                spent_by_category.get(rec[const.DATA_RECORD_CATEGORY], 0)
                + rec[const.DATA_RECORD_AMOUNT]
            )
        earned_by_source: dict[str, float] = dict.fromkeys(
            const.INCOME_SOURCE_OPTIONS, 0
        )
        for rec in earned:
            earned_by_source[rec[const.DATA_RECORD_SOURCE]] = (
                earned_by_source.get(rec[const.DATA_RECORD_SOURCE], 0)
                + rec[const.DATA_RECORD_AMOUNT]
            )

        total_spent = round(sum(rec[const.DATA_RECORD_AMOUNT] for rec in spent), 2)
        total_earned = round(sum(rec[const.DATA_RECORD_AMOUNT] for rec in earned), 2)

        recent = [
            {
                "type": const.TRANSACTION_TYPE_EXPENSE,
                "id": rec[const.DATA_RECORD_ID],
                "label": rec[const.DATA_RECORD_LABEL],
                "amount": rec[const.DATA_RECORD_AMOUNT],
                "timestamp": rec[const.DATA_RECORD_TIMESTAMP],
            }
            for rec in spent
        ] + [
            {
                "type": const.TRANSACTION_TYPE_INCOME,
                "id": rec[const.DATA_RECORD_ID],
                "label": rec[const.DATA_RECORD_LABEL],
                "amount": rec[const.DATA_RECORD_AMOUNT],
                "timestamp": rec[const.DATA_RECORD_TIMESTAMP],
            }
            for rec in earned
        ]
        recent.sort(key=_sort_key, reverse=True)

        return {
            "total_spent": total_spent,
            "total_earned": total_earned,
            "net": round(total_earned - total_spent, 2),
            "spent_by_category": spent_by_category,
            "earned_by_source": earned_by_source,
            "daily_spent_series": LedgerEngine._daily_series(spent),  # type: ignore[typeddict-item]
            "daily_earned_series": LedgerEngine._daily_series(earned),  # type: ignore[typeddict-item]
            "recent_transactions": recent[: const.RECENT_TRANSACTIONS_LIMIT],  # type: ignore[typeddict-item]
        }

    # =========================================================================
    # CSV EXPORT
    # =========================================================================

    @staticmethod
    def _to_csv(records: Iterable[dict[str, Any]], header: tuple[str, ...]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(header)
        for rec in records:
            writer.writerow([rec.get(column, "") for column in header])
        return buffer.getvalue()

    @staticmethod
    def export_expenses_csv(expenses: Iterable[ExpenseRecord]) -> str:
        """CSV text: header `id,timestamp,amount,category,label`, one row per record."""
        return LedgerEngine._to_csv(expenses, const.CSV_EXPENSE_HEADER)  # type: ignore[arg-type]

    @staticmethod
    def export_income_csv(income: Iterable[IncomeRecord]) -> str:
        """CSV text: header `id,timestamp,amount,source,label`, one row per record."""
        return LedgerEngine._to_csv(income, const.CSV_INCOME_HEADER)  # type: ignore[arg-type]
