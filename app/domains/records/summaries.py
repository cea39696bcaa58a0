from typing import Dict, Iterable, List

from app.domains.records.models import (
    CustomerSummary,
    DailyTotals,
    EntryKind,
    PaymentStatus,
    TransactionRecord,
)


def summarize(records: Iterable[TransactionRecord]) -> DailyTotals:
    totals = DailyTotals()
    for record in records:
        totals.record_count += 1
        totals.total_milk += record.quantity
        totals.total_amount += record.amount
        if record.payment_status == PaymentStatus.PAID:
            totals.paid_amount += record.amount
        else:
            totals.due_amount += record.amount
    return totals


def summarize_customer(name: str, records: Iterable[TransactionRecord]) -> CustomerSummary:
    summary = CustomerSummary(name=name)
    for record in records:
        if record.customer_name != name:
            continue
        summary.transaction_count += 1
        summary.total_amount += record.amount
        if record.quantity > 0:
            summary.total_milk += record.quantity
        if record.payment_status == PaymentStatus.PAID:
            summary.paid_amount += record.amount
        if record.kind == EntryKind.ABSENT:
            summary.absent_days += 1
        if summary.last_transaction is None or record.date > summary.last_transaction:
            summary.last_transaction = record.date
    summary.due_amount = summary.total_amount - summary.paid_amount
    return summary


def summarize_customers(records: Iterable[TransactionRecord]) -> List[CustomerSummary]:
    """One summary per customer, largest total amount first."""
    by_name: Dict[str, List[TransactionRecord]] = {}
    for record in records:
        by_name.setdefault(record.customer_name, []).append(record)

    summaries = [summarize_customer(name, rows) for name, rows in by_name.items()]
    return sorted(summaries, key=lambda s: s.total_amount, reverse=True)
