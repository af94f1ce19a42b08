"""
services/summary.py

owner별 납부 합계 계산.

- totalPaid    : 납부 금액(paid) 합계
- totalBalance : 잔액(balance) 합계 (음수 = 미납, 양수 = 선납)

조회 시마다 다시 계산하며 DB에 저장하지 않는다.

"""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class PaymentSummary:
    total_paid: float = 0
    total_balance: float = 0
    count: int = 0


def summarize(payments: Iterable) -> PaymentSummary:
    total_paid = 0
    total_balance = 0
    count = 0
    for p in payments:
        total_paid += p.paid
        total_balance += p.balance or 0
        count += 1
    return PaymentSummary(total_paid=total_paid, total_balance=total_balance, count=count)
