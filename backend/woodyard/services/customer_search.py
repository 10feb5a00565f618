"""Fuzzy customer lookup for the stop form's customer picker"""
from typing import NamedTuple

from rapidfuzz import fuzz, process, utils
from sqlalchemy import select
from sqlalchemy.orm import Session

from woodyard.models import Customer

MIN_SCORE = 60.0


class CustomerMatch(NamedTuple):
    customer: Customer
    score: float  # 0~100


def _haystack(c: Customer) -> str:
    return " ".join(p for p in (c.name, c.phone, c.email, c.full_address) if p)


def rank_customers(query: str, customers: list[Customer], limit: int = 10, min_score: float = MIN_SCORE) -> list[CustomerMatch]:
    """
    Short queries use partial_ratio (prefix-ish), longer ones token_set_ratio.
    Digit-only queries are matched against phone numbers only.
    """
    q = (query or "").strip()
    if not q or not customers:
        return []
    if q.replace("-", "").replace(" ", "").isdigit():
        digits = "".join(ch for ch in q if ch.isdigit())
        hits = [
            CustomerMatch(c, 100.0)
            for c in customers
            if c.phone and digits in "".join(ch for ch in c.phone if ch.isdigit())
        ]
        return hits[:limit]
    choices = [_haystack(c) for c in customers]
    scorer = fuzz.partial_ratio if len(q) <= 3 else fuzz.token_set_ratio
    found = process.extract(
        q,
        choices,
        scorer=scorer,
        processor=utils.default_process,
        limit=limit,
        score_cutoff=min_score,
    )
    return [CustomerMatch(customers[idx], float(score)) for _, score, idx in found]


def search_customers(query: str, db: Session, limit: int = 10) -> list[CustomerMatch]:
    customers = list(db.execute(select(Customer).order_by(Customer.name)).scalars().all())
    return rank_customers(query, customers, limit=limit)
