import hashlib

from .models import Transaction


def generate_fingerprint(date: str, description: str, amount: float, kind: str) -> str:
    """Generate a deterministic SHA256 fingerprint for duplicate detection.

    Format: SHA256({date[:10]}|{DESCRIPTION}|{amount:.2f}|{kind})

    The description is trimmed and uppercased so re-exports that only change
    casing still collide. The amount is normalized to 2 decimal places.
    """
    raw = f"{date[:10]}|{description.strip().upper()}|{amount:.2f}|{kind.strip().lower()}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def transaction_fingerprint(transaction: Transaction) -> str:
    return generate_fingerprint(
        transaction.date,
        transaction.description,
        transaction.amount,
        transaction.kind.value,
    )
