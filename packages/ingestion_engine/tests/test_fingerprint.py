from packages.ingestion_engine.fingerprint import generate_fingerprint, transaction_fingerprint
from packages.ingestion_engine.models import Transaction, TransactionKind


def test_generate_fingerprint_consistency():
    """The same transaction data always generates the same fingerprint."""
    fp1 = generate_fingerprint("2026-02-12", "SWIGGY", 150.00, "expense")
    fp2 = generate_fingerprint("2026-02-12", "SWIGGY", 150.00, "expense")

    assert fp1 == fp2
    assert isinstance(fp1, str)
    assert len(fp1) == 64  # SHA256 hex digest length


def test_generate_fingerprint_normalization():
    """Whitespace and casing in the description don't affect the fingerprint."""
    fp1 = generate_fingerprint("2026-02-12", "Swiggy ", 150.0, "expense")
    fp2 = generate_fingerprint("2026-02-12T10:00:00", "SWIGGY", 150.00, "EXPENSE")

    assert fp1 == fp2


def test_generate_fingerprint_differentiation():
    """Different amounts, dates or sides produce different fingerprints."""
    base = generate_fingerprint("2026-02-12", "SWIGGY", 150.00, "expense")

    assert base != generate_fingerprint("2026-02-12", "SWIGGY", 150.01, "expense")
    assert base != generate_fingerprint("2026-02-13", "SWIGGY", 150.00, "expense")
    assert base != generate_fingerprint("2026-02-12", "SWIGGY", 150.00, "income")


def test_transaction_fingerprint_ignores_id_and_category():
    a = Transaction("u1", "RENT", 15000.0, "2026-02-01", TransactionKind.EXPENSE)
    b = Transaction("u1", "RENT", 15000.0, "2026-02-01", TransactionKind.EXPENSE, category="Housing")

    assert a.id != b.id
    assert transaction_fingerprint(a) == transaction_fingerprint(b)
