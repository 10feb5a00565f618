"""Fuzzy customer search"""
from woodyard.models import Customer
from woodyard.services.customer_search import rank_customers, search_customers


def _customers():
    return [
        Customer(id=1, name="Maple Farm", phone="555-0100", city="Hudson"),
        Customer(id=2, name="Birchwood Cabins", phone="(555) 222-3333", email="stay@birchwood.example"),
        Customer(id=3, name="Riverside Diner", phone="555-9999", address="4 Water St"),
    ]


def test_name_match_first():
    """Exact name ranks first"""
    hits = rank_customers("birchwood", _customers())
    assert hits
    assert hits[0].customer.id == 2


def test_tokens_in_any_order():
    """Word order does not matter"""
    hits = rank_customers("hudson maple", _customers())
    assert hits[0].customer.id == 1


def test_digits_match_phone_only():
    """Digit query searches phones"""
    hits = rank_customers("222-33", _customers())
    assert [h.customer.id for h in hits] == [2]
    assert hits[0].score == 100.0


def test_no_match_below_cutoff():
    """Weak matches are dropped"""
    assert rank_customers("zzzzzzzz", _customers()) == []
    assert rank_customers("   ", _customers()) == []


def test_search_customers(db, customer):
    """Search against the DB"""
    hits = search_customers("maple", db)
    assert [h.customer.id for h in hits] == [customer.id]


def test_search_endpoint(admin_client, customer):
    """GET /api/customers/search"""
    r = admin_client.get("/api/customers/search", params={"q": "Maple"})
    assert r.status_code == 200
    assert r.json()[0]["customer"]["name"] == "Maple Farm"
