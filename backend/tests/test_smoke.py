"""Smoke tests - basic API behaviour"""


def test_health(client):
    """Health check"""
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_login_fail(client):
    """Unknown user"""
    r = client.post("/api/auth/login", json={"username": "x", "password": "y"})
    assert r.status_code == 401


def test_me_unauth(client):
    """/me without login"""
    r = client.get("/api/auth/me")
    assert r.status_code == 401


def test_customers_unauth(client):
    """Customer list without login"""
    r = client.get("/api/customers")
    assert r.status_code == 401


def test_schedules_unauth(client):
    """Schedule list without login"""
    r = client.get("/api/schedules")
    assert r.status_code == 401


def test_me(admin_client):
    """/me after login"""
    r = admin_client.get("/api/auth/me")
    assert r.status_code == 200
    assert r.json()["username"] == "admin"
    assert r.json()["role"] == "ADMIN"


def test_driver_cannot_list_customers(driver_client):
    """Customers are ADMIN only"""
    r = driver_client.get("/api/customers")
    assert r.status_code == 403
