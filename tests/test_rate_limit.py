"""
Tests for the per-client sliding-window limits on /subscribe and /contact.
"""

SUBSCRIBE_MESSAGE = "Too many subscription attempts from this IP, please try again later."
CONTACT_MESSAGE = "Too many contact messages from this IP, please try again later."


def test_eleventh_subscription_rejected(client):
    for i in range(10):
        response = client.post("/subscribe", json={"email": f"user{i}@b.com"})
        assert response.status_code == 200

    response = client.post("/subscribe", json={"email": "user10@b.com"})

    assert response.status_code == 429
    assert response.get_json() == {"error": SUBSCRIBE_MESSAGE}


def test_limit_counts_invalid_bodies(client):
    for _ in range(10):
        assert client.post("/subscribe", json={"email": "bad"}).status_code == 400

    response = client.post("/subscribe", json={"email": "valid@b.com"})
    assert response.status_code == 429


def test_sixth_contact_rejected(client):
    body = {"name": "A", "email": "a@b.com", "message": "hi"}
    for _ in range(5):
        assert client.post("/contact", json=body).status_code == 200

    response = client.post("/contact", json=body)

    assert response.status_code == 429
    assert response.get_json() == {"error": CONTACT_MESSAGE}


def test_forwarded_for_first_hop_is_the_client_key(client):
    for i in range(10):
        client.post("/subscribe", json={"email": f"x{i}@b.com"},
                    headers={"X-Forwarded-For": "203.0.113.5, 10.0.0.1"})

    blocked = client.post("/subscribe", json={"email": "x10@b.com"},
                          headers={"X-Forwarded-For": "203.0.113.5, 10.0.0.2"})
    other_client = client.post("/subscribe", json={"email": "y@b.com"},
                               headers={"X-Forwarded-For": "198.51.100.7"})
    direct = client.post("/subscribe", json={"email": "z@b.com"})

    assert blocked.status_code == 429
    assert other_client.status_code == 200
    assert direct.status_code == 200


def test_routes_limited_independently(client):
    for i in range(10):
        client.post("/subscribe", json={"email": f"user{i}@b.com"})
    assert client.post("/subscribe", json={"email": "more@b.com"}).status_code == 429

    response = client.post("/contact", json={"name": "A", "email": "a@b.com", "message": "hi"})
    assert response.status_code == 200


def test_preflight_not_counted(client):
    for _ in range(15):
        client.options("/contact", headers={
            "Origin": "https://example.org",
            "Access-Control-Request-Method": "POST",
        })

    response = client.post("/contact", json={"name": "A", "email": "a@b.com", "message": "hi"})
    assert response.status_code == 200


def test_admin_and_feed_not_limited(client, admin_headers):
    for _ in range(20):
        assert client.get("/subscribers", headers=admin_headers).status_code == 200
