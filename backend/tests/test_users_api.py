WALLET = "0xAbCdEf1234567890AbCdEf1234567890AbCdEf12"


def test_create_user_returns_public_shape(client):
    r = client.post("/users", json={"name": "Ada Lovelace", "email": "ada@example.com", "password": "secret123"})
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "User created successfully"
    data = body["data"]
    assert "password" not in data
    assert data["walletAddress"] is None
    assert data["role"] == "learner"
    assert {"id", "name", "email", "role", "walletAddress", "createdAt", "updatedAt"} <= set(data)


def test_create_user_rejects_duplicate_email(client, make_user):
    make_user(email="dup@example.com", name="First")
    r = client.post("/users", json={"name": "SECOND", "email": "dup@example.com", "password": "another1"})
    assert r.status_code == 409
    assert r.json()["message"] == "Email already exists"


def test_create_user_validation_errors_are_bad_request(client):
    r = client.post("/users", json={"name": "A", "email": "not-an-email", "password": "123"})
    assert r.status_code == 400
    assert r.json()["error"] == "Bad Request"


def test_create_user_rejects_unknown_fields(client):
    r = client.post("/users", json={"name": "Ada", "email": "ada@example.com", "password": "secret123", "isAdmin": True})
    assert r.status_code == 400


def test_create_user_rejects_malformed_wallet(client):
    r = client.post("/users", json={"name": "Ada", "email": "ada@example.com", "password": "secret123", "walletAddress": "0x123"})
    assert r.status_code == 400


def test_wallet_is_stored_lowercase_and_found_case_insensitively(client, make_user):
    user = make_user(walletAddress=WALLET)
    assert user["walletAddress"] == WALLET.lower()
    r = client.get(f"/users/wallet/{WALLET.lower()}")
    assert r.status_code == 200
    assert r.json()["data"]["id"] == user["id"]
    r = client.get(f"/users/wallet/{WALLET.upper().replace('0X', '0x')}")
    assert r.json()["data"]["id"] == user["id"]


def test_create_user_rejects_wallet_in_use_with_different_case(client, make_user):
    make_user(walletAddress=WALLET.lower())
    r = client.post("/users", json={"name": "Bob", "email": "bob@example.com", "password": "secret123", "walletAddress": WALLET})
    assert r.status_code == 409


def test_unknown_wallet_is_not_found(client):
    r = client.get("/users/wallet/0x0000000000000000000000000000000000000000")
    assert r.status_code == 404


def test_get_update_and_delete_user(client, make_user):
    user = make_user()
    r = client.get(f"/users/{user['id']}")
    assert r.status_code == 200
    assert r.json()["data"] == user

    r = client.put(f"/users/{user['id']}", json={"name": "Renamed", "role": "professor"})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["name"] == "Renamed"
    assert data["role"] == "professor"
    assert data["email"] == user["email"]

    r = client.delete(f"/users/{user['id']}")
    assert r.status_code == 200
    assert r.json() == {"message": "User deleted successfully"}
    assert client.get(f"/users/{user['id']}").status_code == 404
    assert client.delete(f"/users/{user['id']}").status_code == 404


def test_update_email_collision_is_conflict(client, make_user):
    first = make_user()
    second = make_user()
    r = client.put(f"/users/{second['id']}", json={"email": first["email"]})
    assert r.status_code == 409
    # keeping one's own email is not a collision
    r = client.put(f"/users/{second['id']}", json={"email": second["email"]})
    assert r.status_code == 200


def test_malformed_id_is_bad_request(client):
    assert client.get("/users/not-a-uuid").status_code == 400
    assert client.delete("/users/not-a-uuid").status_code == 400


def test_link_wallet_is_idempotent_for_same_user(client, make_user):
    user = make_user()
    r1 = client.patch(f"/users/{user['id']}/wallet", json={"walletAddress": WALLET})
    assert r1.status_code == 200
    assert r1.json()["message"] == "Wallet linked successfully"
    r2 = client.patch(f"/users/{user['id']}/wallet", json={"walletAddress": WALLET})
    assert r2.status_code == 200
    assert r2.json()["data"]["walletAddress"] == WALLET.lower()


def test_link_wallet_held_by_other_account_is_conflict(client, make_user):
    a = make_user()
    b = make_user()
    assert client.patch(f"/users/{a['id']}/wallet", json={"walletAddress": WALLET}).status_code == 200
    r = client.patch(f"/users/{b['id']}/wallet", json={"walletAddress": WALLET.lower()})
    assert r.status_code == 409


def test_link_wallet_unknown_user_is_not_found(client):
    r = client.patch("/users/8d7c4f0e-52f1-4a61-9a8e-1b1f3b0b2c11/wallet", json={"walletAddress": WALLET})
    assert r.status_code == 404


def test_list_users_envelope_and_defaults(client, make_user):
    for _ in range(3):
        make_user()
    r = client.get("/users")
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 3
    assert body["page"] == 1
    assert body["limit"] == 10
    assert len(body["data"]) == 3
    assert all("password" not in u for u in body["data"])


def test_list_users_rejects_non_numeric_pagination(client):
    assert client.get("/users", params={"page": "abc"}).status_code == 400
    assert client.get("/users", params={"limit": "ten"}).status_code == 400
    assert client.get("/users", params={"page": 0}).status_code == 400


def test_list_users_date_range_accepts_naive_and_offset_values(client, make_user):
    make_user()
    make_user()
    for start in ("2000-01-01T00:00:00", "2000-01-01T00:00:00+00:00", "2000-01-01T00:00:00Z"):
        r = client.get("/users", params={"startDate": start, "endDate": "2999-01-01T00:00:00"})
        assert r.status_code == 200, r.text
        assert r.json()["total"] == 2


def test_list_users_end_date_in_the_past_matches_nothing(client, make_user):
    make_user()
    r = client.get("/users", params={"endDate": "2000-01-01T00:00:00"})
    assert r.status_code == 200
    assert r.json()["total"] == 0
    r = client.get("/users", params={"endDate": "2000-01-01T02:00:00+02:00"})
    assert r.status_code == 200
    assert r.json()["data"] == []


def test_request_id_header_exists(client):
    r = client.get("/users", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"
    assert "X-Request-ID" in client.get("/users").headers
