def test_register_and_me(client, auth_headers):
    response = client.get("/api/auth/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["username"] == "alice"


def test_register_rejects_mismatched_passwords(client):
    response = client.post("/api/auth/register", json={
        "username": "bob",
        "email": "bob@example.com",
        "password": "one-password",
        "repeat_password": "another-password",
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Passwords do not match"


def test_register_rejects_duplicate_email(client, register_user):
    register_user()
    response = client.post("/api/auth/register", json={
        "username": "alice2",
        "email": "alice@example.com",
        "password": "s3cret-pass",
        "repeat_password": "s3cret-pass",
    })
    assert response.status_code == 400


def test_login_accepts_username_and_rejects_bad_password(client, register_user):
    register_user()

    ok = client.post("/api/auth/login", data={"username": "alice", "password": "s3cret-pass"})
    bad = client.post("/api/auth/login", data={"username": "alice", "password": "wrong"})

    assert ok.status_code == 200
    assert ok.json()["token_type"] == "bearer"
    assert bad.status_code == 401


def test_refresh_issues_new_pair_and_revokes_old_token(client, register_user):
    tokens = register_user()

    refreshed = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
    new_tokens = refreshed.json()
    assert new_tokens["refresh_token"] != tokens["refresh_token"]

    reused = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert reused.status_code == 401


def test_protected_route_requires_token(client):
    assert client.get("/api/projects/").status_code == 401
    assert client.get("/api/projects/", headers={"Authorization": "Bearer nonsense"}).status_code == 401


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    assert client.get("/api/health").json() == {"status": "healthy"}
