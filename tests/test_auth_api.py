from conftest import STAFF_EMAIL, STAFF_PASSWORD


def test_register_and_duplicate(client):
    resp = client.post('/api/register', json={"email": "new@example.com", "password": "pw"})
    assert resp.status_code == 201

    resp = client.post('/api/register', json={"email": "new@example.com", "password": "pw"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "This email is already registered."


def test_register_requires_both_fields(client):
    assert client.post('/api/register', json={"email": "x@example.com"}).status_code == 400
    assert client.post('/api/register', data={"password": "pw"}).status_code == 400


def test_login_rejects_bad_credentials(client):
    client.post('/api/register', json={"email": STAFF_EMAIL, "password": STAFF_PASSWORD})

    for body in ({"email": STAFF_EMAIL, "password": "nope"},
                 {"email": "ghost@example.com", "password": STAFF_PASSWORD},
                 {}):
        resp = client.post('/api/login', json=body)
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Invalid credentials."


def test_protected_routes_need_a_session(client):
    resp = client.get('/api/users')
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Unauthorized. Please log in."
    assert client.get('/api/submissions').status_code == 401


def test_login_gives_access_and_never_exposes_hashes(staff_client):
    resp = staff_client.get('/api/users')
    assert resp.status_code == 200
    users = resp.get_json()
    assert [u["email"] for u in users] == [STAFF_EMAIL]
    assert "password" not in users[0]
    assert "password_hash" not in users[0]


def test_login_replaces_the_previous_session(staff_client, ctx):
    assert len(list(ctx.settings.sessions_dir.iterdir())) == 1
    resp = staff_client.post('/api/login', json={"email": STAFF_EMAIL, "password": STAFF_PASSWORD})
    assert resp.status_code == 200
    assert len(list(ctx.settings.sessions_dir.iterdir())) == 1


def test_logout_ends_the_session(staff_client, ctx):
    resp = staff_client.post('/api/logout')
    assert resp.status_code == 200
    assert list(ctx.settings.sessions_dir.iterdir()) == []
    assert staff_client.get('/api/users').status_code == 401


def test_logout_without_session_is_fine(client):
    assert client.post('/api/logout').status_code == 200
