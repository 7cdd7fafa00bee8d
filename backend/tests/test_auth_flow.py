from laundry import get_db
from laundry.models.audit import AuditLog
from tests.test_utils_seed import unique


def test_signup_login_and_me(client):
    email = f"{unique('signup')}@example.com"
    resp = client.post('/auth/signup', json={'email': email, 'password': 'pw', 'full_name': 'Dee Driver', 'role': 'driver'})
    assert resp.status_code == 201, resp.get_json()
    created = resp.get_json()
    assert created['role'] == 'driver'
    assert created['access_token']

    login = client.post('/auth/login', json={'email': email, 'password': 'pw'})
    assert login.status_code == 200, login.get_json()
    assert login.get_json()['role'] == 'driver'
    token = login.get_json()['access_token']

    me = client.get('/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert me.status_code == 200
    body = me.get_json()
    assert body['email'] == email
    assert body['role'] == 'driver'
    assert body['id'] == created['id']

    audit = get_db().query(AuditLog).filter_by(action='PROFILE.SIGNUP', entity_id=str(created['id'])).one_or_none()
    assert audit is not None and audit.meta['role'] == 'driver'


def test_signup_defaults_to_customer(client):
    resp = client.post('/auth/signup', json={'email': f"{unique('cust')}@example.com", 'password': 'pw'})
    assert resp.status_code == 201
    assert resp.get_json()['role'] == 'customer'


def test_signup_rejects_unknown_role_and_duplicates(client):
    email = f"{unique('dup')}@example.com"
    bad_role = client.post('/auth/signup', json={'email': email, 'password': 'pw', 'role': 'superuser'})
    assert bad_role.status_code == 400
    assert bad_role.get_json()['error']['detail'] == 'role invalid'
    assert client.post('/auth/signup', json={'email': email, 'password': 'pw'}).status_code == 201
    again = client.post('/auth/signup', json={'email': email.upper(), 'password': 'pw'})
    assert again.status_code == 409


def test_signup_requires_email_and_password(client):
    assert client.post('/auth/signup', json={'password': 'pw'}).status_code == 400
    assert client.post('/auth/signup', json={'email': f"{unique('nopw')}@example.com"}).status_code == 400


def test_login_rejects_bad_credentials(client):
    email = f"{unique('badpw')}@example.com"
    client.post('/auth/signup', json={'email': email, 'password': 'right'})
    assert client.post('/auth/login', json={'email': email, 'password': 'wrong'}).status_code == 401
    assert client.post('/auth/login', json={'email': email}).status_code == 400


def test_concurrent_duplicate_signup_is_conflict(client, monkeypatch):
    import laundry.routes.auth as auth_mod
    from sqlalchemy import false
    real_select = auth_mod.select
    email = f"{unique('race')}@example.com"
    assert client.post('/auth/signup', json={'email': email, 'password': 'pw'}).status_code == 201
    # the existence check misses, as when another request inserts between check and commit
    monkeypatch.setattr(auth_mod, 'select', lambda *a: real_select(*a).where(false()))
    again = client.post('/auth/signup', json={'email': email, 'password': 'pw'})
    assert again.status_code == 409
    assert again.get_json()['error']['detail'] == 'email already registered'
    monkeypatch.undo()
    # session is usable after the rollback
    assert client.post('/auth/login', json={'email': email, 'password': 'pw'}).status_code == 200
