from laundry.constants.roles import Role
from tests.test_utils_seed import ensure_profile, unique
from tests.test_lifecycle_helpers import (
    DRIVER_CHAIN, auth_headers, seeded_cast, assert_transition, create_order_and_assert, approved_order
)


def test_stats_reflect_lifecycle(client, app_instance):
    cast = seeded_cast(app_instance)
    admin_h = cast['admin'][1]
    before = client.get('/admin/stats', headers=admin_h).get_json()

    create_order_and_assert(client, cast['customer'][1], cast['hub'].id)
    oid = approved_order(client, cast)['id']
    assert_transition(client, f'/orders/{oid}/claim', cast['driver'][1], 200, 'assigned')
    for status in DRIVER_CHAIN:
        assert_transition(client, f'/orders/{oid}/advance', cast['driver'][1], 200, status)

    after = client.get('/admin/stats', headers=admin_h).get_json()
    assert after['total'] == before['total'] + 2
    assert after['pending'] == before['pending'] + 1
    assert after['delivered'] == before['delivered'] + 1
    assert after['revenue'] == before['revenue'] + 250
    assert after['by_status']['delivered'] == after['delivered']


def test_admin_endpoints_reject_other_roles(client, app_instance):
    for role in (Role.CUSTOMER, Role.DRIVER):
        headers = auth_headers(app_instance, ensure_profile(role))
        assert client.get('/admin/stats', headers=headers).status_code == 403
        assert client.get('/admin/drivers', headers=headers).status_code == 403


def test_driver_directory(client, app_instance):
    name = unique('Driver')
    driver = ensure_profile(Role.DRIVER, full_name=name)
    customer = ensure_profile(Role.CUSTOMER)
    resp = client.get('/admin/drivers?limit=200', headers=auth_headers(app_instance, ensure_profile(Role.ADMIN)))
    assert resp.status_code == 200
    ids = {d['id'] for d in resp.get_json()['data']}
    assert driver.id in ids
    assert customer.id not in ids


def test_healthz(client):
    resp = client.get('/healthz')
    assert resp.status_code == 200
    assert resp.get_json() == {'status': 'ok'}
