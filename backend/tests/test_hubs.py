from laundry import get_db
from laundry.constants.roles import Role
from laundry.models.audit import AuditLog
from tests.test_utils_seed import ensure_profile, unique
from tests.test_lifecycle_helpers import auth_headers


def test_service_catalogue_is_public(client):
    resp = client.get('/hubs/services')
    assert resp.status_code == 200
    by_id = {s['id']: s for s in resp.get_json()['data']}
    assert by_id['wash_fold']['unit_price'] == 50
    assert by_id['dry_cleaning']['unit_price'] == 120
    assert by_id['ironing']['turnaround_hours'] == 12


def test_admin_creates_hub_and_listing_shows_it(client, app_instance):
    admin = ensure_profile(Role.ADMIN)
    headers = auth_headers(app_instance, admin)
    name = unique('Hub')
    resp = client.post('/hubs', headers=headers, json={
        'name': name,
        'address': '5 Rinse Road',
        'phone': '555-0100',
        'latitude': '51.5',
        'longitude': -0.12,
        'services': ['ironing', 'wash_fold', 'ironing'],
    })
    assert resp.status_code == 201, resp.get_json()
    hub = resp.get_json()
    assert hub['services'] == ['ironing', 'wash_fold']
    assert hub['latitude'] == 51.5

    listing = client.get('/hubs?limit=200', headers=auth_headers(app_instance, ensure_profile(Role.CUSTOMER)))
    assert listing.status_code == 200
    assert name in {h['name'] for h in listing.get_json()['data']}
    assert listing.headers.get('ETag')

    audit = get_db().query(AuditLog).filter_by(action='HUB.CREATE', entity_id=str(hub['id'])).one_or_none()
    assert audit is not None and audit.actor_id == admin.id


def test_hub_creation_is_admin_only_and_validated(client, app_instance):
    admin_h = auth_headers(app_instance, ensure_profile(Role.ADMIN))
    driver_h = auth_headers(app_instance, ensure_profile(Role.DRIVER))
    payload = {'name': unique('Hub'), 'address': '9 Spin Street', 'services': ['wash_fold']}
    assert client.post('/hubs', headers=driver_h, json=payload).status_code == 403
    assert client.post('/hubs', headers=admin_h, json={**payload, 'services': ['bleaching']}).status_code == 400
    assert client.post('/hubs', headers=admin_h, json={**payload, 'address': ''}).status_code == 400
    assert client.post('/hubs', headers=admin_h, json={**payload, 'latitude': 'north'}).status_code == 400


def test_hub_listing_conditional_get(client, app_instance):
    headers = auth_headers(app_instance, ensure_profile(Role.CUSTOMER))
    first = client.get('/hubs', headers=headers)
    etag = first.headers['ETag']
    assert client.get('/hubs', headers={**headers, 'If-None-Match': etag}).status_code == 304
    assert client.get('/hubs', headers={**headers, 'If-None-Match': 'stale'}).status_code == 200


def test_hub_coordinates_must_be_in_range(client, app_instance):
    admin_h = auth_headers(app_instance, ensure_profile(Role.ADMIN))
    payload = {'name': unique('Hub'), 'address': '3 Press Place', 'services': ['ironing']}
    for field, value in (('latitude', 91), ('longitude', -180.5), ('latitude', True)):
        resp = client.post('/hubs', headers=admin_h, json={**payload, field: value})
        assert resp.status_code == 400, (field, value)
        assert field in resp.get_json()['error']['detail']
