from flask import Blueprint, request, abort, g
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from laundry import get_db
from laundry.constants.roles import Role, ALL_ROLES
from laundry.decorators.auth import require_actor
from laundry.models.profile import Profile
from laundry.services.audit import add_audit
from laundry.services.identity import issue_access_token
from laundry.utils.listing import iso_z
from laundry.utils.validation import validate_status, require_text, optional_text

auth_bp = Blueprint('auth', __name__)


@auth_bp.post('/signup')
def signup():
    data = request.json or {}
    email = require_text(data.get('email'), 'email', max_length=128).lower()
    password = data.get('password')
    if not password or not isinstance(password, str):
        abort(400, description='password required')
    role = validate_status(data.get('role', Role.CUSTOMER.value), ALL_ROLES, 'role')
    session = get_db()
    if session.execute(select(Profile).where(Profile.email == email)).scalar_one_or_none():
        abort(409, description='email already registered')
    profile = Profile(
        email=email,
        full_name=optional_text(data.get('full_name'), 'full_name'),
        phone=optional_text(data.get('phone'), 'phone'),
        role=role,
        password_hash='',
    )
    profile.set_password(password)
    try:
        session.add(profile)
        session.flush()
        add_audit(session, 'PROFILE.SIGNUP', profile.id, 'Profile', profile.id, {'role': role})
        session.commit()
    except IntegrityError:
        # a concurrent signup registered the same email between check and insert
        session.rollback()
        abort(409, description='email already registered')
    return {**_profile_json(profile), 'access_token': issue_access_token(profile)}, 201


@auth_bp.post('/login')
def login():
    data = request.json or {}
    email = data.get('email'); password = data.get('password')
    if not email or not password:
        abort(400, description='email & password required')
    session = get_db()
    profile = session.execute(select(Profile).where(Profile.email == str(email).lower())).scalar_one_or_none()
    if not profile or not profile.verify_password(password):
        abort(401, description='invalid credentials')
    return {'access_token': issue_access_token(profile), 'role': profile.role}


@auth_bp.get('/me')
@require_actor()
def me():
    session = get_db()
    profile = session.get(Profile, g.actor.actor_id)
    if not profile:
        abort(404)
    return _profile_json(profile)


def _profile_json(p: Profile):
    return {
        'id': p.id,
        'email': p.email,
        'full_name': p.full_name,
        'phone': p.phone,
        'role': p.role,
        'created_at': iso_z(p.created_at),
    }
