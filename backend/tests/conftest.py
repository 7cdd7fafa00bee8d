import os, sys, pytest
# Ensure backend directory is on path so 'laundry' and 'tests' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from laundry import create_app, get_db
from laundry.models.profile import Base
# Import all model modules to ensure tables are registered before create_all
import laundry.models.hub  # noqa: F401
import laundry.models.order  # noqa: F401
import laundry.models.tracking  # noqa: F401
import laundry.models.audit  # noqa: F401


@pytest.fixture(scope='session', autouse=True)
def app_instance():
    app = create_app({'DATABASE_URL': 'sqlite+pysqlite:///:memory:', 'JWT_SECRET_KEY': 'test-secret-key-for-dispatch-suite'})
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture()
def session(app_instance):
    s = get_db()
    try:
        s.rollback()
    except Exception:
        pass
    return s


@pytest.fixture()
def feed(app_instance):
    return app_instance.extensions['change_feed']


@pytest.fixture()
def lifecycle(session, feed):
    from laundry.services.lifecycle import OrderLifecycle
    return OrderLifecycle(session, feed)
