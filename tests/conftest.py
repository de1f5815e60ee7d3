import itertools
import os
import tempfile

# Settings are read when linkme is first imported: point them at a scratch
# SQLite file before any test module imports the application.
_DB_DIR = tempfile.mkdtemp(prefix="linkme-tests-")
os.environ["DB_DRIVER_NAME"] = "sqlite"
os.environ["DB_DATABASE_NAME"] = os.path.join(_DB_DIR, "linkme-test.db")
os.environ["INIT_MODE"] = "runtime"

import pytest  # noqa: E402

import linkme.database.entities  # noqa: E402,F401
from linkme.database.config.connection_engine import connection_engine, metadata  # noqa: E402
from linkme.database.core.funcs import register_user  # noqa: E402
from linkme.database.core.help_requests import create_help_request  # noqa: E402

PASSWORD = "Str0ng!pass"

_sequence = itertools.count(1)


@pytest.fixture(autouse=True)
def fresh_db():
    metadata.drop_all(connection_engine)
    metadata.create_all(connection_engine)
    yield
    metadata.drop_all(connection_engine)


def _jmbg(n: int) -> str:
    return f"{n:013d}"


@pytest.fixture
def make_user():
    def _make(name="Ana", role="user", help_categories=(), **overrides):
        n = next(_sequence)
        data = {
            "email": f"{name.lower()}{n}@example.com",
            "password": PASSWORD,
            "name": name,
            "role": role,
            "jmbg": _jmbg(n),
            "help_categories": list(help_categories),
        }
        data.update(overrides)
        return register_user(**data)

    return _make


@pytest.fixture
def owner(make_user):
    return make_user(name="Olga", role="user")


@pytest.fixture
def volunteer(make_user):
    return make_user(name="Vuk", role="volunteer", help_categories=["shopping", "transport"])


@pytest.fixture
def make_request():
    def _make(user_id, category="shopping", urgency="flexible", latitude=44.8125, longitude=20.4612,
              description="Need groceries from the market on Saturday morning", address="Knez Mihailova 1"):
        return create_help_request(
            user_id=user_id,
            category=category,
            description=description,
            latitude=latitude,
            longitude=longitude,
            address=address,
            urgency=urgency,
        )

    return _make
