from decimal import Decimal

import pytest

from estateledger_backend import create_app
from estateledger_backend.config import TestingConfig
from estateledger_backend.extensions import db as _db
from estateledger_backend.models import Room, User, ROLE_ADMIN, ROLE_SECURITY, ROLE_TENANT
from estateledger_backend.routes.auth import issue_token
from estateledger_backend.services.notifications import Notifier


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def notifier(db):
    return Notifier(db.session)


def _user(db, full_name, email, role, password="secret123"):
    user = User(full_name=full_name, email=email, role=role)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def make_user(db):
    def _make(full_name, email, role, password="secret123"):
        return _user(db, full_name, email, role, password)

    return _make


@pytest.fixture
def make_room(db):
    def _make(room_number="101", floor="1", rent_amount="15000"):
        room = Room(room_number=room_number, floor=floor, rent_amount=Decimal(rent_amount))
        db.session.add(room)
        db.session.commit()
        return room

    return _make


@pytest.fixture
def admin(db):
    return _user(db, "Site Admin", "admin@example.com", ROLE_ADMIN)


@pytest.fixture
def security(db):
    return _user(db, "Ram Guard", "guard@example.com", ROLE_SECURITY)


@pytest.fixture
def room(make_room):
    return make_room()


@pytest.fixture
def tenant(db, room):
    user = _user(db, "Sita Sharma", "sita@example.com", ROLE_TENANT)
    user.room_id = room.id
    room.tenant_id = user.id
    db.session.commit()
    return user


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return _headers
