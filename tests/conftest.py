import json

import pytest
from flask_jwt_extended import create_access_token

from craftlance.extensions import db as _db
from craftlance.main import create_app
from craftlance.models.user import User
from craftlance.services.order_service import create_order
from craftlance.services.offer_service import submit_offer
from craftlance.services.store import OrderStore
from craftlance.utils.auth_utils import Caller

OFFER_MESSAGE = "I can build this redstone farm within a week."


class RecordingNotifier:
    """Collects notifications instead of writing them."""

    def __init__(self):
        self.sent = []

    def notify(self, user_id, notif_type, title, message, link=None):
        self.sent.append({
            "user_id": user_id,
            "type": notif_type,
            "title": title,
            "message": message,
            "link": link,
        })

    def to(self, user_id):
        return [n for n in self.sent if n["user_id"] == user_id]


class FailingNotifier:
    def __init__(self):
        self.calls = 0

    def notify(self, user_id, notif_type, title, message, link=None):
        self.calls += 1
        raise RuntimeError("notification sink is down")


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def users(app):
    rows = {
        "buyer": User(id="usr-buyer", username="buyer", role="user"),
        "seller": User(id="usr-seller", username="seller", role="user"),
        "seller2": User(id="usr-seller2", username="seller2", role="user"),
        "outsider": User(id="usr-outsider", username="outsider", role="user"),
        "moderator": User(id="usr-mod", username="mod", role="moderator"),
        "admin": User(id="usr-admin", username="admin", role="admin"),
    }
    _db.session.add_all(rows.values())
    _db.session.commit()
    return {name: Caller(u.id, u.role) for name, u in rows.items()}


@pytest.fixture
def auth(app):
    def headers(caller):
        token = create_access_token(identity=caller.id)
        return {"Authorization": f"Bearer {token}"}
    return headers


@pytest.fixture
def store(app):
    return OrderStore(_db.session)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def gateway(app):
    return app.extensions["payment_gateway"]


@pytest.fixture
def make_order(store, users):
    def _make(budget=500, buyer=None, title="Build a castle spawn"):
        return create_order(store, buyer or users["buyer"], {
            "title": title,
            "description": "Medieval castle spawn with a market square and portals.",
            "category": "design",
            "budget": budget,
        })
    return _make


@pytest.fixture
def make_offer(store, users):
    def _make(order, seller=None, price=400, delivery_time=7):
        return submit_offer(store, RecordingNotifier(), seller or users["seller"], order.id, {
            "price": price,
            "delivery_time": delivery_time,
            "message": OFFER_MESSAGE,
        })
    return _make


@pytest.fixture
def signed_webhook(client, gateway):
    def _post(payload, signature=None):
        body = json.dumps(payload).encode()
        return client.post(
            "/api/v1/payments/webhook",
            data=body,
            content_type="application/json",
            headers={"X-Body-Hash": signature if signature is not None else gateway.sign(body)},
        )
    return _post


