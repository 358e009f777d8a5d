import os
import shutil
import tempfile

# Settings are read at import time, so the environment has to be ready first
_UPLOAD_DIR = tempfile.mkdtemp(prefix="tourdesk-uploads-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = _UPLOAD_DIR
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.pop("SMS_ACCOUNT_KEY", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tourdesk.config import UPLOAD_DIR  # noqa: E402
from tourdesk.database import Base, SessionLocal, engine  # noqa: E402
from tourdesk.main import app  # noqa: E402
from tourdesk.models import User, UserRole  # noqa: E402
from tourdesk.security_utils import create_access_token, hash_password_bcrypt  # noqa: E402
from tourdesk.services.sms_service import SMSGatewayClient, get_sms_client  # noqa: E402

TEST_PASSWORD = "Password123"


class FakeSMSClient(SMSGatewayClient):
    """Records messages instead of calling the provider"""

    def __init__(self):
        super().__init__(base_url="http://sms.test/api", account_key="test-key")
        self.sent = []

    async def send(self, to_phone, message):
        self.sent.append((to_phone, message))
        return "OK"


@pytest.fixture(scope="session")
def password_hash():
    return hash_password_bcrypt(TEST_PASSWORD)


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    for child in UPLOAD_DIR.iterdir():
        if child.is_dir():
            shutil.rmtree(child)
        else:
            child.unlink()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sms_client():
    fake = FakeSMSClient()
    app.dependency_overrides[get_sms_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_sms_client, None)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db, password_hash):
    def _make_user(role=UserRole.STAFF, email=None, name=None):
        role = UserRole(role)
        user = User(
            name=name or f"{role.value.title()} User",
            email=email or f"{role.value.lower()}-{db.query(User).count() + 1}@tourdesk.test",
            password_hash=password_hash,
            role=role.value,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


def headers_for(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def admin_headers(admin):
    return headers_for(admin)


@pytest.fixture
def manager_headers(make_user):
    return headers_for(make_user(UserRole.MANAGER))


@pytest.fixture
def staff(make_user):
    return make_user(UserRole.STAFF)


@pytest.fixture
def staff_headers(staff):
    return headers_for(staff)


# ============================================================================
# API helpers
# ============================================================================


def create_member(client, headers, name="Asha Rao", mobile_no="9876543210", address="12 Lake Road, Pune", files=None):
    response = client.post(
        "/members",
        data={"name": name, "mobileNo": mobile_no, "address": address},
        files=files,
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_package(client, headers, name="Kashmir Delight", price=25000, seats=40, files=None):
    response = client.post(
        "/tour-packages",
        data={
            "packageName": name,
            "tourPrice": str(price),
            "totalSeat": str(seats),
            "desc": "Seven days across Srinagar, Gulmarg and Pahalgam",
        },
        files=files,
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_booking(client, headers, member_ids, package_id, total_cost=50000, **overrides):
    payload = {
        "memberIds": member_ids,
        "tourPackageId": package_id,
        "packagePrice": 25000,
        "memberCount": len(member_ids),
        "netCost": total_cost,
        "discount": 0,
        "totalCost": total_cost,
        "paymentType": "PARTIAL",
    }
    payload.update(overrides)
    response = client.post("/tour-members", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def add_payment(client, headers, booking_id, amount, status="PAID", method="UPI"):
    response = client.post(
        f"/tour-members/{booking_id}/payments",
        json={"amount": amount, "paymentMethod": method, "status": status},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
