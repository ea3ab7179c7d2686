import io
import os

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["MAIL_USERNAME"] = ""
os.environ["MAIL_PASSWORD"] = ""

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from reportlab.pdfgen import canvas
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hankosign.database import Base, get_db
from hankosign.main import app
from hankosign.modules.auth.services.auth_service import AuthService
from hankosign.modules.users.models.user import User, UserRole
from hankosign.services.email_sender import get_email_sender
from hankosign.services.storage_client import get_storage

DEFAULT_PASSWORD = "Passw0rdX"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeStorage:
    """In-memory stand-in for the S3 client"""

    def __init__(self):
        self.objects = {}
        self.fail_delete = False

    def object_url(self, key):
        return f"https://storage.hankosign.jp/{key}"

    def upload_file(self, key, body, content_type):
        self.objects[key] = (body, content_type)
        return self.object_url(key)

    def delete_file(self, key):
        if self.fail_delete:
            raise ClientError({"Error": {"Code": "500", "Message": "storage down"}}, "DeleteObject")
        self.objects.pop(key, None)

    def get_presigned_url(self, key, expires_in=3600):
        return f"{self.object_url(key)}?X-Amz-Expires={expires_in}"


class FakeEmailSender:
    """Records outgoing mail instead of sending it"""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, to, subject, html):
        if self.fail:
            raise RuntimeError("SMTP unavailable")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"status": "sent"}


@pytest.fixture(autouse=True)
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def email_sender():
    return FakeEmailSender()


@pytest.fixture
def client(storage, email_sender):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_user(session, email, role=UserRole.USER, name="Test User", password=DEFAULT_PASSWORD, **fields):
    user = User(
        email=email,
        password_hash=AuthService.get_password_hash(password),
        name=name,
        role=role,
        **{"is_active": True, **fields}
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers(client, email, password=DEFAULT_PASSWORD):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    # Bearer only; the session cookie would otherwise leak into later requests
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def create_dummy_pdf_bytes(text="HankoSign test document", pages=1):
    buf = io.BytesIO()
    c = canvas.Canvas(buf)
    for page in range(pages):
        c.drawString(50, 750, f"{text} (page {page + 1})")
        c.showPage()
    c.save()
    buf.seek(0)
    return buf.read()


# 1x1 transparent PNG
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


def upload_pdf(client, headers, title="Contract", **form):
    files = {"file": ("contract.pdf", create_dummy_pdf_bytes(), "application/pdf")}
    data = {"title": title, **form}
    resp = client.post("/api/documents", data=data, files=files, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["document"]


def create_hanko(client, headers, name="山田", type="MITOMEIN", **fields):
    payload = {"name": name, "type": type, "image_data": f"data:image/png;base64,{PNG_BASE64}", **fields}
    resp = client.post("/api/hankos", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["hanko"]
