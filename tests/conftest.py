import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.database import get_db
from app.main import app
from app.config import settings
from app.services.auth_service import auth_service


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def tmp_data(tmp_path):
    data_path = tmp_path / "ESignData"
    data_path.mkdir()
    return data_path


@pytest.fixture
def test_db(tmp_data):
    db_path = tmp_data / "db.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    from app.database import init_db
    init_db(db_path)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def db(test_db):
    session = test_db()
    yield session
    session.close()


@pytest.fixture
def fresh_auth_service():
    """Reset session state for each test."""
    original = auth_service.__dict__.copy()
    auth_service._active_tokens = {}
    yield auth_service
    auth_service.__dict__.update(original)


@pytest.fixture
def client(tmp_data, test_db, fresh_auth_service):
    original_data_path = settings.data_path
    settings.data_path = tmp_data
    c = TestClient(app)
    yield c
    settings.data_path = original_data_path


class ApiHelpers:
    """Register/sign-in shortcuts shared by the HTTP tests."""

    credential = "password123"

    def __init__(self, client):
        self.client = client

    def register(self, name, email):
        r = self.client.post("/api/v1/users", json={
            "name": name,
            "email": email,
            "credential": self.credential,
        })
        assert r.status_code == 201, r.text
        return r.json()

    def login(self, email):
        r = self.client.post("/api/v1/auth/login", json={
            "email": email,
            "credential": self.credential,
        })
        assert r.status_code == 200, r.text
        return r.json()["token"]

    def auth(self, token):
        return {"Authorization": f"Bearer {token}"}

    def create_document(self, token, recipient_id, title="Q3 Contract", files=None):
        r = self.client.post(
            "/api/v1/documents",
            data={"title": title, "recipient_id": recipient_id},
            files=files,
            headers=self.auth(token),
        )
        assert r.status_code == 201, r.text
        return r.json()


@pytest.fixture
def api(client):
    return ApiHelpers(client)


@pytest.fixture
def parties(api):
    """Alex sends, Blake receives, Casey is unrelated."""
    alex = api.register("Alex", "alex@acme.com")
    blake = api.register("Blake", "blake@acme.com")
    casey = api.register("Casey", "casey@acme.com")
    return {
        "alex": {**alex, "token": api.login("alex@acme.com")},
        "blake": {**blake, "token": api.login("blake@acme.com")},
        "casey": {**casey, "token": api.login("casey@acme.com")},
    }
