from app.models.document import Document, DocumentStatus
from app.models.user import User
from app.services.user_service import DEMO_CREDENTIAL, get_user_by_email, seed_demo_users
from app.utils.security import verify_credential


class TestUsers:
    def test_register_user(self, client):
        r = client.post("/api/v1/users", json={
            "name": "Alex",
            "email": "Alex@Acme.com",
            "credential": "password123",
        })
        assert r.status_code == 201
        data = r.json()
        assert data["email"] == "alex@acme.com"
        assert set(data) == {"id", "name", "email"}

    def test_duplicate_email_rejected(self, client, api):
        api.register("Alex", "alex@acme.com")
        r = client.post("/api/v1/users", json={
            "name": "Other Alex",
            "email": "ALEX@acme.com",
            "credential": "password123",
        })
        assert r.status_code == 409

    def test_short_credential_rejected(self, client):
        r = client.post("/api/v1/users", json={
            "name": "Alex",
            "email": "alex@acme.com",
            "credential": "short",
        })
        assert r.status_code == 422

    def test_list_users_requires_session(self, client, parties):
        r = client.get("/api/v1/users")
        assert r.status_code == 422

    def test_list_users(self, client, api, parties):
        r = client.get("/api/v1/users", headers=api.auth(parties["alex"]["token"]))
        assert r.status_code == 200
        emails = {u["email"] for u in r.json()}
        assert emails == {"alex@acme.com", "blake@acme.com", "casey@acme.com"}


class TestSeed:
    def test_seed_creates_demo_pair_and_sample(self, db):
        assert seed_demo_users(db) is True

        alex = get_user_by_email(db, "alex@acme.com")
        blake = get_user_by_email(db, "BLAKE@acme.com")
        assert alex.name == "Sender Alex"
        assert verify_credential(blake.credential_hash, DEMO_CREDENTIAL)
        assert blake.credential_hash != DEMO_CREDENTIAL

        sample = db.query(Document).one()
        assert sample.title == "Sample Q3 Contract"
        assert sample.sender_id == alex.id
        assert sample.recipient_id == blake.id
        assert sample.status == DocumentStatus.PENDING.value
        assert sample.signed_at is None

    def test_seed_is_idempotent(self, db):
        seed_demo_users(db)
        assert seed_demo_users(db) is False
        assert db.query(User).count() == 2
        assert db.query(Document).count() == 1
