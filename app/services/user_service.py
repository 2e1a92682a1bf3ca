import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.document import Document, DocumentStatus
from app.models.user import User
from app.services.errors import Conflict
from app.utils.security import hash_credential

logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("Sender Alex", "alex@acme.com"),
    ("Signer Blake", "blake@acme.com"),
]
DEMO_CREDENTIAL = "password123"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.asc(), User.name.asc()).all()


def create_user(db: Session, name: str, email: str, credential: str) -> User:
    if get_user_by_email(db, email):
        raise Conflict("A user with this email already exists")

    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    user = User(
        id=str(uuid.uuid4()),
        name=name.strip(),
        email=normalize_email(email),
        credential_hash=hash_credential(credential),
        created_at=now,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def seed_demo_users(db: Session) -> bool:
    """Create the demo sender/recipient pair and a sample request on an empty database."""
    if db.query(User).count() > 0:
        return False

    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    users = []
    for name, email in DEMO_USERS:
        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            credential_hash=hash_credential(DEMO_CREDENTIAL),
            created_at=now,
        )
        db.add(user)
        users.append(user)

    alex, blake = users
    db.add(Document(
        id=str(uuid.uuid4()),
        title="Sample Q3 Contract",
        sender_id=alex.id,
        recipient_id=blake.id,
        status=DocumentStatus.PENDING.value,
        requested_at=now,
    ))
    db.commit()
    logger.info("Seeded %d demo users and a sample document", len(users))
    return True
