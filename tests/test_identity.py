import pytest

from barta.core.clock import iso_from_ms
from barta.core.config import settings
from barta.core.exceptions import AuthError, ValidationError
from barta.domains.identity.services import IdentityService


async def test_register_hashes_password(db, clock):
    service = IdentityService(db, clock=clock)

    user = await service.register_user("alice", "secret1")

    assert user.photo == settings.default_photo
    stored = (await db.users.load())[0]
    assert "password" not in stored
    assert stored["passwordHash"] != "secret1"


async def test_duplicate_username_rejected_regardless_of_password(db, clock):
    service = IdentityService(db, clock=clock)
    await service.register_user("alice", "secret1")

    with pytest.raises(ValidationError):
        await service.register_user("alice", "another")

    # Имена различаются с учетом регистра
    await service.register_user("Alice", "secret1")


async def test_register_requires_credentials(db, clock):
    with pytest.raises(ValidationError):
        await IdentityService(db, clock=clock).register_user("", "secret")


async def test_login_creates_session(db, clock):
    service = IdentityService(db, clock=clock)
    user = await service.register_user("alice", "secret1")

    session_id, logged_in = await service.login_user("alice", "secret1")

    assert logged_in.id == user.id
    sessions = await db.sessions.load()
    assert sessions == [
        {"sessionId": session_id, "userId": user.id, "username": "alice", "lastActive": clock.now}
    ]


async def test_login_with_wrong_password(db, clock):
    service = IdentityService(db, clock=clock)
    await service.register_user("alice", "secret1")

    with pytest.raises(AuthError):
        await service.login_user("alice", "wrong")
    with pytest.raises(AuthError):
        await service.login_user("nobody", "secret1")


async def test_legacy_plaintext_password_is_upgraded(db, clock):
    await db.users.save([
        {"id": "1", "username": "old", "password": "plain", "photo": "/p.jpg", "registeredAt": ""}
    ])
    service = IdentityService(db, clock=clock)

    await service.login_user("old", "plain")

    stored = (await db.users.load())[0]
    assert "password" not in stored
    assert stored["passwordHash"]
    await service.login_user("old", "plain")


async def test_list_users_reports_presence(db, clock):
    service = IdentityService(db, clock=clock)
    alice = await service.register_user("alice", "secret1")
    bob = await service.register_user("bob", "secret2")
    carol = await service.register_user("carol", "secret3")
    await service.login_user("bob", "secret2")

    users = await service.list_users(alice.id)

    assert users == [
        {"id": bob.id, "username": "bob", "photo": bob.photo, "online": True},
        {"id": carol.id, "username": "carol", "photo": carol.photo, "online": False},
    ]


async def test_registration_time_comes_from_service_clock(db, clock):
    user = await IdentityService(db, clock=clock).register_user("alice", "secret1")

    assert user.id == str(clock.now)
    assert user.registered_at == iso_from_ms(clock.now)
