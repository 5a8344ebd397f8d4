from barta.domains.presence.services import SessionRegistry, TypingRegistry


async def test_session_tokens_are_unique(db, clock):
    registry = SessionRegistry(db, clock=clock)

    tokens = {await registry.create("u1", "alice") for _ in range(20)}

    assert len(tokens) == 20


async def test_presence_flips_after_threshold(db, clock):
    registry = SessionRegistry(db, clock=clock, timeout_seconds=300)
    await registry.create("u1", "alice")

    clock.advance(299)
    assert SessionRegistry.is_online("u1", await registry.list_active())

    clock.advance(2)
    active = await registry.list_active()
    assert not SessionRegistry.is_online("u1", active)
    assert await registry.repository.get_all() == []


async def test_heartbeat_keeps_session_alive(db, clock):
    registry = SessionRegistry(db, clock=clock, timeout_seconds=300)
    session_id = await registry.create("u1", "alice")

    clock.advance(200)
    assert await registry.touch(session_id)
    clock.advance(200)

    assert SessionRegistry.is_online("u1", await registry.list_active())


async def test_touch_unknown_session_is_noop(db, clock):
    registry = SessionRegistry(db, clock=clock)

    assert await registry.touch("missing") is False
    assert await registry.list_active() == []


async def test_end_is_idempotent(db, clock):
    registry = SessionRegistry(db, clock=clock)
    session_id = await registry.create("u1", "alice")
    other = await registry.create("u1", "alice")

    await registry.end(session_id)
    await registry.end(session_id)

    active = await registry.list_active()
    assert [s.session_id for s in active] == [other]


async def test_typing_expires_after_ttl(db, clock):
    registry = TypingRegistry(db, clock=clock, ttl_seconds=5)
    await registry.set_typing("a", "b", True)

    assert await registry.is_typing("a", "b")
    assert not await registry.is_typing("b", "a")

    clock.advance(5)
    assert not await registry.is_typing("a", "b")


async def test_typing_cleared_immediately(db, clock):
    registry = TypingRegistry(db, clock=clock, ttl_seconds=5)
    await registry.set_typing("a", "b", True)
    await registry.set_typing("a", "b", False)

    assert not await registry.is_typing("a", "b")


async def test_typing_renewal_replaces_entry(db, clock):
    registry = TypingRegistry(db, clock=clock, ttl_seconds=5)
    await registry.set_typing("a", "b", True)
    clock.advance(4)
    await registry.set_typing("a", "b", True)
    clock.advance(4)

    assert await registry.is_typing("a", "b")
    assert len(await registry.repository.get_all()) == 1
