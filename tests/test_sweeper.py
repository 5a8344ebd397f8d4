from barta.core.sweeper import sweep_once


async def test_sweep_once_evicts_stale_records(db):
    await db.sessions.save([{"sessionId": "s1", "userId": "u1", "username": "alice", "lastActive": 0}])
    await db.typing.save([{"userId": "a", "receiverId": "b", "timestamp": 0}])
    await db.calls.save([{
        "id": "1", "callerId": "a", "receiverId": "b", "callType": "audio",
        "offer": {}, "status": "ringing", "iceCandidates": [], "timestamp": 0,
    }])

    await sweep_once(db)

    assert await db.sessions.load() == []
    assert await db.typing.load() == []
    calls = await db.calls.load()
    assert [c["status"] for c in calls] == ["expired"]
