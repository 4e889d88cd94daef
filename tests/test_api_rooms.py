from fastapi.testclient import TestClient

from config import Settings
from main import create_app


def _room_with(client, *names):
    """建立房間並讓其他人加入，返回 (code, [member ids])"""
    res = client.post("/rooms", json={"displayName": names[0], "callerId": "a"})
    assert res.status_code == 201
    code = res.json()["roomCode"]
    ids = [res.json()["memberId"]]
    for i, name in enumerate(names[1:], start=1):
        res = client.post(f"/rooms/{code}/join", json={"displayName": name, "callerId": "abcdefgh"[i]})
        assert res.status_code == 200
        ids.append(res.json()["memberId"])
    return code, ids


def test_create_room(client):
    res = client.post("/rooms", json={"displayName": "Alice"})
    assert res.status_code == 201
    data = res.json()
    assert data["phase"] == "lobby"
    assert data["hostId"] == data["memberId"]
    assert len(data["roomCode"]) == 4
    assert data["members"] == [{
        "id": data["memberId"],
        "displayName": "Alice",
        "isHost": True,
        "hasSubmitted": False,
        "hasVoted": False,
        "submission": None,
        "voteTarget": None,
    }]
    assert data["resultSummary"] is None


def test_join_and_state(client):
    code, ids = _room_with(client, "Alice", "Bob")
    res = client.get(f"/rooms/{code.lower()}")
    assert res.status_code == 200
    data = res.json()
    assert data["roomCode"] == code
    assert [m["displayName"] for m in data["members"]] == ["Alice", "Bob"]
    assert [m["id"] for m in data["members"]] == ids


def test_rejoin_with_same_caller_id(client):
    code, _ = _room_with(client, "Alice", "Bob")
    res = client.post(f"/rooms/{code}/join", json={"displayName": "Bobby", "callerId": "b"})
    assert res.status_code == 200
    members = res.json()["members"]
    assert len(members) == 2
    assert members[1]["displayName"] == "Bobby"


def test_unknown_room_is_404(client):
    assert client.get("/rooms/ZZZZ").status_code == 404
    res = client.post("/rooms/ZZZZ/join", json={"displayName": "Bob"})
    assert res.status_code == 404
    assert "error" in res.json()
    assert client.post("/rooms/ZZZZ/start", json={"callerId": "a"}).status_code == 404
    assert client.post("/rooms/ZZZZ/technique", json={"callerId": "a", "text": "x"}).status_code == 404
    assert client.post("/rooms/ZZZZ/vote", json={"callerId": "a", "targetId": "b"}).status_code == 404


def test_full_game_flow(client):
    code, _ = _room_with(client, "Alice", "Bob", "Carol")

    res = client.post(f"/rooms/{code}/start", json={"callerId": "a"})
    assert res.status_code == 200
    assert res.json()["phase"] == "building"

    res = client.post(f"/rooms/{code}/technique", json={"callerId": "a", "text": "Dragon Strike"})
    assert res.json()["allSubmitted"] is False
    # 全員提交前看不到別人的技
    state = client.get(f"/rooms/{code}").json()
    assert [m["hasSubmitted"] for m in state["members"]] == [True, False, False]
    assert all(m["submission"] is None for m in state["members"])

    client.post(f"/rooms/{code}/technique", json={"callerId": "b", "text": "Iron Wall"})
    res = client.post(f"/rooms/{code}/technique", json={"callerId": "c", "text": "Flame Kick"})
    data = res.json()
    assert data["allSubmitted"] is True
    assert data["phase"] == "voting"
    assert [m["submission"] for m in data["members"]] == ["Dragon Strike", "Iron Wall", "Flame Kick"]

    assert client.post(f"/rooms/{code}/vote", json={"callerId": "a", "targetId": "b"}).json()["allVoted"] is False
    client.post(f"/rooms/{code}/vote", json={"callerId": "b", "targetId": "c"})
    res = client.post(f"/rooms/{code}/vote", json={"callerId": "c", "targetId": "b"})
    assert res.status_code == 200
    data = res.json()
    assert data["allVoted"] is True
    assert data["phase"] == "result"
    assert data["winnerIds"] == ["b"]
    assert data["voteCounts"] == {"a": 0, "b": 2, "c": 1}
    assert data["resultSummary"].endswith("Winner: Bob (Iron Wall) with 2 votes")
    assert [m["voteTarget"] for m in data["members"]] == ["b", "c", "b"]

    # 再來一輪
    res = client.post(f"/rooms/{code}/start", json={"callerId": "a"})
    data = res.json()
    assert data["phase"] == "building"
    assert data["resultSummary"] is None
    assert data["winnerIds"] is None
    assert not any(m["hasSubmitted"] or m["hasVoted"] for m in data["members"])


def test_restart_by_non_host_is_403(client):
    code, _ = _room_with(client, "Alice", "Bob")
    res = client.post(f"/rooms/{code}/start", json={"callerId": "b"})
    assert res.status_code == 403
    assert res.json()["error"]
    assert client.get(f"/rooms/{code}").json()["phase"] == "lobby"


def test_technique_errors(client):
    code, _ = _room_with(client, "Alice", "Bob")
    res = client.post(f"/rooms/{code}/technique", json={"callerId": "a", "text": "Too early"})
    assert res.status_code == 400

    client.post(f"/rooms/{code}/start", json={"callerId": "a"})
    assert client.post(f"/rooms/{code}/technique", json={"callerId": "zzz", "text": "x"}).status_code == 404
    assert client.post(f"/rooms/{code}/technique", json={"callerId": "a", "text": "  "}).status_code == 400
    # 缺欄位 / 多餘欄位
    assert client.post(f"/rooms/{code}/technique", json={"callerId": "a"}).status_code == 400
    res = client.post(f"/rooms/{code}/technique", json={"playerId": "a", "techName": "x"})
    assert res.status_code == 400
    assert "error" in res.json()
    assert client.get(f"/rooms/{code}").json()["members"][0]["hasSubmitted"] is False


def test_vote_errors(client):
    code, _ = _room_with(client, "Alice", "Bob")
    assert client.post(f"/rooms/{code}/vote", json={"callerId": "a", "targetId": "b"}).status_code == 400

    client.post(f"/rooms/{code}/start", json={"callerId": "a"})
    client.post(f"/rooms/{code}/technique", json={"callerId": "a", "text": "Punch"})
    client.post(f"/rooms/{code}/technique", json={"callerId": "b", "text": "Kick"})

    res = client.post(f"/rooms/{code}/vote", json={"callerId": "a", "targetId": "a"})
    assert res.status_code == 400
    assert client.post(f"/rooms/{code}/vote", json={"callerId": "a", "targetId": "zzz"}).status_code == 404
    assert client.post(f"/rooms/{code}/vote", json={"callerId": "zzz", "targetId": "a"}).status_code == 404
    assert client.post(f"/rooms/{code}/vote", json={"callerId": "a"}).status_code == 400

    state = client.get(f"/rooms/{code}").json()
    assert not any(m["hasVoted"] for m in state["members"])


def test_two_way_tie_over_http(client):
    code, _ = _room_with(client, "Alice", "Bob")
    client.post(f"/rooms/{code}/start", json={"callerId": "a"})
    client.post(f"/rooms/{code}/technique", json={"callerId": "a", "text": "Punch"})
    client.post(f"/rooms/{code}/technique", json={"callerId": "b", "text": "Kick"})
    client.post(f"/rooms/{code}/vote", json={"callerId": "a", "targetId": "b"})
    data = client.post(f"/rooms/{code}/vote", json={"callerId": "b", "targetId": "a"}).json()
    assert data["winnerIds"] == ["a", "b"]
    assert data["voteCounts"] == {"a": 1, "b": 1}


def test_join_during_voting_policy(client):
    code, _ = _room_with(client, "Alice", "Bob")
    client.post(f"/rooms/{code}/start", json={"callerId": "a"})
    client.post(f"/rooms/{code}/technique", json={"callerId": "a", "text": "Punch"})
    client.post(f"/rooms/{code}/technique", json={"callerId": "b", "text": "Kick"})

    res = client.post(f"/rooms/{code}/join", json={"displayName": "Dan", "callerId": "d"})
    assert res.status_code == 200
    assert res.json()["phase"] == "voting"

    client.post(f"/rooms/{code}/vote", json={"callerId": "a", "targetId": "b"})
    data = client.post(f"/rooms/{code}/vote", json={"callerId": "b", "targetId": "a"}).json()
    assert data["allVoted"] is False
    data = client.post(f"/rooms/{code}/vote", json={"callerId": "d", "targetId": "b"}).json()
    assert data["allVoted"] is True
    assert data["winnerIds"] == ["b"]
    assert "Dan: (no technique) - 0 votes" in data["resultSummary"]


def test_version_increases_on_change(client):
    code, _ = _room_with(client, "Alice")
    v1 = client.get(f"/rooms/{code}").json()["version"]
    client.post(f"/rooms/{code}/join", json={"displayName": "Bob"})
    v2 = client.get(f"/rooms/{code}").json()["version"]
    assert v2 > v1
    assert client.get(f"/rooms/{code}").json()["version"] == v2


def test_first_tie_mode_setting():
    app = create_app(Settings(_env_file=None, tally_tie_mode="first"))
    with TestClient(app) as client:
        code, _ = _room_with(client, "Alice", "Bob")
        client.post(f"/rooms/{code}/start", json={"callerId": "a"})
        client.post(f"/rooms/{code}/technique", json={"callerId": "a", "text": "Punch"})
        client.post(f"/rooms/{code}/technique", json={"callerId": "b", "text": "Kick"})
        client.post(f"/rooms/{code}/vote", json={"callerId": "a", "targetId": "b"})
        data = client.post(f"/rooms/{code}/vote", json={"callerId": "b", "targetId": "a"}).json()
        assert data["winnerIds"] == ["a"]


def test_long_names_and_techniques_are_truncated(client):
    res = client.post("/rooms", json={"displayName": "N" * 201, "callerId": "a"})
    assert res.status_code == 201
    code = res.json()["roomCode"]
    assert res.json()["members"][0]["displayName"] == "N" * 24

    res = client.post(f"/rooms/{code}/join", json={"displayName": "B" * 300, "callerId": "b"})
    assert res.status_code == 200
    assert res.json()["members"][1]["displayName"] == "B" * 24

    client.post(f"/rooms/{code}/start", json={"callerId": "a"})
    res = client.post(f"/rooms/{code}/technique", json={"callerId": "a", "text": "x" * 2001})
    assert res.status_code == 200
    data = client.post(f"/rooms/{code}/technique", json={"callerId": "b", "text": "Iron Wall"}).json()
    assert data["members"][0]["submission"] == "x" * 40
