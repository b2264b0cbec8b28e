from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from fastapi.testclient import TestClient

VIDEO_ID = "dQw4w9WgXcQ"


def test_health(client: TestClient) -> None:
    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["player_provider"] == "simulated"


def test_build_then_resolve_link(client: TestClient) -> None:
    res = client.post(
        "/links/build",
        json={
            "video_id": VIDEO_ID,
            "segments": [
                {"label": "Solo", "start": 61.5, "end": 75},
                {"label": "", "start": "3", "end": 9.999},
                {"label": "broken", "start": "x", "end": 2},
                "garbage",
            ],
        },
    )
    assert res.status_code == 200
    built = res.json()
    assert [(s["label"], s["start"], s["end"]) for s in built["segments"]] == [
        ("Loop 2", 3.0, 10.0),
        ("Solo", 61.5, 75.0),
    ]
    assert parse_qs(built["address_query"])["video"] == [VIDEO_ID]
    assert parse_qs(urlsplit(built["link"]).query)["v"] == [VIDEO_ID]

    res = client.post("/links/resolve", json={"text": f"  {built['link']}  "})
    assert res.status_code == 200
    resolved = res.json()
    assert resolved["video_id"] == VIDEO_ID
    assert resolved["link"] == built["link"]
    solo = resolved["segments"][1]
    assert solo["start_text"] == "01:01.50"
    assert solo["end_text"] == "01:15"
    assert solo["display"] == "01:01 - 01:15"


def test_resolve_rejects_unknown_text(client: TestClient) -> None:
    res = client.post("/links/resolve", json={"text": "https://example.com/video"})
    assert res.status_code == 400
    assert res.json()["detail"] == {
        "error_code": "INVALID_VIDEO_REFERENCE",
        "message": "Please enter a valid YouTube URL or ID.",
    }


def test_build_rejects_invalid_video_id(client: TestClient) -> None:
    res = client.post("/links/build", json={"video_id": "short", "segments": []})
    assert res.status_code == 400
    assert res.json()["detail"]["error_code"] == "INVALID_VIDEO_REFERENCE"


def test_build_without_segments(client: TestClient) -> None:
    res = client.post("/links/build", json={"video_id": VIDEO_ID})
    assert res.status_code == 200
    assert res.json() == {
        "link": f"https://www.youtube.com/watch?v={VIDEO_ID}",
        "address_query": f"video={VIDEO_ID}",
        "segments": [],
    }


def test_state_from_address_bar(client: TestClient) -> None:
    res = client.get(
        "/state",
        params={"video": VIDEO_ID, "segments": '[{"label":"B","start":20,"end":30},{"start":1,"end":2}]'},
    )
    assert res.status_code == 200
    state = res.json()
    assert state["video_id"] == VIDEO_ID
    assert [s["label"] for s in state["segments"]] == ["Loop 2", "B"]
    assert state["selected_segment_id"] == state["segments"][0]["id"]
    assert state["input_text"].startswith(f"https://www.youtube.com/watch?v={VIDEO_ID}&segments=")
    assert parse_qs(state["address_query"])["video"] == [VIDEO_ID]


def test_state_with_invalid_video_keeps_segments(client: TestClient) -> None:
    res = client.get("/state", params={"video": "nope", "segments": "not json"})
    assert res.status_code == 200
    assert res.json() == {
        "video_id": None,
        "input_text": "",
        "selected_segment_id": None,
        "segments": [],
        "address_query": "",
    }


def test_state_repeated_parameters_keep_the_first_value(client: TestClient) -> None:
    res = client.get(
        "/state",
        params=[
            ("video", VIDEO_ID),
            ("video", "bad"),
            ("segments", '[{"label":"First","start":1,"end":2}]'),
            ("segments", '[{"label":"Second","start":3,"end":4}]'),
        ],
    )
    assert res.status_code == 200
    state = res.json()
    assert state["video_id"] == VIDEO_ID
    assert [s["label"] for s in state["segments"]] == ["First"]
