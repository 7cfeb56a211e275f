"""
Integration tests for the HTTP surface: request -> workspace -> response.

The first group runs against the in-memory file system; the last one drives a
full copy on a real temporary directory.
"""

import os
import pytest
import tempfile
from pathlib import Path
from fastapi.testclient import TestClient

from dualpane.config import Settings
from dualpane.main import create_app

from conftest import HOME


@pytest.fixture
def client(workspace):
    """Test client whose startup points both panes at HOME"""
    app = create_app(workspace, settings=Settings())
    with TestClient(app) as client:
        yield client


class TestPanes:
    """Tests for /api/panes"""

    def test_startup_loads_home(self, client):
        for side in ("left", "right"):
            response = client.get(f"/api/panes/{side}")

            assert response.status_code == 200
            data = response.json()
            assert data["history"] == [HOME]
            assert data["history_index"] == 0
            assert data["root"]["path"] == HOME
            assert data["is_loading"] is False

        assert client.get("/api/panes/left").json()["multi_select"] is True
        assert client.get("/api/panes/right").json()["multi_select"] is False

    def test_unknown_side(self, client):
        response = client.get("/api/panes/middle")

        assert response.status_code == 422

    def test_navigate_back_forward(self, client):
        response = client.post("/api/panes/left/navigate", json={"path": f"{HOME}/docs"})
        assert response.json()["history"] == [HOME, f"{HOME}/docs"]

        response = client.post("/api/panes/left/back")
        assert response.json()["history_index"] == 0
        assert response.json()["root"]["path"] == HOME

        response = client.post("/api/panes/left/forward")
        assert response.json()["history_index"] == 1
        assert response.json()["root"]["path"] == f"{HOME}/docs"

        # Right pane is independent
        assert client.get("/api/panes/right").json()["history"] == [HOME]

    def test_navigate_failure_raises_notice(self, client):
        response = client.post("/api/panes/left/navigate", json={"path": "/nonexistent"})

        assert response.status_code == 200
        assert response.json()["root"]["path"] == HOME

        notices = client.get("/api/notices").json()
        assert notices[-1]["level"] == "error"
        assert "/nonexistent" in notices[-1]["message"]

    def test_expand(self, client):
        response = client.post("/api/panes/left/expand", json={"path": f"{HOME}/docs"})

        assert response.status_code == 200
        docs = next(child for child in response.json()["root"]["children"] if child["name"] == "docs")
        assert [child["name"] for child in docs["children"]] == ["reports", "a.txt", "b.txt"]
        assert docs["children"][0]["children"] is None

    def test_expand_unknown_node(self, client):
        response = client.post("/api/panes/left/expand", json={"path": f"{HOME}/docs/reports"})

        assert response.status_code == 404

    def test_visible(self, client):
        client.post("/api/panes/left/expand", json={"path": f"{HOME}/docs"})

        response = client.get("/api/panes/left/visible", params={"query": r"\.txt$", "regex": "true"})

        assert response.json() == [
            HOME,
            f"{HOME}/docs",
            f"{HOME}/docs/a.txt",
            f"{HOME}/docs/b.txt",
            f"{HOME}/notes.txt",
        ]


class TestSelection:
    """Tests for /api/panes/{side}/selection"""

    def test_toggle(self, client):
        response = client.post("/api/panes/left/selection/toggle", json={"path": f"{HOME}/notes.txt"})
        assert response.json()["selection"] == [f"{HOME}/notes.txt"]

        response = client.post("/api/panes/left/selection/toggle", json={"path": f"{HOME}/notes.txt"})
        assert response.json()["selection"] == []

    def test_recursive_toggle(self, client):
        client.post("/api/panes/left/expand", json={"path": f"{HOME}/docs"})

        response = client.post(
            "/api/panes/left/selection/toggle",
            json={"path": f"{HOME}/docs", "recursive": True}
        )

        assert response.json()["selection"] == [
            f"{HOME}/docs",
            f"{HOME}/docs/a.txt",
            f"{HOME}/docs/b.txt",
            f"{HOME}/docs/reports",
        ]

        response = client.post(
            "/api/panes/left/selection/toggle",
            json={"path": f"{HOME}/docs", "recursive": True}
        )
        assert response.json()["selection"] == []

    def test_recursive_toggle_unknown_node(self, client):
        response = client.post(
            "/api/panes/left/selection/toggle",
            json={"path": "/elsewhere", "recursive": True}
        )

        assert response.status_code == 404

    def test_set_and_clear(self, client):
        response = client.put("/api/panes/right/selection", json={"path": f"{HOME}/music"})
        assert response.json()["selection"] == [f"{HOME}/music"]

        response = client.delete("/api/panes/right/selection")
        assert response.json()["selection"] == []

    def test_clipboard(self, client, clipboard):
        client.post("/api/panes/left/selection/toggle", json={"path": f"{HOME}/notes.txt"})
        client.post("/api/panes/left/selection/toggle", json={"path": f"{HOME}/music"})

        response = client.post("/api/panes/left/selection/clipboard")

        assert response.json() == {"text": f"{HOME}/music\n{HOME}/notes.txt", "copied": True}
        assert clipboard.texts == [f"{HOME}/notes.txt\n{HOME}/music"]


class TestCopy:
    """Tests for /api/copy"""

    def test_initiate_without_selection(self, client):
        response = client.post("/api/copy/initiate")

        assert response.json() == {"status": "ok", "accepted": False}
        assert client.get("/api/copy").json()["state"] == "idle"
        assert client.get("/api/notices").json()[-1]["message"] == "No files selected"

    def test_confirm_flow(self, client, copier):
        client.post("/api/panes/left/selection/toggle", json={"path": f"{HOME}/notes.txt"})
        client.put("/api/panes/right/selection", json={"path": "/dest"})

        assert client.post("/api/copy/initiate").json()["accepted"] is True
        status = client.get("/api/copy").json()
        assert status["state"] == "confirm_pending"
        assert status["source_paths"] == [f"{HOME}/notes.txt"]
        assert status["destination"] == "/dest"

        assert client.post("/api/copy/confirm").json()["accepted"] is True
        assert copier.calls == [([f"{HOME}/notes.txt"], "/dest")]
        assert client.get("/api/copy").json() == {
            "state": "idle",
            "source_paths": [],
            "destination": "/dest",
            "progress": None,
        }

    def test_cancel(self, client, copier):
        client.post("/api/panes/left/selection/toggle", json={"path": f"{HOME}/notes.txt"})
        client.put("/api/panes/right/selection", json={"path": "/dest"})
        client.post("/api/copy/initiate")

        assert client.post("/api/copy/cancel").json()["accepted"] is True
        assert client.post("/api/copy/confirm").json()["accepted"] is False
        assert copier.calls == []


@pytest.fixture
def home_tree():
    """Real home directory with a source tree and a target directory"""
    with tempfile.TemporaryDirectory() as tmpdir:
        # tmpdir/
        #   photos/
        #     a.jpg
        #     b.png
        #   backup/
        photos = Path(tmpdir) / "photos"
        photos.mkdir()
        (photos / "a.jpg").write_text("jpeg")
        (photos / "b.png").write_text("png")
        (Path(tmpdir) / "backup").mkdir()

        yield str(Path(tmpdir).resolve())


def test_copy_on_real_file_system(home_tree):
    """Select a loaded folder in the left pane and copy it into the right pane's target"""
    settings = Settings(home_dir=home_tree, copy_progress_delay=0)
    photos = os.path.join(home_tree, "photos")
    backup = os.path.join(home_tree, "backup")

    with TestClient(create_app(settings=settings)) as client:
        client.post("/api/panes/left/expand", json={"path": photos})
        client.post("/api/panes/left/selection/toggle", json={"path": photos})
        client.put("/api/panes/right/selection", json={"path": backup})

        assert client.post("/api/copy/initiate").json()["accepted"] is True
        assert client.post("/api/copy/confirm").json()["accepted"] is True

        assert client.get("/api/panes/left").json()["selection"] == []
        assert client.get("/api/notices").json()[-1]["level"] == "success"

    assert sorted(os.listdir(os.path.join(backup, "photos"))) == ["a.jpg", "b.png"]


def test_search_endpoint(home_tree):
    """Test recursive search over a real directory"""
    with TestClient(create_app(settings=Settings(home_dir=home_tree))) as client:
        response = client.get("/api/search", params={"path": home_tree, "query": r"\.jpg$", "regex": "true"})

        assert response.status_code == 200
        assert [node["name"] for node in response.json()] == ["a.jpg"]

        response = client.get("/api/search", params={"path": "/nonexistent/path/12345", "query": "x"})
        assert response.status_code == 404
