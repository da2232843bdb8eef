"""
Integration tests for Task endpoints.

Tests cover:
- Task CRUD within a project
- Sparse patches and clearing the assignee
- Status validation
- Cross-project task ids: absent for members of both projects, forbidden otherwise
- Membership gate on every task operation
"""

from __future__ import annotations

import uuid

import pytest

from taskboard_shared.schemas.common import TaskStatus
from taskboard_shared.schemas.tasks import TaskCreate, TaskUpdate


@pytest.fixture
async def board(signup, new_project):
    """Owner A with project P, member B invited."""
    a, a_user = await signup("a@x.io")
    b, b_user = await signup("b@x.io")
    project = await new_project(a)
    resp = await a.post(f"/api/projects/{project['id']}/members", json={"email": "b@x.io"})
    assert resp.status_code == 201
    return {
        "a": a,
        "b": b,
        "a_user": a_user,
        "b_user": b_user,
        "project": project,
        "tasks_url": f"/api/projects/{project['id']}/tasks",
    }


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


class TestTaskSchemas:
    def test_status_values(self):
        assert [s.value for s in TaskStatus] == ["todo", "in-progress", "done"]

    def test_update_tracks_sent_fields_only(self):
        patch = TaskUpdate.model_validate({"assignee_id": None})
        assert patch.model_dump(exclude_unset=True) == {"assignee_id": None}

    def test_create_rejects_unknown_status(self):
        with pytest.raises(ValueError):
            TaskCreate.model_validate({"title": "x", "status": "blocked"})


# ---------------------------------------------------------------------------
# Create / list
# ---------------------------------------------------------------------------


class TestCreateTask:
    async def test_member_creates_task(self, board):
        resp = await board["b"].post(
            board["tasks_url"],
            json={"title": "Write tests", "description": "all of them", "status": "todo"},
        )
        assert resp.status_code == 201
        task = resp.json()
        assert task["title"] == "Write tests"
        assert task["description"] == "all of them"
        assert task["status"] == "todo"
        assert task["project_id"] == board["project"]["id"]
        assert task["assignee_id"] is None
        assert task["assignee"] is None

    async def test_create_with_assignee(self, board):
        resp = await board["a"].post(
            board["tasks_url"],
            json={"title": "Review", "status": "in-progress", "assignee_id": board["b_user"]["id"]},
        )
        assert resp.status_code == 201
        assert resp.json()["assignee"] == board["b_user"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"status": "todo"},
            {"title": "No status"},
            {"title": "", "status": "todo"},
            {"title": "   ", "status": "todo"},
            {"title": "Bad status", "status": "blocked"},
        ],
    )
    async def test_invalid_payloads(self, board, payload):
        resp = await board["a"].post(board["tasks_url"], json=payload)
        assert resp.status_code == 400

    async def test_unknown_assignee(self, board):
        resp = await board["a"].post(
            board["tasks_url"], json={"title": "x", "status": "todo", "assignee_id": str(uuid.uuid4())}
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Assignee not found"

    async def test_assignee_need_not_be_member(self, board, signup):
        _, outsider = await signup("c@x.io")
        resp = await board["a"].post(
            board["tasks_url"], json={"title": "x", "status": "todo", "assignee_id": outsider["id"]}
        )
        assert resp.status_code == 201
        assert resp.json()["assignee"] == outsider

    async def test_list_in_creation_order(self, board):
        for title in ("one", "two", "three"):
            await board["a"].post(board["tasks_url"], json={"title": title, "status": "todo"})

        resp = await board["b"].get(board["tasks_url"])
        assert resp.status_code == 200
        assert [t["title"] for t in resp.json()] == ["one", "two", "three"]


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


class TestUpdateTask:
    async def _task(self, board, **fields) -> dict:
        payload = {"title": "Task", "description": "desc", "status": "todo", **fields}
        resp = await board["a"].post(board["tasks_url"], json=payload)
        assert resp.status_code == 201
        return resp.json()

    async def test_sparse_patch_keeps_other_fields(self, board):
        task = await self._task(board, assignee_id=board["b_user"]["id"])
        resp = await board["b"].patch(f"{board['tasks_url']}/{task['id']}", json={"status": "done"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "done"
        assert body["title"] == "Task"
        assert body["description"] == "desc"
        assert body["assignee"] == board["b_user"]

    async def test_null_assignee_clears(self, board):
        task = await self._task(board, assignee_id=board["b_user"]["id"])
        resp = await board["a"].patch(f"{board['tasks_url']}/{task['id']}", json={"assignee_id": None})
        assert resp.status_code == 200
        assert resp.json()["assignee_id"] is None
        assert resp.json()["assignee"] is None

    async def test_omitted_assignee_untouched(self, board):
        task = await self._task(board, assignee_id=board["b_user"]["id"])
        resp = await board["a"].patch(f"{board['tasks_url']}/{task['id']}", json={"title": "Renamed"})
        assert resp.json()["title"] == "Renamed"
        assert resp.json()["assignee_id"] == board["b_user"]["id"]

    async def test_null_description_clears(self, board):
        task = await self._task(board)
        resp = await board["a"].patch(f"{board['tasks_url']}/{task['id']}", json={"description": None})
        assert resp.json()["description"] is None

    @pytest.mark.parametrize(
        "payload",
        [{"status": "blocked"}, {"status": None}, {"title": None}, {"title": ""}, {"title": "  "}],
    )
    async def test_invalid_patch(self, board, payload):
        task = await self._task(board)
        resp = await board["a"].patch(f"{board['tasks_url']}/{task['id']}", json=payload)
        assert resp.status_code == 400

    async def test_unknown_assignee(self, board):
        task = await self._task(board)
        resp = await board["a"].patch(
            f"{board['tasks_url']}/{task['id']}", json={"assignee_id": str(uuid.uuid4())}
        )
        assert resp.status_code == 400

    async def test_missing_task(self, board):
        resp = await board["a"].patch(f"{board['tasks_url']}/{uuid.uuid4()}", json={"status": "done"})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Task not found"


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


class TestDeleteTask:
    async def test_delete_then_idempotent(self, board):
        task = (await board["a"].post(board["tasks_url"], json={"title": "x", "status": "todo"})).json()
        url = f"{board['tasks_url']}/{task['id']}"

        assert (await board["b"].delete(url)).status_code == 204
        assert (await board["b"].get(board["tasks_url"])).json() == []
        assert (await board["b"].delete(url)).status_code == 204

    async def test_delete_never_existing(self, board):
        assert (await board["a"].delete(f"{board['tasks_url']}/{uuid.uuid4()}")).status_code == 204


# ---------------------------------------------------------------------------
# Project scoping and membership
# ---------------------------------------------------------------------------


class TestTaskScoping:
    async def test_task_from_other_project_is_absent(self, board, new_project):
        other = await new_project(board["a"], "Other")
        other_url = f"/api/projects/{other['id']}/tasks"
        foreign = (await board["a"].post(other_url, json={"title": "elsewhere", "status": "todo"})).json()

        resp = await board["a"].patch(f"{board['tasks_url']}/{foreign['id']}", json={"status": "done"})
        assert resp.status_code == 404

        # Deleting through the wrong project is a no-op
        assert (await board["a"].delete(f"{board['tasks_url']}/{foreign['id']}")).status_code == 204
        remaining = (await board["a"].get(other_url)).json()
        assert [t["id"] for t in remaining] == [foreign["id"]]
        assert remaining[0]["status"] == "todo"

    async def test_outsider_forbidden_everywhere(self, board, signup):
        outsider, _ = await signup("c@x.io")
        task = (await board["a"].post(board["tasks_url"], json={"title": "x", "status": "todo"})).json()
        task_url = f"{board['tasks_url']}/{task['id']}"

        assert (await outsider.get(board["tasks_url"])).status_code == 403
        assert (await outsider.post(board["tasks_url"], json={"title": "y", "status": "todo"})).status_code == 403
        assert (await outsider.patch(task_url, json={"status": "done"})).status_code == 403
        assert (await outsider.delete(task_url)).status_code == 403

        # Absent task ids are forbidden too, not 404
        missing = f"{board['tasks_url']}/{uuid.uuid4()}"
        assert (await outsider.patch(missing, json={"status": "done"})).status_code == 403
        assert (await outsider.delete(missing)).status_code == 403

        tasks = (await board["a"].get(board["tasks_url"])).json()
        assert [t["status"] for t in tasks] == ["todo"]

    async def test_foreign_task_under_own_project_forbidden(self, board, signup, new_project):
        """Membership is checked on the task's own project, not only the path project."""
        outsider, _ = await signup("c@x.io")
        mine = await new_project(outsider, "Mine")
        task = (await board["a"].post(board["tasks_url"], json={"title": "x", "status": "todo"})).json()
        smuggled = f"/api/projects/{mine['id']}/tasks/{task['id']}"

        resp = await outsider.patch(smuggled, json={"status": "done"})
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Forbidden: you are not a member of this project"
        assert (await outsider.delete(smuggled)).status_code == 403

        tasks = (await board["a"].get(board["tasks_url"])).json()
        assert [(t["id"], t["status"]) for t in tasks] == [(task["id"], "todo")]
