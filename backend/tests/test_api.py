"""
End-to-end tests for the HTTP API.

Each test runs against both storage backends through the ``client`` fixture.
"""
import uuid


def _create_project(client, name="Launch Party", **fields):
    response = client.post("/api/projects", json={"name": name, **fields})
    assert response.status_code == 201, response.text
    return response.json()


def _create_area(client, project_id, name="Venue", **fields):
    response = client.post("/api/areas", json={"projectId": project_id, "name": name, **fields})
    assert response.status_code == 201, response.text
    return response.json()


def _create_meeting(client, project_id, **fields):
    body = {"projectId": project_id, "title": "Kickoff", "date": "2025-03-01", "time": "10:00"}
    body.update(fields)
    response = client.post("/api/meetings", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:

    def test_root_and_health(self, client):
        assert client.get("/").json()["status"] == "healthy"
        assert client.get("/health").status_code == 200

    def test_request_bodies_are_documented(self, client):
        schemas = client.get("/openapi.json").json()["components"]["schemas"]
        assert "TaskRequest" in schemas
        assert "projectId" in schemas["TaskRequest"]["properties"]
        assert "MeetingNoteRequest" in schemas

    def test_wrongly_typed_field_is_400(self, client):
        project = _create_project(client)
        response = client.post(
            "/api/areas", json={"projectId": project["id"], "name": "Hall", "order": "first"}
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request:")

    def test_unknown_route_uses_error_shape(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert "error" in response.json()


class TestTasksApi:

    def test_create_task_defaults(self, client):
        """A task with only projectId and title starts pending and unassigned."""
        response = client.post(
            "/api/tasks",
            json={"projectId": str(uuid.uuid4()), "title": "Write report"},
        )

        assert response.status_code == 201
        task = response.json()
        assert task["status"] == "pending"
        assert task["title"] == "Write report"
        assert "assigneeId" not in task
        assert task["dependsOn"] == []

    def test_create_task_validation(self, client):
        cases = [
            ({"title": "x"}, "Project ID is required"),
            ({"projectId": "abc", "title": "x"}, "Invalid projectId: must be a valid UUID"),
            ({"projectId": str(uuid.uuid4()), "title": "   "}, "Task title is required"),
            ({"projectId": str(uuid.uuid4()), "title": "x", "status": "done"}, "Invalid task status"),
            (
                {"projectId": str(uuid.uuid4()), "title": "x", "recurrence": {"frequency": "hourly"}},
                "Invalid recurrence",
            ),
        ]
        for body, message in cases:
            response = client.post("/api/tasks", json=body)
            assert response.status_code == 400, body
            assert response.json() == {"error": message}

    def test_malformed_body(self, client):
        response = client.post(
            "/api/tasks",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}

        response = client.post("/api/tasks", json=["a", "list"])
        assert response.json() == {"error": "Invalid JSON body"}

    def test_area_must_belong_to_project(self, client):
        project = _create_project(client, "Home")
        other = _create_project(client, "Away")
        area = _create_area(client, other["id"])

        response = client.post(
            "/api/tasks",
            json={"projectId": project["id"], "title": "Misplaced", "areaId": area["id"]},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid areaId: area does not belong to this project"}

    def test_support_resources_and_partial_update(self, client):
        project = _create_project(client)
        area = _create_area(client, project["id"])
        created = client.post(
            "/api/tasks",
            json={
                "projectId": project["id"],
                "areaId": area["id"],
                "title": "Decorate",
                "supportResources": "https://ideas.example\n\n  moodboard  \n",
                "deadline": "2025-04-01",
            },
        ).json()
        assert created["supportResources"] == ["https://ideas.example", "moodboard"]
        assert created["deadline"] == "2025-04-01"

        response = client.put(f"/api/tasks/{created['id']}", json={"status": "completed"})
        assert response.status_code == 200
        updated = response.json()
        assert updated["status"] == "completed"
        assert updated["completedAt"]
        assert updated["title"] == "Decorate"
        assert updated["areaId"] == area["id"]

        reopened = client.put(f"/api/tasks/{created['id']}", json={"status": "pending"}).json()
        assert "completedAt" not in reopened

    def test_list_filters(self, client):
        project = _create_project(client)
        area = _create_area(client, project["id"])
        client.post("/api/tasks", json={"projectId": project["id"], "title": "A", "areaId": area["id"]})
        client.post("/api/tasks", json={"projectId": project["id"], "title": "B"})

        assert len(client.get("/api/tasks", params={"projectId": project["id"]}).json()) == 2
        in_area = client.get("/api/tasks", params={"projectId": project["id"], "areaId": area["id"]})
        assert [t["title"] for t in in_area.json()] == ["A"]

    def test_missing_task(self, client):
        missing = str(uuid.uuid4())
        assert client.get(f"/api/tasks/{missing}").json() == {"error": "Task not found"}
        response = client.put(f"/api/tasks/{missing}", json={"title": "x"})
        assert response.status_code == 404
        response = client.delete(f"/api/tasks/{missing}")
        assert response.status_code == 404

    def test_update_rejects_area_from_another_project(self, client):
        project = _create_project(client, "Home")
        other = _create_project(client, "Away")
        foreign_area = _create_area(client, other["id"])
        task = client.post("/api/tasks", json={"projectId": project["id"], "title": "Stay"}).json()

        response = client.put(f"/api/tasks/{task['id']}", json={"areaId": foreign_area["id"]})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid areaId: area does not belong to this project"}

    def test_update_rejects_moving_project_away_from_area(self, client):
        project = _create_project(client, "Home")
        other = _create_project(client, "Away")
        area = _create_area(client, project["id"])
        task = client.post(
            "/api/tasks",
            json={"projectId": project["id"], "title": "Move me", "areaId": area["id"]},
        ).json()

        response = client.put(f"/api/tasks/{task['id']}", json={"projectId": other["id"]})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid areaId: area does not belong to this project"}

    def test_task_in_deleted_area_stays_editable(self, client):
        project = _create_project(client)
        area = _create_area(client, project["id"])
        task = client.post(
            "/api/tasks",
            json={"projectId": project["id"], "title": "Orphan", "areaId": area["id"]},
        ).json()
        client.delete(f"/api/areas/{area['id']}")

        response = client.put(
            f"/api/tasks/{task['id']}",
            json={"projectId": project["id"], "areaId": area["id"], "title": "Renamed"},
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert response.json()["areaId"] == area["id"]

        response = client.put(
            f"/api/tasks/{task['id']}", json={"projectId": project["id"], "title": "Again"}
        )
        assert response.status_code == 200

    def test_delete_task(self, client):
        task = client.post(
            "/api/tasks", json={"projectId": str(uuid.uuid4()), "title": "Temp"}
        ).json()
        assert client.delete(f"/api/tasks/{task['id']}").json() == {"success": True}
        assert client.get(f"/api/tasks/{task['id']}").status_code == 404


class TestAreasApi:

    def test_delete_missing_area(self, client):
        response = client.delete(f"/api/areas/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"error": "Area not found"}

    def test_create_validation(self, client):
        response = client.post("/api/areas", json={"name": "Food"})
        assert response.json() == {"error": "Project ID is required"}
        response = client.post("/api/areas", json={"projectId": str(uuid.uuid4())})
        assert response.status_code == 400
        assert response.json() == {"error": "Area name is required"}

    def test_reorder(self, client):
        project = _create_project(client)
        first = _create_area(client, project["id"], "First")
        second = _create_area(client, project["id"], "Second")

        response = client.patch(
            "/api/areas",
            json={
                "projectId": project["id"],
                "areaOrders": [
                    {"id": first["id"], "order": 2},
                    {"id": second["id"], "order": 1},
                ],
            },
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}

        areas = client.get("/api/areas", params={"projectId": project["id"]}).json()
        assert [a["name"] for a in areas] == ["Second", "First"]
        assert [a["order"] for a in areas] == [1, 2]

    def test_update_and_delete(self, client):
        project = _create_project(client)
        area = _create_area(client, project["id"], description="Main hall")

        updated = client.put(f"/api/areas/{area['id']}", json={"name": "Hall"}).json()
        assert updated["name"] == "Hall"
        assert updated["description"] == "Main hall"

        response = client.put(f"/api/areas/{area['id']}", json={"name": ""})
        assert response.json() == {"error": "Area name is required"}

        assert client.delete(f"/api/areas/{area['id']}").json() == {"success": True}
        assert client.get(f"/api/areas/{area['id']}").status_code == 404


class TestProjectsApi:

    def test_create_and_fetch(self, client):
        project = _create_project(client, "Community Meetup", type="Meetup")
        assert project["slug"] == "community-meetup"
        assert project["status"] == "In Planning"

        assert client.get(f"/api/projects/{project['id']}").json()["name"] == "Community Meetup"
        assert client.get("/api/projects/slug/community-meetup").json()["id"] == project["id"]
        assert _create_project(client, "Community Meetup")["slug"] == "community-meetup-1"

    def test_update_enum_validation(self, client):
        project = _create_project(client)

        response = client.put(f"/api/projects/{project['id']}", json={"type": "Party"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid project type"}

        response = client.put(f"/api/projects/{project['id']}", json={"status": "Paused"})
        assert response.json() == {"error": "Invalid project status"}

        response = client.put(f"/api/projects/{project['id']}", json={"name": " "})
        assert response.json() == {"error": "Project name is required"}

        updated = client.put(
            f"/api/projects/{project['id']}", json={"status": "Active", "startDate": "2025-06-01"}
        ).json()
        assert updated["status"] == "Active"
        assert updated["startDate"] == "2025-06-01"
        assert updated["name"] == "Launch Party"

    def test_missing_project(self, client):
        response = client.get(f"/api/projects/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"error": "Project not found"}
        assert client.get("/api/projects/not-a-uuid").status_code == 404

    def test_join_and_leave(self, client, make_user, auth_headers):
        user = make_user()
        project = _create_project(client)
        headers = auth_headers(user)

        response = client.post(f"/api/projects/{project['id']}/join", headers=headers)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["project"]["participantIds"] == [str(user.id)]

        # idempotent
        again = client.post(f"/api/projects/{project['id']}/join", headers=headers).json()
        assert again["project"]["participantIds"] == [str(user.id)]

        joined = client.get("/api/projects", params={"joined": "true"}, headers=headers).json()
        assert [p["id"] for p in joined] == [project["id"]]

        left = client.delete(f"/api/projects/{project['id']}/join", headers=headers).json()
        assert left["project"]["participantIds"] == []

    def test_join_requires_identity(self, client):
        project = _create_project(client)

        response = client.post(f"/api/projects/{project['id']}/join")
        assert response.status_code == 401
        assert response.json() == {"error": "Not authenticated"}

        response = client.post(
            f"/api/projects/{project['id']}/join",
            headers={"Authorization": "Bearer garbage"},
        )
        assert response.json() == {"error": "Invalid token"}

        assert client.get("/api/projects", params={"joined": "true"}).status_code == 401

    def test_public_list_ignores_bad_token(self, client):
        project = _create_project(client)

        response = client.get("/api/projects", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [project["id"]]

        response = client.get(
            "/api/projects",
            params={"joined": "true"},
            headers={"Authorization": "Bearer garbage"},
        )
        assert response.json() == {"error": "Invalid token"}

    def test_overview(self, client, make_user):
        lead = make_user("Lena Lead")
        project = _create_project(client, participantIds=[str(lead.id)])
        area = _create_area(client, project["id"], leadId=str(lead.id))
        for title, status in [("A", "completed"), ("B", "pending"), ("C", "completed")]:
            client.post(
                "/api/tasks",
                json={"projectId": project["id"], "areaId": area["id"], "title": title, "status": status},
            )
        meeting = _create_meeting(client, project["id"], attendeeIds=[str(lead.id), "bogus"])

        overview = client.get(f"/api/projects/{project['id']}/overview").json()
        assert overview["taskStats"] == {"total": 3, "completed": 2, "progress": 67}
        assert overview["participants"][0]["name"] == "Lena Lead"
        assert overview["areas"][0]["lead"]["id"] == str(lead.id)
        assert overview["areas"][0]["taskStats"]["progress"] == 67
        assert overview["meetings"][0]["id"] == meeting["id"]
        assert overview["meetings"][0]["hasNotes"] is False
        assert [a["name"] for a in overview["meetings"][0]["attendees"]] == ["Lena Lead"]

    def test_create_from_template(self, client):
        template = client.post(
            "/api/templates",
            json={
                "name": "Meetup Basics",
                "projectType": "Meetup",
                "areas": [
                    {
                        "name": "Logistics",
                        "team": [{"name": "Ana Rojas"}],
                        "responsibilities": [
                            {"name": "Venue", "tasks": [{"title": "Book", "estado": "Done"}]}
                        ],
                    }
                ],
            },
        ).json()

        response = client.post(
            "/api/projects", json={"name": "April Meetup", "templateId": template["id"]}
        )
        assert response.status_code == 201
        project = response.json()
        assert project["type"] == "Meetup"

        tasks = client.get("/api/tasks", params={"projectId": project["id"]}).json()
        assert [(t["title"], t["status"]) for t in tasks] == [("Book", "completed")]
        assert tasks[0]["templateId"] == template["id"]

    def test_init_la_itaba(self, client):
        response = client.post("/api/projects/init-la-itaba")
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["success"] is True
        assert body["project"]["slug"] == "la-itaba"
        assert body["project"]["type"] == "Property"
        assert body["stats"]["areas"] == len(body["areas"])
        assert body["stats"]["tasks"] == sum(a["taskCount"] for a in body["areas"])

        again = client.post("/api/projects/init-la-itaba")
        assert again.status_code == 400
        assert again.json() == {"error": "Project 'La Itaba' already exists"}


class TestMeetingsApi:

    def test_create_validation(self, client):
        project_id = str(uuid.uuid4())
        cases = [
            ({"projectId": project_id, "date": "2025-01-01", "time": "10:00"}, "Meeting title is required"),
            ({"projectId": project_id, "title": "Sync", "time": "10:00"}, "Meeting date is required"),
            ({"projectId": project_id, "title": "Sync", "date": "2025-01-01"}, "Meeting time is required"),
        ]
        for body, message in cases:
            response = client.post("/api/meetings", json=body)
            assert response.status_code == 400
            assert response.json() == {"error": message}

    def test_update_requires_full_input(self, client):
        project = _create_project(client)
        meeting = _create_meeting(client, project["id"])

        response = client.put(f"/api/meetings/{meeting['id']}", json={"title": "Renamed"})
        assert response.status_code == 400
        assert response.json() == {"error": "Meeting date is required"}

        updated = client.put(
            f"/api/meetings/{meeting['id']}",
            json={"title": "Renamed", "date": "2025-03-02", "time": "12:00", "attendeeIds": ["x"]},
        ).json()
        assert updated["title"] == "Renamed"
        assert updated["date"] == "2025-03-02"
        assert updated["attendeeIds"] == []

    def test_delete(self, client):
        project = _create_project(client)
        meeting = _create_meeting(client, project["id"])
        assert client.delete(f"/api/meetings/{meeting['id']}").json() == {"success": True}
        response = client.delete(f"/api/meetings/{meeting['id']}")
        assert response.json() == {"error": "Meeting not found"}


class TestMeetingNotesApi:

    def test_note_lifecycle(self, client, make_user, auth_headers):
        user = make_user()
        project = _create_project(client)
        meeting = _create_meeting(client, project["id"])
        headers = auth_headers(user)

        response = client.post(
            "/api/meeting-notes",
            json={
                "meetingId": meeting["id"],
                "content": "  Venue confirmed  ",
                "actionItems": ["Sign contract", ""],
            },
            headers=headers,
        )
        assert response.status_code == 201
        note = response.json()
        assert note["content"] == "Venue confirmed"
        assert note["createdBy"] == str(user.id)
        assert note["actionItems"] == ["Sign contract"]

        assert client.get(f"/api/meetings/{meeting['id']}/note").json()["id"] == note["id"]

        duplicate = client.post(
            "/api/meeting-notes",
            json={"meetingId": meeting["id"], "content": "Again"},
            headers=headers,
        )
        assert duplicate.status_code == 400

        updated = client.put(
            f"/api/meeting-notes/{note['id']}", json={"content": "Venue and caterer confirmed"}
        ).json()
        assert updated["content"] == "Venue and caterer confirmed"
        assert updated["actionItems"] == ["Sign contract"]

        response = client.put(f"/api/meeting-notes/{note['id']}", json={"content": ""})
        assert response.json() == {"error": "Meeting note content is required"}

    def test_create_validation(self, client, make_user, auth_headers):
        headers = auth_headers(make_user())

        response = client.post("/api/meeting-notes", json={"content": "x"}, headers=headers)
        assert response.json() == {"error": "Meeting ID is required"}

        response = client.post(
            "/api/meeting-notes", json={"meetingId": "123", "content": "x"}, headers=headers
        )
        assert response.json() == {"error": "Invalid meetingId: must be a valid UUID"}

        response = client.post(
            "/api/meeting-notes", json={"meetingId": str(uuid.uuid4())}, headers=headers
        )
        assert response.json() == {"error": "Meeting note content is required"}

        response = client.post(
            "/api/meeting-notes",
            json={"meetingId": str(uuid.uuid4()), "content": "x"},
            headers=headers,
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Meeting not found"}

    def test_missing_note(self, client):
        response = client.put(f"/api/meeting-notes/{uuid.uuid4()}", json={"content": "x"})
        assert response.status_code == 404
        assert response.json() == {"error": "Meeting note not found"}


class TestUsersAndTemplatesApi:

    def test_users(self, client, make_user, auth_headers):
        response = client.post("/api/users", json={"name": "Sofía Castro", "email": "sofia@example.com"})
        assert response.status_code == 201
        user = response.json()
        assert user["initials"] == "SC"

        duplicate = client.post("/api/users", json={"name": "Other", "email": "sofia@example.com"})
        assert duplicate.status_code == 400

        assert client.get(f"/api/users/{user['id']}").json()["email"] == "sofia@example.com"
        assert client.get(f"/api/users/{uuid.uuid4()}").json() == {"error": "User not found"}

        me = make_user("Me Myself")
        assert client.get("/api/users/me", headers=auth_headers(me)).json()["id"] == str(me.id)
        assert client.get("/api/users/me").status_code == 401

    def test_import_templates(self, client):
        document = {
            "Garden Party": {
                "Areas": {
                    "Food": {"Tareas": [{"tarea": "Buy snacks", "estado": "Done"}]},
                }
            }
        }
        response = client.post("/api/templates/import", params={"projectType": "Meetup"}, json=document)
        assert response.status_code == 201
        [template] = response.json()
        assert template["name"] == "Garden Party"
        assert template["areas"][0]["responsibilities"][0]["name"] == "Tareas"

        again = client.post("/api/templates/import", params={"projectType": "Meetup"}, json=document)
        assert again.json()[0]["id"] == template["id"]
        assert len(client.get("/api/templates").json()) == 1
        assert client.get(f"/api/templates/{template['id']}").json()["name"] == "Garden Party"
