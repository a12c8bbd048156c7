"""Request helpers shared by the API tests"""


def create_workspace(client, user, name="Acme", slug="acme"):
    response = client.post(
        "/api/v1/workspaces",
        json={"name": name, "slug": slug},
        headers=user.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_project(client, user, workspace_id, name="Research", **extra):
    response = client.post(
        "/api/v1/projects",
        json={"workspace_id": workspace_id, "name": name, **extra},
        headers=user.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_table(client, user, workspace_id, name="Bugs", project_id=None):
    payload = {"workspace_id": workspace_id, "name": name}
    if project_id:
        payload["project_id"] = project_id
    response = client.post("/api/v1/tables", json=payload, headers=user.headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_field(client, user, table_id, name, field_type="text", options=None):
    payload = {"table_id": table_id, "name": name, "type": field_type}
    if options is not None:
        payload["options"] = options
    response = client.post("/api/v1/fields", json=payload, headers=user.headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_record(client, user, table_id, data=None):
    payload = {} if data is None else {"data": data}
    response = client.post(f"/api/v1/tables/{table_id}/records", json=payload, headers=user.headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def invite(client, user, workspace_id, email, role="member"):
    response = client.post(
        f"/api/v1/workspaces/{workspace_id}/invitations",
        json={"email": email, "role": role},
        headers=user.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def assert_failure(response, status_code, code):
    assert response.status_code == status_code, response.text
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == code
    return body["error"]
