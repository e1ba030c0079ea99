import httpx

from maxfit import config


def test_missing_bearer_is_unauthorized(client, use_vapi):
    seen = use_vapi(calls=[])

    response = client.get("/api/call-history")

    assert response.status_code == 401
    assert response.json()["detail"] == "Authorization header required"
    assert seen == []


def test_malformed_header_is_unauthorized(client, use_vapi):
    use_vapi(calls=[])

    response = client.get("/api/call-history", headers={"Authorization": "Basic abc"})

    assert response.status_code == 401


def test_invalid_token_is_unauthorized(client, use_vapi):
    seen = use_vapi(calls=[])

    response = client.get("/api/call-history", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"
    assert seen == []


def test_only_callers_calls_are_returned(client, make_account, auth_header, use_vapi, vapi_call):
    account = make_account(email="a@x.com")
    seen = use_vapi(calls=[
        vapi_call("c1", "a@x.com"),
        vapi_call("c2", "b@x.com"),
        vapi_call("c3", "a@x.com"),
    ])

    response = client.get("/api/call-history", headers=auth_header(account))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [call["id"] for call in body["data"]] == ["c1", "c3"]
    assert body["pagination"] == {"page": 1, "limit": 100, "total": 2, "totalPages": 1}
    assert body["debug"]["userEmail"] == "a@x.com"
    assert body["debug"]["totalCallsFromVapi"] == 3
    assert body["debug"]["userCallsAfterFilter"] == 2
    assert body["debug"]["endpoint"] == "https://vapi.test/call"

    request = seen[0]
    assert request.url.path == "/call"
    assert request.headers["Authorization"] == "Bearer test-vapi-key"


def test_email_match_is_case_sensitive(client, make_account, auth_header, use_vapi, vapi_call):
    account = make_account(email="a@x.com")
    use_vapi(calls=[vapi_call("c1", "A@x.com"), vapi_call("c2", "a@x.com ")])

    body = client.get("/api/call-history", headers=auth_header(account)).json()

    assert body["data"] == []
    assert body["pagination"]["total"] == 0
    assert body["pagination"]["totalPages"] == 0


def test_calls_without_requester_email_are_skipped(client, make_account, auth_header, use_vapi, vapi_call):
    account = make_account(email="a@x.com")
    use_vapi(calls=[{"id": "bare"}, vapi_call("c1", "a@x.com")])

    body = client.get("/api/call-history", headers=auth_header(account)).json()

    assert [call["id"] for call in body["data"]] == ["c1"]


def test_pagination_uses_filtered_count(client, make_account, auth_header, use_vapi, vapi_call):
    account = make_account(email="a@x.com")
    calls = [vapi_call(f"mine-{i}", "a@x.com") for i in range(25)]
    calls += [vapi_call(f"other-{i}", "b@x.com") for i in range(40)]
    use_vapi(calls=calls)

    body = client.get("/api/call-history?page=3&limit=10", headers=auth_header(account)).json()

    assert [call["id"] for call in body["data"]] == [f"mine-{i}" for i in range(20, 25)]
    assert body["pagination"] == {"page": 3, "limit": 10, "total": 25, "totalPages": 3}


def test_page_past_the_end_is_empty(client, make_account, auth_header, use_vapi, vapi_call):
    account = make_account(email="a@x.com")
    use_vapi(calls=[vapi_call("c1", "a@x.com")])

    body = client.get("/api/call-history?page=5&limit=10", headers=auth_header(account)).json()

    assert body["data"] == []
    assert body["pagination"]["total"] == 1


def test_bad_paging_params_are_rejected(client, make_account, auth_header, use_vapi):
    account = make_account(email="a@x.com")
    use_vapi(calls=[])

    assert client.get("/api/call-history?page=0", headers=auth_header(account)).status_code == 400
    assert client.get("/api/call-history?limit=abc", headers=auth_header(account)).status_code == 400


def test_auth_is_checked_before_paging_params(client, use_vapi):
    seen = use_vapi(calls=[])

    response = client.get("/api/call-history?page=0&limit=abc")

    assert response.status_code == 401
    assert response.json()["detail"] == "Authorization header required"
    assert seen == []


def test_provider_error_status_is_propagated(client, make_account, auth_header, use_vapi):
    account = make_account(email="a@x.com")
    use_vapi(status=403, text="forbidden key")

    response = client.get("/api/call-history", headers=auth_header(account))

    assert response.status_code == 403
    detail = response.json()["detail"]
    assert detail["error"] == "Vapi API error"
    assert detail["details"] == "Status: 403, Response: forbidden key"
    assert detail["endpoint"] == "https://vapi.test/call"


def test_network_failure_is_internal_error(client, make_account, auth_header, use_vapi):
    account = make_account(email="a@x.com")
    use_vapi(error=httpx.ConnectError("connection refused"))

    response = client.get("/api/call-history", headers=auth_header(account))

    assert response.status_code == 500
    detail = response.json()["detail"]
    assert detail["error"] == "Network error calling Vapi API"
    assert "connection refused" in detail["details"]


def test_missing_api_key_is_internal_error(client, make_account, auth_header, monkeypatch):
    account = make_account(email="a@x.com")
    monkeypatch.setattr(config, "VAPI_PRIVATE_API_KEY", "")

    response = client.get("/api/call-history", headers=auth_header(account))

    assert response.status_code == 500
    assert response.json()["detail"] == "Vapi API key not configured"


def test_other_users_malformed_record_is_ignored(client, make_account, auth_header, use_vapi, vapi_call):
    account = make_account(email="a@x.com")
    use_vapi(calls=[
        vapi_call("c1", "a@x.com"),
        {"assistantOverrides": {"variableValues": {"email": "b@x.com"}}},
        "not-a-call",
    ])

    response = client.get("/api/call-history", headers=auth_header(account))

    assert response.status_code == 200
    body = response.json()
    assert [call["id"] for call in body["data"]] == ["c1"]
    assert body["debug"]["totalCallsFromVapi"] == 3


def test_callers_malformed_record_is_skipped(client, make_account, auth_header, use_vapi, vapi_call):
    account = make_account(email="a@x.com")
    use_vapi(calls=[
        {"assistantOverrides": {"variableValues": {"email": "a@x.com"}}},
        vapi_call("c1", "a@x.com"),
    ])

    response = client.get("/api/call-history", headers=auth_header(account))

    assert response.status_code == 200
    assert [call["id"] for call in response.json()["data"]] == ["c1"]
    assert response.json()["pagination"]["total"] == 1
