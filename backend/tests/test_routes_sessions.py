from models.log import Log


def test_open_join_and_list_participants(client, staff_headers):
    res = client.post("/sessions", json={"table_number": 9}, headers=staff_headers)
    assert res.status_code == 200
    session = res.json()
    assert session["status"] == "active"
    assert session["diners"] == []

    first = client.post(f"/sessions/{session['id']}/diners", json={"name": " Maya "}).json()
    again = client.post(f"/sessions/{session['id']}/diners", json={"name": "Maya"}).json()
    assert first == again
    assert first["name"] == "Maya"
    client.post(f"/sessions/{session['id']}/diners", json={"name": "Omar"})

    res = client.get(f"/sessions/{session['id']}/participants")
    assert res.json() == {"participants": ["Maya", "Omar"], "count": 2}


def test_one_active_session_per_table(client, staff_headers):
    assert client.post("/sessions", json={"table_number": 3}, headers=staff_headers).status_code == 200
    res = client.post("/sessions", json={"table_number": 3}, headers=staff_headers)
    assert res.status_code == 409


def test_opening_a_session_needs_staff(client):
    assert client.post("/sessions", json={"table_number": 3}).status_code in (401, 403)


def test_blank_name_is_rejected(client, staff_headers):
    session_id = client.post("/sessions", json={"table_number": 2}, headers=staff_headers).json()["id"]
    assert client.post(f"/sessions/{session_id}/diners", json={"name": ""}).status_code == 422
    assert client.post(f"/sessions/{session_id}/diners", json={"name": "   "}).status_code == 400


def test_closing_drops_pending_cart(client, staff_headers, menu):
    session_id = client.post("/sessions", json={"table_number": 5}, headers=staff_headers).json()["id"]
    client.post(f"/sessions/{session_id}/diners", json={"name": "Lee"})
    client.post("/cart/add", json={"session_id": session_id, "diner_name": "Lee", "menu_item_id": menu["pizza"]})

    res = client.post(f"/sessions/{session_id}/close", headers=staff_headers)
    assert res.status_code == 200
    assert res.json()["status"] == "completed"
    assert res.json()["ended_at"] is not None

    assert client.get(f"/cart/{session_id}").json()["items"] == []
    res = client.post("/cart/add", json={"session_id": session_id, "diner_name": "Lee", "menu_item_id": menu["pizza"]})
    assert res.status_code == 404

    # The table can be opened again for the next party
    assert client.post("/sessions", json={"table_number": 5}, headers=staff_headers).status_code == 200


def test_cancel_with_explicit_status(client, staff_headers):
    session_id = client.post("/sessions", json={"table_number": 6}, headers=staff_headers).json()["id"]
    res = client.post(f"/sessions/{session_id}/close", json={"status": "cancelled"}, headers=staff_headers)
    assert res.json()["status"] == "cancelled"


def test_unknown_session(client):
    assert client.get("/sessions/999").status_code == 404
    assert client.get("/sessions/999/bill").status_code == 404


def test_menu_management(client, staff_headers, menu):
    res = client.post("/menu", json={"name": "Kunafa", "category": "Desserts", "price": 28.5}, headers=staff_headers)
    assert res.status_code == 201
    item_id = res.json()["id"]

    listed = client.get("/menu").json()
    names = [i["name"] for i in listed["items"]]
    assert "Kunafa" in names
    assert "Lentil Soup" not in names
    assert listed["total"] == 4

    assert client.get("/menu?include_unavailable=true").json()["total"] == 5
    assert [i["name"] for i in client.get("/menu?q=kun").json()["items"]] == ["Kunafa"]
    assert "Desserts" in client.get("/menu/categories").json()

    res = client.patch(f"/menu/{item_id}", json={"price": 30}, headers=staff_headers)
    assert res.json()["price"] == 30.0
    assert client.patch("/menu/999", json={"price": 1}, headers=staff_headers).status_code == 404
    assert client.post("/menu", json={"name": "Free", "price": 0}).status_code in (401, 403)


def test_mutations_leave_an_audit_trail(client, staff_headers, menu, db):
    session_id = client.post("/sessions", json={"table_number": 8}, headers=staff_headers).json()["id"]
    client.post(f"/sessions/{session_id}/diners", json={"name": "Noor"})
    client.post("/cart/add", json={"session_id": session_id, "diner_name": "Noor", "menu_item_id": menu["pizza"]})

    actions = [row.action for row in db.query(Log).filter(Log.session_id == session_id).order_by(Log.id)]
    assert actions == ["SESSION_OPEN", "SESSION_JOIN", "CART_ADD"]
