from app.schemas.books import BookCreate


def _book(books, title="Meditations"):
    return books.create(BookCreate(title=title, author="Aurelius", file_url=f"books/{title}.pdf"))


def test_create_and_fetch_note(client, make_user, books):
    u = make_user("n@example.com")
    b = _book(books)

    resp = client.post(
        "/api/notes",
        json={"title": "On anger", "content": "Book II", "book_id": b.id, "user_id": u.id},
    )
    assert resp.status_code == 201
    note = resp.json()
    assert note["book_id"] == b.id
    assert note["user_id"] == u.id

    fetched = client.get(f"/api/notes/{note['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["content"] == "Book II"


def test_create_note_rejects_dangling_references(client, make_user, books, notes):
    u = make_user("d@example.com")
    b = _book(books)

    assert client.post("/api/notes", json={"title": "x", "book_id": 999, "user_id": u.id}).status_code == 400
    assert client.post("/api/notes", json={"title": "x", "book_id": b.id, "user_id": 999}).status_code == 400
    assert notes.count() == 0


def test_create_note_requires_title(client):
    assert client.post("/api/notes", json={"content": "no title"}).status_code == 400


def test_list_notes_with_filters(client, make_user, books):
    alice = make_user("alice@example.com")
    bob = make_user("bob@example.com")
    b1 = _book(books, "one")
    b2 = _book(books, "two")

    ids = {}
    for title, book, user in (("a1", b1, alice), ("b1", b1, bob), ("a2", b2, alice)):
        ids[title] = client.post(
            "/api/notes", json={"title": title, "book_id": book.id, "user_id": user.id}
        ).json()["id"]

    everything = client.get("/api/notes").json()
    assert [n["title"] for n in everything] == ["a2", "b1", "a1"]

    by_book = client.get("/api/notes", params={"book_id": b1.id}).json()
    assert [n["id"] for n in by_book] == [ids["b1"], ids["a1"]]

    by_user = client.get("/api/notes", params={"user_id": alice.id}).json()
    assert [n["id"] for n in by_user] == [ids["a2"], ids["a1"]]

    both = client.get("/api/notes", params={"book_id": b1.id, "user_id": bob.id}).json()
    assert [n["id"] for n in both] == [ids["b1"]]


def test_update_note_is_partial(client):
    note = client.post("/api/notes", json={"title": "draft", "content": "first"}).json()

    resp = client.put(f"/api/notes/{note['id']}", json={"content": "second"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "draft"
    assert resp.json()["content"] == "second"


def test_update_note_errors(client):
    assert client.put("/api/notes/77", json={"content": "x"}).status_code == 404

    note = client.post("/api/notes", json={"title": "t"}).json()
    assert client.put(f"/api/notes/{note['id']}", json={"book_id": 999}).status_code == 400


def test_update_note_null_detaches_book(client, books):
    b = _book(books)
    note = client.post("/api/notes", json={"title": "t", "book_id": b.id}).json()

    resp = client.put(f"/api/notes/{note['id']}", json={"book_id": None})
    assert resp.status_code == 200
    assert resp.json()["book_id"] is None
    assert resp.json()["title"] == "t"


def test_update_note_rejects_null_title_or_content(client):
    note = client.post("/api/notes", json={"title": "t", "content": "c"}).json()

    assert client.put(f"/api/notes/{note['id']}", json={"title": None}).status_code == 400
    assert client.put(f"/api/notes/{note['id']}", json={"content": None}).status_code == 400
    assert client.get(f"/api/notes/{note['id']}").json()["content"] == "c"


def test_delete_note(client):
    note = client.post("/api/notes", json={"title": "t"}).json()

    assert client.delete(f"/api/notes/{note['id']}").status_code == 200
    assert client.get(f"/api/notes/{note['id']}").status_code == 404
    assert client.delete(f"/api/notes/{note['id']}").status_code == 404


def test_malformed_note_id_is_400(client):
    assert client.get("/api/notes/abc").status_code == 400


def test_upload_note_file(client, blob_store):
    resp = client.post(
        "/api/notes/upload",
        data={"title": "Reading notes", "author": "Ada"},
        files={"noteFile": ("notes.md", b"# Stoics", "text/markdown")},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["key"].startswith("notes/")
    assert body["key"].endswith("-notes.md")
    assert body["url"] == f"/api/files/{body['key']}"
    assert body["size"] == len(b"# Stoics")

    stored = blob_store.get(body["key"])
    assert stored.body == b"# Stoics"
    assert stored.metadata["title"] == "Reading notes"
    assert stored.metadata["author"] == "Ada"

    listed = client.get("/api/notes/files/list").json()["files"]
    assert [f["key"] for f in listed] == [body["key"]]
    assert client.get("/api/books/files/list").json()["files"] == []


def test_upload_note_requires_file(client, blob_store):
    resp = client.post("/api/notes/upload", data={"title": "t", "author": "a"})
    assert resp.status_code == 400
    assert blob_store.list("") == []
