import pytest
from app.core.errors import StorageWriteError
from app.schemas.books import BookCreate, BookUpdate
from app.schemas.notes import NoteCreate, NoteUpdate
from app.schemas.users import UserUpdate


def _book(books, title="T", *, uploaded_by=None):
    return books.create(
        BookCreate(title=title, author="A", file_url=f"books/{title}.pdf", uploaded_by=uploaded_by)
    )


def test_create_assigns_id_and_timestamps(make_user):
    u = make_user("a@example.com")
    assert isinstance(u.id, int)
    assert u.created_at is not None
    assert u.updated_at is not None
    assert u.role == "user"


def test_duplicate_email_is_a_storage_write_error(make_user, users):
    make_user("dup@example.com")
    with pytest.raises(StorageWriteError):
        make_user("dup@example.com")

    # The session is still usable after the rejected insert.
    assert users.get_by_email("dup@example.com") is not None
    assert users.count() == 1


def test_get_by_id_returns_none_when_absent(users, books, notes):
    assert users.get_by_id(999) is None
    assert books.get_by_id(999) is None
    assert notes.get_by_id(999) is None


def test_get_all_is_newest_first(books):
    first = _book(books, "first")
    second = _book(books, "second")
    third = _book(books, "third")

    assert [b.id for b in books.get_all()] == [third.id, second.id, first.id]


def test_get_all_empty(users, books, notes):
    assert list(users.get_all()) == []
    assert list(books.get_all()) == []
    assert list(notes.get_all()) == []


def test_delete_nonexistent_returns_false(books):
    assert books.delete(12345) is False
    assert books.get_by_id(12345) is None


def test_create_then_delete_book(books):
    book = _book(books)
    assert books.get_all()[0].id == book.id

    assert books.delete(book.id) is True
    assert all(b.id != book.id for b in books.get_all())
    assert books.get_by_id(book.id) is None
    assert books.delete(book.id) is False


def test_update_changes_only_supplied_fields(books):
    book = books.create(
        BookCreate(
            title="Republic",
            author="Plato",
            description="dialogue",
            cover_url="covers/1-r.png",
            file_url="books/1-r.pdf",
        )
    )

    updated = books.update(book.id, BookUpdate(title="The Republic"))
    assert updated is not None

    fresh = books.get_by_id(book.id)
    assert fresh.title == "The Republic"
    assert fresh.author == "Plato"
    assert fresh.description == "dialogue"
    assert fresh.cover_url == "covers/1-r.png"
    assert fresh.file_url == "books/1-r.pdf"


def test_update_missing_record_returns_none(users):
    assert users.update(404, UserUpdate(role="admin")) is None


def test_update_user_role_keeps_credentials(make_user, users):
    u = make_user("role@example.com")
    original_hash = u.password_hash

    users.update(u.id, UserUpdate(role="admin"))
    fresh = users.get_by_id(u.id)
    assert fresh.role == "admin"
    assert fresh.name == "Reader"
    assert fresh.password_hash == original_hash


def test_note_scoped_listings(make_user, books, notes):
    alice = make_user("alice@example.com")
    bob = make_user("bob@example.com")
    b1 = _book(books, "one")
    b2 = _book(books, "two")

    n1 = notes.create(NoteCreate(title="n1", content="c", book_id=b1.id, user_id=alice.id))
    n2 = notes.create(NoteCreate(title="n2", content="c", book_id=b1.id, user_id=bob.id))
    n3 = notes.create(NoteCreate(title="n3", content="c", book_id=b2.id, user_id=alice.id))

    assert [n.id for n in notes.get_by_book_id(b1.id)] == [n2.id, n1.id]
    assert [n.id for n in notes.get_by_user_id(alice.id)] == [n3.id, n1.id]
    assert list(notes.get_by_book_id(999)) == []


def test_note_update_refreshes_updated_at(notes):
    note = notes.create(NoteCreate(title="draft", content="x"))
    before = note.updated_at

    updated = notes.update(note.id, NoteUpdate(content="y"))
    assert updated.content == "y"
    assert updated.title == "draft"
    assert updated.updated_at >= before


def test_update_applies_explicit_none_but_skips_omitted_fields(books):
    book = books.create(BookCreate(title="T", author="A", description="d", cover_url="c", file_url="f"))

    updated = books.update(book.id, BookUpdate(description=None))
    assert updated.description is None
    assert updated.cover_url == "c"


def test_update_schema_rejects_null_for_required_columns():
    with pytest.raises(ValueError):
        BookUpdate(title=None)
    with pytest.raises(ValueError):
        NoteUpdate(content=None)
    with pytest.raises(ValueError):
        UserUpdate(role=None)


def test_deleting_book_keeps_its_notes(books, notes):
    book = _book(books)
    note = notes.create(NoteCreate(title="n", content="c", book_id=book.id))

    assert books.delete(book.id) is True

    survivor = notes.get_by_id(note.id)
    assert survivor is not None
    assert survivor.book_id is None


def test_deleting_user_clears_uploader(make_user, users, books):
    u = make_user("gone@example.com")
    book = _book(books, uploaded_by=u.id)

    assert users.delete(u.id) is True
    assert books.get_by_id(book.id).uploaded_by is None


def test_counts(make_user, books):
    make_user("c1@example.com")
    _book(books, "x")
    _book(books, "y")
    assert books.count() == 2
