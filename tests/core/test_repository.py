"""Tests for principia.core.repository module.

Covers:
- CRUD semantics and the errors raised on absence/duplication
- Copy isolation between callers and stored entities
- Custom key functions and unpopulated identifiers
- Read-only helpers (exists, count, ids, find_where)
"""

from dataclasses import dataclass, field
from operator import attrgetter

import pytest
from structlog.testing import capture_logs

from principia.core.errors import DuplicateKeyError, NotFoundError, ValidationError
from principia.core.protocols import Identifiable, Repository
from principia.core.repository import InMemoryRepository, entity_id


@dataclass
class Note:
    id: str
    body: str
    tags: list[str] = field(default_factory=list)


@dataclass
class Product:
    sku: str
    price: int


@pytest.fixture
def notes() -> InMemoryRepository[Note]:
    return InMemoryRepository(Note)


class TestCreate:
    """Tests for create()."""

    def test_create_returns_entity_unchanged(self, notes):
        note = Note("a", "first")
        assert notes.create(note) is note
        assert note == Note("a", "first")

    def test_created_entity_is_found_by_id(self, notes):
        notes.create(Note("a", "first"))
        assert notes.find_by_id("a") == Note("a", "first")

    def test_create_grows_mapping_by_one(self, notes):
        notes.create(Note("a", "first"))
        notes.create(Note("b", "second"))
        assert len(notes) == 2

    def test_duplicate_create_raises_and_keeps_first(self, notes):
        notes.create(Note("a", "first"))

        with pytest.raises(DuplicateKeyError) as exc_info:
            notes.create(Note("a", "impostor"))

        assert exc_info.value.key == "a"
        assert exc_info.value.entity_type == "Note"
        assert notes.find_by_id("a").body == "first"
        assert notes.count() == 1

    @pytest.mark.parametrize("bad_id", [None, ""])
    def test_unpopulated_identifier_rejected(self, notes, bad_id):
        with pytest.raises(ValidationError) as exc_info:
            notes.create(Note(bad_id, "orphan"))

        assert exc_info.value.field == "id"
        assert len(notes) == 0

    def test_entity_without_id_rejected(self, notes):
        with pytest.raises(ValidationError, match="does not expose an 'id'"):
            notes.create(Product("sku-1", 10))


class TestFindAll:
    """Tests for find_all()."""

    def test_empty_repository_returns_empty_list(self, notes):
        assert notes.find_all() == []

    def test_returns_every_entity_once(self, notes):
        for i in range(5):
            notes.create(Note(f"n{i}", f"body {i}"))

        found = notes.find_all()
        assert len(found) == 5
        assert {n.id for n in found} == {f"n{i}" for i in range(5)}


class TestFindById:
    """Tests for find_by_id()."""

    def test_missing_key_raises_not_found(self, notes):
        with pytest.raises(NotFoundError) as exc_info:
            notes.find_by_id("missing")

        assert exc_info.value.key == "missing"
        assert str(exc_info.value) == "Note with id 'missing' not found"

    def test_not_found_does_not_chain_key_error(self, notes):
        with pytest.raises(NotFoundError) as exc_info:
            notes.find_by_id("missing")

        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__ is True


class TestUpdate:
    """Tests for update()."""

    def test_update_replaces_stored_value(self, notes):
        notes.create(Note("a", "first", tags=["x"]))
        replacement = Note("a", "rewritten")

        assert notes.update(replacement) is replacement
        assert notes.find_by_id("a") == Note("a", "rewritten")

    def test_update_is_not_a_merge(self, notes):
        notes.create(Note("a", "first", tags=["x", "y"]))
        notes.update(Note("a", "second"))

        assert notes.find_by_id("a").tags == []

    def test_update_missing_raises_not_found(self, notes):
        with pytest.raises(NotFoundError):
            notes.update(Note("ghost", "boo"))

        assert len(notes) == 0

    def test_update_unpopulated_identifier_rejected(self, notes):
        with pytest.raises(ValidationError):
            notes.update(Note("", "blank"))


class TestDelete:
    """Tests for delete()."""

    def test_delete_removes_entity(self, notes):
        notes.create(Note("a", "first"))

        assert notes.delete("a") is None
        with pytest.raises(NotFoundError):
            notes.find_by_id("a")

    def test_delete_missing_raises_and_leaves_mapping(self, notes):
        notes.create(Note("a", "first"))

        with pytest.raises(NotFoundError):
            notes.delete("b")

        assert notes.ids() == ["a"]

    def test_create_after_delete_is_allowed(self, notes):
        notes.create(Note("a", "first"))
        notes.delete("a")
        notes.create(Note("a", "again"))

        assert notes.find_by_id("a").body == "again"


class TestScenario:
    """End-to-end CRUD scenario."""

    def test_create_delete_find(self, notes):
        notes.create(Note("a", "alpha"))
        notes.create(Note("b", "beta"))
        assert {n.id for n in notes.find_all()} == {"a", "b"}

        notes.delete("a")

        assert {n.id for n in notes.find_all()} == {"b"}
        with pytest.raises(NotFoundError):
            notes.find_by_id("a")


class TestCopyIsolation:
    """Stored entities are isolated from caller-side mutation."""

    def test_mutating_returned_entity_does_not_propagate(self, notes):
        notes.create(Note("a", "first", tags=["x"]))

        found = notes.find_by_id("a")
        found.body = "changed"
        found.tags.append("y")

        assert notes.find_by_id("a") == Note("a", "first", tags=["x"])

    def test_mutating_created_entity_does_not_propagate(self, notes):
        note = Note("a", "first")
        notes.create(note)
        note.body = "changed"

        assert notes.find_by_id("a").body == "first"

    def test_find_all_returns_copies(self, notes):
        notes.create(Note("a", "first"))
        notes.find_all()[0].body = "changed"

        assert notes.find_by_id("a").body == "first"

    def test_reference_semantics_when_copy_disabled(self):
        repo = InMemoryRepository(Note, copy_entities=False)
        note = Note("a", "first")
        repo.create(note)

        assert repo.find_by_id("a") is note

    def test_copy_mode_read_from_settings(self, monkeypatch):
        monkeypatch.setenv("PRINCIPIA_COPY_ENTITIES", "false")
        repo = InMemoryRepository(Note)
        note = Note("a", "first")
        repo.create(note)

        assert repo.find_by_id("a") is note

    def test_explicit_argument_overrides_settings(self, monkeypatch):
        monkeypatch.setenv("PRINCIPIA_COPY_ENTITIES", "false")
        repo = InMemoryRepository(Note, copy_entities=True)
        note = Note("a", "first")
        repo.create(note)

        assert repo.find_by_id("a") is not note

    def test_predicate_mutation_does_not_propagate(self, notes):
        notes.create(Note("a", "first"))

        notes.find_where(lambda n: n.tags.append("leak"))

        assert notes.find_by_id("a").tags == []

    def test_find_where_returns_copies(self, notes):
        notes.create(Note("a", "first"))
        notes.find_where(lambda n: True)[0].body = "changed"

        assert notes.find_by_id("a").body == "first"


class TestCustomKey:
    """Repositories keyed by something other than ``id``."""

    def test_key_function_used_for_all_operations(self):
        products = InMemoryRepository(Product, key=attrgetter("sku"))
        products.create(Product("sku-1", 10))

        products.update(Product("sku-1", 12))
        assert products.find_by_id("sku-1").price == 12

        with pytest.raises(DuplicateKeyError):
            products.create(Product("sku-1", 99))

        products.delete("sku-1")
        assert "sku-1" not in products

    def test_integer_keys(self):
        repo = InMemoryRepository(key=lambda pair: pair[0])
        repo.create((1, "one"))

        assert repo.find_by_id(1) == (1, "one")
        assert repo.entity_name == "Entity"


class TestQueries:
    """Tests for read-only helpers."""

    def test_exists_and_contains(self, notes):
        notes.create(Note("a", "first"))

        assert notes.exists("a")
        assert "a" in notes
        assert not notes.exists("b")
        assert "b" not in notes

    def test_count_and_ids(self, notes):
        notes.create(Note("a", "first"))
        notes.create(Note("b", "second"))

        assert notes.count() == 2
        assert sorted(notes.ids()) == ["a", "b"]

    def test_find_where(self, notes):
        notes.create(Note("a", "first", tags=["draft"]))
        notes.create(Note("b", "second"))

        drafts = notes.find_where(lambda n: "draft" in n.tags)
        assert [n.id for n in drafts] == ["a"]

    def test_find_where_no_match(self, notes):
        notes.create(Note("a", "first"))
        notes.create(Note("b", "second"))

        assert notes.find_where(lambda n: n.body == "third") == []

    def test_find_where_on_empty_repository(self, notes):
        assert notes.find_where(lambda n: True) == []

    def test_repr(self, notes):
        notes.create(Note("a", "first"))
        assert repr(notes) == "InMemoryRepository(Note, count=1)"


class TestProtocols:
    """Tests for the default key function and the protocol contracts."""

    def test_reads_id_attribute(self):
        assert entity_id(Note("a", "first")) == "a"

    def test_identifiable_protocol(self):
        assert isinstance(Note("a", "first"), Identifiable)
        assert not isinstance(Product("sku", 1), Identifiable)

    def test_in_memory_repository_satisfies_repository(self, notes):
        assert isinstance(notes, Repository)


class TestLogging:
    """Mutations emit debug events."""

    def test_mutations_logged(self, notes):
        with capture_logs() as logs:
            notes.create(Note("a", "first"))
            notes.update(Note("a", "second"))
            notes.delete("a")

        events = [entry["event"] for entry in logs]
        assert events == ["entity_created", "entity_updated", "entity_deleted"]
        assert all(entry["entity_id"] == "a" for entry in logs)
        assert all(entry["log_level"] == "debug" for entry in logs)

    def test_rejections_logged_and_still_raised(self, notes):
        notes.create(Note("a", "first"))

        with capture_logs() as logs:
            with pytest.raises(DuplicateKeyError):
                notes.create(Note("a", "again"))
            with pytest.raises(NotFoundError):
                notes.find_by_id("zzz")

        assert [entry["event"] for entry in logs] == [
            "duplicate_key_rejected",
            "entity_not_found",
        ]

    def test_silent_until_logging_configured(self, notes, capsys):
        notes.create(Note("a", "first"))
        notes.update(Note("a", "second"))
        with pytest.raises(NotFoundError):
            notes.delete("missing")
        notes.delete("a")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
