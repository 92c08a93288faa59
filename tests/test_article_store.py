# =============================================================================
# tests/test_article_store.py - ArticleStore Tests
# =============================================================================
# Unit tests for the in-memory article store:
# - CRUD semantics and error cases
# - ID assignment (sequential, never reused)
# - Thread safety under concurrent load
#
# List order is unspecified, so lists are compared as sets of IDs.
# =============================================================================

from concurrent.futures import ThreadPoolExecutor

import pytest

from app.exceptions import NotFoundError, ValidationError
from core.models.article import Article
from core.services.article_store import ArticleStore


def ids(articles):
    return {article.id for article in articles}


# =============================================================================
# Create / Get
# =============================================================================

class TestCreate:
    """Tests for ArticleStore.create."""

    def test_create_then_get(self, store):
        """Get returns what was created, with the assigned ID."""
        created = store.create("Hello", "First post")

        fetched = store.get(created.id)

        assert fetched == Article(id=created.id, title="Hello", content="First post")

    def test_ids_start_at_one_and_increase(self, store):
        """IDs are assigned sequentially from 1."""
        first = store.create("A", "B")
        second = store.create("C", "D")

        assert first.id == 1
        assert second.id == 2

    @pytest.mark.parametrize("title,content", [
        ("", "x"),
        ("x", ""),
        ("", ""),
    ])
    def test_empty_fields_rejected(self, store, title, content):
        """Empty title or content raises ValidationError and stores nothing."""
        with pytest.raises(ValidationError) as exc_info:
            store.create(title, content)

        assert exc_info.value.status_code == 400
        assert len(store) == 0

    def test_failed_create_does_not_consume_id(self, store):
        """A rejected create leaves the ID counter alone."""
        with pytest.raises(ValidationError):
            store.create("", "x")

        assert store.create("A", "B").id == 1

    def test_whitespace_is_not_empty(self, store):
        """Only the empty string counts as missing."""
        article = store.create(" ", " ")
        assert article.title == " "

    def test_get_missing_raises_not_found(self, store):
        """Get on an unknown ID raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            store.get(42)

        assert exc_info.value.status_code == 404

    def test_returned_article_is_a_copy(self, store):
        """Mutating a returned Article doesn't change the store."""
        article = store.create("Hello", "First post")
        article.title = "Changed"

        assert store.get(article.id).title == "Hello"


# =============================================================================
# Update
# =============================================================================

class TestUpdate:
    """Tests for ArticleStore.update."""

    def test_update_replaces_title_and_content(self, store):
        """Update changes title/content but keeps the ID."""
        article = store.create("Old", "Old body")

        updated = store.update(article.id, "New", "New body")

        assert updated == Article(id=article.id, title="New", content="New body")
        assert store.get(article.id) == updated

    def test_update_missing_raises_and_does_not_mutate(self, store):
        """Update on an unknown ID fails and leaves the store as it was."""
        store.create("A", "B")
        before = store.list_articles()

        with pytest.raises(NotFoundError):
            store.update(99, "X", "Y")

        assert store.list_articles() == before

    def test_update_validation_runs_before_lookup(self, store):
        """Empty fields are rejected even for unknown IDs."""
        with pytest.raises(ValidationError):
            store.update(99, "", "Y")

    def test_update_with_empty_field_keeps_original(self, store):
        """A rejected update doesn't touch the stored article."""
        article = store.create("A", "B")

        with pytest.raises(ValidationError):
            store.update(article.id, "X", "")

        assert store.get(article.id).content == "B"


# =============================================================================
# Delete / List
# =============================================================================

class TestDeleteAndList:
    """Tests for ArticleStore.delete and list_articles."""

    def test_delete_removes_article(self, store):
        """Deleted articles can't be fetched."""
        article = store.create("A", "B")

        store.delete(article.id)

        with pytest.raises(NotFoundError):
            store.get(article.id)

    def test_second_delete_raises_not_found(self, store):
        """Deleting twice fails the second time."""
        article = store.create("A", "B")
        store.delete(article.id)

        with pytest.raises(NotFoundError):
            store.delete(article.id)

        assert len(store) == 0

    def test_ids_never_reused(self, store):
        """After creating N and deleting all, the next ID is N + 1."""
        created = [store.create(f"T{i}", f"C{i}") for i in range(5)]
        for article in created:
            store.delete(article.id)

        assert store.create("again", "again").id == 6

    def test_list_empty(self, store):
        """An empty store lists nothing."""
        assert store.list_articles() == []

    def test_example_sequence(self, store):
        """Create, create, delete the first, list and get."""
        first = store.create("A", "B")
        store.create("C", "D")
        store.delete(first.id)

        assert store.list_articles() == [Article(id=2, title="C", content="D")]
        with pytest.raises(NotFoundError):
            store.get(1)

    def test_stores_are_independent(self):
        """Separate instances don't share articles or counters."""
        one = ArticleStore()
        two = ArticleStore()

        one.create("A", "B")
        one.create("C", "D")

        assert two.create("E", "F").id == 1
        assert len(one) == 2
        assert len(two) == 1


# =============================================================================
# Concurrency
# =============================================================================

class TestConcurrency:
    """ArticleStore under concurrent access."""

    def test_concurrent_creates_get_unique_ids(self, store):
        """Parallel creates never hand out the same ID."""
        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(lambda i: store.create(f"T{i}", "body"), range(500)))

        assert ids(results) == set(range(1, 501))
        assert len(store) == 500

    def test_list_size_matches_net_creates_minus_deletes(self, store):
        """Interleaved creates and deletes leave creates - deletes articles."""
        initial = [store.create(f"T{i}", "body") for i in range(200)]
        to_delete = [article.id for article in initial[:120]]

        def work(i):
            if i < len(to_delete):
                store.delete(to_delete[i])
            else:
                store.create(f"N{i}", "body")

        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(work, range(len(to_delete) + 80)))

        articles = store.list_articles()
        assert len(articles) == 200 - 120 + 80
        assert len(ids(articles)) == len(articles)
        assert ids(articles).isdisjoint(to_delete)

    def test_concurrent_updates_leave_consistent_article(self, store):
        """Title and content always come from the same update."""
        article = store.create("t0", "c0")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: store.update(article.id, f"t{i}", f"c{i}"), range(200)))

        final = store.get(article.id)
        assert final.title[1:] == final.content[1:]
