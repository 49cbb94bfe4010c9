from datetime import timedelta

import pytest

from newsfeed.core.article import Article
from newsfeed.exceptions import DuplicateUserError


@pytest.fixture
def user(store):
    return store.create_user("Ada", "ada@example.com", "hashed-pw", ["technology"])


@pytest.fixture
def article(store):
    return store.store_article(Article(
        title="Quantum Leap",
        url="https://x.com/q",
        description="A new qubit record",
        content="Researchers report coherence gains",
        category="science",
    ))


def _age(user, seconds=60):
    """Pretend the user was last updated some time ago."""
    user.updated_at -= timedelta(seconds=seconds)
    return user.updated_at


class TestUsers:
    def test_create_and_lookup(self, store, user):
        assert store.get_user_by_email("ada@example.com") is user
        assert store.get_user_by_id(user.id) is user
        assert store.user_exists("ada@example.com")
        assert user.preferences == ["technology"]

    def test_unknown_lookups(self, store):
        assert store.get_user_by_email("nobody@example.com") is None
        assert store.get_user_by_id("_missing") is None
        assert not store.user_exists("nobody@example.com")

    def test_duplicate_email_rejected(self, store, user):
        with pytest.raises(DuplicateUserError):
            store.create_user("Other", "ada@example.com", "pw")
        assert len(store.users) == 1

    def test_update_user_touches_timestamp(self, store, user):
        before = _age(user)

        updated = store.update_user("ada@example.com", name="Ada L.")

        assert updated.name == "Ada L."
        assert updated.updated_at > before

    def test_update_user_rejects_identity_fields(self, store, user):
        with pytest.raises(AttributeError):
            store.update_user("ada@example.com", email="new@example.com")

    def test_update_unknown_user(self, store):
        assert store.update_user("nobody@example.com", name="x") is None

    def test_update_preferences(self, store, user):
        assert store.update_preferences(user.id, ["sports", "health"])
        assert user.preferences == ["sports", "health"]
        assert not store.update_preferences("_missing", ["sports"])

    def test_to_dict_hides_password(self, user):
        data = user.to_dict()
        assert "password" not in data
        assert data["email"] == "ada@example.com"


class TestArticles:
    def test_store_and_get(self, store, article):
        assert store.get_article(article.id) is article
        assert store.get_all_articles() == [article]

    def test_storing_same_id_overwrites(self, store, article):
        replacement = Article(title="Other", url="https://x.com/o", id=article.id)

        store.store_article(replacement)

        assert store.get_article(article.id) is replacement
        assert len(store.articles) == 1

    def test_store_articles_accepts_dicts(self, store):
        stored = store.store_articles([{"title": "T", "url": "https://x.com/t"}])

        assert isinstance(stored[0], Article)
        assert store.get_article(stored[0].id) is stored[0]

    def test_stored_dict_round_trips(self, store, article):
        data = article.to_dict()
        data["isRead"] = True

        restored = store.store_article(data)

        assert restored == article
        assert store.get_article(article.id) is restored
        assert len(store.articles) == 1

    def test_same_url_may_exist_twice_globally(self, store):
        store.store_articles([Article(title="a", url="https://x.com/a"), Article(title="b", url="https://x.com/a")])

        assert len(store.articles) == 2

    @pytest.mark.parametrize("query", ["quantum", "QUBIT", "coherence"])
    def test_search_matches_title_description_or_content(self, store, article, query):
        assert store.search_articles(query) == [article]

    def test_search_no_match(self, store, article):
        assert store.search_articles("football") == []

    def test_by_category(self, store, article):
        other = store.store_article(Article(title="Goal", url="https://x.com/g", category="sports"))

        assert store.get_articles_by_category("science") == [article]
        assert store.get_articles_by_category(["science", "sports"]) == [article, other]


class TestReadAndFavorite:
    def test_mark_read(self, store, user, article):
        before = _age(user)

        assert store.mark_article_as_read(user.id, article.id) is True
        assert store.is_article_read(user.id, article.id)
        assert store.get_user_read_articles(user.id) == [article]
        assert user.updated_at > before

    def test_mark_favorite_and_remove(self, store, user, article):
        store.mark_article_as_favorite(user.id, article.id)
        assert store.get_user_favorite_articles(user.id) == [article]

        assert store.remove_favorite_article(user.id, article.id) is True
        assert store.get_user_favorite_articles(user.id) == []
        assert not store.is_article_favorite(user.id, article.id)

    def test_removing_unknown_favorite_is_noop(self, store, user, article):
        assert store.remove_favorite_article(user.id, article.id) is True
        assert user.favorite_articles == set()

    def test_missing_user_returns_false_without_mutation(self, store, user, article):
        snapshot = (set(user.read_articles), set(user.favorite_articles), user.updated_at)

        assert store.mark_article_as_read("_ghost", article.id) is False
        assert store.mark_article_as_favorite("_ghost", article.id) is False
        assert store.remove_favorite_article("_ghost", article.id) is False

        assert (user.read_articles, user.favorite_articles, user.updated_at) == snapshot
        assert store.get_user_read_articles("_ghost") == []
        assert store.get_user_favorite_articles("_ghost") == []

    def test_unknown_article_ids_are_skipped_when_resolving(self, store, user, article):
        store.mark_article_as_read(user.id, article.id)
        store.mark_article_as_read(user.id, "_not_stored")

        assert store.get_user_read_articles(user.id) == [article]


class TestStatsAndReset:
    def test_stats(self, store, user, article):
        assert store.get_stats() == {"totalUsers": 1, "totalArticles": 1}

    def test_reset(self, store, user, article):
        store.reset()
        assert store.get_stats() == {"totalUsers": 0, "totalArticles": 0}

    def test_clear_articles_keeps_users(self, store, user, article):
        store.clear_articles()
        assert store.get_stats() == {"totalUsers": 1, "totalArticles": 0}
