import pytest
from bson import ObjectId

from fast_translatable.core.translation_cache import TranslationCache
from translatable_models import ArticleTranslation, article_adapter


def _cache(owner_id=None):
    return TranslationCache(
        article_adapter,
        owner_id=lambda: owner_id,
        new_translation=lambda locale: ArticleTranslation(article_id=owner_id, locale=locale),
    )


def _store(owner_id, locale, **values):
    row_id = ObjectId()
    article_adapter.rows[row_id] = {"_id": row_id, "article_id": owner_id, "locale": locale, **values}
    return row_id


@pytest.mark.asyncio
async def test_get_loads_once_and_returns_the_same_bundle():
    owner_id = ObjectId()
    _store(owner_id, "en", title="Hello")
    cache = _cache(owner_id)

    first = await cache.get("en")
    second = await cache.get("en")

    assert first is second
    assert first.title == "Hello"
    assert article_adapter.loads == 1


@pytest.mark.asyncio
async def test_get_misses_without_owner_or_row():
    assert await _cache().get("en") is None
    assert await _cache(ObjectId()).get("de") is None


@pytest.mark.asyncio
async def test_new_registers_a_single_bundle_per_locale():
    cache = _cache()

    created = cache.new("de")

    assert cache.new("de") is created
    assert await cache.get_or_new("de") is created
    assert cache.locales() == ["de"]
    assert not created.exists


@pytest.mark.asyncio
async def test_all_merges_stored_rows_with_unsaved_bundles():
    owner_id = ObjectId()
    _store(owner_id, "en", title="Hello")
    _store(owner_id, "de", title="Hallo")
    cache = _cache(owner_id)
    pending = cache.new("de")

    bundles = await cache.all()

    assert {bundle.locale for bundle in bundles} == {"en", "de"}
    assert cache.peek("de") is pending
    assert cache.is_complete

    # Once complete, a miss does not reach the store again
    loads = article_adapter.loads
    assert await cache.get("fr") is None
    assert article_adapter.loads == loads


@pytest.mark.asyncio
async def test_invalidate_forgets_bundles():
    owner_id = ObjectId()
    _store(owner_id, "en", title="Hello")
    cache = _cache(owner_id)
    await cache.all()

    cache.invalidate("en")

    assert "en" not in cache
    assert not cache.is_complete
    assert (await cache.get("en")).title == "Hello"

    cache.invalidate()
    assert len(cache) == 0
