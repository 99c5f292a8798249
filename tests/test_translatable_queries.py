import pytest

from fast_translatable import ModelNotFoundException
from translatable_models import Article, article_adapter


async def _articles() -> list[Article]:
    created = []
    for slug, translations in (
        ("athens", {"en": {"title": "Athens"}, "de": {"title": "Athen"}}),
        ("berlin", {"en": {"title": "Berlin"}, "de": {"title": "Berlin"}}),
        ("cairo", {"en": {"title": "Cairo"}}),
    ):
        article = Article(slug=slug)
        article.fill(translations)
        await article.save()
        created.append(article)
    return created


@pytest.mark.asyncio
async def test_create_routes_translated_keys():
    article = await Article.create({"slug": "rome", "title": "Rome", "title:de": "Rom"})

    assert article.id in Article.documents
    assert {row["locale"]: row["title"] for row in article_adapter.documents(article.id)} == {
        "en": "Rome",
        "de": "Rom",
    }


@pytest.mark.asyncio
async def test_update_fills_and_saves_translations():
    article = await Article.create({"slug": "rome", "title": "Rome"})

    await article.update({"slug": "roma", "de": {"title": "Rom"}, "title:en": "Rome, Italy"})

    assert Article.documents[article.id]["slug"] == "roma"
    assert {row["locale"]: row["title"] for row in article_adapter.documents(article.id)} == {
        "en": "Rome, Italy",
        "de": "Rom",
    }


@pytest.mark.asyncio
async def test_all_find_or_fail_and_exists():
    athens, _, _ = await _articles()

    assert sorted(article.title for article in await Article.all()) == ["Athens", "Berlin", "Cairo"]
    assert (await Article.find_or_fail({"slug": "athens"}))["title:de"] == "Athen"
    assert await Article.exists({"_id": athens.id})
    assert not await Article.exists({"slug": "paris"})
    with pytest.raises(ModelNotFoundException):
        await Article.find_or_fail({"slug": "paris"})


@pytest.mark.asyncio
async def test_scopes_with_sort_skip_and_limit():
    await _articles()

    query = Article.scope().translated_in("de").sort(("slug", -1)).limit(1)
    assert [article.slug for article in await query.find()] == ["berlin"]

    query = Article.scope().translated_in("en").sort(("slug", 1)).skip(1).limit(1)
    assert [article.slug for article in await query.find()] == ["berlin"]

    first = await Article.scope().not_translated_in("de").find_one()
    assert first.slug == "cairo"
    assert first.title == "Cairo"
