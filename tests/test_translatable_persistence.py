from typing import Optional

import pytest
from bson import ObjectId

from fast_translatable import (
    Observer,
    Translatable,
    Translation,
    TranslationOptions,
    TranslationSaveError,
    configure,
    register_observer,
    using_locale,
)
from fast_translatable.core.translation_adapters import MemoryTranslationAdapter
from translatable_models import LOCALES, Article, MemoryModel, article_adapter

events: list[str] = []


class RecordingObserver(Observer):

    async def on_created(self, model):
        events.append("created")

    async def on_deleting(self, model):
        remaining = model.translations.adapter.documents(model.id)
        events.append(f"deleting ({len(remaining)} translations left)")

    async def on_deleted(self, model):
        events.append("deleted")

    async def on_translations_saved(self, model):
        events.append("translations_saved")


class PageTranslation(Translation):
    page_id: Optional[ObjectId] = None
    heading: Optional[str] = None


@register_observer(RecordingObserver)
class Page(Translatable, MemoryModel):
    translation_options = TranslationOptions(translated_attributes=("heading",), adapter="memory")

    path: Optional[str] = None


class FailingAdapter(MemoryTranslationAdapter):
    def __init__(self, *args, fail_locale: str, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_locale = fail_locale

    async def insert(self, translation, fields):
        if translation.locale == self.fail_locale:
            raise RuntimeError("disk full")
        return await super().insert(translation, fields)


class NoteTranslation(Translation):
    note_id: Optional[ObjectId] = None
    body: Optional[str] = None


class Note(Translatable, MemoryModel):
    translation_options = TranslationOptions(
        translated_attributes=("body",),
        adapter=FailingAdapter(NoteTranslation, foreign_key="note_id", fail_locale="de"),
    )


@pytest.fixture(autouse=True)
def reset_events():
    events.clear()
    yield
    events.clear()


@pytest.mark.asyncio
async def test_save_writes_the_record_before_its_bundles():
    article = Article(slug="greece")
    article.fill({"en": {"title": "Greece"}, "de": {"title": "Griechenland"}})

    await article.save()

    assert article.id in Article.documents
    for translation in article.translations:
        assert translation.exists
        assert translation.article_id == article.id
    assert {row["locale"] for row in article_adapter.documents(article.id)} == {"en", "de"}


@pytest.mark.asyncio
async def test_only_changed_bundles_are_flushed():
    article = Article(slug="greece")
    article.fill({"en": {"title": "Greece"}, "de": {"title": "Griechenland"}})
    await article.save()

    assert not await article.save_translations()

    article["title:de"] = "Hellas"
    assert not article.translations.peek("en").has_changes(["title", "description"])
    assert article.translations.peek("de").has_changes(["title", "description"])
    assert await article.save_translations()
    assert {row["locale"]: row["title"] for row in article_adapter.documents(article.id)} == {
        "en": "Greece",
        "de": "Hellas",
    }


@pytest.mark.asyncio
async def test_resolved_adapter_and_observer_hooks():
    page = Page(path="/about")
    page.fill({"heading:en": "About", "heading:de": "Über uns"})

    await page.save()
    await page.save()

    adapter = Page.translation_adapter()
    assert adapter.translation_model is PageTranslation
    assert adapter.foreign_key == "page_id"
    assert events == ["created", "translations_saved"]

    events.clear()
    await page.delete()

    assert events == ["deleting (0 translations left)", "deleted"]
    assert page.id not in Page.documents


@pytest.mark.asyncio
async def test_delete_translations_of_one_locale():
    article = Article(slug="greece")
    article.fill({"en": {"title": "Greece"}, "de": {"title": "Griechenland"}})
    await article.save()

    await article.delete_translations("de")

    assert [row["locale"] for row in article_adapter.documents(article.id)] == ["en"]
    assert not await article.has_translation("de")
    assert await article.has_translation("en")


@pytest.mark.asyncio
async def test_delete_removes_every_bundle_and_the_record():
    article = Article(slug="greece")
    article.fill({"en": {"title": "Greece"}, "de": {"title": "Griechenland"}})
    await article.save()

    await article.delete()

    assert article_adapter.documents(article.id) == []
    assert article.id not in Article.documents


@pytest.mark.asyncio
async def test_failed_bundle_reports_what_was_saved():
    note = Note()
    note.fill({"en": {"body": "Hello"}, "de": {"body": "Hallo"}})

    with pytest.raises(TranslationSaveError) as exc_info:
        await note.save()

    error = exc_info.value
    assert error.locale == "de"
    assert error.record_saved
    assert error.saved_locales == ["en"]
    assert isinstance(error.__cause__, RuntimeError)
    assert error.dict()["data"]["saved_locales"] == ["en"]
    # The unsaved bundle keeps its changes for a retry
    assert note.translations.peek("de").is_dirty("body")


@pytest.mark.asyncio
async def test_replicate_copies_bundles_as_new_ones():
    article = Article(slug="greece")
    article.fill({"en": {"title": "Greece"}, "de": {"title": "Griechenland"}})
    await article.save()

    clone = article.replicate()

    assert clone.id is None
    assert clone.slug == "greece"
    for locale in ("en", "de"):
        original, copied = article.translations.peek(locale), clone.translations.peek(locale)
        assert copied is not original
        assert copied.title == original.title
        assert not copied.exists

    clone["title:en"] = "Hellas"
    assert article["title:en"] == "Greece"

    await clone.save()
    assert clone.id != article.id
    assert len(article_adapter.documents(clone.id)) == 2


@pytest.mark.asyncio
async def test_replicate_with_translations_loads_stored_bundles():
    saved = Article(slug="greece")
    saved.fill({"en": {"title": "Greece"}})
    await saved.save()
    article = Article(_id=saved.id, slug="greece")

    clone = await article.replicate_with_translations(except_=["slug"])

    assert clone.slug is None
    assert clone["title:en"] == "Greece"


@pytest.mark.asyncio
async def test_find_loads_bundles_eagerly():
    for slug, title in (("a", "First"), ("b", "Second")):
        article = Article(slug=slug)
        article.title = title
        await article.save()

    loads = article_adapter.loads
    found = await Article.find({})

    assert sorted(article.title for article in found) == ["First", "Second"]
    assert all(article.translations.is_complete for article in found)
    assert article_adapter.loads == loads + 1


@pytest.mark.asyncio
async def test_dict_and_to_array():
    saved = Article(slug="greece")
    saved.fill({"en": {"title": "Greece"}, "de": {"title": "Griechenland"}})
    await saved.save()

    with using_locale("de"):
        data = saved.dict()
    assert data["slug"] == "greece"
    assert data["title"] == "Griechenland"
    assert data["description"] is None
    assert data["_id"] == str(saved.id)

    article = Article(_id=saved.id, slug="greece")
    assert (await article.to_array())["title"] == "Greece"

    configure({"locales": LOCALES, "to_array_always_loads_translations": False})
    article = Article(_id=saved.id, slug="greece")
    assert (await article.to_array())["title"] is None
