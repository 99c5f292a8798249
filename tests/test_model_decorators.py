from typing import Optional

import pytest
from bson import ObjectId

from fast_translatable import Model, Translatable, Translation, TranslationOptions, register_translation


class TagTranslation(Translation):
    tag_id: Optional[ObjectId] = None
    label: Optional[str] = None


@register_translation("label", use_fallback=True, fallback_locale="de", adapter="memory")
class Tag(Translatable, Model):
    color: Optional[str] = None


def test_register_translation_sets_options():
    options = Tag.translation_options

    assert options.translated_attributes == ("label",)
    assert options.use_fallback is True
    assert Tag().use_fallback()
    assert Tag().fallback_locale() == "de"
    assert Tag.translation_adapter().translation_model is TagTranslation


def test_options_override_configuration_per_instance():
    tag = Tag(translation_options=TranslationOptions(translated_attributes=("label",), adapter="memory"))

    assert not tag.use_fallback()
    assert tag.fallback_locale() == "en"


def test_register_translation_requires_translatable_model():
    with pytest.raises(TypeError):
        @register_translation("name")
        class Plain(Model):
            pass
