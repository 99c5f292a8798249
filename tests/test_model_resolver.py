from typing import Optional

import pytest
from bson import ObjectId

from fast_translatable import Model, Translatable, Translation, TranslationOptions
from fast_translatable.utils.model_resolver import resolve_translation_model


class ProductTranslation(Translation):
    product_id: Optional[ObjectId] = None
    name: Optional[str] = None


class ProductText(Translation):
    product_id: Optional[ObjectId] = None
    name: Optional[str] = None


class Product(Translatable, Model):
    translation_options = TranslationOptions(translated_attributes=("name",))


def test_class_reference_is_returned_as_is():
    assert resolve_translation_model(ProductText, owner=Product) is ProductText


def test_default_name_uses_owner_and_suffix():
    assert resolve_translation_model(None, owner=Product) is ProductTranslation
    assert resolve_translation_model(None, owner=Product, suffix="Text") is ProductText


def test_name_and_dotted_path():
    assert resolve_translation_model("ProductText", owner=Product) is ProductText
    assert resolve_translation_model(f"{__name__}.ProductText", owner=Product) is ProductText


def test_unknown_model_raises():
    with pytest.raises(ValueError):
        resolve_translation_model("MissingTranslation", owner=Product)
    with pytest.raises(TypeError):
        resolve_translation_model(42, owner=Product)


def test_default_adapter_binding():
    adapter = Product.translation_adapter()

    assert adapter.translation_model is ProductTranslation
    assert adapter.foreign_key == "product_id"
    assert adapter.locale_key == "locale"
    assert Product.translation_adapter() is adapter
    assert Product.translated_attribute_names() == ("name",)
