"""
Host models used by the integration tests
"""

from sqlalchemy import Column, Integer, String

from autotranslate.automatic import AutomaticTranslationMixin, automatic_translation
from autotranslate.database import Base


@automatic_translation("body", {"from": "en", "to": ["en", "fr", "de"]})
@automatic_translation(["title"], {"from": ["en"], "to": ["en", "fr", "de"]})
class Article(AutomaticTranslationMixin, Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(100), nullable=False, default="")


@automatic_translation(["title"], {"from": ["en", "fr"], "to": ["en", "fr"]})
class Page(AutomaticTranslationMixin, Base):
    __tablename__ = "pages"

    id = Column(Integer, primary_key=True, index=True)
