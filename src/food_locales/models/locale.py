"""
Locale model for country/language configurations.

A locale owns its own subset of foods (see FoodLocalList) and its own
local descriptions. A locale may name a prototype locale from which it
inherits local food data that it does not override.
"""

from sqlalchemy import Column, String, ForeignKey

from .base import BaseModel


class Locale(BaseModel):
    """
    Locale model representing one survey country/language configuration.

    Attributes:
        id: Locale identifier (e.g., "en_GB", "en_NZ")
        english_name: Name of the locale in English
        local_name: Name of the locale in its own language
        respondent_language_id: Language shown to survey respondents
        admin_language_id: Language used by administrators
        country_flag_code: Flag icon code
        prototype_locale_id: Locale that local food data is inherited from
        text_direction: "ltr" or "rtl"
    """

    __tablename__ = "locales"

    id = Column(String(16), primary_key=True)
    english_name = Column(String(64), nullable=False)
    local_name = Column(String(64), nullable=False)
    respondent_language_id = Column(String(16), nullable=False, default="en")
    admin_language_id = Column(String(16), nullable=False, default="en")
    country_flag_code = Column(String(16), nullable=False, default="")
    prototype_locale_id = Column(String(16), ForeignKey("locales.id"), nullable=True)
    text_direction = Column(String(8), nullable=False, default="ltr")
