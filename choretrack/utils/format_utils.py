"""Locale tables for period labels, frequency names and completion messages."""

from __future__ import annotations

from dataclasses import dataclass
import logging

logger = logging.getLogger("choretrack.periods")

DEFAULT_LOCALE = "es"


@dataclass(frozen=True, slots=True)
class LocaleStrings:
    """Presentation strings for one locale.

    Month tuples are indexed by month number (index 0 is unused).
    Mappings are keyed by frequency value ("WEEKLY", "MONTHLY", ...).
    """

    month_names: tuple[str, ...]
    month_abbr: tuple[str, ...]
    quarter_label: str
    half_label: str
    frequency_names: dict[str, str]
    current_period_phrases: dict[str, str]
    already_completed: str


LOCALES: dict[str, LocaleStrings] = {
    "es": LocaleStrings(
        month_names=(
            "", "enero", "febrero", "marzo", "abril", "mayo", "junio",
            "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
        ),
        month_abbr=(
            "", "ene", "feb", "mar", "abr", "may", "jun",
            "jul", "ago", "sept", "oct", "nov", "dic",
        ),
        quarter_label="{ordinal}° Trimestre {year}",
        half_label="{ordinal}° Semestre {year}",
        frequency_names={
            "WEEKLY": "Semanal",
            "MONTHLY": "Mensual",
            "QUARTERLY": "Trimestral",
            "BIANNUAL": "Semestral",
            "ANNUAL": "Anual",
        },
        current_period_phrases={
            "WEEKLY": "esta semana",
            "MONTHLY": "este mes",
            "QUARTERLY": "este trimestre",
            "BIANNUAL": "este semestre",
            "ANNUAL": "este año",
        },
        already_completed="Tarea ya completada {phrase}",
    ),
    "en": LocaleStrings(
        month_names=(
            "", "January", "February", "March", "April", "May", "June",
            "July", "August", "September", "October", "November", "December",
        ),
        month_abbr=(
            "", "Jan", "Feb", "Mar", "Apr", "May", "Jun",
            "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
        ),
        quarter_label="Quarter {ordinal} {year}",
        half_label="Half {ordinal} {year}",
        frequency_names={
            "WEEKLY": "Weekly",
            "MONTHLY": "Monthly",
            "QUARTERLY": "Quarterly",
            "BIANNUAL": "Biannual",
            "ANNUAL": "Annual",
        },
        current_period_phrases={
            "WEEKLY": "this week",
            "MONTHLY": "this month",
            "QUARTERLY": "this quarter",
            "BIANNUAL": "this half",
            "ANNUAL": "this year",
        },
        already_completed="Task already completed {phrase}",
    ),
}


def _frequency_value(frequency: str) -> str:
    return str(getattr(frequency, "value", frequency))


def get_locale_strings(locale: str | None = None) -> LocaleStrings:
    """Return strings for `locale`, falling back to the default locale."""
    if locale is None:
        return LOCALES[DEFAULT_LOCALE]
    strings = LOCALES.get(locale)
    if strings is None:
        logger.warning("Unknown locale %r, using %r", locale, DEFAULT_LOCALE)
        return LOCALES[DEFAULT_LOCALE]
    return strings


def format_frequency(frequency: str, locale: str | None = None) -> str:
    """Human-readable frequency name ("Semanal", "Monthly", ...)."""
    names = get_locale_strings(locale).frequency_names
    value = _frequency_value(frequency)
    return names.get(value, value)


def current_period_phrase(frequency: str, locale: str | None = None) -> str:
    """Phrase naming the current period ("esta semana", "this month", ...)."""
    phrases = get_locale_strings(locale).current_period_phrases
    value = _frequency_value(frequency)
    return phrases.get(value, value)


def already_completed_message(frequency: str, locale: str | None = None) -> str:
    """Message returned when a task is completed twice in the same period."""
    strings = get_locale_strings(locale)
    return strings.already_completed.format(phrase=current_period_phrase(frequency, locale))
