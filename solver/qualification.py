"""Fächerabgleich zwischen Lehrer-Qualifikationen und Basisfächern.

Die Alias-Tabellen liegen als Daten in ``config.defaults``. Eignungs-
Ausnahmen werden als Vorfilter angewendet, bevor überhaupt verglichen wird.
"""

from typing import Iterable, Mapping, Sequence

from config.defaults import (
    ELIGIBILITY_OVERRIDES,
    EXACT_MATCH_SUBJECTS,
    FALLBACK_ALIASES,
    SUBJECT_ALIASES,
)
from config.schema import EligibilityOverride
from models.teacher import Teacher


class QualificationMatcher:
    """Strenger und lockerer Fächerabgleich auf Basis der Alias-Tabellen."""

    def __init__(
        self,
        aliases: Mapping[str, Sequence[str]] = SUBJECT_ALIASES,
        fallback_aliases: Mapping[str, Sequence[str]] = FALLBACK_ALIASES,
        exact_only: Iterable[str] = EXACT_MATCH_SUBJECTS,
    ) -> None:
        self.aliases = aliases
        self.fallback_aliases = fallback_aliases
        self.exact_only = frozenset(exact_only)

    def accepted_codes(self, subject: str) -> set[str]:
        """Alle Schreibweisen (Großbuchstaben), die für das Fach zählen."""
        if subject in self.exact_only:
            return {subject}
        return {a.upper() for a in self.aliases.get(subject, (subject,))}

    def is_qualified(self, teacher: Teacher, subject: str) -> bool:
        """Strenger Abgleich: Token-Gleichheit mit Fachkürzel oder Alias.

        Religionsfächer nur mit exakt gleichem Code, damit katholische und
        evangelische Religion nicht vertauscht werden. Groß/Kleinschreibung
        spielt keine Rolle.
        """
        tokens = teacher.qualification_tokens()
        if subject in self.exact_only:
            return any(tok.upper() == subject for tok in tokens)
        accepted = self.accepted_codes(subject)
        return any(tok.upper() in accepted for tok in tokens)

    def is_qualified_for_any(self, teacher: Teacher, subjects: Iterable[str]) -> bool:
        """True wenn die Lehrkraft mindestens eines der Fächer direkt führt."""
        tokens = {tok.upper() for tok in teacher.qualification_tokens()}
        return any(code.upper() in tokens for code in subjects)

    def is_loosely_qualified(self, teacher: Teacher, subject: str) -> bool:
        """Lockerer Abgleich: Teilstring in beide Richtungen, ohne Groß/Klein.

        Kann fachfremde Lehrkräfte treffen, wenn sich Kürzel überschneiden.
        """
        aliases = [a.upper() for a in self.fallback_aliases.get(subject, (subject,))]
        for entry in teacher.qualifications:
            entry_up = entry.strip().upper()
            if not entry_up:
                continue
            if any(a in entry_up or entry_up in a for a in aliases):
                return True
        return False


class EligibilityFilter:
    """Vorfilter: entfernt Lehrkräfte, die per Ausnahme ausgeschlossen sind."""

    def __init__(
        self, overrides: Iterable[EligibilityOverride] = ELIGIBILITY_OVERRIDES
    ) -> None:
        self.overrides = tuple(overrides)

    def is_excluded(self, teacher: Teacher, subject: str) -> bool:
        return any(o.excludes(teacher.short_name, subject) for o in self.overrides)

    def candidates(self, teachers: Iterable[Teacher], subject: str) -> list[Teacher]:
        """Kandidaten in Roster-Reihenfolge, ohne ausgeschlossene Lehrkräfte."""
        return [t for t in teachers if not self.is_excluded(t, subject)]
