from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

"""Immutable configuration objects for the report-card generator.

These are built by ``report_cards.config.loader`` and passed explicitly into
the classifier, the metrics calculator, and the report-card builder. Nothing
reads configuration from module-level state.
"""


@dataclass(frozen=True)
class SubjectLabel:
    """Display bundle for one subject column."""
    arabic: str
    transliteration: str
    french: str

    @staticmethod
    def fallback(raw_header: str) -> SubjectLabel:
        """Unknown subjects show their raw header in every slot."""
        return SubjectLabel(arabic=raw_header, transliteration=raw_header, french=raw_header)


@dataclass(frozen=True)
class ClassInfo:
    """A class (e.g. ``M06``) and its teacher."""
    code: str
    teacher: str


@dataclass(frozen=True)
class GradingConfig:
    """Dictionaries and constants used by the grade pipeline.

    Header names are stored upper-cased; lookups normalize the header first.
    """
    subjects: Mapping[str, SubjectLabel] = field(default_factory=lambda: MappingProxyType({}))
    ignored_columns: frozenset[str] = frozenset()
    average_headers: tuple[str, ...] = (
        "MOYENNE",
        "MOYENNE GÉNÉRALE",
        "MOYENNE GENERALE",
        "MOY",
        "MOY G.",
        "MOY. G.",
        "MOY G",
    )
    rank_header: str = "RANG"
    mention_header: str = "MENTION"
    appreciation_token: str = "APPRECIATION"  # matched accent-insensitively
    behavior_subjects: frozenset[str] = frozenset({"AKHLAQ", "HUDUR"})
    default_max_score: float = 20.0
    classes: Mapping[str, ClassInfo] = field(default_factory=lambda: MappingProxyType({}))
    default_teacher: str = "Professeur"

    def subject_label(self, subject_key: str, raw_header: str) -> SubjectLabel:
        return self.subjects.get(subject_key) or SubjectLabel.fallback(raw_header)

    def teacher_for(self, class_name: str) -> str:
        info = self.classes.get(class_name)
        return info.teacher if info else self.default_teacher


@dataclass(frozen=True)
class SourceSettings:
    """Where class CSV files live and how their paths are built.

    ``path_template`` placeholders: ``year``, ``year_underscore``, ``semester``,
    ``class_name``. Relative templates are resolved under ``data_directory``.
    """
    data_directory: str = "./data"
    path_template: str = (
        "{year}/SEMESTRE {semester}/[AMI] NOTES - {year_underscore} - SEMESTRE {semester} - {class_name}.csv"
    )


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    grading: GradingConfig
    source: SourceSettings
