"""Label fusion: merge labels from every vision source into one ranked set."""

import re
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from functools import cmp_to_key

from photo_privacy_analyzer.models import (
    EntityAnnotation,
    FusedLabel,
    LocalizedObject,
    VisionResponse,
    WebDetection,
    WebEntity,
)

Stemmer = Callable[[str], str]

OBJECT_WEIGHT = 0.9
WEB_ENTITY_MIN_SCORE = 0.1
BEST_GUESS_SCORE = 0.9

TOP_PAGE_WORDS = 15
TOP_PAGE_PHRASES = 10
MIN_PAGE_WORD_LENGTH = 3

BEST_GUESS_BOOST = 1.2
PAGE_PHRASE_BOOST = 1.15
DIRECT_LABEL_BOOST = 1.1

# Scores closer than this are a tie; ties go to the description nearest the ideal length
REPRESENTATIVE_SCORE_GAP = 0.2
IDEAL_DESCRIPTION_LENGTH = 15

STEM_SUFFIXES = ("ing", "s", "ed", "er")

_PUNCTUATION = re.compile(r"[^\w\s]")


@dataclass(frozen=True)
class LabelSources:
    """Everything fusion can draw labels from, for one image."""

    labels: list[EntityAnnotation] = field(default_factory=list)
    objects: list[LocalizedObject] = field(default_factory=list)
    web_entities: list[WebEntity] = field(default_factory=list)
    best_guesses: list[str] = field(default_factory=list)
    page_titles: list[str] = field(default_factory=list)

    @classmethod
    def from_response(cls, response: VisionResponse) -> "LabelSources":
        web = cls.from_web(response.web) if response.web else cls()
        return cls(
            labels=list(response.labels),
            objects=list(response.objects),
            web_entities=web.web_entities,
            best_guesses=web.best_guesses,
            page_titles=web.page_titles,
        )

    @classmethod
    def from_web(cls, web: WebDetection) -> "LabelSources":
        return cls(
            web_entities=list(web.web_entities),
            best_guesses=list(web.best_guess_labels),
            page_titles=[p.page_title for p in web.pages_with_matching_images if p.page_title],
        )


def stem_word(word: str) -> str:
    """Strip the first matching suffix of -ing, -s, -ed, -er."""
    for suffix in STEM_SUFFIXES:
        if word.endswith(suffix):
            return word[: -len(suffix)]
    return word


def labels_similar(a: str, b: str, stemmer: Stemmer = stem_word) -> bool:
    """Case-insensitive containment either way, or any shared word stem."""
    a, b = a.lower(), b.lower()
    if a in b or b in a:
        return True
    stems = {stemmer(word) for word in a.split()}
    return any(stemmer(word) in stems for word in b.split())


def page_keywords(titles: Iterable[str]) -> list[FusedLabel]:
    """Frequent words and 2-3 word phrases from matching-page titles.

    Words score ``min(0.9, 0.6 + 0.4 * count / titles)``; phrases score
    ``min(0.95, 0.7 + 0.5 * count / titles)``.
    """
    titles = [t for t in titles if t]
    if not titles:
        return []

    words: Counter[str] = Counter()
    phrases: Counter[str] = Counter()
    for title in titles:
        tokens = [
            w for w in _PUNCTUATION.sub(" ", title.lower()).split()
            if len(w) >= MIN_PAGE_WORD_LENGTH
        ]
        words.update(tokens)
        for i in range(len(tokens) - 1):
            phrases[f"{tokens[i]} {tokens[i + 1]}"] += 1
            if i < len(tokens) - 2:
                phrases[f"{tokens[i]} {tokens[i + 1]} {tokens[i + 2]}"] += 1

    n = len(titles)
    keywords = [
        FusedLabel(word, min(0.9, 0.6 + count / n * 0.4))
        for word, count in words.most_common(TOP_PAGE_WORDS)
    ]
    keywords += [
        FusedLabel(phrase, min(0.95, 0.7 + count / n * 0.5))
        for phrase, count in phrases.most_common(TOP_PAGE_PHRASES)
    ]
    return keywords


def fuse(sources: LabelSources, stemmer: Stemmer = stem_word) -> list[FusedLabel]:
    """Collect, weight and cluster labels from all sources.

    Returns labels sorted by descending score; empty sources give ``[]``.
    """
    candidates: list[FusedLabel] = []

    def add(description: str | None, score: float, boost: float = 1.0) -> None:
        if description and description.strip():
            candidates.append(FusedLabel(description, min(1.0, score * boost)))

    for label in sources.labels:
        add(label.description, label.score, DIRECT_LABEL_BOOST)
    for entity in sources.web_entities:
        if entity.score > WEB_ENTITY_MIN_SCORE:
            add(entity.description, entity.score)
    for guess in sources.best_guesses:
        add(guess, BEST_GUESS_SCORE, BEST_GUESS_BOOST)
    for keyword in page_keywords(sources.page_titles):
        boost = PAGE_PHRASE_BOOST if " " in keyword.description else 1.0
        add(keyword.description, keyword.score, boost)
    for obj in sources.objects:
        add(obj.name, obj.score * OBJECT_WEIGHT)

    return fuse_labels(candidates, stemmer)


def fuse_labels(labels: Sequence[FusedLabel], stemmer: Stemmer = stem_word) -> list[FusedLabel]:
    """Greedily cluster similar labels, highest score first.

    Each cluster becomes one label scored by the weighted quadratic mean
    ``sum(s^2) / sum(s)``; single labels pass through unchanged.
    """
    ordered = sorted(labels, key=lambda label: label.score, reverse=True)
    processed: set[str] = set()
    merged: list[FusedLabel] = []

    for label in ordered:
        if label.description.lower() in processed:
            continue
        cluster = [
            other
            for other in ordered
            if other.description.lower() not in processed
            and labels_similar(other.description, label.description, stemmer)
        ]
        total = sum(c.score for c in cluster)
        score = sum(c.score * c.score for c in cluster) / total if total > 0 else 0.0
        merged.append(FusedLabel(_representative(cluster).description, score))
        processed.update(c.description.lower() for c in cluster)

    merged.sort(key=lambda label: label.score, reverse=True)
    return merged


def _representative(cluster: list[FusedLabel]) -> FusedLabel:
    """Highest scorer, unless scores are close; then the most mid-length description."""

    def compare(a: FusedLabel, b: FusedLabel) -> float:
        diff = b.score - a.score
        if abs(diff) - REPRESENTATIVE_SCORE_GAP > 1e-9:
            return diff
        return abs(len(a.description) - IDEAL_DESCRIPTION_LENGTH) - abs(
            len(b.description) - IDEAL_DESCRIPTION_LENGTH
        )

    return sorted(cluster, key=cmp_to_key(compare))[0]
