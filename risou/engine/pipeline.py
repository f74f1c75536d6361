# risou/engine/pipeline.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

from .classify import AUTO, CategoryClassifier
from .delay import DelaySet, allocate, compute_delays
from .extract import FeatureExtractor, FeatureFlags, Quantity, get_default_extractor
from .recommend import Chooser, Recommendations, generate_recommendations
from .scoring import DimensionScores, score_features
from .text import normalize

MODES = ("assist", "full")
MAX_SUGGESTION_CHARS = 300


class RemoteEvaluationLike(Protocol):
    ideal: str
    gaps: List[str]
    actions: List[str]

    def to_scores(self) -> DimensionScores: ...


class RemoteCollaborator(Protocol):
    def evaluate_full(self, text: str, category: str) -> Optional[RemoteEvaluationLike]: ...

    def assist_suggestion(self, text: str, category: str, scores: DimensionScores) -> Optional[str]: ...


@dataclass(frozen=True)
class AnalysisResult:
    text: str
    category: str
    scores: DimensionScores
    delays: DelaySet
    allocation: Dict[str, int]
    recommendations: Recommendations
    flags: FeatureFlags = field(default_factory=FeatureFlags)
    quantities: List[Quantity] = field(default_factory=list)
    source: str = "local"
    suggestion: Optional[str] = None

    @property
    def ideal(self) -> str:
        return self.recommendations.ideal

    @property
    def gaps(self) -> List[str]:
        return list(self.recommendations.gaps)

    @property
    def actions(self) -> List[str]:
        return list(self.recommendations.actions)


def assemble_result(
    text: str,
    category: str,
    scores: DimensionScores,
    recs: Recommendations,
    flags: FeatureFlags | None = None,
    quantities=(),
    source: str = "local",
    suggestion: str | None = None,
) -> AnalysisResult:
    """Derive delays and allocation from `scores` and bundle everything."""
    delays = compute_delays(scores)
    return AnalysisResult(
        text=text,
        category=category,
        scores=scores,
        delays=delays,
        allocation=allocate(delays.overall, scores),
        recommendations=recs,
        flags=flags or FeatureFlags(),
        quantities=list(quantities),
        source=source,
        suggestion=suggestion,
    )


class Analyzer:
    """
    Two-stage analysis. Stage one is the local engine and always runs;
    stage two asks the remote collaborator, when one is given, and only a
    validated remote answer changes the result.
    """

    def __init__(
        self,
        extractor: FeatureExtractor | None = None,
        classifier: CategoryClassifier | None = None,
        chooser: Chooser | None = None,
    ):
        self.extractor = extractor or get_default_extractor()
        self.classifier = classifier or CategoryClassifier(self.extractor.config)
        self.chooser = chooser

    def analyze_local(self, text: str, category: str | None = AUTO) -> AnalysisResult:
        t = normalize(text)
        cat = self.classifier.classify(t, category)
        flags = self.extractor.extract_flags(t)
        quantities = self.extractor.extract_quantities(t)
        scores = score_features(flags, quantities, t, self.extractor.config)
        recs = generate_recommendations(cat, scores, quantities, self.chooser)
        return assemble_result(t, cat, scores, recs, flags, quantities, "local")

    def apply_remote(self, local: AnalysisResult, remote: RemoteCollaborator, mode: str = "assist") -> AnalysisResult:
        if mode == "full":
            evaluation = remote.evaluate_full(local.text, local.category)
            if evaluation is None:
                return local
            scores = evaluation.to_scores()
            # gaps in the remote answer are filled locally; remote scores carry no quantities
            fallback = generate_recommendations(local.category, scores, (), self.chooser)
            recs = Recommendations(
                ideal=evaluation.ideal or fallback.ideal,
                gaps=list(evaluation.gaps) or fallback.gaps,
                actions=list(evaluation.actions) or fallback.actions,
            )
            return assemble_result(local.text, local.category, scores, recs, FeatureFlags(), (), "remote")

        suggestion = remote.assist_suggestion(local.text, local.category, local.scores)
        if not suggestion:
            return local
        flat = suggestion.replace("\n", " ")[:MAX_SUGGESTION_CHARS]
        return assemble_result(
            local.text, local.category, local.scores, local.recommendations,
            local.flags, local.quantities, "local", suggestion=flat,
        )

    def analyze(
        self,
        text: str,
        category: str | None = AUTO,
        remote: RemoteCollaborator | None = None,
        mode: str = "assist",
    ) -> AnalysisResult:
        local = self.analyze_local(text, category)
        if remote is None or mode not in MODES:
            return local
        return self.apply_remote(local, remote, mode)


def analyze(
    text: str,
    category: str | None = AUTO,
    *,
    remote: RemoteCollaborator | None = None,
    mode: str = "assist",
    chooser: Chooser | None = None,
) -> AnalysisResult:
    return Analyzer(chooser=chooser).analyze(text, category, remote, mode)
