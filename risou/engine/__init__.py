# risou/engine/__init__.py
from .text import normalize
from .extract import FeatureExtractor, FeatureFlags, Quantity, Unit, extract_flags, extract_quantities
from .classify import CategoryClassifier, classify
from .scoring import DIM_WEIGHTS, DimensionScores, score
from .delay import DelaySet, allocate, compute_delays, to_delay
from .recommend import Recommendations, generate_recommendations
from .pipeline import AnalysisResult, Analyzer, analyze, assemble_result
