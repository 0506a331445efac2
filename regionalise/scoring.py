# regionalise/scoring.py

from __future__ import annotations

from typing import Dict, Iterable


# Additive confidence adjustments, keyed by context feature name.
FEATURE_WEIGHTS: Dict[str, float] = {
    # units
    "measurement_context": 0.1,
    "no_space": 0.1,
    "plausible_range": 0.05,
    "idiomatic_context": -0.3,
    "out_of_range": -0.2,
    # contextual words
    "infinitive_cue": 0.1,
    "definite_article": 0.05,
    "technical_cooccurrence": -0.2,
}


def score(base: float, features: Iterable[str]) -> float:
    """Base confidence plus the weight of each present feature, clamped to [0, 1]."""
    total = base
    for feature in features:
        total += FEATURE_WEIGHTS[feature]
    total = min(1.0, max(0.0, total))
    # keep 0.7 + 0.1 comparable against a 0.8 threshold
    return round(total, 6)
