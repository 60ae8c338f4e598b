"""
comparison
==========

Model comparison for fitted psychometric models.

- information_criteria / compare_models : AIC, BIC and rescaled versions.
- evidence_matrix : subjects x models matrix of rescaled criteria.
- group_bms : group Bayesian model selection over that matrix.
"""

from .bms import (
    GroupBMS,
    GroupBMSResult,
    VariationalGroupBMS,
    group_bms,
)
from .criteria import (
    CRITERIA,
    ComparisonRecord,
    best_model,
    compare_models,
    evidence_matrix,
    information_criteria,
)

__all__ = [
    "CRITERIA",
    "ComparisonRecord",
    "information_criteria",
    "compare_models",
    "best_model",
    "evidence_matrix",
    "GroupBMS",
    "GroupBMSResult",
    "VariationalGroupBMS",
    "group_bms",
]
