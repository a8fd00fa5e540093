"""
confound.data is for data manipulation of genotypes, phenotypes and covariates

These functions should not depend on confound.Dataset, but rather can be used
on their own alone.
"""

from ._covar import synthesize_covar, join_indiv
from ._misc import convert_dummy, impute_with_mean
from ._stats import (
    quantile_normalize,
    lambda_gc,
    neg_log10,
    signed_log,
    signed_exp,
    signed_log_breaks,
)
from ._utils import index_over_chunks
