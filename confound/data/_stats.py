import numpy as np
from scipy import stats
from typing import List


def _median_chi2_ratio(pval):
    chi2 = stats.chi2.isf(pval, df=1)
    return np.median(chi2) / stats.chi2.ppf(0.5, df=1)


def lambda_gc(pval, bootstrap_ci=False, n_resamples=499):
    """Genomic control inflation factor: median 1-df chi2 statistic of the
    p-values over its expectation under the null

    Parameters
    ----------
    pval : array-like
        p-values, NaN entries are ignored
    bootstrap_ci : bool
        whether to also return a 95% bootstrap confidence interval
    n_resamples : int
        number of bootstrap resamples

    Returns
    -------
    float, or (float, (float, float)) when `bootstrap_ci`
    """
    pval = np.asarray(pval, dtype=float)
    pval = pval[~np.isnan(pval)]
    est = _median_chi2_ratio(pval)
    if not bootstrap_ci:
        return est
    res = stats.bootstrap(
        (pval,),
        _median_chi2_ratio,
        vectorized=False,
        n_resamples=n_resamples,
        method="percentile",
    )
    ci = res.confidence_interval
    return est, (float(ci.low), float(ci.high))


def quantile_normalize(val):
    val = np.array(val)
    non_nan_index = ~np.isnan(val)
    results = np.full(val.shape, np.nan)
    results[non_nan_index] = stats.norm.ppf(
        (stats.rankdata(val[non_nan_index]) - 0.5) / len(val[non_nan_index])
    )
    return results


def neg_log10(pval):
    """-log10(p), p-values of exactly 0 are mapped to inf"""
    pval = np.asarray(pval, dtype=float)
    with np.errstate(divide="ignore"):
        return -np.log10(pval)


def signed_log(x):
    """sign(x) * log(|x| + 1), symmetric log transform that is linear around 0"""
    x = np.asarray(x, dtype=float)
    return np.sign(x) * np.log(np.abs(x) + 1)


def signed_exp(y):
    """sign(y) * (exp(|y|) - 1), the inverse of `signed_log`"""
    y = np.asarray(y, dtype=float)
    return np.sign(y) * (np.exp(np.abs(y)) - 1)


def signed_log_breaks(max_abs: float) -> List[float]:
    """Axis breaks 0, ±1, ±3, ±10, ±30, ±100, ... covering [-max_abs, max_abs]

    Parameters
    ----------
    max_abs : float
        largest absolute value to cover

    Returns
    -------
    List[float]
        sorted breaks, symmetric around 0
    """
    assert max_abs >= 0, "max_abs must be non-negative"
    pos = [1.0]
    while pos[-1] < max_abs:
        # alternate multiplying by 3 and by 10 / 3: 1, 3, 10, 30, 100, ...
        step = 3.0 if len(pos) % 2 == 1 else 10.0 / 3.0
        pos.append(float(round(pos[-1] * step)))
    return [-b for b in pos[::-1]] + [0.0] + pos
