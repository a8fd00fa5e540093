import numpy as np
import pandas as pd
import confound
from typing import Tuple, Union

# minimum sum of non-missing dosages for a SNP to be picked
MIN_DOSAGE_SUM = 10


class NoQualifyingSnpError(RuntimeError):
    """No SNP satisfying the qualification was drawn within the allowed draws"""


def is_qualified(
    geno: Union[np.ndarray, pd.Series], min_dosage_sum: float = MIN_DOSAGE_SUM
) -> bool:
    """Whether a SNP can serve as the confounded SNP

    Missing dosages are ignored. The SNP qualifies if the remaining dosages take
    exactly 2 distinct values and sum to at least `min_dosage_sum`.

    Parameters
    ----------
    geno : np.ndarray or pd.Series
        (n_indiv, ) dosages of one SNP, NaN for missing
    min_dosage_sum : float
        minimum sum of the non-missing dosages

    Returns
    -------
    bool
    """
    geno = np.asarray(geno, dtype=float)
    geno = geno[~np.isnan(geno)]
    return bool(len(np.unique(geno)) == 2 and geno.sum() >= min_dosage_sum)


def select_confounded_snp(
    dset: confound.Dataset,
    seed: int = None,
    max_iter: int = 100_000,
    min_dosage_sum: float = MIN_DOSAGE_SUM,
) -> Tuple[object, pd.Series]:
    """Randomly pick a SNP to be confounded with the covariate

    SNPs are drawn uniformly at random, with replacement, until one passes
    `is_qualified` over the individuals of `dset`.

    Parameters
    ----------
    dset : confound.Dataset
        dataset containing the candidate SNPs and the individuals of the analysis
    seed : int, optional
        random seed, by default None
    max_iter : int
        maximum number of draws
    min_dosage_sum : float
        minimum sum of the non-missing dosages, see `is_qualified`

    Returns
    -------
    snp_id
        identifier of the selected SNP
    geno : pd.Series
        dosages of the selected SNP indexed by individual identifier

    Raises
    ------
    NoQualifyingSnpError
        if no qualifying SNP is drawn within `max_iter` draws
    """
    assert dset.n_snp > 0 and dset.n_indiv > 0, "dataset must not be empty"
    assert max_iter > 0, "max_iter must be positive"
    if seed is not None:
        np.random.seed(seed)

    for i_iter in range(max_iter):
        snp_i = np.random.randint(dset.n_snp)
        geno = dset.get_geno_at(snp_i)
        if is_qualified(geno, min_dosage_sum=min_dosage_sum):
            confound.logger.info(
                f"confound.select.select_confounded_snp: SNP {geno.name} selected "
                f"after {i_iter + 1} draws, dosages {np.unique(geno.dropna())}, "
                f"sum {geno.sum()}"
            )
            return geno.name, geno

    raise NoQualifyingSnpError(
        f"No qualifying SNP found after {max_iter} draws from {dset.n_snp} SNPs "
        f"(2 distinct dosages with sum >= {min_dosage_sum})"
    )
