import numpy as np
import pandas as pd
import statsmodels.api as sm
from tqdm import tqdm
from typing import List, Union
import confound


def _non_aliased_columns(design: np.ndarray, tol: float = 1e-7) -> List[int]:
    """Columns kept when fitting a linear model on `design`

    Columns are scanned from left to right and a column is dropped when it is
    linearly dependent on the columns kept before it.

    Parameters
    ----------
    design : np.ndarray
        (n_indiv, n_col) design matrix
    tol : float
        relative tolerance on the singular values

    Returns
    -------
    List[int]
        indices of the kept columns
    """
    keep: List[int] = []
    for j in range(design.shape[1]):
        cand = keep + [j]
        s = np.linalg.svd(design[:, cand], compute_uv=False)
        if s[0] > 0 and np.sum(s > tol * s[0]) == len(cand):
            keep = cand
    return keep


def _block_ols(
    var: np.ndarray,
    cov: np.ndarray,
    pheno: np.ndarray,
) -> np.ndarray:
    """
    Ordinary least squares for a block of SNPs, one SNP at a time

    Parameters
    ----------
    var : np.ndarray
        (n_indiv, n_snp) dosage matrix, NaN for missing
    cov : np.ndarray
        (n_indiv, n_cov) covariate matrix, including the intercept
    pheno : np.ndarray
        (n_indiv, ) phenotype

    Returns
    -------
    np.ndarray
        (n_snp, 4) matrix with columns BETA, SE, N, P
    """
    n_indiv, n_snp = var.shape
    assert cov.shape[0] == n_indiv, "Number of individuals in genotype and covariate do not match"
    assert pheno.shape == (n_indiv,), "Number of individuals in genotype and phenotype do not match"

    design = np.zeros((n_indiv, 1 + cov.shape[1]))
    design[:, 1:] = cov
    res = np.full((n_snp, 4), np.nan)
    for i in range(n_snp):
        design[:, 0] = var[:, i]
        rows = ~np.isnan(var[:, i])
        res[i, 2] = rows.sum()
        g = var[rows, i]
        if len(g) == 0 or np.all(g == g[0]):
            # no test for SNPs without variation
            continue
        keep = _non_aliased_columns(design[rows])
        if (0 not in keep) or (rows.sum() <= len(keep)):
            # the SNP itself is aliased with the covariates
            continue
        model = sm.OLS(pheno[rows], design[np.ix_(rows, keep)]).fit()
        res[i, 0] = model.params[0]
        res[i, 1] = model.bse[0]
        res[i, 3] = model.pvalues[0]
    return res


OLS_COLUMNS: List[str] = ["BETA", "SE", "N", "P"]


def marginal(
    dset: confound.Dataset,
    pheno: pd.Series,
    covar: Union[pd.Series, pd.DataFrame] = None,
) -> pd.DataFrame:
    """Marginal association testing with ordinary least squares, one SNP at a time

    For each SNP, fit `pheno ~ 1 + snp + covar`. Individuals with a missing
    dosage are dropped for that SNP. Design columns linearly dependent on
    the columns before them are dropped prior to the fit, in the order
    (snp, intercept, covariates): a covariate identical to the SNP is dropped and
    the SNP keeps its estimate.

    Parameters
    ----------
    dset : confound.Dataset
        dataset with genotypes
    pheno : pd.Series
        phenotype indexed by individual identifier
    covar : pd.Series or pd.DataFrame, optional
        covariates indexed by individual identifier. Do NOT include `1`
        intercept. Categorical covariates are converted to dummy variables.

    Returns
    -------
    pd.DataFrame
        indexed by SNP identifier, with columns BETA, SE, N, P
    """
    assert isinstance(pheno, pd.Series), "`pheno` must be a pd.Series"
    pheno_col = "PHENO" if pheno.name is None else pheno.name
    pheno = pheno.rename(pheno_col)
    if covar is not None:
        df = confound.data.join_indiv(pheno, covar)
    else:
        df = pheno.to_frame()

    df = confound.data.join_indiv(df, pd.DataFrame(index=dset.indiv.index))
    n_before = len(df)
    df = df.dropna()
    if len(df) < n_before:
        confound.logger.info(
            f"confound.assoc.marginal: {n_before - len(df)} individuals with missing "
            "phenotype or covariates are removed"
        )

    df_cov = confound.data.convert_dummy(df.drop(columns=[pheno_col]))
    cov = np.hstack([np.ones((len(df), 1)), df_cov.values.astype(float)])
    y = df[pheno_col].values.astype(float)

    dset = dset.sel(indiv=df.index)
    res = []
    snp_chunks = dset.geno.chunks[0]
    for snp_start, snp_stop in tqdm(
        confound.data.index_over_chunks(snp_chunks),
        desc="confound.assoc.marginal",
        total=len(snp_chunks),
    ):
        var = np.asarray(dset.geno[snp_start:snp_stop, :].compute(), dtype=float)
        res.append(_block_ols(var=var.T, cov=cov, pheno=y))

    df_res = pd.DataFrame(
        np.concatenate(res), columns=OLS_COLUMNS, index=dset.snp.index
    ).astype({"N": "int"})
    return df_res
