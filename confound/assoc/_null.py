import numpy as np
import pandas as pd
import statsmodels.api as sm
from scipy import stats, linalg
from tqdm import tqdm
from typing import List, Optional, Union
import confound


class NullModel(object):
    """Fitted null model `pheno ~ covariates` used by `score_test`

    Attributes
    ----------
    indiv : pd.Index
        identifiers of the individuals in the fit
    fixef : pd.DataFrame
        fixed effects with columns Est, SE, Stat, P
    sigma2 : float
        residual variance
    resid : np.ndarray
        marginal residuals y - X beta
    CX : np.ndarray
        design matrix whitened by the Cholesky factor of the inverse covariance
    CXCXI : np.ndarray
        CX (CX' CX)^-1
    PY : np.ndarray
        projected phenotype P y, with P the projection of the null model
    """

    def __init__(
        self,
        indiv: pd.Index,
        fixef: pd.DataFrame,
        sigma2: float,
        resid: np.ndarray,
        CX: np.ndarray,
        CXCXI: np.ndarray,
        PY: np.ndarray,
        whitening: Optional[np.ndarray] = None,
        family: str = "gaussian",
        pheno: pd.Series = None,
        covar: Union[pd.Series, pd.DataFrame] = None,
        cov_mat: pd.DataFrame = None,
    ):
        self.indiv = indiv
        self.fixef = fixef
        self.sigma2 = sigma2
        self.resid = resid
        self.CX = CX
        self.CXCXI = CXCXI
        self.PY = PY
        self.whitening = whitening
        self.family = family
        self.pheno = pheno
        self.covar = covar
        self.cov_mat = cov_mat

    @property
    def n_indiv(self) -> int:
        return len(self.indiv)

    def __repr__(self) -> str:
        return (
            f"confound.assoc.NullModel ({self.family}) with {self.n_indiv} individuals"
            f" and fixed effects: {', '.join(self.fixef.index)}"
        )

    def whiten(self, mat: np.ndarray) -> np.ndarray:
        """C mat, with C the Cholesky factor of the inverse covariance"""
        if self.whitening is not None:
            mat = self.whitening @ mat
        return mat / np.sqrt(self.sigma2)

    def refit(self, indiv: pd.Index) -> "NullModel":
        """The null model fitted on the subset `indiv` of its individuals"""
        return null_model(
            self.pheno,
            self.covar,
            cov_mat=self.cov_mat,
            family=self.family,
            indiv=indiv,
        )


def null_model(
    pheno: pd.Series,
    covar: Union[pd.Series, pd.DataFrame] = None,
    cov_mat: pd.DataFrame = None,
    family: str = "gaussian",
    indiv: pd.Index = None,
) -> NullModel:
    """Fit the null model of phenotype on covariates, without any SNP

    Parameters
    ----------
    pheno : pd.Series
        phenotype indexed by individual identifier
    covar : pd.Series or pd.DataFrame, optional
        covariates indexed by individual identifier. Do NOT include `1`
        intercept. Categorical covariates are converted to dummy variables.
    cov_mat : pd.DataFrame, optional
        (n_indiv, n_indiv) relative covariance between individuals, indexed by
        individual identifier on both axes. By default None, i.e., independent
        individuals.
    family : str
        family of phenotype, only "gaussian" is supported
    indiv : pd.Index, optional
        identifiers of the individuals to fit, e.g., the genotyped individuals
        `dset.indiv.index`. Other individuals are dropped. By default all
        individuals with a phenotype.

    Returns
    -------
    NullModel
    """
    if family != "gaussian":
        raise NotImplementedError(f"family={family} is not supported")
    assert isinstance(pheno, pd.Series), "`pheno` must be a pd.Series"

    pheno_col = "PHENO" if pheno.name is None else pheno.name
    pheno = pheno.rename(pheno_col)
    if covar is not None:
        df = confound.data.join_indiv(pheno, covar)
    else:
        df = pheno.to_frame()
    if indiv is not None:
        df = confound.data.join_indiv(df, pd.DataFrame(index=pd.Index(indiv)))
    if cov_mat is not None:
        df = df[df.index.isin(cov_mat.index)]

    n_before = len(df)
    df = df.dropna()
    if len(df) < n_before:
        confound.logger.info(
            f"confound.assoc.null_model: {n_before - len(df)} individuals with missing "
            "phenotype or covariates are removed"
        )

    df_design = confound.data.convert_dummy(df.drop(columns=[pheno_col]))
    df_design.insert(0, "Intercept", 1.0)
    X = df_design.values.astype(float)
    y = df[pheno_col].values.astype(float)
    assert np.linalg.matrix_rank(X) == X.shape[1], "Covariates must be of full rank"
    assert len(y) > X.shape[1], "More individuals than fixed effects are required"

    if cov_mat is None:
        whitening = None
        Xw, yw = X, y
    else:
        V = cov_mat.loc[df.index, df.index].values.astype(float)
        L = np.linalg.cholesky(V)
        whitening = linalg.solve_triangular(L, np.eye(len(y)), lower=True)
        Xw, yw = whitening @ X, whitening @ y

    model = sm.OLS(yw, pd.DataFrame(Xw, columns=df_design.columns)).fit()
    fixef = pd.DataFrame(
        {
            "Est": model.params,
            "SE": model.bse,
            "Stat": model.tvalues,
            "P": model.pvalues,
        }
    )
    sigma2 = model.scale
    beta = model.params.values

    CX = Xw / np.sqrt(sigma2)
    CXCXI = CX @ np.linalg.inv(CX.T @ CX)
    resid_w = yw - Xw @ beta
    if whitening is None:
        PY = resid_w / sigma2
    else:
        PY = whitening.T @ resid_w / sigma2

    confound.logger.info(
        f"confound.assoc.null_model: {len(y)} individuals, "
        f"fixed effects {list(df_design.columns)}, sigma2={sigma2:.4g}"
    )
    return NullModel(
        indiv=df.index,
        fixef=fixef,
        sigma2=sigma2,
        resid=y - X @ beta,
        CX=CX,
        CXCXI=CXCXI,
        PY=PY,
        whitening=whitening,
        family=family,
        pheno=pheno,
        covar=covar,
        cov_mat=cov_mat,
    )


def _block_score_test(geno: np.ndarray, null: NullModel) -> np.ndarray:
    """
    Score test for a block of SNPs

    Parameters
    ----------
    geno : np.ndarray
        (n_indiv, n_snp) dosage matrix, NaN for missing
    null : NullModel
        fitted null model with the same individuals in the same order

    Returns
    -------
    np.ndarray
        (n_snp, 7) matrix with columns N, SCORE, SCORE_SE, STAT, BETA, SE, P
    """
    assert geno.shape[0] == null.n_indiv, "Number of individuals do not match"
    n_obs = (~np.isnan(geno)).sum(axis=0)
    G = confound.data.impute_with_mean(geno, axis=0)

    # project the covariates out of the whitened genotype
    CG = null.whiten(G)
    Gtilde = CG - null.CXCXI @ (null.CX.T @ CG)
    GPG = (Gtilde ** 2).sum(axis=0)
    score = G.T @ null.PY

    with np.errstate(divide="ignore", invalid="ignore"):
        score_se = np.sqrt(GPG)
        stat = score / score_se
        beta = score / GPG
        se = 1 / score_se
        pval = stats.chi2.sf(stat ** 2, df=1)

    res = np.column_stack([n_obs, score, score_se, stat, beta, se, pval])
    # no test for SNPs without variation (or without any call)
    invariant = np.all(G == G[0:1, :], axis=0) | (n_obs == 0)
    res[invariant, 1:] = np.nan
    return res


SCORE_COLUMNS: List[str] = ["N", "SCORE", "SCORE_SE", "STAT", "BETA", "SE", "P"]


def score_test(null: NullModel, dset: confound.Dataset) -> pd.DataFrame:
    """Score test of every SNP in `dset` against the fitted null model

    Genotypes are matched to the individuals of the null model by identifier.
    Individuals of the null model without genotype are dropped and the null
    model is refitted on the remaining ones.
    Missing dosages are imputed with the SNP mean.

    Parameters
    ----------
    null : NullModel
        null model from `confound.assoc.null_model`
    dset : confound.Dataset
        dataset containing all individuals of the null model

    Returns
    -------
    pd.DataFrame
        indexed by SNP identifier, with columns N, SCORE, SCORE_SE, STAT, BETA,
        SE, P
    """
    in_dset = null.indiv.isin(dset.indiv.index)
    if not in_dset.all():
        confound.logger.info(
            f"confound.assoc.score_test: {(~in_dset).sum()} individuals without "
            "genotype are removed, refitting the null model"
        )
        null = null.refit(null.indiv[in_dset])
    dset = dset.sel(indiv=null.indiv)
    res = []
    snp_chunks = dset.geno.chunks[0]
    for snp_start, snp_stop in tqdm(
        confound.data.index_over_chunks(snp_chunks),
        desc="confound.assoc.score_test",
        total=len(snp_chunks),
    ):
        geno = np.asarray(dset.geno[snp_start:snp_stop, :].compute(), dtype=float)
        res.append(_block_score_test(geno.T, null))

    df_res = pd.DataFrame(
        np.concatenate(res), columns=SCORE_COLUMNS, index=dset.snp.index
    ).astype({"N": "int"})
    return df_res
