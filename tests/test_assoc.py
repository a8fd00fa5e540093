import numpy as np
import pandas as pd
import statsmodels.api as sm
import pytest
import confound


def _simulate_data(seed=0):
    """toy genotypes of 150 individuals, phenotype and an independent A/B covariate"""
    dset = confound.dataset.sample_indiv(confound.dataset.load_toy(), 150, seed=32)
    pheno = confound.simulate.normal_pheno(dset.indiv.index, seed=seed)
    covar = pd.Series(
        pd.Categorical(np.random.choice(["A", "B"], size=dset.n_indiv)),
        index=dset.indiv.index,
        name="COVAR",
    )
    return dset, pheno, covar


def test_null_model():
    """
    Test that the null model is the least-squares fit of the phenotype on the
    covariates
    """
    _, pheno, covar = _simulate_data()
    null = confound.assoc.null_model(pheno, covar)

    X = sm.add_constant((covar == "B").astype(float).values)
    model = sm.OLS(pheno.values, X).fit()
    assert null.fixef.index.tolist() == ["Intercept", "COVAR_B"]
    assert np.allclose(null.fixef["Est"], model.params)
    assert np.allclose(null.fixef["SE"], model.bse)
    assert np.allclose(null.fixef["P"], model.pvalues)
    assert np.isclose(null.sigma2, model.scale)
    assert np.allclose(null.resid, model.resid)

    # individuals with missing covariates are removed
    covar_missing = covar.copy()
    covar_missing.iloc[0:5] = np.nan
    null = confound.assoc.null_model(pheno, covar_missing)
    assert null.n_indiv == len(pheno) - 5

    # no covariates: intercept only
    null = confound.assoc.null_model(pheno)
    assert np.isclose(null.fixef.loc["Intercept", "Est"], pheno.mean())

    with pytest.raises(NotImplementedError):
        confound.assoc.null_model(pheno, covar, family="binary")


def test_cov_mat():
    """
    Identity relative covariance gives the same results as independent individuals
    """
    dset, pheno, covar = _simulate_data()
    dset = dset[0:200]
    cov_mat = pd.DataFrame(
        np.eye(dset.n_indiv), index=dset.indiv.index, columns=dset.indiv.index
    )
    null = confound.assoc.null_model(pheno, covar)
    null_cov = confound.assoc.null_model(pheno, covar, cov_mat=cov_mat)
    assert np.allclose(null.fixef.values, null_cov.fixef.values)

    df_res = confound.assoc.score_test(null, dset)
    df_res_cov = confound.assoc.score_test(null_cov, dset)
    assert np.allclose(df_res.values, df_res_cov.values, equal_nan=True)


def test_score_vs_ols():
    """
    The score test and OLS agree on SNPs that are not confounded with the
    covariates
    """
    dset, pheno, covar = _simulate_data()
    null = confound.assoc.null_model(pheno, covar)
    df_score = confound.assoc.score_test(null, dset)
    df_ols = confound.assoc.marginal(dset, pheno, covar)

    assert df_score.columns.tolist() == confound.assoc.SCORE_COLUMNS
    assert df_ols.columns.tolist() == confound.assoc.OLS_COLUMNS
    assert df_score.index.equals(dset.snp.index)
    assert df_ols.index.equals(dset.snp.index)
    assert np.all(df_score["N"] == df_ols["N"])

    # without missing calls, the score-test effect is the OLS effect
    idx = (df_ols["N"] == dset.n_indiv) & df_ols["BETA"].notna()
    assert idx.sum() > 500
    assert np.allclose(df_score.loc[idx, "BETA"], df_ols.loc[idx, "BETA"])

    # p-values are close for all tested SNPs
    idx = df_score["P"].notna() & df_ols["P"].notna()
    logp_score = -np.log10(df_score.loc[idx, "P"])
    logp_ols = -np.log10(df_ols.loc[idx, "P"])
    assert np.corrcoef(logp_score, logp_ols)[0, 1] > 0.99

    # untested SNPs are the ones without variation
    geno = dset.geno.compute()
    invariant = np.array(
        [len(np.unique(g[~np.isnan(g)])) < 2 for g in geno]
    )
    assert np.all(df_score["P"].isna() == invariant)
    assert np.all(df_ols["P"].isna() == invariant)


def test_degenerate_snp():
    n_indiv = 50
    np.random.seed(1)
    geno = np.random.binomial(2, 0.3, size=(3, n_indiv)).astype(float)
    geno[1, :] = 1
    geno[2, :] = np.nan
    dset = confound.Dataset(geno=geno)
    pheno = pd.Series(np.random.normal(size=n_indiv), index=dset.indiv.index)

    null = confound.assoc.null_model(pheno)
    df_score = confound.assoc.score_test(null, dset)
    df_ols = confound.assoc.marginal(dset, pheno)
    assert df_score["P"].notna().tolist() == [True, False, False]
    assert df_ols["P"].notna().tolist() == [True, False, False]
    assert df_score["N"].tolist() == [n_indiv, n_indiv, 0]
    assert df_ols["N"].tolist() == [n_indiv, n_indiv, 0]


def test_confounded_snp():
    """
    A SNP identical to the covariate: OLS drops the aliased covariate, while the
    score test has (numerically) no variance left for the SNP
    """
    dset = confound.dataset.load_toy()
    res = confound.compare.reproduce(dset)
    snp_id = res["snp"]
    df_mixed, df_ols = res["mixed"], res["ols"]

    assert confound.select.is_qualified(res["indiv"]["GENO"])
    assert np.all(
        res["indiv"]["COVAR"].isna() == res["indiv"]["GENO"].isna()
    )
    assert df_mixed.loc[snp_id, "SCORE_SE"] < 1e-6 * df_mixed["SCORE_SE"].median()
    # OLS of the SNP is the test of the covariate in the null model
    assert np.isclose(
        df_ols.loc[snp_id, "P"], res["null"].fixef.loc["COVAR_B", "P"]
    )

    # the score test reports a spurious association that OLS does not
    assert df_mixed.loc[snp_id, "P"] < 1e-2 * df_ols.loc[snp_id, "P"]

    df_agreement = res["agreement"]
    assert df_agreement.loc["with_outlier", "N_SNP"] == len(res["compare"])
    assert df_agreement.loc["without_outlier", "N_SNP"] == len(res["compare"]) - 1
    # excluding the SNP restores the agreement of the two methods
    assert (
        df_agreement.loc["without_outlier", "MAX_DIFF_LOGP"] * 10
        <= df_agreement.loc["with_outlier", "MAX_DIFF_LOGP"]
    )
    assert res["lambda_gc"].index.tolist() == ["MIXED", "OLS"]
    assert np.all(res["lambda_gc"]["CI_LOW"] <= res["lambda_gc"]["CI_HIGH"])

    # the same seeds give the same SNP
    res2 = confound.compare.reproduce(dset)
    assert res2["snp"] == snp_id
    assert np.allclose(res2["ols"]["P"], df_ols["P"], equal_nan=True)


def test_unmatched_indiv():
    """
    Individuals with phenotype but without genotype are dropped by both methods
    """
    n_indiv = 40
    np.random.seed(2)
    geno = np.random.binomial(2, 0.3, size=(5, n_indiv)).astype(float)
    dset = confound.Dataset(geno=geno)
    indiv = list(dset.indiv.index) + [999]
    pheno = pd.Series(np.random.normal(size=n_indiv + 1), index=indiv, name="PHENO")
    covar = pd.Series(np.random.normal(size=n_indiv + 1), index=indiv, name="AGE")

    df_score = confound.assoc.score_test(confound.assoc.null_model(pheno, covar), dset)
    df_ols = confound.assoc.marginal(dset, pheno, covar)
    assert np.all(df_score["N"] == n_indiv)
    assert np.all(df_ols["N"] == n_indiv)
    assert np.allclose(df_score["BETA"], df_ols["BETA"])

    null = confound.assoc.null_model(pheno, covar, indiv=dset.indiv.index)
    assert null.n_indiv == n_indiv
    assert 999 not in null.indiv
    df_score2 = confound.assoc.score_test(null, dset)
    assert np.allclose(df_score2.values, df_score.values)
