"""
Check whether basic functions runs without error
"""
import numpy as np
import pandas as pd
import pytest
from structlog.testing import capture_logs
import confound


def test_synthesize_covar():
    geno = pd.Series([0, 1, np.nan, 1, 0], index=list("abcde"), name="rs1")
    covar = confound.data.synthesize_covar(geno)
    assert covar.name == "COVAR"
    assert list(covar.cat.categories) == ["A", "B"]
    assert covar["a"] == "A" and covar["e"] == "A"
    assert covar["b"] == "B" and covar["d"] == "B"
    assert pd.isna(covar["c"])

    # lower dosage is always "A"
    covar = confound.data.synthesize_covar(pd.Series([2.0, 1.0, 2.0]))
    assert covar.tolist() == ["B", "A", "B"]

    with pytest.raises(ValueError):
        confound.data.synthesize_covar(pd.Series([0.0, 1.0, 2.0]))
    with pytest.raises(ValueError):
        confound.data.synthesize_covar(pd.Series([1.0, 1.0, np.nan]))


def test_join_indiv():
    pheno = pd.Series([1.0, 2.0, 3.0], index=["a", "b", "c"], name="PHENO")
    covar = pd.Series(["A", "B"], index=["c", "a"], name="COVAR")
    df = confound.data.join_indiv(pheno, covar)
    assert df.index.tolist() == ["a", "c"]
    assert df["COVAR"].tolist() == ["B", "A"]

    # individuals missing from different tables are all counted
    age = pd.Series([30, 40, 50], index=["a", "c", "d"], name="AGE")
    with capture_logs() as logs:
        df = confound.data.join_indiv(pheno, covar, age)
    assert df.index.tolist() == ["a", "c"]
    assert any("2 unmatched" in log["event"] for log in logs)

    sex = pd.Series(["M", "F"], index=["b", "d"], name="SEX")
    with capture_logs() as logs:
        df = confound.data.join_indiv(pheno, covar, age, sex)
    assert len(df) == 0
    assert any("4 unmatched" in log["event"] for log in logs)


def test_convert_dummy():
    df = pd.DataFrame(
        {
            "AGE": [30.0, 40.0, 50.0],
            "COVAR": pd.Categorical(["A", None, "B"], categories=["A", "B"]),
        }
    )
    df_dummy = confound.data.convert_dummy(df)
    assert df_dummy.columns.tolist() == ["AGE", "COVAR_B"]
    assert np.allclose(df_dummy["COVAR_B"], [0.0, np.nan, 1.0], equal_nan=True)


def test_impute_with_mean():
    mat = np.array([[0.0, np.nan], [2.0, 1.0], [np.nan, 1.0]])
    imputed = confound.data.impute_with_mean(mat, axis=0)
    assert np.allclose(imputed, [[0, 1], [2, 1], [1, 1]])
    # input is untouched
    assert np.isnan(mat[0, 1])


def test_stats():
    x = np.array([-100.0, -2.5, 0.0, 0.3, 42.0])
    assert np.allclose(confound.data.signed_exp(confound.data.signed_log(x)), x)
    assert np.allclose(confound.data.signed_log([0.0, np.e - 1]), [0.0, 1.0])
    assert confound.data.signed_log_breaks(25) == [
        -30.0, -10.0, -3.0, -1.0, 0.0, 1.0, 3.0, 10.0, 30.0
    ]
    assert confound.data.signed_log_breaks(0.5) == [-1.0, 0.0, 1.0]

    assert np.allclose(confound.data.neg_log10([1.0, 0.01]), [0.0, 2.0])
    assert np.isposinf(confound.data.neg_log10([0.0])[0])

    np.random.seed(0)
    pval = np.random.uniform(size=10000)
    assert abs(confound.data.lambda_gc(pval) - 1) < 0.1
    est, (ci_low, ci_high) = confound.data.lambda_gc(
        pval, bootstrap_ci=True, n_resamples=200
    )
    assert est == confound.data.lambda_gc(pval)
    assert ci_low <= est <= ci_high
    pval[0] = np.nan
    assert np.isfinite(confound.data.lambda_gc(pval))


def test_simulate_pheno():
    indiv = pd.Index(np.arange(20000))
    pheno1 = confound.simulate.normal_pheno(indiv, seed=28)
    pheno2 = confound.simulate.normal_pheno(indiv, seed=28)
    assert pheno1.equals(pheno2)
    assert pheno1.name == "PHENO"
    assert pheno1.index.equals(indiv)
    assert abs(pheno1.mean() - 150) < 2
    assert abs(pheno1.std() - 50) < 2


def test_pheno_independence():
    """
    Repeated phenotype draws are uncorrelated with any SNP
    """
    dset = confound.dataset.load_toy()
    for i in range(dset.n_snp):
        geno = dset.get_geno_at(i)
        if geno.notna().all() and geno.nunique() > 1:
            break

    cors = [
        np.corrcoef(
            geno.values,
            confound.simulate.normal_pheno(dset.indiv.index, seed=seed).values,
        )[0, 1]
        for seed in range(100)
    ]
    assert abs(np.mean(cors)) < 0.03
    assert np.std(cors) > 0


def test_simulate_geno():
    dset = confound.simulate.geno(
        n_indiv=200, n_snp=500, n_chrom=3, missing_rate=0.02, seed=1
    )
    geno = dset.geno.compute()
    assert geno.shape == (500, 200)
    values = np.unique(geno[~np.isnan(geno)])
    assert set(values) <= {0.0, 1.0, 2.0}
    assert 0.01 < np.isnan(geno).mean() < 0.03
    assert set(dset.snp["CHROM"]) <= {1, 2, 3}
    assert dset.snp.index.is_unique and dset.indiv.index.is_unique

    dset2 = confound.simulate.geno(
        n_indiv=200, n_snp=500, n_chrom=3, missing_rate=0.02, seed=1
    )
    assert np.allclose(geno, dset2.geno.compute(), equal_nan=True)
