import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import confound


def _assoc_frames():
    df_mixed = pd.DataFrame(
        {"BETA": [1.0, 2.0, 3.0, np.nan], "P": [0.1, 0.01, 1e-5, 0.5]},
        index=["a", "b", "c", "d"],
    )
    df_ols = pd.DataFrame(
        {"BETA": [1.0, 2.5, 3.0, 4.0], "P": [0.1, 0.001, 1e-5, 0.5]},
        index=["a", "b", "c", "e"],
    )
    return df_mixed, df_ols


def test_compare():
    df_mixed, df_ols = _assoc_frames()
    df_compare = confound.compare.compare(df_mixed, df_ols)
    assert df_compare.index.tolist() == ["a", "b", "c"]
    assert df_compare.columns.tolist() == [
        "MIXED_BETA",
        "OLS_BETA",
        "MIXED_LOGP",
        "OLS_LOGP",
    ]
    assert np.allclose(df_compare["MIXED_LOGP"], [1, 2, 5])
    assert np.allclose(df_compare["OLS_LOGP"], [1, 3, 5])

    assert np.isclose(confound.compare.max_discrepancy(df_compare, "BETA"), 0.5)
    assert np.isclose(confound.compare.max_discrepancy(df_compare, "LOGP"), 1.0)
    df_drop = confound.compare.drop_snp(df_compare, "b")
    assert df_drop.index.tolist() == ["a", "c"]
    assert np.isclose(confound.compare.max_discrepancy(df_drop, "LOGP"), 0.0)
    # dropping an absent SNP is a no-op
    assert confound.compare.drop_snp(df_compare, "z").equals(df_compare)

    df_agreement = confound.compare.agreement(df_compare, outlier="b")
    assert df_agreement.index.tolist() == ["with_outlier", "without_outlier"]
    assert df_agreement["N_SNP"].tolist() == [3, 2]
    assert np.allclose(df_agreement["MAX_DIFF_BETA"], [0.5, 0.0])
    assert np.allclose(df_agreement["MAX_DIFF_LOGP"], [1.0, 0.0])


def test_rank():
    df_assoc = pd.DataFrame(
        {"BETA": [0.1, 0.2, 0.3, 0.4], "P": [0.5, np.nan, 0.01, 0.2]},
        index=["a", "b", "c", "d"],
    )
    assert confound.compare.rank(df_assoc).index.tolist() == ["c", "d", "a", "b"]


def test_write_assoc(tmp_path):
    df_mixed, _ = _assoc_frames()
    path = str(tmp_path / "toy.assoc")
    confound.io.write_assoc(df_mixed, path)
    with open(path) as f:
        lines = f.read().splitlines()
    assert lines[0] == "\tBETA\tP"
    assert lines[3] == "c\t3\t1e-05"
    assert lines[4] == "d\tNA\t0.5"


def test_plot():
    np.random.seed(0)
    n_snp = 200
    beta = pd.Series(np.random.normal(scale=5, size=n_snp))
    pval = pd.Series(np.random.uniform(size=n_snp))
    pval[3] = 0.0

    fig, axes = plt.subplots(figsize=(8, 8), nrows=2, ncols=2)
    confound.plot.volcano(beta, pval, highlight=3, ax=axes[0, 0])
    xticks = axes[0, 0].get_xticks()
    assert 0 in xticks and 10 in xticks and -10 in xticks

    df_compare = pd.DataFrame(
        {
            "MIXED_BETA": beta,
            "OLS_BETA": beta + np.random.normal(scale=0.1, size=n_snp),
            "MIXED_LOGP": confound.data.neg_log10(pval),
            "OLS_LOGP": confound.data.neg_log10(pval),
        }
    )
    confound.plot.compare_methods(df_compare, outlier=3, ax=axes[0, 1])
    confound.plot.compare_methods(df_compare, stat="BETA", ax=axes[1, 0])
    lgc = confound.plot.qq(pval, ax=axes[1, 1])
    assert 0.5 < lgc < 2
    plt.close(fig)

    geno = pd.Series(np.random.binomial(2, 0.3, size=100), name="rs1")
    pheno = pd.Series(np.random.normal(size=100), name="PHENO")
    covar = confound.data.synthesize_covar(geno.where(geno < 2, 1))
    fig, ax = plt.subplots()
    confound.plot.geno_pheno(geno, pheno, covar=covar, title="rs1", ax=ax)
    assert ax.get_title() == "rs1"
    plt.close(fig)
