import matplotlib.pyplot as plt
from matplotlib import patheffects

import numpy as np
import pandas as pd
from scipy import stats

import confound
from confound.data import (
    quantile_normalize,
    lambda_gc,
    neg_log10,
    signed_log,
    signed_exp,
    signed_log_breaks,
)


def _clip_inf(val: np.ndarray) -> np.ndarray:
    """replace +inf (p-values of 0) with 1.1 x the largest finite value"""
    val = np.array(val, dtype=float)
    finite = np.isfinite(val)
    if finite.any():
        val[np.isposinf(val)] = np.max(val[finite]) * 1.1
    return val


def geno_pheno(
    geno: pd.Series,
    pheno: pd.Series,
    covar: pd.Series = None,
    title: str = None,
    ax=None,
    s: float = 10,
):
    """Phenotype distribution by dosage of one SNP

    Parameters
    ----------
    geno : pd.Series
        dosages indexed by individual identifier
    pheno : pd.Series
        phenotype indexed by individual identifier
    covar : pd.Series, optional
        categorical covariate used to color individuals
    title : str, optional
        title, e.g., with the test statistics of the SNP
    ax : matplotlib.axes, optional
        by default None
    """
    if ax is None:
        ax = plt.gca()

    data = [geno.rename("GENO"), pheno.rename("PHENO")]
    if covar is not None:
        data.append(covar.rename("COVAR"))
    df = confound.data.join_indiv(*data).dropna(subset=["GENO", "PHENO"])

    levels = np.sort(df["GENO"].unique())
    ax.boxplot(
        [df.loc[df["GENO"] == lvl, "PHENO"].values for lvl in levels],
        positions=levels,
        widths=0.5,
        showfliers=False,
    )

    # fixed jitter so that the figure does not depend on the global random state
    jitter = np.random.RandomState(0).uniform(-0.15, 0.15, size=len(df))
    if covar is None:
        ax.scatter(df["GENO"] + jitter, df["PHENO"], s=s, alpha=0.6)
    else:
        cmap = plt.get_cmap("tab10")
        for i, (label, group) in enumerate(
            df.groupby("COVAR", observed=True, dropna=False)
        ):
            mask = df.index.isin(group.index)
            ax.scatter(
                df["GENO"][mask] + jitter[mask],
                df["PHENO"][mask],
                s=s,
                alpha=0.6,
                color=cmap(i),
                label=str(label),
            )
        ax.legend(title="covariate")

    ax.set_xticks(levels)
    ax.set_xticklabels([f"{lvl:g}" for lvl in levels])
    ax.set_xlabel(f"Dosage of SNP {geno.name}")
    ax.set_ylabel(pheno.name if pheno.name is not None else "Phenotype")
    if title is not None:
        ax.set_title(title, fontsize=9)
    return ax


def volcano(
    beta: pd.Series,
    pval: pd.Series,
    highlight=None,
    ax=None,
    s: float = 4,
    color: str = "#3b76af",
):
    """Effect size vs. -log10(p) across SNPs, with a signed-log effect axis

    The x-axis is transformed with sign(x) log(|x| + 1) and labeled at
    0, ±1, ±3, ±10, ±30, ±100, ...

    Parameters
    ----------
    beta : pd.Series
        effect sizes indexed by SNP identifier
    pval : pd.Series
        p-values indexed by SNP identifier
    highlight : optional
        identifier of a SNP to mark and annotate
    ax : matplotlib.axes, optional
        by default None
    """
    if ax is None:
        ax = plt.gca()

    df = pd.DataFrame(
        {"BETA": beta, "LOGP": pd.Series(neg_log10(pval), index=pval.index)}
    ).dropna()
    df["LOGP"] = _clip_inf(df["LOGP"].values)

    ax.set_xscale("function", functions=(signed_log, signed_exp))
    ax.scatter(df["BETA"], df["LOGP"], s=s, c=color)

    if highlight is not None and highlight in df.index:
        x, y = df.loc[highlight, "BETA"], df.loc[highlight, "LOGP"]
        ax.scatter([x], [y], s=s * 8, facecolor="none", edgecolor="red")
        ax.annotate(
            str(highlight),
            (x, y),
            xytext=(5, 5),
            textcoords="offset points",
            color="red",
            path_effects=[patheffects.withStroke(linewidth=2.5, foreground="w")],
        )

    finite = np.isfinite(df["BETA"].values)
    max_abs = np.max(np.abs(df["BETA"].values[finite])) if finite.any() else 1.0
    breaks = signed_log_breaks(max_abs)
    ax.set_xticks(breaks)
    ax.set_xticklabels([f"{b:g}" for b in breaks])
    ax.set_xlim(breaks[0], breaks[-1])
    ax.set_xlabel("Effect size")
    ax.set_ylabel("-$\\log_{10}(P)$")
    return ax


def compare_methods(
    df_compare: pd.DataFrame,
    outlier=None,
    stat: str = "LOGP",
    names=("MIXED", "OLS"),
    ax=None,
    s: float = 5,
):
    """Compare the estimates of two association methods across SNPs

    Parameters
    ----------
    df_compare : pd.DataFrame
        output of `confound.compare.compare`
    outlier : optional
        identifier of the known outlier SNP to annotate
    stat : str
        "LOGP" (-log10 p-value) or "BETA"
    names : Tuple[str, str]
        column prefixes of the y-axis method and the x-axis method
    ax : matplotlib.axes, optional
        by default None
    """
    assert stat in ["LOGP", "BETA"], "stat must be LOGP or BETA"
    if ax is None:
        ax = plt.gca()

    y = df_compare[f"{names[0]}_{stat}"].values
    x = df_compare[f"{names[1]}_{stat}"].values
    if stat == "LOGP":
        y, x = _clip_inf(y), _clip_inf(x)
    ax.scatter(x, y, s=s)

    xy = np.concatenate([x, y])
    xy = xy[np.isfinite(xy)]
    lim_low, lim_high = (np.min(xy), np.max(xy)) if len(xy) > 0 else (0, 1)
    ax.plot([lim_low, lim_high], [lim_low, lim_high], "k--", alpha=0.5, lw=1, label="y=x")

    if outlier is not None and outlier in df_compare.index:
        i = df_compare.index.get_loc(outlier)
        ax.scatter([x[i]], [y[i]], s=s * 8, facecolor="none", edgecolor="red")
        ax.annotate(
            f"SNP {outlier}",
            (x[i], y[i]),
            xytext=(5, -10),
            textcoords="offset points",
            color="red",
        )
    ax.legend()
    label = "-$\\log_{10}(P)$" if stat == "LOGP" else "Effect size"
    ax.set_xlabel(f"{names[1]} {label}")
    ax.set_ylabel(f"{names[0]} {label}")
    return ax


def qq(pval, label=None, ax=None):
    """Observed vs. expected -log10(p) of the tested SNPs

    Parameters
    ----------
    pval : array-like
        p-values, NaN for untested SNPs
    label : str, optional
        legend label
    ax : matplotlib.axes, optional
        by default None

    Returns
    -------
    float
        lambda GC of the p-values
    """
    if ax is None:
        ax = plt.gca()

    pval = np.array(pval, dtype=float)
    pval = pval[~np.isnan(pval)]
    expected_logp = -np.log10(stats.norm.sf(quantile_normalize(-pval)))
    ax.scatter(expected_logp, _clip_inf(neg_log10(pval)), s=2, label=label)
    lim = expected_logp.max()
    ax.plot([0, lim], [0, lim], "r--")
    ax.set_xlabel("Expected -$\\log_{10}(p)$")
    ax.set_ylabel("Observed -$\\log_{10}(p)$")
    return lambda_gc(pval)
