import numpy as np
import pandas as pd
import confound


def compare(
    df_mixed: pd.DataFrame,
    df_ols: pd.DataFrame,
    names=("MIXED", "OLS"),
) -> pd.DataFrame:
    """Align the results of two association methods by SNP identifier

    Parameters
    ----------
    df_mixed : pd.DataFrame
        results of `confound.assoc.score_test`, indexed by SNP identifier
    df_ols : pd.DataFrame
        results of `confound.assoc.marginal`, indexed by SNP identifier
    names : Tuple[str, str]
        prefixes of the columns of the two methods

    Returns
    -------
    pd.DataFrame
        indexed by SNP identifier, with columns <name>_BETA and <name>_LOGP
        (-log10 p-value) for each method. SNPs not tested by both methods are
        dropped.
    """
    frames = []
    for name, df in zip(names, [df_mixed, df_ols]):
        frames.append(
            pd.DataFrame(
                {
                    f"{name}_BETA": df["BETA"],
                    f"{name}_LOGP": confound.data.neg_log10(df["P"]),
                },
                index=df.index,
            )
        )
    df_compare = frames[0].join(frames[1], how="inner")
    df_compare = df_compare[
        [f"{n}_{s}" for s in ["BETA", "LOGP"] for n in names]
    ].dropna()
    n_dropped = max(len(df_mixed), len(df_ols)) - len(df_compare)
    if n_dropped > 0:
        confound.logger.info(
            f"confound.compare.compare: {n_dropped} SNPs not tested by both methods"
        )
    return df_compare


def drop_snp(df_compare: pd.DataFrame, snp_id) -> pd.DataFrame:
    """The comparison without the SNP `snp_id` (no-op if absent)"""
    return df_compare[df_compare.index != snp_id]


def max_discrepancy(
    df_compare: pd.DataFrame, stat: str = "LOGP", names=("MIXED", "OLS")
) -> float:
    """Largest absolute difference of `stat` between the two methods

    Parameters
    ----------
    df_compare : pd.DataFrame
        output of `compare`
    stat : str
        "LOGP" or "BETA"

    Returns
    -------
    float
    """
    assert stat in ["LOGP", "BETA"], "stat must be LOGP or BETA"
    diff = np.abs(
        df_compare[f"{names[0]}_{stat}"].values - df_compare[f"{names[1]}_{stat}"].values
    )
    if len(diff) == 0:
        return np.nan
    return float(np.max(diff))


def agreement(df_compare: pd.DataFrame, outlier, names=("MIXED", "OLS")) -> pd.DataFrame:
    """Discrepancy between the two methods with and without the outlier SNP

    Parameters
    ----------
    df_compare : pd.DataFrame
        output of `compare`
    outlier
        identifier of the known outlier SNP

    Returns
    -------
    pd.DataFrame
        rows "with_outlier" and "without_outlier", columns N_SNP,
        MAX_DIFF_BETA, MAX_DIFF_LOGP
    """
    dict_rls = {}
    for label, df in [
        ("with_outlier", df_compare),
        ("without_outlier", drop_snp(df_compare, outlier)),
    ]:
        dict_rls[label] = {
            "N_SNP": len(df),
            "MAX_DIFF_BETA": max_discrepancy(df, "BETA", names=names),
            "MAX_DIFF_LOGP": max_discrepancy(df, "LOGP", names=names),
        }
    return pd.DataFrame(dict_rls).T.astype({"N_SNP": "int"})


def rank(df_assoc: pd.DataFrame) -> pd.DataFrame:
    """Sort association results by p-value, smallest first, untested SNPs last"""
    return df_assoc.sort_values("P", ascending=True, na_position="last", kind="stable")
