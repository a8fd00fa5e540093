import numpy as np
import pandas as pd
import confound
from typing import Tuple, Union


def synthesize_covar(
    geno: pd.Series, labels: Tuple[str, str] = ("A", "B"), name: str = "COVAR"
) -> pd.Series:
    """Turn the dosages of a two-level SNP into a categorical covariate

    The lower dosage is mapped to `labels[0]` and the higher dosage to `labels[1]`,
    so the covariate is a deterministic function of the SNP. Individuals with a
    missing dosage get a missing label.

    Parameters
    ----------
    geno : pd.Series
        dosages indexed by individual identifier
    labels : Tuple[str, str]
        labels of the lower and higher dosage, by default ("A", "B")
    name : str
        name of the returned series, by default "COVAR"

    Returns
    -------
    pd.Series
        categorical covariate indexed by individual identifier
    """
    assert len(labels) == 2, "exactly two labels are required"
    levels = np.sort(pd.unique(geno.dropna()))
    if len(levels) != 2:
        raise ValueError(
            f"Covariate requires exactly 2 distinct non-missing dosages, got {levels}"
        )
    mapping = dict(zip(levels, labels))
    covar = pd.Series(
        pd.Categorical(geno.map(mapping), categories=list(labels)),
        index=geno.index,
        name=name,
    )
    confound.logger.info(
        f"confound.data.synthesize_covar: {mapping} from SNP {geno.name}, "
        f"{covar.isna().sum()} individuals without label"
    )
    return covar


def join_indiv(*data: Union[pd.Series, pd.DataFrame]) -> pd.DataFrame:
    """Join individual-level tables on the individual identifier

    Inner join: individuals absent from any of the tables are dropped.

    Parameters
    ----------
    *data : pd.Series or pd.DataFrame
        tables indexed by individual identifier; series must be named

    Returns
    -------
    pd.DataFrame
        joined table, in the order of the first table
    """
    assert len(data) > 0, "at least one table is required"
    frames = [d.to_frame() if isinstance(d, pd.Series) else d for d in data]
    df, all_indiv = frames[0], frames[0].index
    for other in frames[1:]:
        df = df.join(other, how="inner")
        all_indiv = all_indiv.union(other.index)
    n_dropped = len(all_indiv.difference(df.index))
    if n_dropped > 0:
        confound.logger.info(
            f"confound.data.join_indiv: {n_dropped} unmatched individuals dropped"
        )
    return df
