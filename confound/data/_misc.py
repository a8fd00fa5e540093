import pandas as pd
from typing import List
import confound
import numpy as np


def convert_dummy(df: pd.DataFrame, cols: List[str] = None) -> pd.DataFrame:
    """
    Convert categorical variables to dummy variables for each column in df.

    Parameters
    ----------
    df : pd.DataFrame
        Dataframe to convert
    cols : List[str], optional
        Columns to convert, by default None (columns are selected automatically)

    Returns
    -------
    pd.DataFrame
        Converted dataframe, the first level of each categorical column is dropped
    """
    if cols is None:
        cols = [
            col
            for col in df.columns
            if not pd.api.types.is_numeric_dtype(df[col])
            or isinstance(df[col].dtype, pd.CategoricalDtype)
        ]

    added_cols = []
    df = df.copy()
    for col in cols:
        dummies = pd.get_dummies(df[col], drop_first=True, dtype=float)
        dummies.columns = [f"{col}_{s}" for s in dummies.columns]
        dummies.loc[df[col].isnull(), dummies.columns] = np.nan
        added_cols.extend(dummies.columns)
        df = pd.concat([df, dummies], axis=1)
        df = df.drop(columns=[col])
    if len(added_cols) > 0:
        confound.logger.info(
            f"Detected categorical columns: {','.join(cols)}, "
            f"and added dummy variables: {','.join(added_cols)}"
        )
    return df


def impute_with_mean(mat, inplace=False, axis=1):
    """impute the each entry using the mean of the input matrix np.mean(mat, axis=axis)
    axis = 1 corresponds to row-wise imputation
    axis = 0 corresponds to column-wise imputation

    Parameters
    ----------
    mat : np.ndarray
        input matrix. For reminder, the genotype matrix is with shape (n_snp, n_indiv)
    inplace : bool
        whether to return a new dataset or modify the input dataset
    axis : int
        axis to impute along

    Returns
    -------
    if inplace:
        None
    else:
        mat : np.ndarray
    """
    assert axis in [0, 1], "axis should be 0 or 1"
    if not inplace:
        mat = mat.copy()

    mean = np.nanmean(mat, axis=axis)
    nanidx = np.where(np.isnan(mat))

    # axis = 1, row-wise imputation, index the mean using the nanidx[0]
    # axis = 0, column-wise imputation, index the mean using the nanidx[1]
    mat[nanidx] = mean[nanidx[1 - axis]]

    if not inplace:
        return mat
    else:
        return None
