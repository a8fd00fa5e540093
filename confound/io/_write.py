import numpy as np
import pandas as pd
import xarray as xr
import confound


def _to_array(col: pd.Series) -> np.ndarray:
    if pd.api.types.is_numeric_dtype(col) and not isinstance(
        col.dtype, pd.CategoricalDtype
    ):
        return col.values
    return col.astype(str).values


def write_dataset(dset: confound.Dataset, path: str, snp_chunk: int = 1024) -> None:
    """
    Write a dataset to a zarr store.

    The genotype is stored as the `geno` variable with (snp, indiv) dimensions.
    Each column of `dset.snp` (`dset.indiv`) is stored as a `<col>@snp`
    (`<col>@indiv`) coordinate.

    Parameters
    ----------
    dset : confound.Dataset
        dataset to write
    path : str
        path to the zarr store, overwritten if it exists
    snp_chunk : int
        number of SNPs per stored chunk
    """
    coords = {"snp": dset.snp.index.values, "indiv": dset.indiv.index.values}
    for dim, df in zip(["snp", "indiv"], [dset.snp, dset.indiv]):
        for col in df.columns:
            coords[f"{col}@{dim}"] = (dim, _to_array(df[col]))

    xr_dset = xr.Dataset(
        data_vars={
            "geno": (("snp", "indiv"), dset.geno.astype(float).rechunk((snp_chunk, -1)))
        },
        coords=coords,
    )
    xr_dset.to_zarr(path, mode="w")
    confound.logger.info(
        f"confound.io.write_dataset: {dset.n_snp} SNPs and {dset.n_indiv} "
        f"individuals written to {path}"
    )


def write_assoc(df: pd.DataFrame, path: str) -> None:
    """Write an association or comparison table as tab-separated text"""
    df.to_csv(path, sep="\t", float_format="%.6g", na_rep="NA")
    confound.logger.info(f"Output written to {path}")
