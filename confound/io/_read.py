import numpy as np
import pandas as pd
import dask.array as da
import xarray as xr
from contextlib import contextmanager
from typing import Iterator
import confound


def _to_frame(xr_dset: xr.Dataset, dim: str) -> pd.DataFrame:
    """Collect the `<col>@<dim>` variables of a stored dataset into a data frame"""
    suffix = f"@{dim}"
    cols = [
        name
        for name in xr_dset.variables
        if isinstance(name, str) and name.endswith(suffix)
    ]
    df = pd.DataFrame(
        {col[: -len(suffix)]: xr_dset[col].values for col in cols},
        index=pd.Index(xr_dset[dim].values, name=dim),
    )
    return df


def read_dataset(path: str, snp_chunk: int = 1024) -> confound.Dataset:
    """
    Read a dataset written by `confound.io.write_dataset`.

    Genotypes are read lazily; call `dset.close()` (or use
    `confound.io.open_dataset`) to release the file handle.

    Parameters
    ----------
    path: str
        path to the zarr store
    snp_chunk: int
        number of SNPs per dask chunk (default: 1024)

    Returns
    -------
    Dataset
    """
    xr_dset = xr.open_zarr(path, chunks={"snp": snp_chunk, "indiv": -1})
    dset = confound.Dataset(
        geno=xr_dset["geno"].data,
        snp=_to_frame(xr_dset, "snp"),
        indiv=_to_frame(xr_dset, "indiv"),
    )
    dset.xr.attrs["path"] = str(path)
    dset._source = xr_dset
    confound.logger.info(
        f"confound.io.read_dataset: {dset.n_snp} SNPs and {dset.n_indiv} "
        f"individuals from {path}"
    )
    return dset


@contextmanager
def open_dataset(path: str, snp_chunk: int = 1024) -> Iterator[confound.Dataset]:
    """Read a dataset and release its file handle when the block exits

    Examples
    --------
    >>> with confound.io.open_dataset("toy.zarr") as dset:
    ...     geno = dset.get_geno(1)
    """
    dset = read_dataset(path, snp_chunk=snp_chunk)
    try:
        yield dset
    finally:
        dset.close()


def read_pfile(pfile: str, snp_chunk: int = 1024) -> confound.Dataset:
    """
    Read a PLINK2 file set (<pfile>.pgen, <pfile>.pvar, <pfile>.psam) as dosages.

    Parameters
    ----------
    pfile: str
        PLINK2 file prefix
    snp_chunk: int
        number of SNPs per dask chunk (default: 1024)

    Returns
    -------
    Dataset
    """
    import dapgen

    hap, pvar, psam = dapgen.read_pfile(pfile, phase=True, snp_chunk=snp_chunk)
    hap = hap.astype(float)
    # negative allele codes are missing calls
    hap = da.where(hap < 0, np.nan, hap)
    geno = hap.sum(axis=2)
    confound.logger.info(
        f"confound.io.read_pfile: {geno.shape[0]} SNPs and {geno.shape[1]} "
        f"individuals from {pfile}"
    )
    return confound.Dataset(geno=geno, snp=pvar, indiv=psam)
