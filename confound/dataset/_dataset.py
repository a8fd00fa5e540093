import pandas as pd
import xarray as xr
import numpy as np
import dask.array as da
import confound
import dask
from typing import (
    Hashable,
    Optional,
    Any,
    Dict,
    Union,
)
from ._index import normalize_indices, labels_to_positions


class Dataset(object):
    """Data structure to contain a (n_snp, n_indiv) genotype dosage matrix.

    Dosages take values in {0, 1, 2} and missing calls are encoded as NaN.
    SNPs and individuals are identified by the index of `dset.snp` and
    `dset.indiv`, respectively.
    """

    def __init__(
        self,
        geno: Optional[da.Array] = None,
        snp: Optional[pd.DataFrame] = None,
        indiv: Optional[pd.DataFrame] = None,
        dset_ref=None,
        snp_idx: Union[slice, int, np.ndarray] = None,
        indiv_idx: Union[slice, int, np.ndarray] = None,
        enforce_order: bool = True,
    ):
        if dset_ref is not None:
            # initialize from reference data set
            if isinstance(snp_idx, (int, np.integer)):
                assert (
                    0 <= snp_idx < dset_ref.n_snp
                ), f"SNP index `{snp_idx}` is out of range."
                snp_idx = slice(snp_idx, snp_idx + 1, 1)

            if isinstance(indiv_idx, (int, np.integer)):
                assert (
                    0 <= indiv_idx < dset_ref.n_indiv
                ), f"Individual index `{indiv_idx}` is out of range."
                indiv_idx = slice(indiv_idx, indiv_idx + 1, 1)

            for name, idx in zip(["snp", "indiv"], [snp_idx, indiv_idx]):
                if isinstance(idx, slice):
                    if idx.step is not None:
                        assert idx.step > 0, f"Slice `{idx}` is not ordered."
                elif isinstance(idx, np.ndarray):
                    if enforce_order:
                        assert np.all(
                            idx == np.sort(idx)
                        ), f"{name}_idx=`{idx}` is not ordered"
                else:
                    raise ValueError(
                        f"`{name}_idx` must be a slice or a numpy array of integers."
                    )
            self._snp = dset_ref.snp.iloc[snp_idx, :].copy()
            self._indiv = dset_ref.indiv.iloc[indiv_idx, :].copy()

            with dask.config.set(**{"array.slicing.split_large_chunks": False}):
                self._xr = dset_ref.xr.isel(snp=snp_idx, indiv=indiv_idx)
            self._source = None

        else:
            # initialize from actual data set
            assert geno is not None, "`geno` must not be None"
            assert geno.ndim == 2, "`geno` must be a (n_snp, n_indiv) matrix"
            if not isinstance(geno, da.Array):
                geno = da.from_array(np.asarray(geno, dtype=float), chunks=(1024, -1))
            data_vars: Dict[Hashable, Any] = {"geno": (("snp", "indiv"), geno)}

            n_snp, n_indiv = geno.shape

            # assign `indiv` and `snp`
            if snp is None:
                self._snp = pd.DataFrame(index=pd.RangeIndex(stop=n_snp, name="snp"))
            else:
                assert len(snp) == n_snp, "`snp` must have n_snp rows"
                self._snp = snp

            if indiv is None:
                self._indiv = pd.DataFrame(
                    index=pd.RangeIndex(stop=n_indiv, name="indiv")
                )
            else:
                assert len(indiv) == n_indiv, "`indiv` must have n_indiv rows"
                self._indiv = indiv

            assert self._snp.index.is_unique, "SNP identifiers must be unique"
            assert self._indiv.index.is_unique, "Individual identifiers must be unique"

            self._xr = xr.Dataset(
                data_vars=data_vars,
                coords={"snp": self._snp.index.values, "indiv": self._indiv.index.values},
            )
            self._xr.attrs["path"] = None
            self._source = None

    def __repr__(self) -> str:
        descr = (
            f"confound.Dataset object with n_snp x n_indiv = {self.n_snp} x {self.n_indiv}"
        )
        if len(self.snp.columns) > 0:
            descr += "\n\tsnp: " + ", ".join([f"'{col}'" for col in self.snp.columns])
        if len(self.indiv.columns) > 0:
            descr += "\n\tindiv: " + ", ".join(
                [f"'{col}'" for col in self.indiv.columns]
            )
        return descr

    @property
    def n_indiv(self) -> int:
        """Number of individuals."""
        return self._xr.sizes["indiv"]

    @property
    def n_snp(self) -> int:
        """Number of SNPs."""
        return self._xr.sizes["snp"]

    @property
    def indiv(self) -> pd.DataFrame:
        """One-dimensional annotation of individuals (`pd.DataFrame`)."""
        return self._indiv

    @property
    def snp(self) -> pd.DataFrame:
        """One-dimensional annotation of SNPs (`pd.DataFrame`)."""
        return self._snp

    @property
    def geno(self) -> da.Array:
        """Genotype dosage matrix (n_snp, n_indiv)"""
        return self._xr["geno"].data

    @property
    def xr(self) -> xr.Dataset:
        """Return the xr.Dataset used internally"""
        return self._xr

    @property
    def path(self) -> Optional[str]:
        """Path of the store the dataset was read from, None for in-memory data"""
        return self._xr.attrs.get("path", None)

    def get_geno(self, snp_id) -> pd.Series:
        """Dosages of one SNP across all individuals

        Parameters
        ----------
        snp_id
            SNP identifier, an entry of `dset.snp.index`

        Returns
        -------
        pd.Series
            dosages indexed by individual identifier, named by `snp_id`
        """
        i = self.snp.index.get_loc(snp_id)
        return self.get_geno_at(i)

    def get_geno_at(self, i: int) -> pd.Series:
        """Dosages of the SNP at position `i`"""
        values = np.asarray(self.geno[i, :].compute(), dtype=float)
        return pd.Series(values, index=self.indiv.index, name=self.snp.index[i])

    def persist(self) -> None:
        """Load the genotypes into memory, keeping their chunks

        Afterwards the dataset no longer reads from its store, so it remains
        usable after `close`.
        """
        geno = self.geno
        values = np.asarray(geno.compute(), dtype=float)
        self._xr["geno"] = (("snp", "indiv"), da.from_array(values, chunks=geno.chunks))

    def close(self) -> None:
        """Release the underlying file handle, if any"""
        if self._source is not None:
            self._source.close()
            self._source = None
        self._xr.close()

    def append_indiv_info(
        self, df_info: pd.DataFrame, force_update: bool = False
    ) -> None:
        """
        append indiv info to the dataset, individuals are matched using
        self.indiv.index and df_info.index. Individuals of the dataset missing in
        df_info will be filled with NaN; individuals of df_info missing in the
        dataset are ignored.

        Parameters
        ----------
        df_info : pd.DataFrame
            DataFrame with the indiv info
        force_update : bool
            If True, update the indiv information even if it already exists.
        """
        n_extra = len(set(df_info.index) - set(self.indiv.index))
        if n_extra > 0:
            confound.logger.warning(
                "confound.dataset.append_indiv_info: "
                f"{n_extra}/{len(set(df_info.index))}"
                " individuals in the new dataframe not in the dataset;"
                " These individuals will be ignored."
            )
        n_missing = len(set(self.indiv.index) - set(df_info.index))
        if n_missing > 0:
            confound.logger.warning(
                "confound.dataset.append_indiv_info: "
                f"{n_missing}/{len(set(self.indiv.index))}"
                " individuals in the dataset are missing in the provided data frame."
                " These individuals will be filled with NaN."
            )

        df_info = df_info.reindex(self.indiv.index)

        for col in df_info.columns:
            if col in self.indiv.columns:
                is_equal = self.indiv[col].equals(df_info[col])
                if not is_equal:
                    if force_update:
                        confound.logger.info(
                            f"confound.dataset.append_indiv_info: {col} is updated"
                        )
                        self._indiv[col] = df_info[col]
                    else:
                        raise ValueError(
                            "confound.dataset.append_indiv_info: "
                            f"The column '{col}' in the provided data frame is not "
                            "consistent with the dataset."
                        )
            else:
                self._indiv[col] = df_info[col]

    def sel(self, snp=None, indiv=None) -> "Dataset":
        """Subset the dataset by identifiers

        Parameters
        ----------
        snp : array-like, optional
            SNP identifiers to keep, by default all SNPs
        indiv : array-like, optional
            individual identifiers to keep, by default all individuals

        Returns
        -------
        Dataset
            new dataset following the order of the provided identifiers
        """
        snp_idx = (
            slice(None) if snp is None else labels_to_positions(snp, self.snp.index)
        )
        indiv_idx = (
            slice(None)
            if indiv is None
            else labels_to_positions(indiv, self.indiv.index)
        )
        return Dataset(
            dset_ref=self, snp_idx=snp_idx, indiv_idx=indiv_idx, enforce_order=False
        )

    def __getitem__(self, index) -> "Dataset":
        """Returns a sliced view of the object."""
        snp_idx, indiv_idx = normalize_indices(index)
        return Dataset(dset_ref=self, snp_idx=snp_idx, indiv_idx=indiv_idx)
