import pandas as pd
import numpy as np
from typing import (
    Union,
    Tuple,
    Sequence,
)


def normalize_indices(
    index,
) -> Tuple[Union[slice, int, np.ndarray], Union[slice, int, np.ndarray]]:
    """Normalize a positional index to the snp slices and individual slices

    Parameters
    ----------
    index : int, slice, array-like, or a tuple of them
        positional indexer, (snp_idx, indiv_idx) or snp_idx alone

    Returns
    -------
    Tuple
        (snp_idx, indiv_idx), each an int, a slice or an array of positions
    """
    # deal with tuples of length 1
    if isinstance(index, tuple) and len(index) == 1:
        index = index[0]

    if isinstance(index, tuple):
        if len(index) > 2:
            raise ValueError(
                "data can only be sliced in SNPs (first dim) and individuals (second dim)"
            )

    snp_ax, indiv_ax = unpack_index(index)
    return _normalize_position(snp_ax), _normalize_position(indiv_ax)


def _normalize_position(
    indexer: Union[slice, int, np.ndarray, Sequence],
) -> Union[slice, int, np.ndarray]:
    if isinstance(indexer, slice):
        return indexer
    elif isinstance(indexer, (np.integer, int)):
        return indexer
    elif isinstance(indexer, (Sequence, np.ndarray, pd.Index, pd.Series)):
        indexer = np.asarray(indexer)
        if issubclass(indexer.dtype.type, np.bool_):
            return np.where(indexer)[0]
        elif issubclass(indexer.dtype.type, np.integer):
            return indexer
        raise IndexError(
            f"Positional indexer must hold integers or booleans, got {indexer.dtype}. "
            "Use `Dataset.sel` to subset by identifiers."
        )
    else:
        raise IndexError(f"Unknown indexer {indexer!r} of type {type(indexer)}")


def labels_to_positions(labels, index: pd.Index) -> np.ndarray:
    """Convert identifiers to positions in `index`

    Parameters
    ----------
    labels : array-like
        identifiers, e.g., SNP or individual ids
    index : pd.Index
        index to look up

    Returns
    -------
    np.ndarray
        positions of `labels` within `index`, in the order of `labels`

    Raises
    ------
    KeyError
        if any of the labels is not in `index`
    """
    labels = np.asarray(labels)
    positions = index.get_indexer(labels)
    if np.any(positions < 0):
        not_found = labels[positions < 0]
        raise KeyError(
            f"{len(not_found)} identifiers are not in the dataset, "
            f"e.g., {list(not_found[0:5])}"
        )
    return positions


def unpack_index(index):
    if not isinstance(index, tuple):
        return index, slice(None)
    elif len(index) == 2:
        return index
    elif len(index) == 1:
        return index[0], slice(None)
    else:
        raise IndexError("invalid number of indices")
