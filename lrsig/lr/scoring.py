
from __future__ import annotations
import numpy as np
import pandas as pd

from lrsig.lr.utils import (
    default_primary_columns as P,
    default_common_columns as C,
    internal_values as I
)


def cluster_means(codes, n_clusters, x) -> np.ndarray:
    ''' NaN-skipping mean of ``x`` within each cluster code. Empty groups give NaN. '''
    x = np.asarray(x, dtype = float)
    valid = ~ np.isnan(x)
    sums = np.bincount(codes[valid], weights = x[valid], minlength = n_clusters)
    counts = np.bincount(codes[valid], minlength = n_clusters)
    with np.errstate(invalid = 'ignore', divide = 'ignore'):
        means = sums / counts
    means[counts == 0] = np.nan
    return means


def score_grid(labels, ligand, receptor) -> pd.DataFrame | None:
    """
    Interaction score of every (ligand cluster, receptor cluster) combination.

    This is used identically for the observed labels and for each permutation of them.

    Parameters
    ----------

    labels : array-like
        Cluster label per cell.

    ligand, receptor : array-like
        Expression of the ligand and receptor gene per cell, aligned with `labels`.

    Returns
    -------
    A data frame with columns ``[source, target, ligand.means, receptor.means,
    interaction.score]``. The source is the ligand-expressing cluster and the target
    the receptor-expressing one. Clusters with an undefined mean (no non-missing value)
    are dropped from the corresponding role. Returns None if no cluster is left in
    either role.
    """

    labels = np.asarray(labels)
    if labels.shape[0] == 0: return None
    clusters, codes = np.unique(labels, return_inverse = True)
    codes = codes.reshape(-1)

    lmeans = cluster_means(codes, len(clusters), ligand)
    rmeans = cluster_means(codes, len(clusters), receptor)
    lkeep = ~ np.isnan(lmeans)
    rkeep = ~ np.isnan(rmeans)
    if (not lkeep.any()) or (not rkeep.any()): return None

    # cartesian product of sources and targets, sources vary slowest.
    src, tgt = np.meshgrid(np.flatnonzero(lkeep), np.flatnonzero(rkeep), indexing = 'ij')
    src = src.reshape(-1)
    tgt = tgt.reshape(-1)

    return pd.DataFrame({
        P.source: clusters[src],
        P.target: clusters[tgt],
        C.ligand_means: lmeans[src],
        C.receptor_means: rmeans[tgt],
        C.score: lmeans[src] * rmeans[tgt]
    })


def score_interaction(frame: pd.DataFrame, ligand: str, receptor: str) -> pd.DataFrame | None:
    """
    Observed score grid of one interaction in one sample.

    `frame` is the output of :meth:`lrsig.lr.source.expression_source.fetch`. Returns
    None (the pair is unscorable in this sample) when either gene column is absent.
    """

    if (ligand not in frame.columns) or (receptor not in frame.columns): return None
    return score_grid(
        frame[I.label].to_numpy(),
        frame[ligand].to_numpy(),
        frame[receptor].to_numpy()
    )
