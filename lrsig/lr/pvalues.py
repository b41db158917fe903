
from __future__ import annotations
import numpy as np
import pandas as pd

from lrsig.ansi import error
from lrsig.lr.utils import (
    default_params as V,
    default_primary_columns as P,
    default_common_columns as C
)


def empirical_p(observed, pool, tail: str = V.tail):
    """
    One-sided (upper tail) empirical p-values of observed scores against a null pool.

    NaN values in the pool count towards the pool size but never match. With
    ``tail = 'inclusive'`` a null value equal to the observed value counts as a match,
    with ``tail = 'strict'`` it does not.

    Returns
    -------
    Tuple of arrays ``(n_ge, n_total, p)`` with the same shape as `observed`. p is
    NaN where the pool is empty.
    """

    if tail not in V.tails: error(f"`tail` should be one of {V.tails}, got `{tail}`.")

    observed = np.atleast_1d(np.asarray(observed, dtype = float))
    pool = np.asarray(pool, dtype = float).reshape(-1)
    n_total = pool.shape[0]

    finite = np.sort(pool[~ np.isnan(pool)])
    side = 'left' if tail == 'inclusive' else 'right'
    n_ge = finite.shape[0] - np.searchsorted(finite, observed, side = side)

    n_total = np.full(observed.shape, n_total)
    with np.errstate(invalid = 'ignore', divide = 'ignore'):
        p = np.where(n_total > 0, n_ge / np.maximum(n_total, 1), np.nan)

    return n_ge, n_total, p


def empirical_pvalues(
    observed: pd.DataFrame, null: pd.DataFrame,
    pool: str = V.pool, tail: str = V.tail
) -> pd.DataFrame:
    """
    Empirical p-value of every observed (interaction, sample, cluster pair) row with a
    positive interaction score. Rows scoring zero are not tested and not returned.

    Parameters
    ----------

    observed : DataFrame
        Observed score grids with columns ``[interaction, sample, source, target,
        interaction.score, ...]``.

    null : DataFrame
        Permuted score grids with the same columns plus ``replicate``.

    pool : Literal['pair', 'sample']
        With 'pair', each cluster pair is compared against the scores of the same pair
        in the permutations (one value per replicate). With 'sample', all cluster pairs
        of the (interaction, sample) unit form one pool.

    tail : Literal['inclusive', 'strict']
        Whether ties with the observed value count as at least as extreme.

    Returns
    -------
    The tested rows of `observed`, with ``n.null.ge``, ``n.null`` and ``p`` appended.
    """

    if pool not in V.pools: error(f"`pool` should be one of {V.pools}, got `{pool}`.")
    if tail not in V.tails: error(f"`tail` should be one of {V.tails}, got `{tail}`.")

    tested = observed[observed[C.score] > 0].copy()
    tested[C.n_ge] = 0
    tested[C.n_null] = 0
    tested[C.pvals] = np.nan
    if len(tested) == 0: return tested.reset_index(drop = True)

    group_keys = P.primary if pool == 'pair' else P.unit
    pools = {
        key: grp[C.score].to_numpy()
        for key, grp in null.groupby(group_keys, sort = False, observed = True)
    }

    n_ge_col = np.zeros(len(tested), dtype = int)
    n_null_col = np.zeros(len(tested), dtype = int)
    p_col = np.full(len(tested), np.nan)

    for key, idx in tested.groupby(group_keys, sort = False, observed = True).indices.items():
        values = pools.get(key, np.array([]))
        n_ge, n_total, p = empirical_p(tested[C.score].to_numpy()[idx], values, tail = tail)
        n_ge_col[idx] = n_ge
        n_null_col[idx] = n_total
        p_col[idx] = p

    tested[C.n_ge] = n_ge_col
    tested[C.n_null] = n_null_col
    tested[C.pvals] = p_col
    return tested.reset_index(drop = True)
