
from __future__ import annotations
import numpy as np
import pandas as pd
from scipy.stats import chi2
from statsmodels.stats.multitest import multipletests

from lrsig.ansi import error
from lrsig.lr.utils import (
    default_params as V,
    default_primary_columns as P,
    default_common_columns as C
)


def bh(pvals) -> np.ndarray:
    ''' Benjamini-Hochberg adjusted p-values. NaN stays NaN. '''

    pvals = np.asarray(pvals, dtype = float)
    adjusted = np.full(pvals.shape, np.nan)
    finite = ~ np.isnan(pvals)
    if finite.any():
        adjusted[finite] = multipletests(pvals[finite], method = 'fdr_bh')[1]
    return adjusted


def bh_by_sample(pvalues: pd.DataFrame) -> pd.DataFrame:
    """
    First correction stage: Benjamini-Hochberg within each sample, over all tested
    (interaction, cluster pair) p-values of that sample.
    """

    pvalues = pvalues.copy()
    pvalues[C.pvals_bh] = np.nan
    for _, idx in pvalues.groupby(P.sample, sort = False).indices.items():
        pvalues.iloc[idx, pvalues.columns.get_loc(C.pvals_bh)] = bh(pvalues[C.pvals].to_numpy()[idx])
    return pvalues


def floor_pvals(pvals, floor: float = V.fisher_floor) -> np.ndarray:
    ''' Replace exact zeros by `floor`, so that their logarithm stays finite. '''
    if not (0 < floor <= 1): error(f"fisher floor should be in (0, 1], got `{floor}`.")
    pvals = np.asarray(pvals, dtype = float)
    if np.any((pvals < 0) | (pvals > 1)): error("p-values to combine should lie in [0, 1].")
    return np.where(pvals == 0, floor, pvals)


def fisher_combine(pvals, floor: float = V.fisher_floor):
    """
    Fisher's combined probability test.

    Exact zeros are replaced by `floor` before the logarithm. The statistic
    ``-2 * sum(log(p))`` follows a chi-squared distribution with ``2k`` degrees of
    freedom under the null, for `k` combined p-values. NaN values are ignored.

    Returns
    -------
    Tuple ``(statistic, p)``.
    """

    pvals = np.asarray(pvals, dtype = float)
    pvals = floor_pvals(pvals[~ np.isnan(pvals)], floor)
    if pvals.shape[0] == 0: return np.nan, np.nan

    statistic = -2 * np.sum(np.log(pvals))
    return statistic, chi2.sf(statistic, 2 * pvals.shape[0])


def aggregate_samples(
    grid: pd.DataFrame, floor: float = V.fisher_floor,
    by = None
) -> pd.DataFrame:
    """
    Combine the per-sample results of each (condition, interaction, cluster pair).

    Parameters
    ----------

    grid : DataFrame
        Zero-filled, normalized per-sample table with ``p.bh``, ``tested``,
        ``interaction.norm`` and the ligand and receptor means.

    by : list[str]
        Grouping columns. Defaults to ``[condition, interaction, source, target]``,
        dropping ``condition`` if it is absent.

    Returns
    -------
    One row per group, with the number of samples where the combination was tested
    (``n.samples``), fisher's statistic and p-value (see :func:`fisher_combine`), and
    the mean normalized score and mean ligand and receptor expression over all samples
    of the group. The second stage of correction (``p.adjusted``) is added by
    :func:`adjust_combined`.
    """

    if by is None:
        by = [P.condition, P.interaction, P.source, P.target]
        if P.condition not in grid.columns: by = by[1:]

    pvals = grid[C.pvals_bh].to_numpy(dtype = float)
    finite = ~ np.isnan(pvals)
    logp = np.zeros(pvals.shape)
    logp[finite] = np.log(floor_pvals(pvals[finite], floor))

    combined = grid.assign(**{'.logp': logp, '.k': finite}) \
        .groupby(by, sort = False, observed = True) \
        .agg(**{
            C.n_samples: (C.tested, 'sum'),
            '.logp': ('.logp', 'sum'),
            '.k': ('.k', 'sum'),
            C.score_norm: (C.score_norm, 'mean'),
            C.ligand_means: (C.ligand_means, 'mean'),
            C.receptor_means: (C.receptor_means, 'mean'),
        }).reset_index()

    k = combined['.k'].to_numpy(dtype = int)
    statistic = np.where(k > 0, -2 * combined['.logp'].to_numpy(), np.nan)
    combined[C.fisher_stat] = statistic
    combined[C.pvals_fisher] = np.where(k > 0, chi2.sf(statistic, 2 * np.maximum(k, 1)), np.nan)
    combined[C.n_samples] = combined[C.n_samples].astype(int)

    return combined[by + [
        C.n_samples, C.fisher_stat, C.pvals_fisher,
        C.score_norm, C.ligand_means, C.receptor_means
    ]]


def adjust_combined(combined: pd.DataFrame) -> pd.DataFrame:
    ''' Final correction stage: Benjamini-Hochberg across all combined p-values jointly. '''
    combined = combined.copy()
    combined[C.pvals_adj] = bh(combined[C.pvals_fisher].to_numpy())
    return combined
