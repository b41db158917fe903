
from __future__ import annotations
import numpy as np
import pandas as pd

from lrsig.ansi import error, warning, info
from lrsig.lr.utils import (
    default_params as V,
    default_primary_columns as P,
    default_common_columns as C,
    conditions as K
)


def expression_gate(
    observed: pd.DataFrame, min_expr: float = V.min_expr,
    policy: str = V.gate_policy, verbose: bool = False
) -> pd.DataFrame:
    """
    Decide which interactions are worth permuting.

    For every interaction, the maximum ligand and receptor cluster means are taken
    across all samples and clusters. A maximum fails the gate when it is strictly
    below `min_expr`; a maximum equal to `min_expr` passes.

    Parameters
    ----------

    policy : Literal['both', 'either']
        With 'both', an interaction is excluded only if the ligand and the receptor both
        fail. With 'either', it is excluded as soon as one of them fails.

    Returns
    -------
    A data frame indexed by interaction with the maxima and a boolean ``keep`` column.
    Interactions that are unscorable in every sample are absent.
    """

    if policy not in V.gate_policies:
        error(f"`policy` should be one of {V.gate_policies}, got `{policy}`.")

    gate = observed.groupby(P.interaction, sort = False)[[C.ligand_means, C.receptor_means]].max()
    ligand_fail = gate[C.ligand_means].fillna(0) < min_expr
    receptor_fail = gate[C.receptor_means].fillna(0) < min_expr

    if policy == 'both': gate['keep'] = ~ (ligand_fail & receptor_fail)
    else: gate['keep'] = ~ (ligand_fail | receptor_fail)

    n_drop = int((~ gate['keep']).sum())
    if verbose and n_drop > 0:
        info(f"{n_drop} of {len(gate)} interactions are below the expression threshold {min_expr}.")

    return gate


def zero_fill(
    tested: pd.DataFrame, observed: pd.DataFrame,
    samples, interactions, clusters
) -> pd.DataFrame:
    """
    Expand the per-sample results to every (sample, interaction, source, target)
    combination that could have been observed.

    Combinations without a computed p-value (unscorable, zero score, or gene absent in
    the sample) count as no signal: ``p = p.bh = 1``. Combinations absent from the
    observed grids get a score and means of 0. The ``tested`` column marks the rows
    that carry a real p-value.
    """

    clusters = list(clusters)
    index = pd.MultiIndex.from_product(
        [list(samples), list(interactions), clusters, clusters],
        names = [P.sample, P.interaction, P.source, P.target]
    )
    grid = index.to_frame(index = False)

    keys = [P.sample, P.interaction, P.source, P.target]
    score_cols = [C.ligand_means, C.receptor_means, C.score]
    test_cols = [C.n_ge, C.n_null, C.pvals, C.pvals_bh]

    grid = grid.merge(observed[keys + score_cols], on = keys, how = 'left')
    grid = grid.merge(tested[keys + [x for x in test_cols if x in tested.columns]], on = keys, how = 'left')
    if len(grid) != len(index):
        error("duplicated (sample, interaction, cluster pair) rows in the per-sample results.")

    grid[C.tested] = grid[C.pvals].notna()
    grid[score_cols] = grid[score_cols].fillna(0.0)
    grid[C.pvals] = grid[C.pvals].fillna(1.0)
    if C.pvals_bh in grid.columns: grid[C.pvals_bh] = grid[C.pvals_bh].fillna(1.0)
    for col in [C.n_ge, C.n_null]:
        if col in grid.columns: grid[col] = grid[col].fillna(0).astype(int)
    return grid


def normalize_scores(grid: pd.DataFrame) -> pd.DataFrame:
    """
    Scale the interaction scores of each interaction to [0, 1], dividing by the largest
    score of that interaction over the whole zero-filled grid. Interactions whose scores
    are all zero are normalized to 0.
    """

    grid = grid.copy()
    top = grid.groupby(P.interaction, sort = False)[C.score].transform('max')
    with np.errstate(invalid = 'ignore', divide = 'ignore'):
        norm = grid[C.score] / top
    grid[C.score_norm] = norm.where(top > 0, 0.0)
    return grid


def condition_labels(samples, malignancy: dict | pd.Series | None = None) -> dict:
    """
    Condition label of each sample.

    Parameters
    ----------

    malignancy : dict | Series
        Mapping from sample name to a boolean (True for malignant) or to a condition
        label. The mapped samples must be exactly the analysed ones. When None, every
        sample is labelled ``all``.
    """

    if malignancy is None:
        return { sample: K.pooled for sample in samples }

    malignancy = dict(malignancy)
    samples = set(samples)
    annotated = set(malignancy.keys())
    if annotated != samples:
        missing = sorted(map(str, samples - annotated))
        extra = sorted(map(str, annotated - samples))
        error(
            "sample names of the malignancy annotation do not match the analysed samples. "
            f"not annotated: {missing}; unknown: {extra}"
        )

    labels = {}
    for sample, value in malignancy.items():
        if isinstance(value, (bool, np.bool_)):
            labels[sample] = K.malignant if value else K.non_malignant
        elif isinstance(value, str): labels[sample] = value
        else: error(f"malignancy of sample `{sample}` should be a boolean or a label, got `{value}`.")

    return labels


def annotate_condition(
    frame: pd.DataFrame, samples, malignancy: dict | pd.Series | None = None
) -> pd.DataFrame:
    ''' Label each row by the malignancy of its sample, see :func:`condition_labels`. '''
    frame = frame.copy()
    frame[P.condition] = frame[P.sample].map(condition_labels(samples, malignancy))
    return frame


def drop_pairs(results: pd.DataFrame, excluded_pairs = None) -> pd.DataFrame:
    ''' Remove self pairs and the explicitly excluded (source, target) pairs. '''

    keep = results[P.source] != results[P.target]
    excluded_pairs = [tuple(x) for x in (excluded_pairs or [])]
    if len(excluded_pairs) > 0:
        pairs = pd.MultiIndex.from_frame(results[[P.source, P.target]])
        excluded = pairs.isin(excluded_pairs)
        if not excluded.any():
            warning(f"none of the excluded pairs {excluded_pairs} were found in the results.")
        keep &= ~ excluded

    return results[keep].reset_index(drop = True)
