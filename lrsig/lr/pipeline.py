
from __future__ import annotations
import anndata
import pandas as pd

from lrsig.ansi import error, warning, info
from lrsig.lr.resources import handle_resource
from lrsig.lr.source import expression_source
from lrsig.lr.scoring import score_interaction
from lrsig.lr.store import results_store
from lrsig.lr.permutation import generate_nulls
from lrsig.lr.pvalues import empirical_pvalues
from lrsig.lr.aggregate import bh_by_sample, aggregate_samples, adjust_combined
from lrsig.lr.filter import (
    expression_gate, zero_fill, normalize_scores,
    condition_labels, annotate_condition, drop_pairs
)
from lrsig.lr.utils import (
    default_params as V,
    default_resource_columns as R,
    default_primary_columns as P,
    default_common_columns as C,
    internal_values as I,
    pair_label
)


_grid_cols = [P.source, P.target, C.ligand_means, C.receptor_means, C.score]


class lr_result:
    """
    Tables produced by :func:`permutation_test`.

    Attributes
    ----------

    observed : DataFrame
        Observed score grid of every scorable (interaction, sample).

    gate : DataFrame
        Maximum ligand and receptor means per interaction, and whether it was permuted.

    null : DataFrame | None
        Permuted score grids tagged by replicate. Only kept with ``keep_null = True``.

    pvalues : DataFrame
        Tested rows with empirical and per-sample BH-corrected p-values.

    grid : DataFrame
        Zero-filled per-sample table with normalized scores and conditions.

    results : DataFrame
        Combined, corrected and filtered results.
    """

    def __init__(self, observed, gate, null, pvalues, grid, results):
        self.observed = observed
        self.gate = gate
        self.null = null
        self.pvalues = pvalues
        self.grid = grid
        self.results = results


    def significant(self, alpha: float = V.alpha) -> pd.DataFrame:
        return self.results[self.results[C.pvals_adj] < alpha].reset_index(drop = True)


    def __repr__(self):
        return (
            f'<lr_result: {self.results[P.interaction].nunique()} interactions, '
            f'{len(self.results)} rows, {len(self.significant())} significant>'
        )


def check_samples(samples: dict, n_samples: int | None = None):

    if samples is None or len(samples) == 0:
        error("no expression datasets are given.")
    if not isinstance(samples, dict):
        error(f"samples should be a mapping from sample name to `AnnData`, got `{type(samples).__name__}`.")

    for sample, adata in samples.items():
        if not isinstance(adata, anndata.AnnData):
            error(f"expression dataset of sample `{sample}` is `{type(adata).__name__}`, not `AnnData`.")

    if n_samples is not None and len(samples) != n_samples:
        warning(f"{n_samples} samples are expected, but {len(samples)} are given.")


def permutation_test(
    samples: dict,
    groupby: str,
    resource: pd.DataFrame | None = None,
    interactions: list | None = None,
    malignancy: dict | None = None,
    min_expr: float = V.min_expr,
    gate_policy: str = V.gate_policy,
    n_perms: int = V.n_perms,
    seed: int = V.seed,
    pool: str = V.pool,
    tail: str = V.tail,
    fisher_floor: float = V.fisher_floor,
    excluded_pairs: list | None = None,
    n_samples: int | None = V.n_samples,
    layer: str | None = V.layer,
    use_raw: bool = V.use_raw,
    n_jobs: int = V.n_jobs,
    keep_null: bool = V.keep_null,
    verbose: bool = V.verbose
) -> lr_result:
    """
    Permutation test of ligand-receptor interactions between cell populations, with
    meta-analysis across samples.

    Parameters
    ----------

    samples : dict[str, anndata.AnnData]
        Expression dataset of each sample. Expression is expected to be normalized and
        non-negative.

    groupby : str
        Column of `obs` holding the cluster (population) label. Cells with a missing
        label are ignored.

    resource : DataFrame
        Interaction reference with columns `Ligand`, `Receptor` and `Merged`.

    interactions : list[tuple]
        Alternatively, a list of ``(ligand, receptor)`` pairs.

    malignancy : dict
        Sample name to malignancy (boolean, or condition label). Results are combined
        within each condition. The samples must match `samples` exactly.

    min_expr : float
        Expression gate. Interactions are permuted only if the maximal cluster mean of
        the ligand or the receptor (see `gate_policy`) reaches this value.

    gate_policy : Literal['both', 'either']
        Exclude an interaction if both genes, or if either gene, fails the gate.

    n_perms : int
        Number of label permutations per (interaction, sample).

    seed : int
        Base seed. Each replicate is seeded from the base seed, interaction, sample and
        replicate index.

    pool : Literal['pair', 'sample']
        Null pool of a cluster pair: the same pair across replicates, or every pair of
        the (interaction, sample) across replicates.

    tail : Literal['inclusive', 'strict']
        Whether null scores equal to the observed one count as at least as extreme.

    fisher_floor : float
        Substitute for exact zero p-values in fisher's method.

    excluded_pairs : list[tuple]
        (source, target) cluster pairs removed from the results, besides self pairs.

    n_samples : int
        Expected number of samples, a warning is raised on mismatch.

    keep_null : bool
        Whether to keep the permuted score table in the result.

    Returns
    -------
    :class:`lr_result`
    """

    check_samples(samples, n_samples)
    if pool not in V.pools: error(f"`pool` should be one of {V.pools}, got `{pool}`.")
    if tail not in V.tails: error(f"`tail` should be one of {V.tails}, got `{tail}`.")
    if gate_policy not in V.gate_policies:
        error(f"`gate_policy` should be one of {V.gate_policies}, got `{gate_policy}`.")
    if int(n_perms) < 1: error(f"at least one permutation is required, got `{n_perms}`.")

    resource = handle_resource(resource = resource, interactions = interactions, verbose = verbose)
    conditions = condition_labels(samples.keys(), malignancy)
    if verbose and len(set(conditions.values())) > 1:
        for cond, n in pd.Series(conditions).value_counts().items():
            info(f'condition [{cond}]: {n} samples.')
    if excluded_pairs is None: excluded_pairs = V.excluded_pairs

    genes = list(dict.fromkeys(
        resource[R.ligand].tolist() + resource[R.receptor].tolist()))
    ligands = dict(zip(resource[R.merged], resource[R.ligand]))
    receptors = dict(zip(resource[R.merged], resource[R.receptor]))

    # observed scores
    frames = {}
    clusters = set()
    observed_store = results_store(keys = P.unit, columns = _grid_cols)

    for sample, adata in samples.items():
        if verbose: info(f'scoring sample [{sample}] ...')
        source = expression_source(adata, groupby, layer = layer, use_raw = use_raw)
        if source.n_cells == 0:
            warning(f"sample [{sample}] has no cells with a valid `{groupby}`, it is unscorable.")

        frame = source.fetch(genes)
        frames[sample] = frame
        clusters.update(source.clusters.tolist())

        n_missing = 0
        for interaction in resource[R.merged]:
            grid = score_interaction(frame, ligands[interaction], receptors[interaction])
            if grid is None: n_missing += 1
            observed_store.append((interaction, sample), grid)

        if verbose and n_missing > 0:
            info(f'{n_missing} of {len(resource)} interactions are unscorable in sample [{sample}].')

    observed = observed_store.frame()
    clusters = sorted(clusters)

    # expression gate
    gate = expression_gate(observed, min_expr = min_expr, policy = gate_policy, verbose = verbose)
    kept = [x for x in resource[R.merged] if x in gate.index and gate.loc[x, 'keep']]
    if len(kept) == 0:
        warning("no interaction passes the expression gate.")

    # permutations
    kept_set = set(kept)
    units = []
    for interaction, sample in observed_store.scorable():
        if interaction not in kept_set: continue
        frame = frames[sample]
        units.append((
            interaction, sample,
            frame[I.label].to_numpy(),
            frame[ligands[interaction]].to_numpy(),
            frame[receptors[interaction]].to_numpy()
        ))

    if verbose:
        info(f'running {n_perms} permutations for {len(units)} (interaction, sample) units ...')

    null_store = results_store(keys = [P.interaction, P.sample, P.replicate], columns = _grid_cols)
    for interaction, sample, replicates in generate_nulls(
        units, n_perms = n_perms, seed = seed, n_jobs = n_jobs, verbose = verbose
    ):
        for replicate, grid in replicates:
            null_store.append((interaction, sample, replicate), grid)

    null = null_store.frame()

    # per-sample significance
    observed_kept = observed[observed[P.interaction].isin(kept_set)]
    pvalues = empirical_pvalues(observed_kept, null, pool = pool, tail = tail)
    pvalues = bh_by_sample(pvalues)

    # zero-filled grid across samples
    grid = zero_fill(pvalues, observed_kept, list(samples.keys()), kept, clusters)
    grid = normalize_scores(grid)
    grid = annotate_condition(grid, samples.keys(), malignancy)

    # meta analysis
    results = aggregate_samples(grid, floor = fisher_floor)
    results = adjust_combined(results)
    results.insert(results.columns.get_loc(P.interaction) + 1, P.ligand, results[P.interaction].map(ligands))
    results.insert(results.columns.get_loc(P.ligand) + 1, P.receptor, results[P.interaction].map(receptors))
    results.insert(
        results.columns.get_loc(P.target) + 1, P.pair,
        [pair_label(s, t) for s, t in zip(results[P.source], results[P.target])]
    )

    results = drop_pairs(results, excluded_pairs)
    results = results.sort_values(
        [C.pvals_adj, C.score_norm], ascending = [True, False], kind = 'stable'
    ).reset_index(drop = True)

    if verbose:
        info(
            f'{int((results[C.pvals_adj] < V.alpha).sum())} of {len(results)} '
            f'(condition, interaction, cluster pair) combinations with adjusted p < {V.alpha}.'
        )

    return lr_result(
        observed = observed,
        gate = gate,
        null = null if keep_null else None,
        pvalues = pvalues,
        grid = grid,
        results = results
    )
