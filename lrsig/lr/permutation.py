
from __future__ import annotations
import numpy as np
from joblib import Parallel, delayed

from lrsig.ansi import pprog
from lrsig.utils import stable_hash
from lrsig.lr.scoring import score_grid


def seed_sequence(seed: int, interaction, sample, replicate: int) -> np.random.SeedSequence:
    """
    Seed of a single permutation replicate.

    The entropy is the base seed, the CRC32 digests of the interaction and sample names,
    and the replicate index. Each replicate therefore has an independent stream, which
    does not depend on the order of execution or the number of parallel workers.
    """
    return np.random.SeedSequence([
        int(seed), stable_hash(interaction), stable_hash(sample), int(replicate)
    ])


def permuted_labels(labels, rng: np.random.Generator) -> np.ndarray:
    ''' Uniform permutation (without replacement) of the label vector. '''
    return rng.permutation(np.asarray(labels))


def null_distribution(
    interaction, sample, labels, ligand, receptor,
    n_perms: int, seed: int
) -> list:
    """
    Score grids of one (interaction, sample) unit under `n_perms` label permutations.

    The expression vectors stay fixed while the labels are shuffled, so the per-cluster
    cell counts are kept and any association between expression and cluster is broken.

    Returns
    -------
    A list of ``(replicate, grid)`` tuples with replicates numbered from 1. ``grid`` is
    the output of :func:`lrsig.lr.scoring.score_grid` and may be None.
    """

    results = []
    for replicate in range(1, n_perms + 1):
        rng = np.random.default_rng(seed_sequence(seed, interaction, sample, replicate))
        grid = score_grid(permuted_labels(labels, rng), ligand, receptor)
        results.append((replicate, grid))

    return results


def permute_unit(unit, n_perms, seed):
    interaction, sample, labels, ligand, receptor = unit
    return interaction, sample, null_distribution(
        interaction, sample, labels, ligand, receptor,
        n_perms = n_perms, seed = seed
    )


def generate_nulls(units, n_perms: int, seed: int, n_jobs: int = 1, verbose: bool = False):
    """
    Run the permutations of all units in parallel.

    Parameters
    ----------

    units : list[tuple]
        ``(interaction, sample, labels, ligand, receptor)`` tuples, with the per-cell
        arrays of the sample.

    Returns
    -------
    A list of ``(interaction, sample, [(replicate, grid), ...])`` in the order of `units`.
    """

    return Parallel(n_jobs = n_jobs)(
        delayed(permute_unit)(unit, n_perms, seed)
        for unit in pprog(units, desc = 'permutations', disable = not verbose)
    )
