
import numpy as np
import pandas as pd
import pytest
from scipy.stats import chi2

from lrsig.lr.aggregate import (
    bh, bh_by_sample, fisher_combine, aggregate_samples, adjust_combined
)


def test_bh_values():
    adjusted = bh([0.01, 0.04, 0.03, 0.2])
    np.testing.assert_allclose(adjusted, [0.04, 0.16 / 3, 0.16 / 3, 0.2])


def test_bh_is_monotone_in_raw_rank():
    rng = np.random.default_rng(3)
    raw = rng.uniform(size = 200) ** 3
    adjusted = bh(raw)
    order = np.argsort(raw, kind = 'stable')
    assert np.all(np.diff(adjusted[order]) >= -1e-12)
    assert np.all(adjusted >= raw)


def test_bh_keeps_nan():
    adjusted = bh([0.01, np.nan, 0.02])
    assert np.isnan(adjusted[1])
    np.testing.assert_allclose(adjusted[[0, 2]], [0.02, 0.02])


def test_correction_is_scoped_by_sample():
    pvalues = pd.DataFrame({
        'sample': ['s1', 's1', 's2'],
        'p': [0.01, 0.04, 0.01],
    })
    corrected = bh_by_sample(pvalues)
    np.testing.assert_allclose(corrected['p.bh'], [0.02, 0.04, 0.01])


def test_fisher_combination():
    statistic, p = fisher_combine([0.5, 0.5])
    assert statistic == pytest.approx(-4 * np.log(0.5))
    # chi-squared survival with 4 degrees of freedom: exp(-x/2) * (1 + x/2)
    assert p == pytest.approx(np.exp(-statistic / 2) * (1 + statistic / 2))


def test_fisher_floor_replaces_exact_zeros():
    assert fisher_combine([0.0, 0.2]) == pytest.approx(fisher_combine([0.001, 0.2]))
    assert fisher_combine([0.0], floor = 0.01) == pytest.approx(fisher_combine([0.01]))
    assert np.isfinite(fisher_combine([0.0, 0.0])[0])


def test_fisher_of_nothing():
    statistic, p = fisher_combine([np.nan])
    assert np.isnan(statistic) and np.isnan(p)


def test_aggregate_samples():
    grid = pd.DataFrame({
        'condition': ['all'] * 4,
        'interaction': ['i1'] * 4,
        'source': ['A', 'A', 'A', 'A'],
        'target': ['B', 'B', 'C', 'C'],
        'sample': ['s1', 's2', 's1', 's2'],
        'p.bh': [0.0, 0.1, 1.0, 1.0],
        'tested': [True, True, False, False],
        'interaction.norm': [1.0, 0.5, 0.0, 0.0],
        'ligand.means': [2.0, 1.0, 0.0, 0.0],
        'receptor.means': [1.0, 1.0, 0.0, 0.0],
    })

    combined = adjust_combined(aggregate_samples(grid))
    assert len(combined) == 2
    ab = combined.iloc[0]
    ac = combined.iloc[1]

    statistic, p = fisher_combine([0.0, 0.1])
    assert ab['n.samples'] == 2
    assert ab['fisher.stat'] == pytest.approx(statistic)
    assert ab['p.fisher'] == pytest.approx(p)
    assert ab['interaction.norm'] == pytest.approx(0.75)
    assert ab['ligand.means'] == pytest.approx(1.5)

    assert ac['n.samples'] == 0
    assert ac['p.fisher'] == pytest.approx(1.0)
    assert ac['p.adjusted'] == pytest.approx(1.0)
    assert ab['p.adjusted'] == pytest.approx(min(1.0, 2 * p))


def test_chi2_degrees_follow_sample_count():
    grid = pd.DataFrame({
        'interaction': ['i1'] * 3,
        'source': ['A'] * 3,
        'target': ['B'] * 3,
        'p.bh': [0.2, 0.3, 0.4],
        'tested': [True] * 3,
        'interaction.norm': [0.1] * 3,
        'ligand.means': [0.1] * 3,
        'receptor.means': [0.1] * 3,
    })
    combined = aggregate_samples(grid)
    statistic = -2 * np.log([0.2, 0.3, 0.4]).sum()
    assert list(combined.columns[:3]) == ['interaction', 'source', 'target']
    assert combined['p.fisher'].iloc[0] == pytest.approx(chi2.sf(statistic, 6))
