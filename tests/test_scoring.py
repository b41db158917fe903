
import numpy as np
import pandas as pd
import pytest

from lrsig.lr.scoring import score_grid, score_interaction
from lrsig.lr.utils import internal_values as I


def as_dict(grid):
    return { (s, t): v for s, t, v in zip(grid['source'], grid['target'], grid['interaction.score']) }


def test_grid_is_product_of_cluster_means():
    labels = ['A', 'A', 'B', 'B', 'C']
    ligand = [1.0, 3.0, 0.0, 1.0, 4.0]
    receptor = [0.0, 2.0, 2.0, 2.0, 0.0]
    grid = score_grid(labels, ligand, receptor)

    assert len(grid) == 9
    scores = as_dict(grid)
    assert scores[('A', 'B')] == pytest.approx(2.0 * 2.0)
    assert scores[('C', 'A')] == pytest.approx(4.0 * 1.0)
    assert scores[('B', 'C')] == pytest.approx(0.0)

    row = grid[(grid['source'] == 'B') & (grid['target'] == 'A')].iloc[0]
    assert row['ligand.means'] == pytest.approx(0.5)
    assert row['receptor.means'] == pytest.approx(1.0)


def test_scores_are_non_negative():
    rng = np.random.default_rng(0)
    labels = rng.choice(['T.cd4', 'T.cd8', 'B', 'B.malignant'], size = 200)
    grid = score_grid(labels, rng.exponential(size = 200), rng.exponential(size = 200))
    assert (grid['interaction.score'] >= 0).all()
    assert len(grid) == 16


def test_all_missing_cluster_is_dropped_from_its_role():
    labels = ['A', 'A', 'B', 'B']
    ligand = [1.0, 1.0, np.nan, np.nan]
    receptor = [1.0, 2.0, 3.0, 4.0]
    grid = score_grid(labels, ligand, receptor)

    assert set(grid['source']) == { 'A' }
    assert set(grid['target']) == { 'A', 'B' }
    assert as_dict(grid)[('A', 'B')] == pytest.approx(3.5)


def test_empty_grid_is_unscorable():
    assert score_grid([], [], []) is None
    assert score_grid(['A'], [np.nan], [1.0]) is None


def test_missing_gene_is_unscorable():
    frame = pd.DataFrame({ I.label: ['A', 'B'], 'L': [1.0, 0.0] })
    assert score_interaction(frame, 'L', 'R') is None
    assert score_interaction(frame, 'R', 'L') is None

    grid = score_interaction(frame, 'L', 'L')
    assert as_dict(grid)[('A', 'A')] == pytest.approx(1.0)
