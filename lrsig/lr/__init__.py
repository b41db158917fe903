
from lrsig.lr.source import expression_source, fetch
from lrsig.lr.scoring import score_grid, score_interaction
from lrsig.lr.permutation import null_distribution, generate_nulls, seed_sequence
from lrsig.lr.pvalues import empirical_p, empirical_pvalues
from lrsig.lr.aggregate import bh, bh_by_sample, fisher_combine, aggregate_samples, adjust_combined
from lrsig.lr.filter import (
    expression_gate, zero_fill, normalize_scores, 
    condition_labels, annotate_condition, drop_pairs
)
from lrsig.lr.store import results_store
from lrsig.lr.resources import handle_resource
from lrsig.lr.io import read_interactions, read_samples, write_results
from lrsig.lr.pipeline import permutation_test, lr_result
