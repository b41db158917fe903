
from lrsig.configuration import default as cfg


class default_params():

    min_expr = cfg['lr.min.expr']
    gate_policy = cfg['lr.gate.policy']
    n_perms = cfg['lr.n.perms']
    seed = cfg['lr.seed']
    n_jobs = cfg['lr.n.jobs']
    tail = cfg['lr.tail']
    pool = cfg['lr.pool']
    fisher_floor = cfg['lr.fisher.floor']
    alpha = cfg['lr.alpha']
    n_samples = cfg['lr.n.samples']
    pair_sep = cfg['lr.pair.sep']
    excluded_pairs = cfg['lr.excluded.pairs']
    layer = None
    use_raw = False
    keep_null = False
    verbose = False

    gate_policies = ['both', 'either']
    tails = ['inclusive', 'strict']
    pools = ['pair', 'sample']


class default_resource_columns():
    ligand = 'Ligand'
    receptor = 'Receptor'
    merged = 'Merged'
    required = [ligand, receptor]


class default_primary_columns():
    interaction = 'interaction'
    sample = 'sample'
    replicate = 'replicate'
    condition = 'condition'
    source = 'source'
    target = 'target'
    ligand = 'ligand'
    receptor = 'receptor'
    pair = 'pair'
    unit = [interaction, sample]
    primary = [interaction, sample, source, target]


class default_common_columns():
    ligand_means = 'ligand.means'
    receptor_means = 'receptor.means'
    score = 'interaction.score'
    score_norm = 'interaction.norm'
    n_ge = 'n.null.ge'
    n_null = 'n.null'
    pvals = 'p'
    pvals_bh = 'p.bh'
    tested = 'tested'
    n_samples = 'n.samples'
    fisher_stat = 'fisher.stat'
    pvals_fisher = 'p.fisher'
    pvals_adj = 'p.adjusted'


class internal_values():
    label = '.label'


class conditions():
    malignant = 'malignant'
    non_malignant = 'non-malignant'
    pooled = 'all'


def pair_label(source, target, sep = default_params.pair_sep):
    return f'{source}{sep}{target}'
