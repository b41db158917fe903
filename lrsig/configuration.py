
class Configuration:

    def __init__(self):

        self.config = {}

        # expression gate applied before generating the null distribution.
        # an interaction fails the gate when its maximum cluster mean across
        # all samples is below the threshold. 'both' excludes an interaction
        # only when ligand and receptor fail, 'either' when any of them fails.

        self.config['lr.min.expr'] = 0.05
        self.config['lr.gate.policy'] = 'both'

        # permutation test

        self.config['lr.n.perms'] = 30
        self.config['lr.seed'] = 42
        self.config['lr.n.jobs'] = 1
        self.config['lr.tail'] = 'inclusive'
        self.config['lr.pool'] = 'pair'

        # cross-sample meta analysis. exact zero p-values are replaced by
        # the floor before taking the logarithm in fisher's method.

        self.config['lr.fisher.floor'] = 0.001
        self.config['lr.alpha'] = 0.01
        self.config['lr.n.samples'] = None

        # cluster pairs (source, target) removed from the final table in
        # addition to the self pairs.

        self.config['lr.excluded.pairs'] = []
        self.config['lr.pair.sep'] = ' > '

        # maximum number of dense elements (cells * genes) a single fetch
        # from an expression dataset may materialize.

        self.config['lr.max.dense'] = 2_000_000_000


    def __getitem__(self, index):
        return self.config[index]
    

    def update(self, conf):
        for key in conf:
            if key in self.config:
                self.config[key] = conf[key]
    

    def update_config(self, conf_name, value):
        self.config[conf_name] = value


default = Configuration()
