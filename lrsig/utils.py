
import zlib
import numpy as np
import scipy.sparse as sp

from lrsig.ansi import error


def ensure_array(a):
    ''' If a is a matrix, turn it into an array. '''
    if isinstance(a, np.matrix): return a.A
    else: return a


def densify(X):
    ''' Convert a (possibly sparse) expression block into a dense float array. '''
    if sp.issparse(X): X = X.toarray()
    return np.asarray(ensure_array(X), dtype = float)


def choose_layer(adata, use_raw = False, layer = None):
    is_layer = layer is not None
    if is_layer: 
        if layer == 'X': return adata.X
        elif layer in adata.layers.keys(): return adata.layers[layer]
        else: error(f'layer `{layer}` does not present in the annotated data.')
    elif use_raw: 
        if adata.raw is None: error('`use_raw` is set, but the annotated data has no raw slot.')
        return adata.raw.X
    else: return adata.X


def choose_var_names(adata, use_raw = False, layer = None):
    if use_raw and layer is None: return adata.raw.var_names
    else: return adata.var_names


def stable_hash(x) -> int:
    '''
    Process-independent 32-bit digest of a name. The builtin ``hash`` of strings
    is salted per interpreter, so it cannot be used to derive reproducible seeds.
    '''
    return zlib.crc32(str(x).encode('utf-8'))
