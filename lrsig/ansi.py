
import sys

from tqdm import tqdm

SILENT = False

class lrsig_error(Exception):
    pass

def fore_red() -> None:
    print('\033[31m', end = '')

def fore_yellow() -> None:
    print('\033[33m', end = '')

def fore_cyan() -> None:
    print('\033[36m', end = '')

def ansi_reset() -> None:
    print('\033[0m', end = '')

def error(text: str, error = None) -> None:
    if SILENT: raise lrsig_error(text) from error
    fore_red()
    print('[error]', end = ' ')
    ansi_reset()
    print(text)

    if error is None: raise lrsig_error(text)
    else: raise lrsig_error(text) from error

def warning(text: str) -> None:
    if SILENT: return
    fore_yellow()
    print('[!]', end = ' ')
    ansi_reset()
    print(text)
    ansi_reset()

def info(text: str) -> None:
    if SILENT: return
    fore_cyan()
    print('[i]', end = ' ')
    ansi_reset()
    print(text)
    ansi_reset()

progress_styles = {
    'ncols': 80,
    'ascii': ' =',
    'bar_format': '   {bar} {desc:20} {n:5d} / {total:<5d} ({elapsed} < {remaining})',
    'file': sys.stderr
}

class pprog(tqdm):
    def __init__(self, iterable = None, **kwargs):
        super().__init__(iterable, **progress_styles, **kwargs)
