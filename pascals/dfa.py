"""
deterministic finite automaton consumed by the lexer, and its two file formats

text format:
    # comment
    start_state = S
    final_state = ID, NUM_INT
    S letter ID

json format:
    {"start_state": "S", "final_states": [...], "transitions": {"S": {"letter": "ID"}}}
"""

import json
import os

from . import settings


class DFAFormatError(ValueError):
    pass


class DFA:
    def __init__(self, start, finals, transitions):
        """DFA

        Args:
          start: str
          finals: iterable of str
          transitions: dict[(state, label)] -> state
        """
        self._start = start
        self._finals = frozenset(finals)
        self._transitions = dict(transitions)

    @property
    def start(self):
        return self._start

    @property
    def finals(self):
        return self._finals

    def next_state(self, state, label):
        """the state reached from `state` on `label`, None if there is no transition
        """
        return self._transitions.get((state, label))

    def is_final(self, state):
        return state in self._finals

    def __len__(self):
        return len(self._transitions)

    def __repr__(self):
        return f'<DFA(start={self._start!r}, finals={len(self._finals)}, transitions={len(self._transitions)})>'


def load_dfa_txt(path):
    start = None
    finals = set()
    transitions = {}

    with open(path, encoding='utf-8') as fin:
        for lineno, raw in enumerate(fin, 1):
            line = raw.strip()
            if not line or line.startswith('#'):
                continue

            lower = line.lower()
            if lower.startswith('start_state') or lower.startswith('final_state'):
                key, sep, value = line.partition('=')
                if not sep:
                    raise DFAFormatError(f'{path}:{lineno}: missing `=` in `{line}`')
                if lower.startswith('start_state'):
                    start = value.strip()
                else:
                    finals.update(item.strip() for item in value.split(',') if item.strip())
                continue

            parts = line.split()
            if len(parts) != 3:
                raise DFAFormatError(f'{path}:{lineno}: invalid transition `{line}`')
            src, label, dst = parts
            transitions[(src, label)] = dst

    if start is None:
        raise DFAFormatError(f'{path}: start_state is not defined')
    return DFA(start, finals, transitions)


def load_dfa_json(path):
    with open(path, encoding='utf-8') as fin:
        data = json.load(fin)

    try:
        start = data['start_state']
        finals = data['final_states']
        table = data['transitions']
    except KeyError as e:
        raise DFAFormatError(f'{path}: missing key {e}') from e

    transitions = {}
    for src, mapping in table.items():
        for label, dst in mapping.items():
            transitions[(src, label)] = dst
    return DFA(start, finals, transitions)


def load_dfa(path):
    """load a DFA, format chosen by file extension
    """
    ext = os.path.splitext(path)[1].lower()
    if ext == '.txt':
        return load_dfa_txt(path)
    elif ext == '.json':
        return load_dfa_json(path)
    else:
        raise DFAFormatError(f'{path}: DFA must be .txt or .json')


_default = None


def default_dfa():
    """the automaton shipped with the package, loaded once"""
    global _default
    if _default is None:
        _default = load_dfa(settings.DEFAULT_DFA)
    return _default
