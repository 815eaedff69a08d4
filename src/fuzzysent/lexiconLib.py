import logging
import math
import os
from collections import defaultdict
from typing import Dict, Iterable, List, NamedTuple, Tuple, Union

import numpy as np

"""
Lexicon Library for building term polarity scores from a SentiWordNet dictionary
"""

log = logging.getLogger(__name__)

COMMENT = '#'
N_FIELDS = 6
WEIGHTINGS = ('mean', 'rank')

# field positions in a dictionary line
POS_FIELD = 0
ID_FIELD = 1
POS_SCORE_FIELD = 2
NEG_SCORE_FIELD = 3
TERMS_FIELD = 4

Scores = Tuple[float, float]
Sense = Tuple[str, int]  # (synset id, sense rank)


class FormatError(ValueError):
    def __init__(self, message: str, line_number: int = None):
        """
        Raised when a line of a dictionary or dataset cannot be parsed

        Parameters
        ----------
        message : str
            description of the problem
        line_number : int, optional
            1-based number of the offending line
        """

        if line_number is not None:
            message = 'line %d: %s' % (line_number, message)
        super().__init__(message)
        self.line_number = line_number


class Synset(NamedTuple):
    pos_marker: str
    synset_id: str
    scores: Scores
    terms: List[Tuple[str, int]]


class Degrees(NamedTuple):
    negativity: float
    positivity: float


def parse_line(line: str, line_number: int = None) -> Synset:
    """
    Split one data line of the dictionary

    Parameters
    ----------
    line : str
        tab separated line POS, ID, PosScore, NegScore, SynsetTerms, Gloss
    line_number : int, optional
        used in error messages

    Returns
    -------
    Synset
        part of speech marker (a, n, r, v), synset id,
        (positive score, negative score) and the
        (lemma, sense rank) of each synset term

    Raises
    ------
    FormatError
        wrong number of fields, score not a number in [0, 1] or malformed term
    """

    data = line.rstrip('\r\n').split('\t')
    if len(data) != N_FIELDS:
        raise FormatError('expected %d tab separated fields, found %d' % (N_FIELDS, len(data)), line_number)

    try:
        scores = (float(data[POS_SCORE_FIELD]), float(data[NEG_SCORE_FIELD]))
    except ValueError as err:
        raise FormatError('invalid score (%s)' % err, line_number) from err
    for score in scores:
        # float() also accepts nan and inf
        if not math.isfinite(score) or not 0.0 <= score <= 1.0:
            raise FormatError('invalid score %r, expected a number in [0, 1]' % score, line_number)

    terms = []
    for token in data[TERMS_FIELD].split():
        lemma, sep, rank = token.rpartition('#')
        if not sep or not lemma:
            raise FormatError('synset term %r is not of the form lemma#rank' % token, line_number)
        try:
            rank = int(rank)
        except ValueError as err:
            raise FormatError('synset term %r has an invalid sense rank' % token, line_number) from err
        if rank < 1:
            raise FormatError('synset term %r has a sense rank below 1' % token, line_number)
        terms.append((lemma, rank))

    return Synset(data[POS_FIELD], data[ID_FIELD], scores, terms)


def aggregate_senses(senses: Dict[Sense, Scores], weighting: str = 'mean') -> Scores:
    """
    Combine the scores of all senses of a term

    Parameters
    ----------
    senses : Dict[Tuple[str, int], Tuple[float, float]]
        (synset id, sense rank) -> (positive score, negative score)
    weighting : str, optional
        'mean' for the plain average over senses, or 'rank'
        to weigh each sense by 1/rank, by default 'mean'

    Returns
    -------
    Tuple[float, float]
        aggregated (positive score, negative score)
    """

    ranks = np.array([rank for _, rank in senses.keys()], dtype=float)
    scores = np.array(list(senses.values()), dtype=float)

    if weighting == 'mean':
        weights = np.ones_like(ranks)
    elif weighting == 'rank':
        weights = 1.0 / ranks
    else:
        raise ValueError('unknown weighting %r, expected one of %s' % (weighting, WEIGHTINGS))

    positive, negative = np.average(scores, axis=0, weights=weights)
    return float(positive), float(negative)


class Lexicon:

    def __init__(self, scores: Dict[str, Scores]):
        """
        Read-only mapping of term#pos keys to
        (positive score, negative score)

        Parameters
        ----------
        scores : Dict[str, Tuple[float, float]]
            aggregated scores keyed by 'lemma#pos'
        """

        self._scores = dict(scores)

    @staticmethod
    def key(term: str, pos: str) -> str:
        return '%s#%s' % (term, pos)

    @classmethod
    def load(cls, path: Union[str, os.PathLike], encoding: str = 'utf-8', weighting: str = 'mean') -> 'Lexicon':
        return load_lexicon(path, encoding=encoding, weighting=weighting)

    def score(self, term: str, pos: str) -> Scores:
        """
        Scores of a term, (0.0, 0.0) when the term is unknown

        Parameters
        ----------
        term : str
            lemma to look up
        pos : str
            part of speech marker (a, n, r, v)

        Returns
        -------
        Tuple[float, float]
            (positive score, negative score)
        """

        return self._scores.get(self.key(term, pos), (0.0, 0.0))

    def polarity(self, term: str, pos: str) -> float:
        positive, negative = self.score(term, pos)
        return positive - negative

    def degrees(self, terms: Iterable[str], pos_markers: Tuple[str, ...] = ('a', 'r', 'v', 'n')) -> Degrees:
        """
        Mean negativity and positivity over the terms found in the lexicon

        Each term is looked up with the first part of speech
        marker under which it is known.

        Parameters
        ----------
        terms : Iterable[str]
            preprocessed tokens
        pos_markers : Tuple[str, ...], optional
            markers to try in order, by default ('a', 'r', 'v', 'n')

        Returns
        -------
        Degrees
            (negativity, positivity), both 0.0 when no term is known
        """

        found = []
        for term in terms:
            for pos in pos_markers:
                key = self.key(term, pos)
                if key in self._scores:
                    found.append(self._scores[key])
                    break

        if not found:
            return Degrees(0.0, 0.0)

        positive, negative = np.mean(np.array(found), axis=0)
        return Degrees(float(negative), float(positive))

    def keys(self):
        return self._scores.keys()

    def __contains__(self, item) -> bool:
        if isinstance(item, tuple):
            item = self.key(*item)
        return item in self._scores

    def __len__(self) -> int:
        return len(self._scores)


def load_lexicon(path: Union[str, os.PathLike], encoding: str = 'utf-8', weighting: str = 'mean') -> Lexicon:
    """
    Build a lexicon from a SentiWordNet style dictionary file

    Lines starting with '#' and blank lines are skipped. Every
    synset term is stored under 'lemma#pos' with the synset scores
    for its (synset id, sense rank), a repeated entry replaces the
    earlier one. The senses of each key are then aggregated.

    Parameters
    ----------
    path : Union[str, os.PathLike]
        dictionary file
    encoding : str, optional
        file encoding, by default 'utf-8'
    weighting : str, optional
        see `aggregate_senses`, by default 'mean'

    Returns
    -------
    Lexicon
        the aggregated lexicon

    Raises
    ------
    FormatError
        if any data line is malformed, no lexicon is returned
    """

    if weighting not in WEIGHTINGS:
        raise ValueError('unknown weighting %r, expected one of %s' % (weighting, WEIGHTINGS))

    senses = defaultdict(dict)

    with open(path, 'r', encoding=encoding) as f:
        for line_number, line in enumerate(f, start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith(COMMENT):
                continue

            synset = parse_line(line, line_number)
            for lemma, rank in synset.terms:
                senses[Lexicon.key(lemma, synset.pos_marker)][(synset.synset_id, rank)] = synset.scores

    lexicon = Lexicon({key: aggregate_senses(term_senses, weighting) for key, term_senses in senses.items()})
    log.info('loaded %d terms from %s', len(lexicon), path)

    return lexicon
