import csv
import logging
import os
import re
import string
from typing import Iterable, Iterator, List, NamedTuple, Optional, Set, Union

from nltk.stem import PorterStemmer

from .lexiconLib import FormatError

"""Text Library for turning raw tweets into lexicon lookup terms"""

log = logging.getLogger(__name__)

URL_PATTERN = re.compile(r'http\S*')
MENTION_PATTERN = re.compile(r'@\S*')
DIGIT_PATTERN = re.compile(r'[0-9]')
PUNCTUATION_PATTERN = re.compile('[%s]' % re.escape(string.punctuation))

TEXT_COLUMN = 5  # tweet text column of a Sentiment140 csv


class Tweet(NamedTuple):
    text: str
    tokens: List[str]
    stems: List[str]
    negation: bool


def clean_tweet(line: str) -> str:
    """lowercase a tweet and drop links and @mentions"""
    line = line.lower()
    line = URL_PATTERN.sub('', line)
    line = MENTION_PATTERN.sub('', line)
    return line


def has_negation(text: str) -> bool:
    return ' not ' in text


def tokenize(text: str, stopwords: Iterable[str] = ()) -> List[str]:
    """
    Split text into words without digits or punctuation

    Parameters
    ----------
    text : str
        cleaned text
    stopwords : Iterable[str], optional
        words to drop, by default ()

    Returns
    -------
    List[str]
        remaining words in order
    """

    text = DIGIT_PATTERN.sub('', text)
    text = PUNCTUATION_PATTERN.sub('', text)

    stopwords = set(stopwords)
    return [token for token in text.split() if token not in stopwords]


def stem_tokens(tokens: Iterable[str], stemmer: Optional[PorterStemmer] = None) -> List[str]:
    if stemmer is None:
        stemmer = PorterStemmer(mode=PorterStemmer.ORIGINAL_ALGORITHM)
    return [stemmer.stem(token) for token in tokens]


def preprocess(line: str, stopwords: Iterable[str] = (), stemmer: Optional[PorterStemmer] = None) -> Tweet:
    """
    Full preprocessing of one tweet

    Parameters
    ----------
    line : str
        raw tweet text
    stopwords : Iterable[str], optional
        words to drop, by default ()
    stemmer : PorterStemmer, optional
        stemmer to reuse across calls

    Returns
    -------
    Tweet
        cleaned text, tokens, their stems and the negation flag
    """

    text = clean_tweet(line)
    tokens = tokenize(text, stopwords)
    return Tweet(text, tokens, stem_tokens(tokens, stemmer), has_negation(text))


def load_stopwords(path: Union[str, os.PathLike], encoding: str = 'utf-8') -> Set[str]:
    """one stopword per line, blank lines ignored"""
    with open(path, 'r', encoding=encoding) as f:
        stopwords = {line.strip() for line in f if line.strip()}

    log.info('loaded %d stopwords from %s', len(stopwords), path)
    return stopwords


def read_tweets(path: Union[str, os.PathLike], column: int = TEXT_COLUMN,
                encoding: str = 'utf-8') -> Iterator[str]:
    """
    Yield the tweet text of every row of a csv dataset

    Parameters
    ----------
    path : Union[str, os.PathLike]
        csv file with quoted fields
    column : int, optional
        index of the text column, by default 5
    encoding : str, optional
        file encoding, by default 'utf-8'

    Raises
    ------
    FormatError
        if a row has no text column
    """

    with open(path, 'r', encoding=encoding, newline='') as f:
        reader = csv.reader(f)
        for row in reader:
            if not row:
                continue
            if len(row) <= column:
                raise FormatError('expected at least %d columns, found %d' % (column + 1, len(row)), reader.line_num)
            yield row[column]
