"""
Fuzzy Sentiment Library
-----------------------

A library for classifying the sentiment of short texts
with a type-1 fuzzy logic system fed by polarity degrees
taken from a SentiWordNet lexicon

"""

__version__ = '0.1.0'
__all__ = ['TriangularFunc', 'TrapezoidalFunc', 'GaussianFunc', 'GauangleFunc', 'FuzzyFunction', 'FuzzySet',
           'Input', 'Output', 'Antecedent', 'Consequent', 'FuzzyRule', 'Rulebase', 'Defuzzification',
           'ConfigurationError', 'Lexicon', 'load_lexicon', 'FormatError', 'Degrees', 'SentimentSystem',
           'RULE_TABLE', 'Tweet', 'preprocess', 'clean_tweet', 'tokenize', 'stem_tokens', 'has_negation',
           'load_stopwords', 'read_tweets', 'check_folder', 'setup_logging']

from .fuzzyLib import TriangularFunc, TrapezoidalFunc, GaussianFunc, GauangleFunc, FuzzyFunction, FuzzySet, \
    Input, Output, Antecedent, Consequent, FuzzyRule, Rulebase, Defuzzification, ConfigurationError
from .lexiconLib import Lexicon, load_lexicon, FormatError, Degrees
from .sentimentLib import SentimentSystem, RULE_TABLE
from .textLib import Tweet, preprocess, clean_tweet, tokenize, stem_tokens, has_negation, load_stopwords, \
    read_tweets
from .utilities import check_folder, setup_logging
