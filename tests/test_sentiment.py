import logging

import pytest
import numpy as np
import matplotlib.pyplot as plt

from fuzzysent import SentimentSystem, RULE_TABLE, Defuzzification, Lexicon, setup_logging
from fuzzysent.sentimentLib import CLASSES


@pytest.fixture
def system():
    return SentimentSystem()


def test_rule_table():
    """ the nine rules of the classifier """

    assert RULE_TABLE == (
        (('low', 'low'), 'Neutral'),
        (('moderate', 'moderate'), 'Neutral'),
        (('high', 'high'), 'Neutral'),
        (('low', 'moderate'), 'Negative'),
        (('low', 'high'), 'Negative'),
        (('moderate', 'high'), 'Negative'),
        (('moderate', 'low'), 'Positive'),
        (('high', 'moderate'), 'Positive'),
        (('high', 'low'), 'Positive'),
    )


def test_system(system):

    assert len(system.rulebase) == 9
    assert [rule.label for rule in system.rulebase.rules] == ['R%d' % i for i in range(1, 10)]
    assert system.rulebase.outputs == [system.classification]
    assert system.classification.discretisation_level == 100
    assert str(system.rulebase.rules[0]) == 'IF Low Negativity AND Low Positivity THEN Neutral'


def test_rule_strengths(system):
    """ negativity 0.6 and positivity 0.4 fire R2, R7, R8 and R9 """

    system.negativity.set_input(0.6)
    system.positivity.set_input(0.4)

    strengths = [rule.get_firing_strength() for rule in system.rulebase.rules]

    assert strengths == pytest.approx([0.0, 0.5, 0.0, 0.0, 0.0, 0.0, 0.2, 0.5, 0.2])


def test_classify_height(system):

    value = system.classify(0.6, 0.4, Defuzzification.HEIGHT)

    # (0.5 * 0.5 + (0.2 + 0.5 + 0.2) * 0.85) / 1.4
    assert value == pytest.approx(0.725)
    assert system.classify(0.6, 0.4, 0) == pytest.approx(0.725)
    assert system.label(value) == 'Positive'


def test_classify_centroid(system):

    value = system.classify(0.6, 0.4, Defuzzification.CENTROID)

    # recompute the max-min aggregate directly
    universe = np.linspace(0.0, 1.0, 100)
    neutral = np.fmin(0.5, system.classification_mfs['Neutral'].get_array(universe))
    positive = np.fmin(0.5, system.classification_mfs['Positive'].get_array(universe))
    aggregate = np.fmax(neutral, positive)

    assert value == pytest.approx(np.sum(universe * aggregate) / np.sum(aggregate))
    assert value == pytest.approx(0.67088, abs=1e-3)
    assert system.label(value) == 'Positive'

    # default mode is centroid
    assert system.classify(0.6, 0.4) == pytest.approx(value)


def test_classify_idempotent(system):

    first = system.classify(0.2, 0.9)
    system.classify(0.9, 0.1)
    second = system.classify(0.2, 0.9)

    assert first == second


def test_no_rule_fired(system):
    """ out of domain inputs fire nothing """

    assert system.classify(1.5, 0.2, Defuzzification.HEIGHT) == 0.0
    assert system.classify(1.5, 0.2, Defuzzification.CENTROID) == pytest.approx(0.5)


def test_invalid_mode(system):
    with pytest.raises(ValueError):
        system.classify(0.5, 0.5, 2)


@pytest.mark.parametrize('negativity, positivity, expected', [
    (0.9, 0.1, 'Positive'),
    (0.1, 0.9, 'Negative'),
    (0.5, 0.5, 'Neutral'),
])
def test_label(system, negativity, positivity, expected):
    assert system.label(system.classify(negativity, positivity)) == expected


def test_label_classes(system):
    assert system.label(0.0) == CLASSES[0]
    assert system.label(0.5) == CLASSES[1]
    assert system.label(1.0) == CLASSES[2]


def test_control_surface(system):

    x, y, z = system.control_surface(5, 4)

    assert x.shape == (5,)
    assert y.shape == (4,)
    assert z.shape == (4, 5)
    assert np.all(z >= 0.0) and np.all(z <= 1.0)

    assert z[2, 1] == pytest.approx(system.classify(x[1], y[2]))


def test_fuzzy_sets(system):

    fuzzy_sets = system.fuzzy_sets(n_points=21)

    assert list(fuzzy_sets.keys()) == ['Negativity degree', 'Positivity degree', 'Tweet classification']

    lo, md, hi = fuzzy_sets['Positivity degree'].interp(0.5)
    assert lo == pytest.approx(0.0)
    assert md == pytest.approx(1.0)
    assert hi == pytest.approx(0.0)


def test_views(system, tmp_path):
    """ figures are saved into a folder that does not exist yet """

    folder = str(tmp_path / 'render')

    figures = system.view_mfs(folder=folder)
    assert len(figures) == 3

    fig = system.view_surface(4, 4, folder=folder)
    assert fig is not None

    for name in ('negativity_degree.png', 'positivity_degree.png', 'tweet_classification.png', 'control_surface.png'):
        assert (tmp_path / 'render' / name).exists()

    plt.close('all')


def test_degrees_to_classification(system):
    """ lexicon degrees feed the classifier """

    lexicon = Lexicon({'love#v': (0.625, 0.0), 'hate#v': (0.0, 0.75), 'day#n': (0.0, 0.0)})

    degrees = lexicon.degrees(['love', 'day'])
    assert degrees == pytest.approx((0.0, 0.3125))

    value = system.classify(*degrees)
    assert 0.0 <= value <= 1.0


def test_logging(system, caplog):

    with caplog.at_level(logging.INFO, logger='fuzzysent'):
        SentimentSystem()
    assert 'rulebase sentiment created with 9 rules' in caplog.text

    with caplog.at_level(logging.DEBUG, logger='fuzzysent'):
        system.classify(0.6, 0.4, Defuzzification.HEIGHT)
    assert 'HEIGHT' in caplog.text


def test_setup_logging():

    setup_logging(logging.WARNING)
    assert logging.getLogger('fuzzysent').level == logging.WARNING

    setup_logging()
    assert logging.getLogger('fuzzysent').level == logging.INFO
