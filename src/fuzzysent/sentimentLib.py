import logging
import os
from typing import Dict, Optional, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np

from .fuzzyLib import (Antecedent, Consequent, Defuzzification, FuzzyRule, FuzzySet, Input, Output, Rulebase,
                       TrapezoidalFunc, TriangularFunc)
from .utilities import check_folder

"""
Sentiment Library holding the fixed type-1 fuzzy logic system
that classifies (negativity, positivity) degrees of a text
"""

log = logging.getLogger(__name__)

LEVELS = ('low', 'moderate', 'high')
CLASSES = ('Negative', 'Neutral', 'Positive')

NEGATIVITY_MFS = {
    'low': (0.0, 0.0, 0.3, 0.5),
    'moderate': (0.3, 0.45, 0.55, 0.7),
    'high': (0.5, 0.7, 1.0, 1.0),
}

POSITIVITY_MFS = {
    'low': (0.0, 0.0, 0.5),
    'moderate': (0.3, 0.5, 0.7),
    'high': (0.5, 1.0, 1.0),
}

CLASSIFICATION_MFS = {
    'Negative': (0.0, 0.0, 0.3, 0.5),
    'Neutral': (0.3, 0.45, 0.55, 0.7),
    'Positive': (0.5, 0.7, 1.0, 1.0),
}

# ((negativity, positivity), classification)
RULE_TABLE = (
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


class SentimentSystem:

    def __init__(self, discretisation_level: int = 100):
        """
        Type-1 fuzzy logic system mapping negativity and
        positivity degrees in [0, 1] to a classification in [0, 1]

        Parameters
        ----------
        discretisation_level : int, optional
            number of points used by centroid
            defuzzification, by default 100
        """

        self.negativity = Input('Negativity degree', (0.0, 1.0))
        self.positivity = Input('Positivity degree', (0.0, 1.0))
        self.classification = Output('Tweet classification', (0.0, 1.0), discretisation_level)

        self.negativity_mfs = {level: TrapezoidalFunc(*params, label='MF for %s negativity' % level)
                               for level, params in NEGATIVITY_MFS.items()}
        self.positivity_mfs = {level: TriangularFunc(*params, label='MF for %s positivity' % level)
                               for level, params in POSITIVITY_MFS.items()}
        self.classification_mfs = {name: TrapezoidalFunc(*params, label='%s classification' % name)
                                   for name, params in CLASSIFICATION_MFS.items()}

        negativity_antecedents = {
            level: Antecedent('%s Negativity' % level.capitalize(), mf, self.negativity)
            for level, mf in self.negativity_mfs.items()
        }
        positivity_antecedents = {
            level: Antecedent('%s Positivity' % level.capitalize(), mf, self.positivity)
            for level, mf in self.positivity_mfs.items()
        }
        consequents = {
            name: Consequent(name, mf, self.classification)
            for name, mf in self.classification_mfs.items()
        }

        rules = []
        for i, ((negativity, positivity), name) in enumerate(RULE_TABLE):
            antecedents = [negativity_antecedents[negativity], positivity_antecedents[positivity]]
            rules.append(FuzzyRule(antecedents, consequents[name], label='R%d' % (i + 1)))

        self.rulebase = Rulebase(rules, label='sentiment')

    def classify(self, negativity: float, positivity: float,
                 mode: Union[Defuzzification, int] = Defuzzification.CENTROID) -> float:
        """
        Crisp classification of a pair of degrees

        Parameters
        ----------
        negativity : float
            negativity degree
        positivity : float
            positivity degree
        mode : Union[Defuzzification, int], optional
            defuzzification method, by default Defuzzification.CENTROID

        Returns
        -------
        float
            classification value, towards 0 is Negative and towards 1 Positive
        """

        self.negativity.set_input(negativity)
        self.positivity.set_input(positivity)

        value = self.rulebase.evaluate(mode)[self.classification]
        log.debug('negativity=%.3f positivity=%.3f %s -> %.4f', negativity, positivity,
                  Defuzzification(mode).name, value)

        return value

    def label(self, value: float) -> str:
        """name of the classification set with the highest membership at value"""
        levels = [self.classification_mfs[name].interp(value) for name in CLASSES]
        return CLASSES[int(np.argmax(levels))]

    def control_surface(self, n_negativity: int = 10, n_positivity: int = 10,
                        mode: Union[Defuzzification, int] = Defuzzification.CENTROID) \
            -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Sample the classification over the input domains

        Leaves the inputs set to the last grid point.

        Parameters
        ----------
        n_negativity : int, optional
            number of negativity levels, by default 10
        n_positivity : int, optional
            number of positivity levels, by default 10
        mode : Union[Defuzzification, int], optional
            defuzzification method, by default Defuzzification.CENTROID

        Returns
        -------
        x : np.ndarray
            negativity levels
        y : np.ndarray
            positivity levels
        z : np.ndarray
            array of shape [n_positivity, n_negativity] with
            z[j, i] the classification at (x[i], y[j])
        """

        x = np.linspace(self.negativity.domain[0], self.negativity.domain[1], n_negativity)
        y = np.linspace(self.positivity.domain[0], self.positivity.domain[1], n_positivity)
        z = np.zeros((len(y), len(x)))

        for i, x_i in enumerate(x):
            self.negativity.set_input(x_i)
            for j, y_j in enumerate(y):
                self.positivity.set_input(y_j)
                z[j, i] = self.rulebase.evaluate(mode)[self.classification]

        return x, y, z

    def fuzzy_sets(self, n_points: int = 100) -> Dict[str, FuzzySet]:
        """FuzzySet of every variable, sampled with n_points"""
        fuzzy_sets = {}
        for variable, mfs in ((self.negativity, self.negativity_mfs),
                              (self.positivity, self.positivity_mfs),
                              (self.classification, self.classification_mfs)):
            universe = np.linspace(variable.domain[0], variable.domain[1], n_points)
            lo, md, hi = mfs.values()
            fuzzy_sets[variable.name] = FuzzySet(lo, md, hi, universe, label='%s membership functions' % variable.name)
        return fuzzy_sets

    def view_mfs(self, n_points: int = 100, folder: Optional[str] = None):
        """
        Plot the membership functions of every variable

        Parameters
        ----------
        n_points : int, optional
            discretisation of each domain, by default 100
        folder : str, optional
            if given, save each figure as a png in this folder

        Returns
        -------
        list
            the matplotlib figures
        """

        figures = []
        for name, fuzzy_set in self.fuzzy_sets(n_points).items():
            fig = fuzzy_set.view()
            if folder is not None:
                check_folder(folder)
                fig.savefig(os.path.join(folder, '%s.png' % name.replace(' ', '_').lower()))
            figures.append(fig)
        return figures

    def view_surface(self, n_negativity: int = 10, n_positivity: int = 10,
                     mode: Union[Defuzzification, int] = Defuzzification.CENTROID, folder: Optional[str] = None):
        """
        Plot the control surface of the system

        Returns
        -------
        fig : matplotlib.figure.Figure
            the figure holding the surface
        """

        x, y, z = self.control_surface(n_negativity, n_positivity, mode)
        xx, yy = np.meshgrid(x, y)

        fig = plt.figure(figsize=(8, 6))
        ax = fig.add_subplot(projection='3d')

        ax.plot_surface(xx, yy, z, cmap='viridis', linewidth=0.4, antialiased=True)
        ax.set_xlabel(self.negativity.name)
        ax.set_ylabel(self.positivity.name)
        ax.set_zlabel('Classification')
        ax.set_zlim(0.0, 1.0)
        ax.set_title('Type-1 fuzzy logic system control surface (%s)' % Defuzzification(mode).name.lower())

        if folder is not None:
            check_folder(folder)
            fig.savefig(os.path.join(folder, 'control_surface.png'))

        return fig
