import logging
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np
import skfuzzy as fuzz

"""
Fuzzy Library for type-1 Mamdani inference over crisp inputs
"""

log = logging.getLogger(__name__)

# fraction of each Gauangle half-width covered by the gaussian cap
GAUANGLE_SIMILARITY = 0.5


class ConfigurationError(ValueError):
    """Raised when a fuzzy system is assembled from invalid parts"""


def _check_domain(name: str, domain: Sequence[float]) -> Tuple[float, float]:
    if domain is None or len(domain) != 2:
        raise ConfigurationError('domain of %s must be a (min, max) pair' % name)
    lo, hi = float(domain[0]), float(domain[1])
    if not lo < hi:
        raise ConfigurationError('domain of %s must satisfy min < max, got (%g, %g)' % (name, lo, hi))
    return lo, hi


class FuzzyFunction:
    def __init__(self, params: Sequence[float], label: str = ''):
        """
        Contains description and implementation of
        different fuzzy membership functions

        Parameters
        ----------
        params : Sequence[float]
            ordered shape parameters of the membership function
        label : str, optional
            string to tag instance with, by default ''
        """

        self._params = tuple(float(p) for p in params)
        self._label = label

    @property
    def label(self) -> str:
        return self._label

    @property
    def peak(self) -> float:
        """domain point of maximum membership"""
        raise NotImplementedError

    @property
    def support(self) -> Tuple[float, float]:
        raise NotImplementedError

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def interp(self, input_x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """
        Interpret membership of input for fuzzy function

        Parameters
        ----------
        input_x : Union[float,np.ndarray]
            value(s) at which membership is to be interpreted

        Returns
        -------
        level : Union[float,np.ndarray]
            interpreted membership level(s) of the input(s),
            float for a scalar input and an array of the
            same shape otherwise
        """

        x = np.asarray(input_x, dtype=float)
        level = self._evaluate(np.atleast_1d(x).ravel()).reshape(x.shape)
        # skfuzzy shapes can report full membership for nan
        level = np.where(np.isnan(x), 0.0, level)
        level = np.clip(level, 0.0, 1.0)

        if level.ndim == 0:
            return float(level)
        return level

    def degree_of_membership(self, x: float) -> float:
        return float(self.interp(float(x)))

    def get_array(self, universe: np.ndarray) -> np.ndarray:
        """
        Sample an array of values from membership function

        Parameters
        ----------
        universe : np.ndarray
            1d array of points to sample

        Returns
        -------
        array : np.ndarray
            1d array of length universe
        """

        return self.interp(np.asarray(universe, dtype=float))

    def __repr__(self) -> str:
        return '%s(%s, label=%r)' % (type(self).__name__, ', '.join('%g' % p for p in self._params), self._label)


class TriangularFunc(FuzzyFunction):
    def __init__(self, low: float, medium: float, high: float, label: str = ''):
        """
        Triangular membership function

        Parameters
        ----------
        low : float
            left foot of triangle
        medium : float
            peak of triangle
        high : float
            right foot of triangle
        label : str, optional
            string to tag instance with, by default ''
        """

        if not low <= medium <= high:
            raise ConfigurationError('triangle %s requires low <= medium <= high' % label)
        super().__init__((low, medium, high), label)

    @property
    def peak(self) -> float:
        return self._params[1]

    @property
    def support(self) -> Tuple[float, float]:
        return self._params[0], self._params[2]

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        return fuzz.trimf(x, list(self._params))


class TrapezoidalFunc(FuzzyFunction):
    def __init__(self, a: float, b: float, c: float, d: float, label: str = ''):
        """
        Trapezoidal membership function, rising on [a, b],
        flat on [b, c] and falling on [c, d]
        """

        if not a <= b <= c <= d:
            raise ConfigurationError('trapezoid %s requires a <= b <= c <= d' % label)
        super().__init__((a, b, c, d), label)

    @property
    def peak(self) -> float:
        return (self._params[1] + self._params[2]) / 2.0

    @property
    def support(self) -> Tuple[float, float]:
        return self._params[0], self._params[3]

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        return fuzz.trapmf(x, list(self._params))


class GaussianFunc(FuzzyFunction):
    def __init__(self, mean: float, std: float, label: str = ''):
        if std < 0:
            raise ConfigurationError('gaussian %s requires a non-negative standard deviation' % label)
        super().__init__((mean, std), label)

    @property
    def peak(self) -> float:
        return self._params[0]

    @property
    def support(self) -> Tuple[float, float]:
        mean, std = self._params
        return mean - 4.0 * std, mean + 4.0 * std

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        mean, std = self._params
        if std == 0.0:
            return (x == mean).astype(float)
        return fuzz.gaussmf(x, mean, std)


class GauangleFunc(FuzzyFunction):
    def __init__(self, start: float, center: float, end: float, label: str = ''):
        """
        Gaussian cap around `center` with straight tails reaching
        zero at `start` and `end`

        The cap covers GAUANGLE_SIMILARITY of each half-width and
        its standard deviation is half the cap width, the tails
        join it at membership exp(-2).

        Parameters
        ----------
        start : float
            left foot
        center : float
            peak, membership 1
        end : float
            right foot
        label : str, optional
            string to tag instance with, by default ''
        """

        if not start <= center <= end:
            raise ConfigurationError('gauangle %s requires start <= center <= end' % label)
        super().__init__((start, center, end), label)

    @property
    def peak(self) -> float:
        return self._params[1]

    @property
    def support(self) -> Tuple[float, float]:
        return self._params[0], self._params[2]

    @staticmethod
    def _half(distance: np.ndarray, width: float) -> np.ndarray:
        if width == 0.0:
            return np.ones(distance.shape)

        knee = GAUANGLE_SIMILARITY * width
        sigma = knee / 2.0

        level = np.exp(-distance ** 2 / (2.0 * sigma ** 2))
        tail = distance > knee
        level[tail] = np.exp(-2.0) * (width - distance[tail]) / (width - knee)

        return level

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        start, center, end = self._params
        level = np.zeros(x.shape)

        inside = (x >= start) & (x <= end)
        left = inside & (x <= center)
        right = inside & (x > center)

        level[left] = self._half(center - x[left], center - start)
        level[right] = self._half(x[right] - center, end - center)

        return level


class FuzzySet:

    def __init__(self, lo: FuzzyFunction, md: FuzzyFunction, hi: FuzzyFunction,
                 universe: np.ndarray, label: str = ''):
        """
        Contains all fuzzy functions describing the
        low, medium, and high level membership functions
        of one linguistic variable

        Parameters
        ----------
        lo : FuzzyFunction
            low membership function
        md : FuzzyFunction
            medium membership function
        hi : FuzzyFunction
            high membership function
        universe : np.ndarray
            1d array of points used to sample the functions
        label : str, optional
            string to tag instance with
        """

        self.lo = lo
        self.md = md
        self.hi = hi

        self.universe = np.asarray(universe, dtype=float)
        self.label = label

    def interp(self, inputs: Union[float, np.ndarray]) -> Tuple[Union[float, np.ndarray], Union[float, np.ndarray],
                                                                Union[float, np.ndarray]]:
        """
        Interpret membership of input

        Parameters
        ----------
        inputs : float OR np.ndarray
            The input(s) at which membership is to be interpreted

        Returns
        -------
        level_lo : float OR np.ndarray
            membership of the input(s) to the low function
        level_md : float OR np.ndarray
            membership of the input(s) to the medium function
        level_hi : float OR np.ndarray
            membership of the input(s) to the high function
        """

        level_lo = self.lo.interp(inputs)
        level_md = self.md.interp(inputs)
        level_hi = self.hi.interp(inputs)

        return level_lo, level_md, level_hi

    def view(self):
        """
        Used to view the distribution of all associated membership functions

        Returns
        -------
        fig : matplotlib.figure.Figure
            the figure holding the plot
        """

        fig, ax = plt.subplots(nrows=1, figsize=(8, 3))

        ax.plot(self.universe, self.lo.get_array(self.universe), 'b', linewidth=1.5, label=self.lo.label or 'Low')
        ax.plot(self.universe, self.md.get_array(self.universe), 'g', linewidth=1.5, label=self.md.label or 'Medium')
        ax.plot(self.universe, self.hi.get_array(self.universe), 'r', linewidth=1.5, label=self.hi.label or 'High')
        ax.set_title(self.label)
        ax.set_ylim(0.0, 1.05)
        ax.legend()

        ax.spines['top'].set_visible(False)
        ax.spines['right'].set_visible(False)
        ax.get_xaxis().tick_bottom()
        ax.get_yaxis().tick_left()

        plt.tight_layout()

        return fig


class Input:
    def __init__(self, name: str, domain: Sequence[float] = (0.0, 1.0)):
        """
        Crisp input variable of a fuzzy system

        Values outside the domain are accepted as given,
        membership functions simply evaluate them where they fall.

        Parameters
        ----------
        name : str
            name of the variable
        domain : Sequence[float], optional
            (min, max) of the variable, by default (0.0, 1.0)
        """

        self.name = name
        self.domain = _check_domain(name, domain)
        self._value = None

    @property
    def size(self) -> float:
        return self.domain[1] - self.domain[0]

    def set_input(self, value: float):
        self._value = float(value)

    def get_input(self) -> float:
        if self._value is None:
            raise ConfigurationError('input %s has no value, call set_input first' % self.name)
        return self._value

    def __repr__(self) -> str:
        return 'Input(%r, domain=%r)' % (self.name, self.domain)


class Output:
    def __init__(self, name: str, domain: Sequence[float] = (0.0, 1.0), discretisation_level: int = 100):
        """
        Output variable of a fuzzy system

        Parameters
        ----------
        name : str
            name of the variable
        domain : Sequence[float], optional
            (min, max) of the variable, by default (0.0, 1.0)
        discretisation_level : int, optional
            number of equally spaced points used by
            centroid defuzzification, by default 100
        """

        self.name = name
        self.domain = _check_domain(name, domain)
        self.discretisation_level = None
        self.set_discretisation_level(discretisation_level)

    @property
    def size(self) -> float:
        return self.domain[1] - self.domain[0]

    @property
    def midpoint(self) -> float:
        return (self.domain[0] + self.domain[1]) / 2.0

    def set_discretisation_level(self, level: int):
        if int(level) != level or level < 2:
            raise ConfigurationError('discretisation level of %s must be an integer >= 2' % self.name)
        self.discretisation_level = int(level)

    def get_discretisation(self) -> np.ndarray:
        return np.linspace(self.domain[0], self.domain[1], self.discretisation_level)

    def __repr__(self) -> str:
        return 'Output(%r, domain=%r)' % (self.name, self.domain)


class Antecedent:
    def __init__(self, name: str, mf: FuzzyFunction, input_var: Input):
        """
        Binds a membership function to an input variable

        Parameters
        ----------
        name : str
            name of the antecedent, e.g. 'Low Negativity'
        mf : FuzzyFunction
            membership function
        input_var : Input
            the variable read when the antecedent is evaluated
        """

        if mf is None:
            raise ConfigurationError('antecedent %s has no membership function' % name)
        if input_var is None:
            raise ConfigurationError('antecedent %s is not bound to an input' % name)

        self.name = name
        self.mf = mf
        self.input = input_var

    def firing_degree(self) -> float:
        return self.mf.degree_of_membership(self.input.get_input())

    def __str__(self) -> str:
        return self.name


class Consequent:
    def __init__(self, name: str, mf: FuzzyFunction, output_var: Output):
        if mf is None:
            raise ConfigurationError('consequent %s has no membership function' % name)
        if output_var is None:
            raise ConfigurationError('consequent %s is not bound to an output' % name)

        self.name = name
        self.mf = mf
        self.output = output_var

    def __str__(self) -> str:
        return self.name


class FuzzyRule:
    def __init__(self, antecedents: List[Antecedent], consequent: Consequent, label: str = ''):
        """
        Conjunctive fuzzy rule connecting antecedents
        to a single consequent

        Parameters
        ----------
        antecedents : List[Antecedent]
            antecedents joined by AND (minimum)
        consequent : Consequent
            conclusion of the rule
        label : str, optional
            string to tag instance with
        """

        antecedents = list(antecedents or [])
        if not antecedents:
            raise ConfigurationError('rule %s has no antecedents' % label)
        if any(a is None for a in antecedents):
            raise ConfigurationError('rule %s contains an empty antecedent' % label)
        if consequent is None:
            raise ConfigurationError('rule %s has no consequent' % label)

        self._antecedents = tuple(antecedents)
        self.consequent = consequent
        self.label = label

    @property
    def antecedents(self) -> Tuple[Antecedent, ...]:
        return self._antecedents

    def get_firing_strength(self) -> float:
        # AND statement between antecedents
        return min(a.firing_degree() for a in self._antecedents)

    def fire(self) -> Tuple[Consequent, float]:
        return self.consequent, self.get_firing_strength()

    def __str__(self) -> str:
        conditions = ' AND '.join(str(a) for a in self._antecedents)
        return 'IF %s THEN %s' % (conditions, self.consequent)


class Defuzzification(IntEnum):
    HEIGHT = 0
    CENTROID = 1


Candidates = Dict[Output, List[Tuple[FuzzyFunction, float]]]


class Rulebase:

    def __init__(self, rules: Optional[List[FuzzyRule]] = None, label: str = ''):
        """
        Contains the rules of a fuzzy system and evaluates
        them for the current input values

        Parameters
        ----------
        rules : List[FuzzyRule], optional
            rules in evaluation order
        label : str, optional
            string to tag instance with
        """

        self._rules = []
        self.label = label

        for rule in rules or []:
            self.add_rule(rule)

        log.info('rulebase %s created with %d rules', label, len(self._rules))

    def add_rule(self, rule: FuzzyRule):
        if not isinstance(rule, FuzzyRule):
            raise ConfigurationError('rulebase %s only accepts FuzzyRule objects' % self.label)
        self._rules.append(rule)

    @property
    def rules(self) -> List[FuzzyRule]:
        return list(self._rules)

    @property
    def outputs(self) -> List[Output]:
        outputs = []
        for rule in self._rules:
            if rule.consequent.output not in outputs:
                outputs.append(rule.consequent.output)
        return outputs

    def _fire(self) -> Candidates:
        candidates = {output: [] for output in self.outputs}

        for i, rule in enumerate(self._rules):
            consequent, strength = rule.fire()
            log.debug('rule %d (%s) strength=%.4f', i + 1, rule, strength)

            if strength > 0.0:
                candidates[consequent.output].append((consequent.mf, strength))

        return candidates

    @staticmethod
    def height_defuzzification(candidates: List[Tuple[FuzzyFunction, float]]) -> float:
        """
        Average of the consequent peaks weighted by rule strength

        Parameters
        ----------
        candidates : List[Tuple[FuzzyFunction, float]]
            (consequent function, firing strength) pairs

        Returns
        -------
        float
            crisp value, 0.0 when no rule fired
        """

        strengths = np.array([s for _, s in candidates], dtype=float)
        peaks = np.array([mf.peak for mf, _ in candidates], dtype=float)

        denominator = np.sum(strengths)
        if denominator == 0.0:
            log.debug('no rule fired, height defuzzification falls back to 0')
            return 0.0

        return float(np.sum(strengths * peaks) / denominator)

    @staticmethod
    def aggregate(output: Output, candidates: List[Tuple[FuzzyFunction, float]]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Max-min composition of the clipped consequents
        over the discretised output domain

        Returns
        -------
        universe : np.ndarray
            discretisation of the output domain
        aggregate : np.ndarray
            aggregated membership at each point of universe
        """

        universe = output.get_discretisation()
        aggregate = np.zeros_like(universe)

        for mf, strength in candidates:
            # clip the top off the consequent function
            activation = np.fmin(strength, mf.get_array(universe))
            aggregate = np.fmax(activation, aggregate)

        return universe, aggregate

    @classmethod
    def centroid_defuzzification(cls, output: Output, candidates: List[Tuple[FuzzyFunction, float]]) -> float:
        universe, aggregate = cls.aggregate(output, candidates)

        denominator = np.sum(aggregate)
        if denominator == 0.0:
            log.debug('empty aggregate for %s, centroid falls back to the domain midpoint', output.name)
            return output.midpoint

        return float(np.sum(universe * aggregate) / denominator)

    def evaluate(self, mode: Union[Defuzzification, int]) -> Dict[Output, float]:
        """
        Fire every rule and defuzzify each output

        Parameters
        ----------
        mode : Union[Defuzzification, int]
            Defuzzification.HEIGHT (0) or Defuzzification.CENTROID (1)

        Returns
        -------
        Dict[Output, float]
            crisp value of every output referenced by the rules

        Raises
        ------
        ValueError
            if mode is not a known defuzzification method
        """

        mode = Defuzzification(mode)
        candidates = self._fire()

        results = {}
        for output, output_candidates in candidates.items():
            if mode == Defuzzification.HEIGHT:
                results[output] = self.height_defuzzification(output_candidates)
            else:
                results[output] = self.centroid_defuzzification(output, output_candidates)

        return results

    def get_aggregate(self, output: Output) -> Tuple[np.ndarray, np.ndarray]:
        """
        Aggregated membership of an output for the current inputs,
        see `aggregate`
        """

        candidates = self._fire()
        if output not in candidates:
            raise KeyError('output %s is not used by rulebase %s' % (output.name, self.label))
        return self.aggregate(output, candidates[output])

    def view(self, output: Output):
        """
        View the aggregate membership function of an output
        and its centroid for the current inputs
        """

        universe, aggregate = self.get_aggregate(output)
        value = self.evaluate(Defuzzification.CENTROID)[output]
        activation = np.interp(value, universe, aggregate)

        fig, ax = plt.subplots(figsize=(8, 3))

        n_0 = np.zeros_like(universe)

        ax.fill_between(universe, n_0, aggregate, facecolor='Orange', alpha=0.7)
        ax.plot([value, value], [0, activation], 'k', linewidth=1.5, alpha=0.9)
        ax.set_title('Aggregated membership and result (line)')

        ax.set_xlabel(output.name)
        ax.set_ylabel('membership')

        return fig

    def __len__(self) -> int:
        return len(self._rules)

    def __str__(self) -> str:
        lines = ['Rulebase %s' % self.label if self.label else 'Rulebase']
        for i, rule in enumerate(self._rules):
            lines.append('  Rule %d: %s' % (i + 1, rule))
        return '\n'.join(lines)
