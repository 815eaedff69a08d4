import sys

import matplotlib.pyplot as plt
import numpy as np

from fuzzysent import SentimentSystem, Defuzzification, load_lexicon, load_stopwords, preprocess, read_tweets
from fuzzysent import setup_logging

setup_logging()

# Define the fuzzy logic system
system = SentimentSystem(discretisation_level=100)
print(system.rulebase)

# Visualize the membership functions of every variable
system.view_mfs(folder='render/')

# %% Compute for given degrees
inputs = np.array([
    0.6,  # negativity
    0.4,  # positivity
])
for mode in Defuzzification:
    value = system.classify(inputs[0], inputs[1], mode)
    print('%s: %.4f (%s)' % (mode.name, value, system.label(value)))

system.rulebase.view(system.classification)

# Simulate the control surface at a higher resolution
system.view_surface(n_negativity=50, n_positivity=50, folder='render/')

# %% Classify a dataset
# usage: python sentiment_example.py SentiWordNet.txt tweets.csv [stopwords.txt]
if len(sys.argv) >= 3:
    lexicon = load_lexicon(sys.argv[1])
    stopwords = load_stopwords(sys.argv[3]) if len(sys.argv) > 3 else ()

    counts = {'Negative': 0, 'Neutral': 0, 'Positive': 0}
    for line in read_tweets(sys.argv[2]):
        tweet = preprocess(line, stopwords)
        degrees = lexicon.degrees(tweet.tokens)
        counts[system.label(system.classify(*degrees))] += 1

    print(counts)

plt.show()
