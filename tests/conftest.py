import matplotlib

matplotlib.use('Agg')  # no display during tests
