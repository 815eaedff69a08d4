""" Useful utility functions """

import logging
import os

LOG_FORMAT = '%(asctime)s %(name)s %(levelname)s: %(message)s'


def check_folder(folder='render/'):
    """
    check if folder exists, make if not present

    Parameters
    ----------
    folder : str, optional
        name of directory to check, by default 'render/'
    """
    if not os.path.exists(folder):
        os.makedirs(folder)


def setup_logging(level=logging.INFO):
    """
    Send the library log records to stderr,
    meant for scripts, the library itself never calls it

    Parameters
    ----------
    level : int, optional
        logging level, by default logging.INFO
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger('fuzzysent').setLevel(level)
